from tether.main import run

run()
