"""
Stands in for a parent that dies without cleaning up after itself: starts
tether with the given command, prints the launcher's pid, then waits to be
killed.

Usage: python fake_parent.py <command> [args...]
"""
import sys
import time
import subprocess

if __name__ == "__main__":
    proc = subprocess.Popen([sys.executable, "-m", "tether"] + sys.argv[1:])
    print(proc.pid, flush=True)
    while True:
        time.sleep(1)
