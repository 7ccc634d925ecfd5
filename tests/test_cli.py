import signal
import subprocess
import time

import psutil
import pytest

from conftest import TETHER, descendants, find_descendant, wait_for


def test_usage_without_command(run_tether):
    result = run_tether()
    assert result.returncode == 1
    assert "Usage" in result.stderr
    assert result.stdout == ""


@pytest.mark.parametrize("code", [0, 1, 3, 42, 255])
def test_exit_code_is_mirrored(run_tether, code):
    result = run_tether("sh", "-c", f"exit {code}")
    assert result.returncode == code


def test_false_exits_one_quickly(run_tether):
    start = time.monotonic()
    result = run_tether("false")
    assert result.returncode == 1
    assert time.monotonic() - start < 5


@pytest.mark.parametrize("signum", [signal.SIGTERM, signal.SIGKILL, signal.SIGUSR1])
def test_signal_death_is_mirrored(run_tether, signum):
    result = run_tether("sh", "-c", f"kill -{signum.name[3:]} $$")
    assert result.returncode == 128 + signum


def test_missing_command_fails_without_hanging(run_tether):
    result = run_tether("this-command-should-not-exist-anywhere", timeout=5)
    assert result.returncode == 1
    assert "this-command-should-not-exist-anywhere" in result.stderr


def test_arguments_pass_through_unmodified(run_tether):
    result = run_tether("printf", "%s|", "a", "b c", "", "$HOME", "*")
    assert result.returncode == 0
    assert result.stdout == "a|b c||$HOME|*|"


def test_standard_streams_are_inherited(run_tether):
    result = run_tether("sh", "-c", "cat; echo oops >&2", input="hello\n")
    assert result.stdout == "hello\n"
    assert "oops" in result.stderr


def test_process_tree_leaves_no_zombies(cleanup_pids):
    proc = subprocess.Popen(TETHER + ["sleep", "0.5"])
    cleanup_pids.append(proc.pid)
    find_descendant(proc.pid, "sleep")
    tree = [p.pid for p in descendants(proc.pid)]
    assert len(tree) == 2  # intermediate and target

    # Each watchdog reaps its child before exiting, so nothing lingers once the launcher is done.
    assert proc.wait(timeout=10) == 0
    assert not any(psutil.pid_exists(pid) for pid in tree)


def test_watchdogs_are_titled(cleanup_pids):
    proc = subprocess.Popen(TETHER + ["sleep", "5"])
    cleanup_pids.append(proc.pid)
    try:
        target = find_descendant(proc.pid, "sleep")
        intermediate = target.parent()
        assert wait_for(lambda: "tether: intermediate sleep 5" in " ".join(intermediate.cmdline()), timeout=2)
    finally:
        proc.kill()
        proc.wait()
