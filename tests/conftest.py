import os
import sys
import time
import subprocess
from pathlib import Path
from typing import Callable, List

import psutil
import pytest

ROOT = Path(__file__).resolve().parent.parent
TETHER = [sys.executable, "-m", "tether"]

# Make `python -m tether` importable in child processes even without an install.
os.environ["PYTHONPATH"] = os.pathsep.join(
    p for p in (str(ROOT), os.environ.get("PYTHONPATH", "")) if p
)


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Polls predicate until it returns True or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def is_gone(pid: int) -> bool:
    """True once a process no longer runs; a zombie waiting for an unrelated reaper counts as gone."""
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


def descendants(pid: int) -> List[psutil.Process]:
    try:
        return psutil.Process(pid).children(recursive=True)
    except psutil.NoSuchProcess:
        return []


def find_descendant(pid: int, name: str, timeout: float = 5.0) -> psutil.Process:
    """Waits for a descendant of pid whose command line starts with name."""
    found = []

    def _search() -> bool:
        for proc in descendants(pid):
            try:
                cmdline = proc.cmdline()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            if cmdline and os.path.basename(cmdline[0]) == name:
                found.append(proc)
                return True
        return False

    if not wait_for(_search, timeout):
        pytest.fail(f"No '{name}' process appeared under PID {pid}")
    return found[0]


@pytest.fixture
def run_tether():
    """Runs tether with the given arguments and returns the CompletedProcess."""
    def _run(*args, **kwargs) -> subprocess.CompletedProcess:
        kwargs.setdefault("capture_output", True)
        kwargs.setdefault("text", True)
        kwargs.setdefault("timeout", 10)
        return subprocess.run(TETHER + list(args), **kwargs)
    return _run


@pytest.fixture
def cleanup_pids():
    """Collects pids a test spawned and SIGKILLs any survivors afterwards."""
    pids: List[int] = []
    yield pids
    for pid in pids:
        try:
            psutil.Process(pid).kill()
        except psutil.NoSuchProcess:
            pass
