import os
import sys
import signal
import psutil
import logging
from typing import Optional, Sequence

from tether import settings

log = logging.getLogger(__name__)


#* --- Process Status & Monitoring ---
class Ancestor:
    """
    A process whose death a watchdog waits for.

    The pid is captured once and never re-resolved. When psutil can read the
    process, its start time is pinned too, so a pid recycled by the OS for an
    unrelated process reads as dead instead of alive.
    """

    def __init__(self, pid: int, process: Optional[psutil.Process] = None):
        self.pid = pid
        self.process = process

    @classmethod
    def capture(cls, pid: int) -> "Ancestor":
        """
        Captures a process identity for later liveness probes.

        :param pid: The process to watch.
        :return: An Ancestor pinned to that process where psutil allows it.
        """
        try:
            return cls(pid, psutil.Process(pid))
        except psutil.NoSuchProcess:
            log.debug(f"Process {pid} vanished before it could be captured.")
            return cls(pid, None)
        except psutil.AccessDenied:
            log.debug(f"Cannot inspect process {pid}; falling back to the bare pid probe.")
            return cls(pid, None)

    def is_alive(self) -> bool:
        """
        Probes the ancestor without affecting it.

        The null signal checks existence; a zombie or a process with another
        start time behind the same pid counts as dead.
        """
        try:
            os.kill(self.pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            pass  # exists, owned by someone else
        if self.process is None:
            return True
        try:
            return self.process.is_running() and self.process.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            return True

    def __repr__(self) -> str:
        return f"Ancestor(pid={self.pid})"


def exit_status(status: int) -> int:
    """
    Translates a raw wait status into a process exit code.

    :param status: The status reported by os.waitpid.
    :return: The exit code for a normal exit, 128 + signal for a signal death, 1 otherwise.
    """
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return settings.SIGNAL_EXIT_BASE + os.WTERMSIG(status)
    return settings.EXIT_FAILURE


#* --- Process Groups ---
def create_process_group() -> int:
    """
    Makes the calling process the leader of a new process group.

    A process that already leads its own group (a session leader, for
    instance) keeps it; setpgrp would fail for a session leader anyway.

    :raises OSError: If the group cannot be created.
    :return: The process group id.
    """
    if is_group_leader():
        log.debug(f"Already leading process group {os.getpgrp()}")
        return os.getpgrp()
    os.setpgrp()
    pgid = os.getpgrp()
    log.debug(f"Process group created: PGID={pgid}")
    return pgid


def is_group_leader() -> bool:
    """Returns True if the calling process leads its own process group."""
    return os.getpgrp() == os.getpid()


#* --- Process Creation ---
def fork() -> int:
    """
    Forks the current process after flushing buffered output.

    :raises OSError: If the fork fails.
    :return: 0 in the child, the child's pid in the parent.
    """
    sys.stdout.flush()
    sys.stderr.flush()
    return os.fork()


def _restore_signals() -> None:
    """Puts back the default disposition of signals the interpreter ignores."""
    for signum in settings.RESTORED_SIGNALS:
        signal.signal(signum, signal.SIG_DFL)


def exec_target(argv: Sequence[str]) -> None:
    """
    Replaces the current process image with the target command. Never returns.

    On failure a diagnostic goes to stderr and the process exits with 1.

    :param argv: The command followed by its arguments; the command is looked up on PATH.
    """
    _restore_signals()
    try:
        os.execvp(argv[0], list(argv))
    except OSError as e:
        print(f"{settings.PROCESS_TITLE_PREFIX}: {argv[0]}: {e.strerror}", file=sys.stderr)
        sys.stderr.flush()
    os._exit(settings.EXIT_FAILURE)
