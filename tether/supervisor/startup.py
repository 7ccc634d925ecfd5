import os
import logging
import setproctitle
from typing import Sequence

from tether import settings
from tether.log import set_process_role
from tether.supervisor import process_utils
from tether.supervisor.process_utils import Ancestor
from tether.supervisor.watchdog import Watchdog

log = logging.getLogger(__name__)


def _set_title(role: str, argv: Sequence[str]) -> None:
    """Names this process after its role so the tree reads clearly in ps."""
    set_process_role(role)
    setproctitle.setproctitle(f"{settings.PROCESS_TITLE_PREFIX}: {role} {' '.join(argv)}")


def _become_intermediate(launcher: Ancestor, argv: Sequence[str]) -> int:
    """
    Runs in the first child: forks the target, then watches the launcher.

    :param launcher: The process that performed the first fork.
    :param argv: The target command and its arguments.
    :return: The exit code for the intermediate process.
    """
    _set_title("intermediate", argv)
    log.debug("Performing second fork")
    try:
        child_pid = process_utils.fork()
    except OSError as e:
        log.error(f"Second fork failed: {e}")
        return settings.EXIT_FAILURE

    if child_pid == 0:
        set_process_role("target")
        log.debug(f"Target about to exec: {argv[0]}")
        process_utils.exec_target(argv)

    log.debug(f"Intermediate watchdog for child {child_pid}")
    return Watchdog(launcher, child_pid).run()


def launch(argv: Sequence[str]) -> int:
    """
    Starts the supervised command under two nested watchdogs.

    The calling process becomes the leader of a new process group and the
    outer watchdog, watching its own parent. Its child becomes the inner
    watchdog, watching the caller. The grandchild execs the command.

    :param argv: The target command and its arguments.
    :return: The exit code for the calling process.
    """
    original_parent = Ancestor.capture(os.getppid())
    log.debug(f"Starting: PID={os.getpid()} PPID={original_parent.pid}")

    try:
        process_utils.create_process_group()
    except OSError as e:
        log.error(f"Failed to create process group: {e}")
        return settings.EXIT_FAILURE

    launcher = Ancestor.capture(os.getpid())
    _set_title("launcher", argv)
    log.debug("Performing first fork")
    try:
        child_pid = process_utils.fork()
    except OSError as e:
        log.error(f"First fork failed: {e}")
        return settings.EXIT_FAILURE

    if child_pid == 0:
        return _become_intermediate(launcher, argv)

    log.debug(f"Launcher watchdog for child {child_pid}")
    return Watchdog(original_parent, child_pid).run()
