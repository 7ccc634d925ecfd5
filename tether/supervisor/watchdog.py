import os
import time
import enum
import signal
import logging
from typing import Dict, Optional

from tether import settings
from tether.supervisor import process_utils, shutdown
from tether.supervisor.process_utils import Ancestor

log = logging.getLogger(__name__)


class WatchdogState(enum.Enum):
    POLLING = "polling"
    CHILD_EXITED = "child_exited"
    ANCESTOR_DEAD = "ancestor_dead"
    CHILD_LOST = "child_lost"
    SIGNALLED = "signalled"


class Watchdog:
    """
    Watches one ancestor for death and one child for exit.

    Each iteration checks, in this order: a trapped termination signal, the
    ancestor's liveness, the supervised child's exit, then reaps any other
    exited children. Ancestor death and trapped signals terminate the whole
    process group; a child exit is translated into this process's exit code.
    """

    def __init__(
        self,
        ancestor: Ancestor,
        child_pid: int,
        poll_interval: Optional[float] = None,
        grace_period: Optional[float] = None,
    ) -> None:
        """
        :param ancestor: The process whose death triggers group termination.
        :param child_pid: The one child this watchdog supervises.
        :param poll_interval: Seconds between iterations. Defaults to settings.POLL_INTERVAL.
        :param grace_period: Seconds between SIGTERM and SIGKILL. Defaults to settings.GRACE_PERIOD.
        """
        self.ancestor = ancestor
        self.child_pid = child_pid
        self.poll_interval = settings.POLL_INTERVAL if poll_interval is None else poll_interval
        self.grace_period = settings.GRACE_PERIOD if grace_period is None else grace_period
        self.state = WatchdogState.POLLING
        self.exit_code: Optional[int] = None
        self.pending_signal: Optional[int] = None

    def handle_signal(self, signum: int, frame) -> None:
        """Signal handler: records the first trapped signal for the loop to act on."""
        if self.pending_signal is None:
            self.pending_signal = signum

    def _finish(self, state: WatchdogState, exit_code: int) -> int:
        self.state = state
        self.exit_code = exit_code
        log.debug(f"Watchdog for child {self.child_pid} finished: {state.value}, exit code {exit_code}")
        return exit_code

    def _child_exited(self, status: int) -> int:
        return self._finish(WatchdogState.CHILD_EXITED, process_utils.exit_status(status))

    def _reap_strays(self) -> Optional[int]:
        """
        Collects every exited child so none is left as a zombie.

        :return: The exit code if the supervised child was among them, else None.
        """
        while True:
            try:
                pid, status = os.waitpid(-1, os.WNOHANG)
            except ChildProcessError:
                return None
            if pid == 0:
                return None
            if pid == self.child_pid:
                log.debug(f"Reaped monitored child {pid}")
                return self._child_exited(status)
            log.debug(f"Reaped unexpected child {pid}")

    def poll(self) -> Optional[int]:
        """
        Runs one watchdog iteration without blocking.

        :return: The exit code once a terminal state is reached, None while still polling.
        """
        if self.pending_signal is not None:
            log.warning(f"Received {signal.Signals(self.pending_signal).name}, terminating process group.")
            shutdown.terminate_group(self.grace_period)
            return self._finish(WatchdogState.SIGNALLED, settings.SIGNAL_EXIT_BASE + self.pending_signal)

        if not self.ancestor.is_alive():
            log.info(f"Ancestor {self.ancestor.pid} died, terminating process group.")
            shutdown.terminate_group(self.grace_period)
            return self._finish(WatchdogState.ANCESTOR_DEAD, settings.EXIT_SUCCESS)

        try:
            pid, status = os.waitpid(self.child_pid, os.WNOHANG)
        except ChildProcessError:
            log.debug(f"Child {self.child_pid} no longer exists.")
            return self._finish(WatchdogState.CHILD_LOST, settings.EXIT_SUCCESS)
        except OSError as e:
            log.error(f"waitpid failed for child {self.child_pid}: {e}")
            return self._finish(WatchdogState.CHILD_LOST, settings.EXIT_FAILURE)

        if pid == self.child_pid:
            log.debug(f"Child {self.child_pid} exited.")
            return self._child_exited(status)

        return self._reap_strays()

    def run(self) -> int:
        """
        Polls until a terminal state is reached, with trapped signals installed.

        :return: The exit code this process should exit with.
        """
        previous: Dict[int, object] = {
            signum: signal.signal(signum, self.handle_signal) for signum in settings.TRAPPED_SIGNALS
        }
        log.debug(f"Starting watchdog: ancestor={self.ancestor.pid} child={self.child_pid}")
        try:
            while True:
                exit_code = self.poll()
                if exit_code is not None:
                    return exit_code
                time.sleep(self.poll_interval)
        finally:
            for signum, handler in previous.items():
                if handler is not None:
                    signal.signal(signum, handler)
