import os
import time
import signal
import logging
from typing import Optional

from tether import settings
from tether.supervisor import process_utils

log = logging.getLogger(__name__)


def _signal_group(pgid: int, signum: int) -> bool:
    """
    Delivers a signal to every member of a process group.

    A group that no longer exists is expected and only logged at debug level.
    Any other failure is logged and reported through the return value.

    :param pgid: The process group to signal.
    :param signum: The signal to deliver.
    :return: True if the signal was delivered.
    """
    name = signal.Signals(signum).name
    try:
        os.killpg(pgid, signum)
    except ProcessLookupError:
        log.debug(f"Process group {pgid} is already gone, {name} not needed.")
        return False
    except OSError as e:
        log.error(f"Failed to send {name} to process group {pgid}: {e}")
        return False
    log.debug(f"Sent {name} to process group {pgid}.")
    return True


def terminate_group(grace_period: Optional[float] = None) -> bool:
    """
    Terminates the caller's whole process group: SIGTERM, a grace period, then SIGKILL.

    Both signals target the group, so descendants spawned by the supervised
    command are reached as well. The forced phase always runs, whatever
    happened to the graceful one. A caller that leads the group would signal
    itself, so for the leader this is a no-op.

    Note that a non-leader caller is a member of the group and is itself
    killed by the forced phase.

    :param grace_period: Seconds between the two phases. Defaults to settings.GRACE_PERIOD.
    :return: True if the group was signalled, False if the caller leads it.
    """
    if grace_period is None:
        grace_period = settings.GRACE_PERIOD

    pgid = os.getpgrp()
    if process_utils.is_group_leader():
        log.debug(f"Not signalling process group {pgid}: this process is its leader.")
        return False

    log.info(f"Terminating process group {pgid}...")
    _signal_group(pgid, signal.SIGTERM)
    time.sleep(grace_period)
    _signal_group(pgid, signal.SIGKILL)
    return True
