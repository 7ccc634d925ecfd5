"""
This module contains the configuration settings for tether.
It defines the supervision timings, exit codes, signal sets and the
logging side channel. Supervision timings are fixed constants; only the
logging side channel reads the environment.
"""

import os
import signal
import pathlib

#* --- Watchdog Timings ---
POLL_INTERVAL = 0.05  # seconds between watchdog iterations
GRACE_PERIOD = 0.1    # seconds between SIGTERM and SIGKILL

#* --- Exit Codes ---
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
SIGNAL_EXIT_BASE = 128  # exit code = 128 + signal number

#* --- Signals ---
# Delivered to a watchdog, these trigger group termination instead of an abrupt death.
TRAPPED_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGHUP)
# The interpreter ignores these at start-up; the target gets them back at their defaults.
RESTORED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFZ", "SIGXFSZ") if hasattr(signal, name)
)

#* --- Process Identification ---
PROCESS_TITLE_PREFIX = "tether"
USAGE = "Usage: tether <command> [args...]"

#* --- Logging Side Channel ---
DEBUG_LOGGING = os.getenv("TETHER_DEBUG", "False").lower() in ('true', '1', 't')
_log_db = os.getenv("TETHER_LOG_DB", "")
LOG_DB_PATH = pathlib.Path(_log_db).expanduser() if _log_db else None
