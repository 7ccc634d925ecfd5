import sys
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from tether import settings
from tether.log.handler import SQLiteHandler


class RoleFilter(logging.Filter):
    """Stamps every record with the tether role of the current process."""

    def __init__(self, role: str = "launcher"):
        super().__init__()
        self.role = role

    def filter(self, record):
        record.role = self.role
        return True


class MainFormatter(logging.Formatter):
    """Console formatter; the pid and role tell the three processes apart on a shared stderr."""

    def __init__(self):
        super().__init__('%(asctime)s - %(levelname)-8s - [PID:%(process)d %(role)s] - [%(name)s] - %(message)s')


role_filter = RoleFilter()


def set_process_role(role: str) -> None:
    """
    Renames the role carried by all subsequent log records of this process.
    Called right after a fork, once the process knows what it has become.

    :param role: The new role (e.g., 'intermediate').
    """
    role_filter.role = role


def setup_logging(console_level: Optional[int] = None, db_path: Optional[Path] = settings.LOG_DB_PATH) -> None:
    """
    Configures the root logger for tether.
    This sets up handlers for the console (stderr) and optionally SQLite,
    clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output. Defaults to
                          DEBUG when TETHER_DEBUG is set, WARNING otherwise.
    :param db_path: Where to store log records; None disables the SQLite sink.
    """
    if console_level is None:
        console_level = logging.DEBUG if settings.DEBUG_LOGGING else logging.WARNING

    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    # stdout belongs to the supervised command, so diagnostics go to stderr.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.addFilter(role_filter)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- SQLite Handler (conditional, all levels) ---
    if db_path is not None:
        try:
            sqlite_handler = SQLiteHandler(db_path=db_path)
            sqlite_handler.setLevel(logging.DEBUG)
            sqlite_handler.addFilter(role_filter)
            root_logger.addHandler(sqlite_handler)
        except (sqlite3.Error, OSError) as e:
            root_logger.error(f"Failed to initialize SQLite logging handler: {e}. Logging to DB will be disabled.")
