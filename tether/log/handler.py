import sys
import logging
import sqlite3
from pathlib import Path
from tether.database import LogDBManager


class SQLiteHandler(logging.Handler):
    """
    A logging handler that writes each record straight to a SQLite database.

    Records are written synchronously with a fresh connection per record, so
    the handler keeps working in every process of the forked tree without
    background threads.
    """
    def __init__(self, db_path: Path):
        """
        Initializes the SQLite handler.

        :param db_path: The path to the SQLite database file.
        """
        super().__init__()
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.logDB = LogDBManager(self.db_path)
        self.logDB.initialize_database()

    def emit(self, record: logging.LogRecord) -> None:
        """
        Writes a log record to the database.

        :param record: The log record to be processed.
        """
        try:
            self.logDB.insert_log_entry(
                timestamp=record.created,
                level=record.levelname,
                pid=record.process,
                role=getattr(record, "role", "-"),
                module=record.module,
                func_name=record.funcName,
                line_no=record.lineno,
                message=record.getMessage(),
            )
        except sqlite3.Error as e:
            print(f"Error writing log record to DB '{self.db_path}': {e}", file=sys.stderr)
