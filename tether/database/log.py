import time
from pathlib import Path
from collections import namedtuple
from typing import List
from tether.database.base import BaseDBManager

LogEntry = namedtuple('LogEntry', ['timestamp', 'level', 'pid', 'role', 'module', 'message'])


class LogDBManager(BaseDBManager):
    """
    Manages the SQLite database that backs the optional log sink.
    """

    def __init__(self, db_path: Path):
        """
        Initializes the LogDBManager.

        :param db_path: The path to the logging SQLite database file.
        """
        super().__init__(db_path, enable_wal=False)

    def initialize_database(self) -> None:
        """Ensures the log table exists in the database."""
        self.execute('''
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp REAL,
                level TEXT,
                pid INTEGER,
                role TEXT,
                module TEXT,
                funcName TEXT,
                lineno INTEGER,
                message TEXT
            )
        ''')

    def insert_log_entry(
        self, timestamp: float, level: str, pid: int, role: str,
        module: str, func_name: str, line_no: int, message: str
    ) -> None:
        """
        Inserts a single log entry into the database.

        :param timestamp: The Unix timestamp of the log entry.
        :param level: The log level (e.g., 'INFO', 'ERROR').
        :param pid: The process that emitted the record.
        :param role: The tether role of that process (e.g., 'launcher').
        :param module: The module that generated the log.
        :param func_name: The function name that generated the log.
        :param line_no: The line number where the log was generated.
        :param message: The log message.
        """
        self.execute(
            '''INSERT INTO logs (timestamp, level, pid, role, module, funcName, lineno, message)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)''',
            (timestamp, level, pid, role, module, func_name, line_no, message)
        )

    def fetch_last_entries(self, limit: int) -> List[LogEntry]:
        """
        Fetches the most recent N log entries from the database, oldest first.

        :param limit: The maximum number of log entries to retrieve.
        :return list: A list of LogEntry namedtuples.
        """
        rows = self.fetch_all(
            "SELECT timestamp, level, pid, role, module, message FROM logs ORDER BY id DESC LIMIT ?",
            (limit,)
        )
        entries = []
        for row in reversed(rows):
            dt = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(row['timestamp']))
            entries.append(LogEntry(
                timestamp=row['timestamp'], level=row['level'], pid=row['pid'], role=row['role'],
                module=row['module'],
                message=f"{dt} - {row['level']:<8} - [PID:{row['pid']} {row['role']}] - [{row['module']}] - {row['message']}"
            ))
        return entries
