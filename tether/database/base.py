import sqlite3
from pathlib import Path
from contextlib import contextmanager
from typing import List, Optional, Tuple, Any, Generator


class BaseDBManager:
    """
    Base class for database managers, providing common functionality.

    Every operation opens its own connection, so an instance created before
    a fork stays usable in both processes.
    """

    def __init__(self, db_path: Path, timeout: float = 10, enable_wal: bool = False):
        """
        Initializes the base database manager.

        :param db_path: The path to the SQLite database file.
        :param timeout: Seconds to wait for a lock held by another process.
        :param enable_wal: Whether to enable WAL (Write-Ahead Logging) mode.
        """
        self.db_path = db_path
        self.timeout = timeout
        self.enable_wal = enable_wal

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager that creates and returns a new database connection.

        :return Generator[sqlite3.Connection, None, None]: A generator yielding a database connection.
        """
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        if self.enable_wal:
            conn.execute("PRAGMA journal_mode=WAL;")
        try:
            yield conn
        finally:
            conn.close()

    def execute(self, sql: str, params: Optional[Tuple[Any, ...]] = None) -> Any:
        """
        Executes a raw SQL command on the database.

        :param sql: The SQL command to execute.
        :param params: Optional parameters for the SQL command.
        :return: The result of the query.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, params or ())
            conn.commit()
            return cursor.fetchall()

    def fetch_all(self, sql: str, params: Optional[Tuple[Any, ...]] = None) -> List[sqlite3.Row]:
        """
        Fetches all rows from a query.

        :param sql: The SQL command to execute.
        :param params: Optional parameters for the SQL command.
        :return: A list of sqlite3.Row objects.
        """
        with self._get_connection() as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(sql, params or ())
            return cursor.fetchall()
