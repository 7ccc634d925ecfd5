"""
This package provides the SQLite storage used by the optional log sink.
"""

from .log import LogDBManager, LogEntry

__all__ = ["LogDBManager", "LogEntry"]
