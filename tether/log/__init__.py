"""
Logging module for tether.
This module provides the logging side channel: a stderr console handler
and an optional SQLite sink, both tagged with the pid and role of the
process that emitted each record.
"""

from .setup import setup_logging, set_process_role

__all__ = ["setup_logging", "set_process_role"]
