"""
tether: run a command that dies with its parent.

`tether <command> [args...]` runs the command under two nested watchdogs.
When the process that started tether disappears, the command and every
process it spawned are terminated. Otherwise tether exits with the
command's own exit status.

The spawn module offers the same guarantee from Python, with the
subprocess API.
"""

from .spawn import Popen, run, check_output, command, which

__all__ = ["Popen", "run", "check_output", "command", "which"]
