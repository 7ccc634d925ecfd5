"""
The Supervisor package.
Runs a command under two nested watchdogs that kill its whole process
group when the original parent disappears.

This package contains the Watchdog state machine and its helper modules,
which together handle process-group creation, the double fork, liveness
probing, group termination and exit-status translation.
"""
from .startup import launch
from .watchdog import Watchdog, WatchdogState

__all__ = ['launch', 'Watchdog', 'WatchdogState']
