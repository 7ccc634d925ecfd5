"""
Drop-in counterparts of the subprocess API that run every command under
tether, so the command and all of its descendants are terminated when the
calling process dies.

    >>> from tether import spawn
    >>> spawn.run(["echo", "hello"], capture_output=True, text=True).stdout
    'hello\\n'
"""
import os
import sys
import shutil
import subprocess
from subprocess import CalledProcessError, SubprocessError, TimeoutExpired
from typing import Any, List, Optional, Sequence

__all__ = [
    "command", "Popen", "run", "check_output", "which",
    "CalledProcessError", "SubprocessError", "TimeoutExpired",
]


def command(args: Sequence[Any]) -> List[str]:
    """
    Returns the argument list that runs `args` under tether.

    :param args: The command followed by its arguments (str or path-like).
    :raises ValueError: If args is a plain string or empty.
    :return: An argument list for the subprocess API.
    """
    if isinstance(args, (str, bytes)):
        raise ValueError("tether needs an argument list, not a command string")
    args = [os.fspath(arg) for arg in args]
    if not args:
        raise ValueError("tether needs a command to run")
    return [sys.executable, "-m", "tether", *args]


def _check_kwargs(kwargs: dict) -> None:
    if kwargs.get("shell"):
        raise ValueError("shell=True is not supported under tether; pass an argument list")
    if kwargs.get("executable") is not None:
        raise ValueError("executable is not supported under tether; put the program first in args")


class Popen(subprocess.Popen):
    """
    A subprocess.Popen whose command is supervised by tether.

    `pid` is the pid of the tether launcher, and `returncode` mirrors the
    command's own exit code (128 + signal if a signal killed it). Killing
    this process object kills the whole supervised tree.
    """

    def __init__(self, args: Sequence[Any], **kwargs: Any) -> None:
        _check_kwargs(kwargs)
        argv = command(args)
        self.target_args = argv[3:]
        super().__init__(argv, **kwargs)


def run(args: Sequence[Any], **kwargs: Any) -> subprocess.CompletedProcess:
    """
    subprocess.run() for a command supervised by tether.

    On timeout the launcher is killed, and the inner watchdog then terminates
    the command's process group.
    """
    _check_kwargs(kwargs)
    return subprocess.run(command(args), **kwargs)


def check_output(args: Sequence[Any], **kwargs: Any) -> Any:
    """subprocess.check_output() for a command supervised by tether."""
    _check_kwargs(kwargs)
    return subprocess.check_output(command(args), **kwargs)


def which(name: str, path: Optional[str] = None) -> Optional[str]:
    """
    Looks up an executable on PATH, the same way tether resolves the command.

    :param name: The executable name.
    :param path: An alternative search path.
    :return: The full path, or None if it cannot be found.
    """
    return shutil.which(name, path=path)
