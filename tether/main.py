import sys
from typing import List, Optional

from tether import settings
from tether.log import setup_logging
from tether.supervisor import launch


def main(argv: Optional[List[str]] = None) -> int:
    """
    The command-line entry point: `tether <command> [args...]`.

    :param argv: The command and its arguments. Defaults to sys.argv[1:].
    :return: The exit code for this process.
    """
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        print(settings.USAGE, file=sys.stderr)
        return settings.EXIT_FAILURE

    setup_logging()
    return launch(argv)


def run() -> None:
    """Console-script wrapper around main()."""
    sys.exit(main())


if __name__ == "__main__":
    run()
