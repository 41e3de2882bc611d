"""
Command line interface.

    passwd [-l location] [-u authname] [-v] [user]
"""

import argparse
import getpass
import logging
import sys
from typing import Optional, Sequence
from od_passwd.config import Settings
from od_passwd.domain.errors import EXIT_FAILURE, EXIT_NO_USERNAME
from od_passwd.sdk.client import od_passwd

PROG = "passwd"
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Change a user's password in the directory service.",
    )
    parser.add_argument("user", nargs="?",
                        help="user whose password changes (default: invoking user)")
    parser.add_argument("-l", "--location", metavar="location",
                        help="directory node to use, e.g. /Local/Default (default: search)")
    parser.add_argument("-u", "--authname", metavar="authname",
                        help="user to authenticate as (default: the target user)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="verbosity level")
    return parser


def configure_logging(verbose: int):
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(name)s: %(levelname)s: %(message)s")


def default_user() -> Optional[str]:
    """Login name of the invoking user, or None if it cannot be found."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    user = args.user or default_user()
    try:
        status = od_passwd(
            user,
            args.location,
            args.authname,
            settings=Settings.from_env(),
            progname=parser.prog,
        )
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return EXIT_INTERRUPTED

    if status == EXIT_NO_USERNAME:
        parser.print_usage(sys.stderr)
        return EXIT_FAILURE
    return status


if __name__ == "__main__":
    sys.exit(main())
