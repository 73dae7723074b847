"""Entry point for the jot native messaging host.

The browser launches this with the calling extension's origin as the first
argument (and ``--parent-window=<id>`` on Windows); both are accepted and
otherwise ignored. Everything on stdout belongs to the protocol.
"""

import argparse
import logging
import sys

from jot.core.config import LOG_FILE, setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the host until the browser closes the pipe."""
    parser = argparse.ArgumentParser(
        prog="jot-host",
        description="Jot native messaging host - speaks length-prefixed JSON on stdio",
        epilog="""
Normally started by the browser, not by hand. To poke at it manually:
  jot request ping
  jot request ping --spawn
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "origin",
        nargs="?",
        default=None,
        help="Calling extension origin (passed by the browser)",
    )
    parser.add_argument(
        "--log-file",
        default=LOG_FILE,
        help='Log destination, "-" for stderr (default: %(default)s)',
    )
    args, _unknown = parser.parse_known_args(argv)

    setup_logging(args.log_file)
    if args.origin:
        logger.info("Launched by %s", args.origin)

    from jot.host.server import run_host

    run_host()
    return 0


if __name__ == "__main__":
    sys.exit(main())
