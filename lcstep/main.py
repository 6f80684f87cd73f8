"""Interactive single-step beta reducer for the untyped lambda calculus. Called from the lcstep console script.

Runs a Shell over a Session, both wrapped in the error handling context manager. An expression given on the command
line is loaded before the prompt appears.
"""

import argparse
import logging
import sys

from lcstep.lang.error import ErrorHandler
from lcstep.lang.render import RenderOptions
from lcstep.lang.session import Session
from lcstep.lang.shell import Shell

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def build_parser():
    parser = argparse.ArgumentParser(prog="lcstep", description="Step through beta reductions of a λ-term.")
    parser.add_argument("expr", help="λ-term to load (if empty, one is asked for at the prompt)", nargs="?")
    parser.add_argument("--no-color", action="store_true", help="do not color output")
    parser.add_argument("--no-ids", action="store_true", help="do not print redex ids under the term")
    parser.add_argument("--ascii", action="store_true", help="print '\\' instead of 'λ'")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more (repeat for debug output)")
    return parser


def main(argv=None):
    """Runs lcstep. Called from lcstep executable script."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=LOG_LEVELS[min(args.verbose, len(LOG_LEVELS) - 1)],
                        format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    color = not args.no_color
    options = RenderOptions(color=color, show_ids=not args.no_ids, lam="\\" if args.ascii else "λ")
    shell = Shell(Session(ErrorHandler(fatal=False, color=color)), options)

    if args.expr is not None:
        shell.default(args.expr)

    with ErrorHandler(color=color):
        shell.cmdloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
