"""Command-line entry point: interprets a Hydrogen file, or runs in command-line mode when no file is given. Also uses
the error handling context manager.
"""

import argparse
import logging

from hydrogen import __version__
from hydrogen.lang.error import ErrorHandler
from hydrogen.lang.session import Session
from hydrogen.lang.shell import Shell

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser():
    parser = argparse.ArgumentParser(prog="hydrogen", description="Hydrogen language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tree", action="store_true", help="print the syntax tree of each program before running it")
    parser.add_argument("--log-level", default="WARNING", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="logging level")
    parser.add_argument("--no-color", action="store_true", help="disable colored error messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Runs the Hydrogen interpreter. Called from the hydrogen console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    with ErrorHandler(color=not args.no_color) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tree=args.tree)
            try:
                sess.run()
            finally:
                for value in sess.results:
                    print(value)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, show_tree=args.tree)).cmdloop()


if __name__ == "__main__":
    main()
