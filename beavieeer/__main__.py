"""
Beavieeer command line entry point.

  beavieeer script.bv        # Run a script
  beavieeer                  # Interactive mode
  beavieeer -i script.bv     # Run a script, then continue interactively
  beavieeer --debug ...      # Log interpreter internals to stderr
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from beavieeer import __version__
from beavieeer.errors import BeavieeerOverflowError
from beavieeer.interpreter import Interpreter
from beavieeer.repl import run_file, start_repl

logger = logging.getLogger("beavieeer")


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beavieeer",
        description="Beavieeer - a small dynamically-typed scripting language",
    )
    parser.add_argument("script", nargs="?", help="Beavieeer script file to execute")
    parser.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Start interactive mode (after running the script, if one is given)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"Beavieeer {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        itp = Interpreter(out=sys.stdout)
        status = 0
        if args.script:
            status = run_file(args.script, sys.stdout, interpreter=itp)
        if args.interactive or not args.script:
            start_repl(sys.stdin, sys.stdout, interpreter=itp)
            status = 0
        return status
    except FileNotFoundError as ex:
        print(f"Error: cannot open '{ex.filename}'", file=sys.stderr)
        return 1
    except BeavieeerOverflowError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 1
    except RecursionError:
        logger.debug("recursion limit exceeded", exc_info=True)
        print("Error: maximum recursion depth exceeded", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
