"""Interactive loop and file runner for Beavieeer.

Thin host wrappers around `Interpreter`: they read text, print syntax errors
one per line, and print the value of each evaluated unit when there is one.

REPL meta-commands:
- `:q`               quit
- `:info`            list documented functions
- `:info <function>` show documentation for one function
- `:help`            list the meta-commands
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Optional

from beavieeer.builtin.docs import BUILTIN_DOCS
from beavieeer.errors import BeavieeerOverflowError, BeavieeerSyntaxError
from beavieeer.interpreter import Interpreter
from beavieeer.types.objects import is_error

PROMPT = ">> "

HELP_TEXT = """Available commands:
  :q                - Quit the REPL
  :info             - List available functions
  :info <function>  - Show documentation for a specific function
  :help             - Show this help message"""


def _run_meta_command(line: str, output: IO[str]) -> bool:
    """Handle a `:command`; returns False when the REPL should stop."""
    if line == ":q":
        output.write("Exiting REPL. Goodbye!\n")
        return False
    if line == ":help":
        output.write(HELP_TEXT + "\n")
    elif line == ":info":
        output.write("Usage: :info <function_name>\nAvailable functions:\n")
        output.write(", ".join(sorted(BUILTIN_DOCS)) + "\n")
    elif line.startswith(":info "):
        name = line[len(":info "):].strip()
        doc = BUILTIN_DOCS.get(name)
        if doc is None:
            output.write(f"No documentation found for '{name}'\n")
        else:
            output.write(doc.render(name) + "\n")
    else:
        output.write(f"Unknown command '{line}'. Type :help for help.\n")
    return True


def start_repl(
    input: IO[str],
    output: IO[str],
    interpreter: Optional[Interpreter] = None,
) -> None:
    itp = interpreter if interpreter is not None else Interpreter(out=output)
    output.write("Welcome to the Beavieeer REPL!\n")
    output.write("Type :q to quit, :info <function> to get function documentation\n")

    while True:
        output.write(PROMPT)
        output.flush()
        line = input.readline()
        if not line:
            return  # End of input

        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed.startswith(":"):
            if not _run_meta_command(trimmed, output):
                return
            continue

        try:
            result = itp.eval(trimmed)
        except BeavieeerSyntaxError as ex:
            for err in ex.errors:
                output.write(f"{err}\n")
            continue
        except BeavieeerOverflowError as ex:
            output.write(f"{ex}\n")
            continue
        if result is not None:
            output.write(f"{result}\n")


def run_file(
    path: str | Path,
    output: Optional[IO[str]] = None,
    interpreter: Optional[Interpreter] = None,
) -> int:
    """Evaluate a source file; returns a process exit status."""
    out = output if output is not None else sys.stdout
    source = Path(path).read_text(encoding="utf-8")
    itp = interpreter if interpreter is not None else Interpreter(out=out)
    try:
        result = itp.eval(source)
    except BeavieeerSyntaxError as ex:
        for err in ex.errors:
            out.write(f"{err}\n")
        return 1
    if result is not None:
        out.write(f"{result}\n")
    return 1 if is_error(result) else 0
