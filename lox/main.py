"""CLI entry point for the Lox interpreter."""
from __future__ import annotations
import sys
import argparse
import logging
import traceback

from . import __version__
from .driver import Lox
from .runtime import Completed
from .types import LoxType

# sysexits.h
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70
EX_INTERNAL = 2

STACK_OVERFLOW = "[lox] Fatal: stack overflow (recursion too deep)."


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="lox",
        description="Tree-walking interpreter for the Lox scripting language",
    )
    parser.add_argument("file", nargs="?", help="Script to execute")
    parser.add_argument("--tokens", action="store_true", help="Print the token stream before running")
    parser.add_argument("--ast", action="store_true", help="Print the syntax tree before running")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    parser.add_argument("--repl", action="store_true", help="Force REPL mode")
    parser.add_argument("--version", action="version", version=f"lox {__version__}")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="[lox] %(levelname)s %(name)s: %(message)s",
        )

    flags = {
        "tokens": args.tokens,
        "ast": args.ast,
    }

    if args.file and not args.repl:
        run_file(args.file, flags)
    else:
        run_repl(flags)


def run_file(path: str, flags: dict):
    """Execute a script, exiting non-zero on static or runtime errors."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"[lox] File not found: {path}", file=sys.stderr)
        sys.exit(EX_NOINPUT)

    lox = Lox(flags=flags)
    try:
        lox.run(source)
    except RecursionError:
        print(STACK_OVERFLOW, file=sys.stderr)
        sys.exit(EX_SOFTWARE)
    except Exception as e:
        print(f"[lox] Internal Error: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(EX_INTERNAL)

    if lox.had_error:
        sys.exit(EX_DATAERR)
    if lox.had_runtime_error:
        sys.exit(EX_SOFTWARE)


def run_repl(flags: dict):
    """Interactive REPL. Definitions persist across lines."""
    print(f"lox {__version__}")
    print("Type 'exit' or press Ctrl-D to quit.\n")

    lox = Lox(flags=flags)

    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line.strip():
            continue
        if line.strip() in ("exit", "quit"):
            break

        try:
            outcome = lox.run(line)
        except RecursionError:
            print(STACK_OVERFLOW, file=sys.stderr)
            continue
        except Exception as e:
            print(f"[Internal Error] {e}", file=sys.stderr)
            continue
        finally:
            lox.reporter.reset()

        if isinstance(outcome, Completed) and outcome.value is not None \
                and outcome.value.type != LoxType.NIL:
            print(f"=> {outcome.value}")


if __name__ == "__main__":
    main()
