#!/usr/bin/env python3
"""
Command line entry point.

    trbbfi                 # start the shell
    trbbfi file.bf         # execute a file
    trbbfi -c CODE         # execute code given on the command line
    trbbfi -d file.bf      # execute with a step trace on stderr
"""

import argparse
import sys
from typing import List, Optional

from trbbfi import __version__
from trbbfi.core.bf_runner import ProgramLoadError, make_interpreter, read_program_file
from trbbfi.core.config import ConfigError, load_config
from trbbfi.shell import Shell

VERSION_TEXT = (
    f"TRBBFI v{__version__}\n"
    "Licensed under GNU GPL v3\n"
    "https://github.com/TheRealOwenJ/trbbfi"
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="trbbfi",
        description=f"TRBBFI v{__version__} - The Really Better Brainfuck Interpreter",
    )
    ap.add_argument("file", nargs="?", help="Brainfuck program to execute")
    ap.add_argument("-c", "--code", help="Execute CODE instead of a file")
    ap.add_argument("-d", "--debug", action="store_true", help="Trace every step on stderr")
    ap.add_argument("--config", help="YAML file with interpreter settings")
    ap.add_argument("-v", "--version", action="version", version=VERSION_TEXT)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {"debug": True} if args.debug else {}
    try:
        config = load_config(args.config, **overrides)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.code is None and args.file is None:
        Shell(config=config).run()
        return 0

    if args.code is not None:
        source = args.code
    else:
        try:
            source = read_program_file(args.file, config.max_file_size)
        except ProgramLoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    interpreter = make_interpreter(config)
    interpreter.load(source)
    result = interpreter.execute()
    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
