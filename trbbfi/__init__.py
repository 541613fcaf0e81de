"""TRBBFI - The Really Better Brainfuck Interpreter."""

__version__ = "1.0"

from trbbfi.brainfuck import (  # noqa: E402
    BrainfuckError,
    BrainfuckInterpreter,
    ExecutionResult,
    Instruction,
    MemoryLimitExceeded,
    RuntimeUnmatchedClose,
    RuntimeUnmatchedOpen,
    UnmatchedBracketError,
    filter_source,
    validate_brackets,
)
