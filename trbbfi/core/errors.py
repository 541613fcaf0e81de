"""Error types raised by the Brainfuck engine."""

from typing import Optional


class BrainfuckError(Exception):
    """Base class for everything that can stop a program from running."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class UnmatchedBracketError(BrainfuckError):
    """Bracket balance check failed before execution started."""


class RuntimeUnmatchedOpen(BrainfuckError):
    """A '[' with no matching ']' was reached while skipping a loop."""


class RuntimeUnmatchedClose(BrainfuckError):
    """A ']' was reached with no open loop on the loop stack."""


class MemoryLimitExceeded(BrainfuckError):
    """The tape would have to grow past its configured cap."""
