#!/usr/bin/env python3
"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Input a byte and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and ignored.

The tape starts with 30000 zeroed cells and doubles on demand up to one
million cells. Moving left of cell 0 leaves the pointer at 0. Reading past
the end of input stores 0.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, List, Optional, TextIO, Tuple, Union

from trbbfi.brainfuck_debugger import StepTracer
from trbbfi.core.errors import (
    BrainfuckError,
    MemoryLimitExceeded,
    RuntimeUnmatchedClose,
    RuntimeUnmatchedOpen,
    UnmatchedBracketError,
)
from trbbfi.core.tape import DEFAULT_CELLS, MAX_CELLS, Tape

__all__ = [
    "Instruction",
    "ExecutionResult",
    "BrainfuckInterpreter",
    "filter_source",
    "validate_brackets",
    "BrainfuckError",
    "UnmatchedBracketError",
    "RuntimeUnmatchedOpen",
    "RuntimeUnmatchedClose",
    "MemoryLimitExceeded",
]


class Instruction(Enum):
    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    OUTPUT = '.'
    INPUT = ','
    JUMP_IF_ZERO = '['
    JUMP_BACK_IF_NONZERO = ']'

    def __str__(self):
        return self.value


_SYMBOLS = {instruction.value: instruction for instruction in Instruction}


def filter_source(source: Union[str, bytes]) -> Tuple[Instruction, ...]:
    """Keep only the 8 command characters, in order."""
    if isinstance(source, (bytes, bytearray)):
        source = source.decode('latin-1')
    return tuple(_SYMBOLS[c] for c in source if c in _SYMBOLS)


def validate_brackets(code: Tuple[Instruction, ...]) -> None:
    """Check that every '[' has a matching ']'.

    Raises UnmatchedBracketError on the first ']' that closes nothing, or,
    after the full scan, for the innermost '[' left open.
    """
    open_positions: List[int] = []

    for i, cmd in enumerate(code):
        if cmd is Instruction.JUMP_IF_ZERO:
            open_positions.append(i)
        elif cmd is Instruction.JUMP_BACK_IF_NONZERO:
            if not open_positions:
                raise UnmatchedBracketError(f"Unmatched ']' at position {i}", position=i)
            open_positions.pop()

    if open_positions:
        position = open_positions[-1]
        raise UnmatchedBracketError(f"Unmatched '[' at position {position}", position=position)


@dataclass
class ExecutionResult:
    """Outcome of one execute() call."""
    ok: bool
    steps: int = 0
    output_bytes: int = 0
    error: Optional[str] = None
    error_kind: Optional[str] = None
    position: Optional[int] = None

    def __bool__(self):
        return self.ok


class BrainfuckInterpreter:
    """Loads, validates and runs one Brainfuck program at a time.

    Streams default to the process's stdin/stdout (binary) and stderr (trace).
    They are looked up when used, so redirecting sys.stdout after
    construction is honoured.
    """

    def __init__(
        self,
        memory_size: int = DEFAULT_CELLS,
        max_memory: int = MAX_CELLS,
        debug: bool = False,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[TextIO] = None,
        tracer: Optional[Callable[[int, str, int, int], None]] = None,
    ):
        self.tape = Tape(memory_size, max_memory)
        self.instructions: Tuple[Instruction, ...] = ()
        self.instruction_pointer = 0
        self.loop_stack: List[int] = []
        self._debug = bool(debug)
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.tracer = tracer
        self._default_tracer = StepTracer()
        self.steps = 0
        self.input_reads = 0
        self.output_writes = 0

    # -- loading -----------------------------------------------------------

    def load(self, source: Union[str, bytes]) -> int:
        """Replace the current program. Returns the instruction count."""
        self.instructions = filter_source(source)
        self.reset()
        return len(self.instructions)

    def validate(self) -> bool:
        try:
            validate_brackets(self.instructions)
        except UnmatchedBracketError:
            return False
        return True

    def reset(self) -> None:
        """Clear tape, pointer, instruction pointer and loop stack. Keeps the program."""
        self.tape.reset()
        self.instruction_pointer = 0
        self.loop_stack = []
        self.steps = 0
        self.input_reads = 0
        self.output_writes = 0

    # -- status ------------------------------------------------------------

    @property
    def debug(self) -> bool:
        return self._debug

    @debug.setter
    def debug(self, enabled: bool) -> None:
        self._debug = bool(enabled)

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)

    @property
    def pointer(self) -> int:
        return self.tape.pointer

    @property
    def ip(self) -> int:
        return self.instruction_pointer

    @property
    def loop_depth(self) -> int:
        return len(self.loop_stack)

    @property
    def code(self) -> str:
        return ''.join(cmd.value for cmd in self.instructions)

    @property
    def halted(self) -> bool:
        return self.instruction_pointer >= len(self.instructions)

    # -- execution ---------------------------------------------------------

    def execute(self) -> ExecutionResult:
        """Validate, then run the loaded program from a fresh tape.

        Engine errors never escape: they come back as a failed result and
        the interpreter state is left as it was when the error happened.
        """
        try:
            validate_brackets(self.instructions)
        except UnmatchedBracketError as e:
            return self._failure(e)

        self.reset()

        try:
            while self.step():
                pass
        except BrainfuckError as e:
            return self._failure(e)

        return ExecutionResult(ok=True, steps=self.steps, output_bytes=self.output_writes)

    def step(self) -> bool:
        """Execute a single instruction. Returns False once the program has finished."""
        if self.instruction_pointer >= len(self.instructions):
            return False

        ip = self.instruction_pointer
        cmd = self.instructions[ip]

        if self.debug:
            self._trace(ip, cmd)

        if cmd is Instruction.MOVE_RIGHT:
            self.tape.move_right()

        elif cmd is Instruction.MOVE_LEFT:
            self.tape.move_left()

        elif cmd is Instruction.INCREMENT:
            self.tape.increment()

        elif cmd is Instruction.DECREMENT:
            self.tape.decrement()

        elif cmd is Instruction.OUTPUT:
            self._write_byte(self.tape.read())

        elif cmd is Instruction.INPUT:
            self.tape.write(self._read_byte())

        elif cmd is Instruction.JUMP_IF_ZERO:
            if self.tape.read() == 0:
                self.instruction_pointer = self._find_matching_close(ip)
            else:
                self.loop_stack.append(ip)

        elif cmd is Instruction.JUMP_BACK_IF_NONZERO:
            if not self.loop_stack:
                raise RuntimeUnmatchedClose(f"Unmatched ']' at position {ip}", position=ip)
            if self.tape.read() != 0:
                self.instruction_pointer = self.loop_stack[-1]
            else:
                self.loop_stack.pop()

        self.instruction_pointer += 1
        self.steps += 1
        return True

    def _find_matching_close(self, ip: int) -> int:
        depth = 1
        pos = ip + 1
        while pos < len(self.instructions) and depth > 0:
            if self.instructions[pos] is Instruction.JUMP_IF_ZERO:
                depth += 1
            elif self.instructions[pos] is Instruction.JUMP_BACK_IF_NONZERO:
                depth -= 1
            pos += 1
        if depth > 0:
            raise RuntimeUnmatchedOpen(f"Unmatched '[' at position {ip}", position=ip)
        return pos - 1

    def _trace(self, ip: int, cmd: Instruction) -> None:
        tracer = self.tracer
        if tracer is None:
            # follow stderr reassignments between runs
            self._default_tracer.stream = self.stderr
            tracer = self._default_tracer
        tracer(ip, cmd.value, self.tape.pointer, self.tape.read())

    def _write_byte(self, value: int) -> None:
        stream = self.stdout if self.stdout is not None else sys.stdout.buffer
        stream.write(bytes((value,)))
        stream.flush()
        self.output_writes += 1

    def _read_byte(self) -> int:
        stream = self.stdin if self.stdin is not None else sys.stdin.buffer
        # EOF and a failed read both give 0
        try:
            data = stream.read(1)
        except (OSError, ValueError):
            return 0
        if not data:
            return 0
        self.input_reads += 1
        return data[0]

    def _failure(self, error: BrainfuckError) -> ExecutionResult:
        position = error.position
        if position is None:
            position = self.instruction_pointer
        return ExecutionResult(
            ok=False,
            steps=self.steps,
            output_bytes=self.output_writes,
            error=str(error),
            error_kind=type(error).__name__,
            position=position,
        )
