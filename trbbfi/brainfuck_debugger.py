#!/usr/bin/env python3
"""
Brainfuck Step Tracing and Memory Inspection

StepTracer prints one line per executed instruction, before the instruction
takes effect:

    [DEBUG] Step 12: '+' ptr=3 val=7

dump_memory renders a slice of the tape with the pointer cell in brackets.
"""

import sys
from typing import Optional, TextIO

from trbbfi.core.tape import Tape


class StepTracer:
    """Writes a trace line for every step to a diagnostic stream (stderr by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.lines_written = 0

    def __call__(self, ip: int, symbol: str, pointer: int, value: int) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        print(f"[DEBUG] Step {ip}: '{symbol}' ptr={pointer} val={value}", file=stream, flush=True)
        self.lines_written += 1


def dump_memory(tape: Tape, start: int = 0, count: int = 16) -> str:
    """Show `count` cells starting at `start`, marking the pointer cell."""
    if start < 0:
        return f"Error: Start position {start} is negative"
    if start >= len(tape):
        return f"Error: Start position {start} exceeds memory size {len(tape)}"
    if count <= 0:
        return f"Memory [{start}-{start}]: (empty)"

    values = tape.window(start, count)
    end = start + len(values)

    memory_vals = []
    for i, value in enumerate(values, start):
        if i == tape.pointer:
            memory_vals.append(f"[{value}]")
        else:
            memory_vals.append(str(value))

    return f"Memory [{start}-{end - 1}]: " + " ".join(memory_vals)


if __name__ == "__main__":
    # Small demonstration: trace a short program and dump the result
    from trbbfi.brainfuck import BrainfuckInterpreter

    interpreter = BrainfuckInterpreter(debug=True)
    interpreter.load("++>+++<[->+<]>")
    outcome = interpreter.execute()
    print(f"ok={outcome.ok} steps={outcome.steps}")
    print(dump_memory(interpreter.tape, 0, 4))
