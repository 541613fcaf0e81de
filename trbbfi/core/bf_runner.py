import io
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional, TextIO, Union

from trbbfi.brainfuck import BrainfuckInterpreter, ExecutionResult
from .config import InterpreterConfig


class ProgramLoadError(Exception):
    """A program file could not be used."""


@dataclass
class RunOutput:
    """Result of a run with captured streams."""
    result: ExecutionResult
    output: bytes
    trace: str


def make_interpreter(
    config: Optional[InterpreterConfig] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[TextIO] = None,
) -> BrainfuckInterpreter:
    """Interpreter sized and flagged from the configuration."""
    config = config or InterpreterConfig()
    return BrainfuckInterpreter(
        memory_size=config.initial_cells,
        max_memory=config.max_cells,
        debug=config.debug,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
    )


def read_program_file(path: str, max_size: int = 1000000) -> str:
    """Read a program file, refusing anything larger than max_size bytes.

    The contents are decoded as latin-1 so every byte maps to one character;
    only the 8 command characters survive filtering anyway.
    """
    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise ProgramLoadError(f"Cannot open file {path}") from e
    if size > max_size:
        raise ProgramLoadError(f"File too large ({size} bytes, limit {max_size})")
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ProgramLoadError(f"Cannot open file {path}") from e
    return data.decode("latin-1")


def run_source(
    source: Union[str, bytes],
    input_data: bytes = b"",
    debug: bool = False,
    config: Optional[InterpreterConfig] = None,
) -> RunOutput:
    """Execute source once with in-memory streams. Fresh interpreter every call."""
    stdin = io.BytesIO(input_data)
    stdout = io.BytesIO()
    stderr = io.StringIO()
    itp = make_interpreter(config, stdin=stdin, stdout=stdout, stderr=stderr)
    itp.debug = debug or itp.debug
    itp.load(source)
    result = itp.execute()
    return RunOutput(result=result, output=stdout.getvalue(), trace=stderr.getvalue())


def run_file(path: str, input_data: bytes = b"", config: Optional[InterpreterConfig] = None) -> RunOutput:
    config = config or InterpreterConfig()
    source = read_program_file(path, config.max_file_size)
    return run_source(source, input_data, config=config)
