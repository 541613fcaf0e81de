#!/usr/bin/env python3
"""
Interactive TRBBFI shell.

    trbbfi> code ++++++++[>++++++++<-]>+.
    Loaded 21 instructions
    trbbfi> run
    A
"""

import io
import sys
from typing import BinaryIO, List, Optional, TextIO, Union

from trbbfi import __version__
from trbbfi.brainfuck import BrainfuckInterpreter
from trbbfi.brainfuck_debugger import dump_memory
from trbbfi.core.bf_runner import ProgramLoadError, make_interpreter, read_program_file
from trbbfi.core.config import InterpreterConfig

SHOW_LIMIT = 200

HELP_TEXT = """TRBBFI - Brainfuck Interpreter Commands:
  load <file.bf>     - Load brainfuck program from file
  code <program>     - Load brainfuck program from command line
  run (or r)         - Execute loaded brainfuck program
  reset              - Reset interpreter state (clear memory)
  dump [start] [cnt] - Show memory contents
  debug [on|off]     - Toggle debug mode (shows step-by-step)
  show (or s)        - Show loaded brainfuck program
  clear (or c)       - Clear loaded program
  status             - Show interpreter status
  help (or h)        - Show this help
  exit/quit/q        - Exit TRBBFI

Tips:
  - Debug output goes to stderr
  - Files must contain valid Brainfuck code (+-<>[].,)
  - Memory is limited to {max_cells} cells"""


class Shell:
    """Line-oriented command loop around one interpreter."""

    def __init__(
        self,
        interpreter: Optional[BrainfuckInterpreter] = None,
        config: Optional[InterpreterConfig] = None,
        stdin: Optional[Union[BinaryIO, TextIO]] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.config = config or InterpreterConfig()
        self.interpreter = interpreter or make_interpreter(self.config)
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout
        self.current_program = ""

        # Commands and the program's ',' read from one byte stream
        if self.interpreter.stdin is None and not isinstance(self.stdin, io.TextIOBase):
            self.interpreter.stdin = self.stdin

    def say(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def read_line(self) -> str:
        line = self.stdin.readline()
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        return line

    def print_banner(self) -> None:
        self.say(f"TRBBFI v{__version__} - The Really Better Brainfuck Interpreter")
        self.say("Type 'help' for commands")
        self.say()

    def run(self) -> None:
        self.print_banner()

        while True:
            self.stdout.write(self.config.prompt)
            self.stdout.flush()
            line = self.read_line()
            if not line:
                self.say()
                self.say("Bye!")
                break
            if not self.handle(line):
                break

        self.say("Goodbye!")

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        tokens = line.split()
        if not tokens:
            return True

        cmd, args = tokens[0], tokens[1:]
        if cmd in ("exit", "quit", "q"):
            return False

        if cmd in ("help", "h"):
            self.say(HELP_TEXT.format(max_cells=self.config.max_cells))
        elif cmd == "load":
            self.cmd_load(args)
        elif cmd == "code":
            self.cmd_code(args)
        elif cmd in ("run", "r"):
            self.cmd_run()
        elif cmd == "reset":
            self.interpreter.reset()
            self.say("Interpreter reset")
        elif cmd == "dump":
            self.cmd_dump(args)
        elif cmd in ("debug", "d"):
            self.cmd_debug(args)
        elif cmd in ("show", "s"):
            self.cmd_show()
        elif cmd in ("clear", "c"):
            self.current_program = ""
            self.say("Program cleared")
        elif cmd == "status":
            self.cmd_status()
        else:
            self.say(f"Unknown command: {cmd}")
        return True

    def cmd_load(self, args: List[str]) -> None:
        if not args:
            self.say("Usage: load <file.bf>")
            return
        filename = args[0]
        if ".." in filename:
            self.say("Error: Invalid filename")
            return
        try:
            program = read_program_file(filename, self.config.max_file_size)
        except ProgramLoadError as e:
            self.say(f"Error: {e}")
            return
        count = self.interpreter.load(program)
        self.current_program = program
        self.say(f"Loaded {count} instructions from {filename}")

    def cmd_code(self, args: List[str]) -> None:
        if not args:
            self.say("Usage: code <program>")
            return
        program = " ".join(args)
        if len(program) > self.config.max_code_length:
            self.say("Error: Program too long")
            return
        count = self.interpreter.load(program)
        self.current_program = program
        self.say(f"Loaded {count} instructions")

    def cmd_run(self) -> None:
        if not self.current_program:
            self.say("No program loaded.")
            return
        self.stdout.flush()
        result = self.interpreter.execute()
        if not result.ok:
            self.say()
            self.say(f"Error: {result.error}")
            self.say("Program failed.")

    def cmd_dump(self, args: List[str]) -> None:
        try:
            start = int(args[0]) if len(args) > 0 else 0
            count = int(args[1]) if len(args) > 1 else self.config.dump_count
        except ValueError:
            self.say("Usage: dump [start] [count]")
            return
        if start < 0 or count < 0:
            self.say("Usage: dump [start] [count]")
            return
        self.say(dump_memory(self.interpreter.tape, start, count))

    def cmd_debug(self, args: List[str]) -> None:
        arg = args[0].lower() if args else ""
        if arg == "on":
            self.interpreter.debug = True
            self.say("Debug mode on")
        elif arg == "off":
            self.interpreter.debug = False
            self.say("Debug mode off")
        else:
            self.say("Usage: debug [on|off]")

    def cmd_show(self) -> None:
        if not self.current_program:
            self.say("No program loaded")
            return
        self.say(f"Program ({self.interpreter.instruction_count} instructions): "
                 f"{self.current_program[:SHOW_LIMIT]}")

    def cmd_status(self) -> None:
        self.say("Status:")
        self.say(f"  Program loaded: {'Yes' if self.current_program else 'No'}")
        self.say(f"  Instructions: {self.interpreter.instruction_count}")
        self.say(f"  Memory pointer: {self.interpreter.pointer}")
        self.say(f"  Debug mode: {'On' if self.interpreter.debug else 'Off'}")
