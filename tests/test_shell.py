import io

import pytest

from trbbfi.brainfuck import BrainfuckInterpreter
from trbbfi.core.config import InterpreterConfig
from trbbfi.shell import Shell


class ShellHarness:
    def __init__(self, script="", config=None):
        self.program_out = io.BytesIO()
        self.trace = io.StringIO()
        self.out = io.StringIO()
        interpreter = BrainfuckInterpreter(stdout=self.program_out, stderr=self.trace)
        self.shell = Shell(
            interpreter=interpreter,
            config=config,
            stdin=io.BytesIO(script) if isinstance(script, bytes) else io.StringIO(script),
            stdout=self.out,
        )

    def command(self, line):
        keep_going = self.shell.handle(line)
        text = self.out.getvalue()
        self.out.seek(0)
        self.out.truncate()
        return keep_going, text


@pytest.fixture
def sh():
    return ShellHarness()


def test_session_banner_and_goodbye():
    h = ShellHarness("code +++.\nrun\nquit\n")
    h.shell.run()
    text = h.out.getvalue()
    assert text.startswith("TRBBFI v1.0 - The Really Better Brainfuck Interpreter\n")
    assert "Loaded 4 instructions\n" in text
    assert text.count("trbbfi> ") == 3
    assert text.endswith("Goodbye!\n")
    assert "Bye!" not in text.replace("Goodbye!", "")
    assert h.program_out.getvalue() == b"\x03"


def test_eof_says_bye():
    h = ShellHarness("status\n")
    h.shell.run()
    assert h.out.getvalue().endswith("\nBye!\nGoodbye!\n")


def test_blank_and_unknown(sh):
    assert sh.command("   \n") == (True, "")
    assert sh.command("frobnicate 1 2") == (True, "Unknown command: frobnicate\n")


@pytest.mark.parametrize("word", ["exit", "quit", "q"])
def test_exit_words(sh, word):
    keep_going, _ = sh.command(word)
    assert keep_going is False


def test_code_joins_tokens(sh):
    _, text = sh.command("code ++  + comment .")
    assert text == "Loaded 4 instructions\n"
    _, text = sh.command("show")
    assert text == "Program (4 instructions): ++ + comment .\n"


def test_code_usage_and_length_limit():
    h = ShellHarness(config=InterpreterConfig(max_code_length=5))
    assert h.command("code")[1] == "Usage: code <program>\n"
    assert h.command("code ++++++")[1] == "Error: Program too long\n"
    assert h.command("code +++++")[1] == "Loaded 5 instructions\n"


def test_run_without_program(sh):
    assert sh.command("run")[1] == "No program loaded.\n"


def test_run_failure_is_reported(sh):
    sh.command("code +]")
    _, text = sh.command("r")
    assert "Error: Unmatched ']' at position 1\n" in text
    assert text.endswith("Program failed.\n")


def test_load_file(sh, tmp_path, hello_world):
    path = tmp_path / "hello.bf"
    path.write_text(hello_world)
    _, text = sh.command(f"load {path}")
    assert text == f"Loaded {len(hello_world)} instructions from {path}\n"
    sh.command("run")
    assert sh.program_out.getvalue() == b"Hello World!\n"


def test_load_errors(sh, tmp_path):
    assert sh.command("load")[1] == "Usage: load <file.bf>\n"
    assert sh.command("load ../secret.bf")[1] == "Error: Invalid filename\n"
    assert sh.command(f"load {tmp_path / 'missing.bf'}")[1].startswith("Error: Cannot open file")


def test_load_too_large(tmp_path):
    h = ShellHarness(config=InterpreterConfig(max_file_size=4))
    path = tmp_path / "big.bf"
    path.write_text("+++++")
    assert h.command(f"load {path}")[1].startswith("Error: File too large")


def test_dump_and_reset(sh):
    sh.command("code ++>+++")
    sh.command("run")
    assert sh.command("dump 0 3")[1] == "Memory [0-2]: 2 [3] 0\n"
    assert sh.command("reset")[1] == "Interpreter reset\n"
    assert sh.command("dump 0 3")[1] == "Memory [0-2]: [0] 0 0\n"


def test_dump_defaults_and_bad_args(sh):
    _, text = sh.command("dump")
    assert text.startswith("Memory [0-15]: [0] 0")
    assert sh.command("dump x")[1] == "Usage: dump [start] [count]\n"
    assert sh.command("dump 50000")[1] == "Error: Start position 50000 exceeds memory size 30000\n"


def test_debug_toggle(sh):
    assert sh.command("debug on")[1] == "Debug mode on\n"
    sh.command("code +")
    sh.command("run")
    assert sh.trace.getvalue() == "[DEBUG] Step 0: '+' ptr=0 val=0\n"
    assert sh.command("d OFF")[1] == "Debug mode off\n"
    assert sh.command("debug")[1] == "Usage: debug [on|off]\n"
    assert sh.shell.interpreter.debug is False


def test_clear_and_status(sh):
    sh.command("code +>")
    sh.command("run")
    _, text = sh.command("status")
    assert text == (
        "Status:\n"
        "  Program loaded: Yes\n"
        "  Instructions: 2\n"
        "  Memory pointer: 1\n"
        "  Debug mode: Off\n"
    )
    assert sh.command("c")[1] == "Program cleared\n"
    assert sh.command("s")[1] == "No program loaded\n"
    assert sh.command("run")[1] == "No program loaded.\n"


def test_help(sh):
    _, text = sh.command("h")
    assert text.startswith("TRBBFI - Brainfuck Interpreter Commands:")
    assert "Memory is limited to 1000000 cells" in text


def test_program_reads_input_after_run():
    h = ShellHarness(b"code ,.,.\nrun\nAB\nquit\n")
    h.shell.run()
    assert h.program_out.getvalue() == b"AB"
    text = h.out.getvalue()
    assert "Unknown command" not in text
    assert text.endswith("Goodbye!\n")


def test_program_input_at_eof_reads_zero():
    h = ShellHarness(b"code ,.\nrun\n")
    h.shell.run()
    assert h.program_out.getvalue() == b"\x00"
    assert h.out.getvalue().endswith("Bye!\nGoodbye!\n")


def test_injected_interpreter_stdin_is_kept():
    program_in = io.BytesIO(b"z")
    interpreter = BrainfuckInterpreter(stdin=program_in, stdout=io.BytesIO())
    shell = Shell(interpreter=interpreter, stdin=io.BytesIO(b"quit\n"), stdout=io.StringIO())
    assert shell.interpreter.stdin is program_in


def test_status_follows_interpreter_debug_flag(sh):
    sh.shell.interpreter.debug = True
    assert "  Debug mode: On\n" in sh.command("status")[1]
