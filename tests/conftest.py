import io

import pytest

from trbbfi.brainfuck import BrainfuckInterpreter

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


class Harness:
    """Interpreter wired to in-memory streams."""

    def __init__(self, input_data=b"", **kwargs):
        self.stdin = io.BytesIO(input_data)
        self.stdout = io.BytesIO()
        self.stderr = io.StringIO()
        self.interpreter = BrainfuckInterpreter(
            stdin=self.stdin, stdout=self.stdout, stderr=self.stderr, **kwargs
        )

    def run(self, source):
        self.interpreter.load(source)
        return self.interpreter.execute()

    @property
    def output(self):
        return self.stdout.getvalue()

    @property
    def trace(self):
        return self.stderr.getvalue()


@pytest.fixture
def harness():
    return Harness


@pytest.fixture
def hello_world():
    return HELLO_WORLD
