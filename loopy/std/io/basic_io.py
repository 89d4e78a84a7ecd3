import sys
from typing import Optional, TextIO


class BasicIO:
    """Console plumbing for the builtins.

    Streams default to the process streams, looked up on every call so
    that redirection after construction is honoured.
    """
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def read_line(self) -> str:
        # an exhausted stream yields ''
        return self.stdin.readline()

    def write_line(self, text: str) -> None:
        self.stdout.write(text + '\n')
        self.stdout.flush()
