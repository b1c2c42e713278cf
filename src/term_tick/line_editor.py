"""
Line input on top of raw keystroke reads.

LineEditor shows a prompt, collects keystrokes one byte at a time, handles
backspace, and returns the finished line when Enter is pressed. The visible
line is redrawn after every keystroke so it always matches the buffer.
"""

import enum
import logging
from typing import List, Optional

from blessed import Terminal

from .errors import InputError
from .raw_input import RawInput, ReadResult

logger = logging.getLogger(__name__)

BACKSPACE = "\x7f"
NEWLINE = "\n"
NUL = "\x00"


class EditorState(enum.Enum):
    """Where LineEditor is after the last keystroke: typing, erasing, or finished."""
    COLLECTING = "collecting"
    DELETING = "deleting"
    DONE = "done"


class ReadFailurePolicy(enum.Enum):
    """What LineEditor does when a raw read produces no character.

    SKIP logs the failure and reads again. APPEND_NUL appends a NUL byte to
    the buffer as if it had been typed. RAISE raises InputError.
    """
    SKIP = "skip"
    APPEND_NUL = "append-nul"
    RAISE = "raise"


class LineEditor:
    """Prompted single-line input with backspace support.

    Every byte other than backspace and Enter is appended as-is, including
    control characters.

    Attributes:
        term: Blessed Terminal used for the in-place redraw
        raw_input: Source of single keystrokes
        on_read_failure: ReadFailurePolicy applied to failed reads
        state: EditorState after the most recent keystroke
    """

    def __init__(
        self,
        term: Optional[Terminal] = None,
        raw_input: Optional[RawInput] = None,
        on_read_failure: ReadFailurePolicy = ReadFailurePolicy.SKIP,
    ):
        self.term = term or Terminal()
        self.raw_input = raw_input or RawInput()
        self.on_read_failure = ReadFailurePolicy(on_read_failure)
        self.state = EditorState.COLLECTING
        self._buffer: List[str] = []

    @property
    def buffer(self) -> str:
        """The line typed so far."""
        return "".join(self._buffer)

    def read_line(self, prompt: str = "") -> str:
        """Prompt for a line and return it without the trailing newline.

        Args:
            prompt: Text shown in front of the input

        Raises:
            EOFError: If the input device reaches end of file
            InputError: If a read fails under ReadFailurePolicy.RAISE
        """
        self._buffer = []
        self.state = EditorState.COLLECTING

        while self.state is not EditorState.DONE:
            self.draw(prompt)
            char = self._next_char()
            if char is not None:
                self.handle_char(char)

        print(flush=True)
        return self.buffer

    def draw(self, prompt: str):
        """Redraw the prompt and buffer over the current line."""
        print(
            self.term.move_x(0) + self.term.clear_eol + prompt + self.buffer,
            end='',
            flush=True
        )

    def handle_char(self, char: str) -> EditorState:
        """Apply one keystroke to the buffer and return the new state."""
        if char == BACKSPACE:
            self.state = EditorState.DELETING
            if self._buffer:
                self._buffer.pop()
        elif char == NEWLINE:
            self.state = EditorState.DONE
        else:
            self.state = EditorState.COLLECTING
            if not char.isprintable():
                logger.debug("Appending control character %r", char)
            self._buffer.append(char)
        return self.state

    def _next_char(self) -> Optional[str]:
        result: ReadResult = self.raw_input.read_raw_char()
        if result.eof:
            raise EOFError("input closed while reading a line")
        if result.char is not None:
            return result.char

        match self.on_read_failure:
            case ReadFailurePolicy.APPEND_NUL:
                logger.info("Read failed, appending NUL: %s", result.error)
                return NUL
            case ReadFailurePolicy.RAISE:
                raise InputError(f"keystroke read failed: {result.error}") from result.error
            case _:
                logger.info("Read failed, reading again: %s", result.error)
                return None
