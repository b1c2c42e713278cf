"""Shared test doubles for the clock, the line discipline, and the byte source."""

import termios

import pytest
from unittest.mock import Mock
from blessed import Terminal


class FakeClock:
    """Nanosecond clock that only moves when told to."""

    def __init__(self, start=0):
        self.now = start

    def advance(self, nanoseconds):
        self.now += nanoseconds

    def __call__(self):
        return self.now


class FakeDiscipline:
    """LineDiscipline that records every attribute change."""

    def __init__(self, fail_get=False, fail_set_raw=False, fail_restore=False):
        self.attributes = [
            0o002400,  # iflag
            0o000005,  # oflag
            0o000277,  # cflag
            termios.ICANON | termios.ECHO | termios.ISIG,  # lflag
            38400,
            38400,
            [b'\x00'] * 32,
        ]
        self.fail_get = fail_get
        self.fail_set_raw = fail_set_raw
        self.fail_restore = fail_restore
        self.calls = []

    def snapshot(self):
        return self.attributes[:6] + [list(self.attributes[6])]

    def get_attributes(self):
        if self.fail_get:
            raise termios.error(25, 'Inappropriate ioctl for device')
        return self.snapshot()

    def set_attributes(self, attributes, when):
        self.calls.append(when)
        if when == termios.TCSANOW and self.fail_set_raw:
            raise termios.error(5, 'Input/output error')
        if when == termios.TCSADRAIN and self.fail_restore:
            raise termios.error(5, 'Input/output error')
        self.attributes = attributes[:6] + [list(attributes[6])]


class ScriptedReader:
    """Byte source that replays a script, one byte (or exception) per call."""

    def __init__(self, *items):
        self.items = list(items)
        self.discipline = None
        self.modes_seen = []

    def __call__(self):
        if self.discipline is not None:
            self.modes_seen.append(self.discipline.attributes[3])
        item = self.items.pop(0) if self.items else b''
        if isinstance(item, Exception):
            raise item
        return item


def script(text):
    """Split text into single-byte reads."""
    return [bytes([b]) for b in text.encode('latin-1')]


def create_mock_terminal(width=80, height=24):
    """Create a mock Terminal whose sequences are empty strings."""
    term = Mock(spec=Terminal)
    term.width = width
    term.height = height
    term.move_x = Mock(return_value='')
    term.clear_eol = ''
    return term


@pytest.fixture
def clock():
    return FakeClock(start=5 * 1_000_000_000 + 250)


@pytest.fixture
def discipline():
    return FakeDiscipline()


@pytest.fixture
def mock_term():
    return create_mock_terminal()
