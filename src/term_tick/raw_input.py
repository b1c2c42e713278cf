"""
Unbuffered, unechoed keystroke reads.

The terminal's line discipline is switched to non-canonical mode with echo off
for exactly one single-byte read and then put back the way it was. Both the
line discipline and the byte source can be swapped out, so the read path can
be driven by scripted input in tests.
"""

import logging
import os
import sys
import termios
from dataclasses import dataclass
from typing import Any, Callable, Hashable, List, Optional, Protocol, Set

logger = logging.getLogger(__name__)

# Index of the local-mode flags and control characters in a termios attribute list.
LFLAG = 3
CC = 6

_TERMINAL_ERRORS = (termios.error, OSError)


class LineDiscipline(Protocol):
    """Read and write access to an input device's terminal attributes."""

    def get_attributes(self) -> List[Any]:
        ...

    def set_attributes(self, attributes: List[Any], when: int) -> None:
        ...


class TermiosDiscipline:
    """LineDiscipline backed by termios on a tty file descriptor."""

    def __init__(self, fd: int):
        self.fd = fd

    def get_attributes(self) -> List[Any]:
        return termios.tcgetattr(self.fd)

    def set_attributes(self, attributes: List[Any], when: int) -> None:
        termios.tcsetattr(self.fd, when, attributes)


def raw_attributes(attributes: List[Any]) -> List[Any]:
    """Return a copy of `attributes` set up for one-byte unechoed reads.

    Canonical mode and echo are cleared, and reads return after one byte with
    no inter-byte timeout. The input list is left untouched.
    """
    raw = list(attributes)
    raw[LFLAG] = raw[LFLAG] & ~(termios.ICANON | termios.ECHO)
    raw[CC] = list(raw[CC])
    raw[CC][termios.VMIN] = 1
    raw[CC][termios.VTIME] = 0
    return raw


class RawModeSession:
    """Context manager that holds an input device in raw mode.

    On entry the current attributes are saved and raw attributes applied. On
    exit the saved attributes are written back, whatever happened inside the
    block. Failing to save or apply attributes is logged and the block still
    runs; the read then happens in whatever mode the device was already in.

    Attributes:
        discipline: The LineDiscipline being modified
        saved: Attributes captured on entry, or None if they could not be read
        error: The first configuration error seen, if any
        restored: Whether the saved attributes have been written back
    """

    def __init__(self, discipline: LineDiscipline):
        self.discipline = discipline
        self.saved: Optional[List[Any]] = None
        self.error: Optional[Exception] = None
        self.restored = False

    def __enter__(self):
        try:
            self.saved = self.discipline.get_attributes()
        except _TERMINAL_ERRORS as exc:
            logger.warning("Could not read terminal attributes: %s", exc)
            self.error = exc
            return self

        try:
            self.discipline.set_attributes(raw_attributes(self.saved), termios.TCSANOW)
        except _TERMINAL_ERRORS as exc:
            logger.warning("Could not switch terminal to raw mode: %s", exc)
            self.error = exc
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.saved is None or self.restored:
            return False
        self.restored = True
        try:
            self.discipline.set_attributes(self.saved, termios.TCSADRAIN)
        except _TERMINAL_ERRORS as restore_exc:
            logger.warning("Could not restore terminal attributes: %s", restore_exc)
            self.error = self.error or restore_exc
        return False


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a single raw keystroke read.

    Attributes:
        char: The byte read, as a one-character string, or None if nothing
            usable was read
        error: The terminal or read error that degraded this read, if any
        eof: True if the input device reported end of file
    """
    char: Optional[str] = None
    error: Optional[Exception] = None
    eof: bool = False

    @property
    def ok(self) -> bool:
        return self.char is not None and self.error is None

    @property
    def degraded(self) -> bool:
        return self.error is not None


class RawInput:
    """Single-byte keystroke source for a terminal input device.

    Only one raw mode session may be open per device at a time. Two RawInput
    objects on the same file descriptor share that limit; an input built from
    an injected discipline alone is identified by the discipline object.

    Attributes:
        discipline: LineDiscipline toggled around every read
    """

    def __init__(
        self,
        fd: Optional[int] = None,
        reader: Optional[Callable[[], bytes]] = None,
        discipline: Optional[LineDiscipline] = None,
    ):
        self._fd = fd
        self._reader = reader or self._read_fd
        self.discipline = discipline or TermiosDiscipline(self.fd)

    @property
    def fd(self) -> int:
        """File descriptor of the input device, stdin unless given."""
        if self._fd is None:
            self._fd = sys.stdin.fileno()
        return self._fd

    @property
    def device(self) -> Hashable:
        """Key identifying the underlying device for the one-session rule."""
        if self._fd is not None:
            return ("fd", self._fd)
        return ("discipline", id(self.discipline))

    def _read_fd(self) -> bytes:
        return os.read(self.fd, 1)

    def is_raw_mode(self) -> bool:
        """Whether a raw mode session is currently open on this device."""
        return self.device in _active_devices

    def raw_mode(self) -> RawModeSession:
        """Open a raw mode session. Sessions on one device cannot be nested."""
        if self.is_raw_mode():
            raise RuntimeError("input device is already in raw mode")
        return _TrackedSession(self.discipline, self.device)

    def read_raw_char(self) -> ReadResult:
        """Read one byte without waiting for Enter and without echo.

        Blocks until a byte arrives. The terminal attributes are restored
        before this method returns, on success and on failure.
        """
        with self.raw_mode() as session:
            try:
                data = self._reader()
            except OSError as exc:
                logger.warning("Raw keystroke read failed: %s", exc)
                return ReadResult(error=exc)

        if not data:
            return ReadResult(eof=True, error=session.error)
        return ReadResult(char=data[:1].decode("latin-1"), error=session.error)


# Devices with an open raw mode session.
_active_devices: Set[Hashable] = set()


class _TrackedSession(RawModeSession):
    """RawModeSession that marks its device busy while open."""

    def __init__(self, discipline: LineDiscipline, device: Hashable):
        super().__init__(discipline)
        self._device = device

    def __enter__(self):
        if self._device in _active_devices:
            raise RuntimeError("input device is already in raw mode")
        _active_devices.add(self._device)
        return super().__enter__()

    def __exit__(self, exc_type, exc, tb):
        try:
            return super().__exit__(exc_type, exc, tb)
        finally:
            _active_devices.discard(self._device)
