"""
Terminal Tick Library

Small utilities for terminal-interactive programs built on the Blessed library.
Provides a monotonic frame timer and fixed-rate loop, plus a raw-mode line
editor that reads keystrokes without line buffering or echo.
"""

__version__ = '0.1.0'

from .errors import ClockUnavailableError, InputError, TermTickError
from .frame_loop import FrameLoop
from .line_editor import EditorState, LineEditor, ReadFailurePolicy
from .raw_input import (
    LineDiscipline,
    RawInput,
    RawModeSession,
    ReadResult,
    TermiosDiscipline,
)
from .timer import NANOS_PER_SEC, FrameTimer, Instant, frame_ns, timestamp

__all__ = [
    'NANOS_PER_SEC',
    'ClockUnavailableError',
    'EditorState',
    'FrameLoop',
    'FrameTimer',
    'InputError',
    'Instant',
    'LineDiscipline',
    'LineEditor',
    'RawInput',
    'RawModeSession',
    'ReadFailurePolicy',
    'ReadResult',
    'TermTickError',
    'TermiosDiscipline',
    'frame_ns',
    'timestamp',
]
