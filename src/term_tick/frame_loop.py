"""
Fixed-rate main loop.

FrameLoop polls a FrameTimer and calls its frame hook once per period. It can
optionally hold the terminal in cbreak mode and poll for keystrokes between
frames, so the loop keeps reacting to input while it waits for the next tick.
"""

import contextlib
import logging
import time
from typing import Callable, Optional

from blessed import Terminal

from .timer import NANOS_PER_SEC, FrameTimer

logger = logging.getLogger(__name__)


class FrameLoop:
    """Busy-poll loop that runs a hook at a fixed frame rate.

    Subclasses override :meth:`on_frame` (and optionally :meth:`on_key`), or
    pass callables for them to the constructor.

    Attributes:
        timer: FrameTimer restarted after every frame
        frame_ns: Frame length in nanoseconds
        idle_sleep: Seconds to sleep between polls, 0 for a pure busy-poll
        max_frames: Stop after this many frames, or None to run until stopped
        term: Blessed Terminal used for key polling
        poll_keys: Whether to poll for keystrokes between frames
        frame_count: Frames run so far
        running: Whether the loop is active
    """

    def __init__(
        self,
        *,
        timer: Optional[FrameTimer] = None,
        frame_ns: int = NANOS_PER_SEC // 60,
        idle_sleep: float = 0.0,
        max_frames: Optional[int] = None,
        term: Optional[Terminal] = None,
        poll_keys: bool = False,
        on_frame: Optional[Callable[[int], None]] = None,
        on_key: Optional[Callable[[object], None]] = None,
    ):
        if frame_ns < 0:
            raise ValueError(f"frame_ns must not be negative, got {frame_ns}")
        if max_frames is not None and max_frames < 0:
            raise ValueError(f"max_frames must not be negative, got {max_frames}")
        self.timer = timer or FrameTimer()
        self.frame_ns = frame_ns
        self.idle_sleep = idle_sleep
        self.max_frames = max_frames
        self.poll_keys = poll_keys
        if term is None and poll_keys:
            term = Terminal()
        self.term = term
        self.frame_count = 0
        self.running = False
        if on_frame is not None:
            self.on_frame = on_frame
        if on_key is not None:
            self.on_key = on_key

    def on_frame(self, frame_number: int):
        """Hook executed once per frame. Frame numbers start at 1."""

    def on_key(self, key):
        """Hook executed for each keystroke when poll_keys is set.

        Args:
            key: Blessed Keystroke

        The default stops the loop on 'q' or Escape.
        """
        if key == 'q' or key.name == 'KEY_ESCAPE':
            self.stop()

    def stop(self):
        """Ask the loop to finish after the current iteration."""
        self.running = False

    def run(self) -> int:
        """Run frames until stopped or max_frames is reached.

        Returns:
            The number of frames that ran.
        """
        self.frame_count = 0
        self.running = self.max_frames != 0

        modes = self.term.cbreak() if self.poll_keys else contextlib.nullcontext()
        with modes:
            self.timer.start()
            while self.running:
                if self.poll_keys:
                    key = self.term.inkey(timeout=0)
                    if key:
                        self.on_key(key)
                        if not self.running:
                            break

                if self.timer.elapsed_at_least(self.frame_ns):
                    self.frame_count += 1
                    self.on_frame(self.frame_count)
                    if self.max_frames is not None and self.frame_count >= self.max_frames:
                        self.running = False
                    self.timer.start()
                elif self.idle_sleep:
                    time.sleep(self.idle_sleep)

        logger.debug("Frame loop finished after %d frames", self.frame_count)
        return self.frame_count
