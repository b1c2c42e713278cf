"""
Monotonic timing for fixed-rate loops.

This module provides an immutable nanosecond timestamp, a polling frame timer
that answers "has at least N nanoseconds passed since the last reset", and a
calendar timestamp helper for stamping output lines.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import ClockUnavailableError

logger = logging.getLogger(__name__)

NANOS_PER_SEC = 1_000_000_000

_CLOCK_ERRORS = (OSError, OverflowError, ValueError)


def frame_ns(frames_per_second):
    """Return the length of one frame in nanoseconds.

    Args:
        frames_per_second: Target tick rate, must be positive.
    """
    if frames_per_second <= 0:
        raise ValueError(f"frames_per_second must be positive, got {frames_per_second}")
    return NANOS_PER_SEC // frames_per_second


@dataclass(frozen=True)
class Instant:
    """A monotonic timestamp split into whole seconds and leftover nanoseconds.

    Instants are only meaningful relative to each other. Subtracting two of
    them gives the signed number of nanoseconds between them.

    Attributes:
        seconds: Whole seconds of the clock reading
        nanoseconds: Sub-second part, 0 <= nanoseconds < NANOS_PER_SEC
    """
    seconds: int
    nanoseconds: int

    def __post_init__(self):
        if not 0 <= self.nanoseconds < NANOS_PER_SEC:
            raise ValueError(f"nanoseconds out of range: {self.nanoseconds}")

    @classmethod
    def from_ns(cls, total_ns: int) -> "Instant":
        """Build an instant from a single nanosecond reading."""
        seconds, nanoseconds = divmod(total_ns, NANOS_PER_SEC)
        return cls(seconds, nanoseconds)

    @classmethod
    def now(cls, clock: Optional[Callable[[], int]] = None) -> "Instant":
        """Read the clock and return the current instant.

        Args:
            clock: Zero-argument callable returning integer nanoseconds.
                Defaults to time.monotonic_ns.

        Raises:
            ClockUnavailableError: If the clock cannot be read.
        """
        clock = clock or time.monotonic_ns
        try:
            return cls.from_ns(clock())
        except _CLOCK_ERRORS as exc:
            logger.error("Monotonic clock is unavailable: %s", exc)
            raise ClockUnavailableError(f"monotonic clock is unavailable: {exc}") from exc

    def __sub__(self, other: "Instant") -> int:
        if not isinstance(other, Instant):
            return NotImplemented
        return ((self.seconds - other.seconds) * NANOS_PER_SEC
                + (self.nanoseconds - other.nanoseconds))


class FrameTimer:
    """A restartable timer that is polled rather than waited on.

    Polling keeps the calling loop free to do other work (such as checking for
    keystrokes) between ticks. The timer never sleeps; callers that want to
    spend less CPU should sleep briefly between polls themselves.

    Attributes:
        clock: Zero-argument callable returning integer nanoseconds
        started_at: Instant of the last start(), or None before the first one
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self.clock = clock or time.monotonic_ns
        self.started_at: Optional[Instant] = None

    def start(self) -> Instant:
        """Record the current instant as the start of a new period.

        Raises:
            ClockUnavailableError: If the clock cannot be read.
        """
        self.started_at = Instant.now(self.clock)
        return self.started_at

    def elapsed_ns(self) -> int:
        """Nanoseconds since the last start()."""
        if self.started_at is None:
            raise RuntimeError("FrameTimer queried before start()")
        return Instant.now(self.clock) - self.started_at

    def elapsed_at_least(self, nanoseconds: int) -> bool:
        """Return True once at least `nanoseconds` have passed since start().

        The boundary is inclusive: an elapsed time exactly equal to the
        threshold counts. The timer itself is not modified.
        """
        if nanoseconds < 0:
            raise ValueError(f"threshold must not be negative, got {nanoseconds}")
        return self.elapsed_ns() >= nanoseconds


def timestamp(clock: Optional[Callable[[], float]] = None) -> str:
    """Return the local calendar time in ctime form, e.g. 'Sun Oct 18 14:03:07 2026'.

    Args:
        clock: Zero-argument callable returning seconds since the epoch.
            Defaults to time.time.

    Raises:
        ClockUnavailableError: If calendar time cannot be read or converted.
    """
    clock = clock or time.time
    try:
        return time.ctime(clock()).rstrip("\n")
    except _CLOCK_ERRORS as exc:
        logger.error("Calendar time is unavailable: %s", exc)
        raise ClockUnavailableError(f"calendar time is unavailable: {exc}") from exc
