"""Exceptions raised by term_tick."""


class TermTickError(Exception):
    """Base class for term_tick errors."""


class ClockUnavailableError(TermTickError):
    """The monotonic or calendar clock could not be read.

    There is no way to pace frames or stamp output without a clock, so callers
    normally treat this as fatal.
    """


class InputError(TermTickError):
    """A raw keystroke read failed and the editor was told not to carry on."""
