"""Settings and logging setup for term_tick."""

from .logging import configure_logging
from .settings import TermTickSettings

__all__ = [
    'TermTickSettings',
    'configure_logging',
]
