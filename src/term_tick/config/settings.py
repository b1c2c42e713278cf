"""Settings for the term-tick command, from CLI flags, env vars, and defaults.

Priority, highest first:
  1. Init kwargs  (CLI flags passed by Click)
  2. Env vars     (``TERM_TICK_*`` prefix)
  3. Code defaults
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..line_editor import ReadFailurePolicy


class TermTickSettings(BaseSettings):
    """Frozen settings object for one run of the frame-logging demo.

    Attributes:
        frames_per_second: Tick rate of the frame loop
        frame_limit: Frames to write before stopping
        idle_sleep: Seconds to sleep between timer polls
        read_failure: What the line editor does when a keystroke read fails
        prompt: Prompt shown when asking for the output file name
        verbose: Enable DEBUG logging for term_tick
        log_json: Emit JSON log lines instead of console output
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="TERM_TICK_",
    )

    frames_per_second: int = Field(default=60, gt=0)
    frame_limit: int = Field(default=5, ge=1)
    idle_sleep: float = Field(default=0.0, ge=0.0)
    read_failure: ReadFailurePolicy = ReadFailurePolicy.SKIP
    prompt: str = "Write a name for the file: "
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> "TermTickSettings":
        """Build settings from CLI options, ignoring options left unset."""
        return cls(**{name: value for name, value in cli_flags.items() if value is not None})
