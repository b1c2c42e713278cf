"""term-tick command: ask for a file name, then log a few paced frames to it."""

import logging

import click

from . import __version__
from .config.logging import configure_logging
from .config.settings import TermTickSettings
from .errors import TermTickError
from .frame_loop import FrameLoop
from .line_editor import LineEditor, ReadFailurePolicy
from .timer import frame_ns, timestamp

logger = logging.getLogger(__name__)


class FrameLogger(FrameLoop):
    """FrameLoop that writes one stamped line per frame to a file and stdout."""

    def __init__(self, stream, **kwargs):
        super().__init__(**kwargs)
        self.stream = stream

    def on_frame(self, frame_number: int):
        text = f"Frame number {frame_number} at {timestamp()}\n"
        self.stream.write(text)
        click.echo(text, nl=False)


@click.command()
@click.version_option(version=__version__, prog_name="term-tick")
@click.argument("filename", required=False)
@click.option("--fps", "frames_per_second", type=int, default=None, help="Frames per second.")
@click.option("--frames", "frame_limit", type=int, default=None, help="Frames to write before stopping.")
@click.option("--idle-sleep", type=float, default=None, help="Seconds to sleep between timer polls.")
@click.option(
    "--on-read-failure",
    "read_failure",
    type=click.Choice([policy.value for policy in ReadFailurePolicy]),
    default=None,
    help="What to do when a keystroke read fails.",
)
@click.option("--interactive", is_flag=True, help="Stop early on 'q' or Esc.")
@click.option("-v", "--verbose", is_flag=True, default=None, help="Debug logging.")
@click.option("--log-json", is_flag=True, default=None, help="Structured JSON log output to stderr.")
def main(filename, interactive, **flags):
    """Write paced, timestamped frame lines to FILENAME.

    FILENAME is prompted for when it is not given.
    """
    try:
        settings = TermTickSettings.from_cli(**flags)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    if filename is None:
        try:
            editor = LineEditor(on_read_failure=settings.read_failure)
            filename = editor.read_line(settings.prompt)
        except EOFError as exc:
            raise click.ClickException("input closed before a file name was entered") from exc
        except OSError as exc:
            raise click.ClickException(f"could not read a file name: {exc}") from exc
        except TermTickError as exc:
            logger.error("Aborting: %s", exc)
            raise click.ClickException(str(exc)) from exc
    if not filename:
        raise click.UsageError("a file name is required")

    try:
        with open(filename, "w") as stream:
            loop = FrameLogger(
                stream,
                frame_ns=frame_ns(settings.frames_per_second),
                idle_sleep=settings.idle_sleep,
                max_frames=settings.frame_limit,
                poll_keys=interactive,
            )
            loop.run()
    except OSError as exc:
        raise click.ClickException(f"could not write {filename}: {exc}") from exc
    except TermTickError as exc:
        logger.error("Aborting: %s", exc)
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Please review file: {filename}")
