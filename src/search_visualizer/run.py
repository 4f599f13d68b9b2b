# run.py
# Entry point. Config and wiring only — no logic lives here.
#
# Pacing defaults mirror the classroom demo: a long pause on each inspection
# and on "too small", a shorter one on "too large". Override through the
# SEARCH_VIZ_* environment variables (or .env) or --speed / --no-delay.

import asyncio
import logging
import sys

import click
from rich.logging import RichHandler

from search_visualizer import display
from search_visualizer.config import VALID_LOG_LEVELS, ConfigError, Settings
from search_visualizer.models import PacingPolicy
from search_visualizer.session import SearchSession

DEFAULT_NUMBERS = "0,2,4,6,8,10,12,14,16,18,20,22,24,26,28"
DEFAULT_TARGET = 14

EXIT_INVALID = 1
EXIT_INTERRUPTED = 130


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=display.console, show_path=False)],
        force=True,
    )


async def _animate(session: SearchSession, pacing: PacingPolicy) -> None:
    display.search_start(len(session.sequence))
    async for event in session.play(pacing):
        display.show_step(session.sequence, event.step, event.description)


@click.command()
@click.argument("numbers", default=DEFAULT_NUMBERS)
@click.option("--target", "-t", type=int, default=DEFAULT_TARGET, show_default=True, help="Value to search for.")
@click.option("--speed", type=float, default=None, help="Divide every pause by this factor.")
@click.option("--no-delay", is_flag=True, help="Emit every step without pausing.")
@click.option("--info", "show_info", is_flag=True, help="Show how binary search works first.")
@click.option("--more-info", "show_more", is_flag=True, help="Show background on binary search first.")
@click.option("--log-level", type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False), default=None)
def main(numbers, target, speed, no_delay, show_info, show_more, log_level) -> None:
    """Animate a binary search for TARGET over comma-separated NUMBERS."""
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        display.error(str(exc))
        sys.exit(EXIT_INVALID)

    _configure_logging((log_level or settings.log_level).upper())

    if speed is not None:
        if speed <= 0:
            display.error("--speed must be greater than zero")
            sys.exit(EXIT_INVALID)
        settings = settings.model_copy(update={"speed": speed})
    pacing = PacingPolicy.immediate() if no_delay else settings.pacing()

    session = SearchSession(target=target)
    if not session.set_input(numbers):
        display.error(session.error)
        sys.exit(EXIT_INVALID)

    display.banner(session.sequence, session.target)
    if show_info:
        display.how_it_works()
    if show_more:
        display.more_info()

    try:
        asyncio.run(_animate(session, pacing))
    except KeyboardInterrupt:
        session.reset()
        display.cancelled()
        sys.exit(EXIT_INTERRUPTED)

    if session.error:
        display.error(session.error)
        sys.exit(EXIT_INVALID)


if __name__ == "__main__":
    main()
