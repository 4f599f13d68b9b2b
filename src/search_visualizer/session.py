# session.py
# Caller-owned state record for the visualizer.
#
# The stepper never reaches into this record. The session feeds inputs to the
# stepper and folds each emitted StepEvent back into its own fields. Any change
# to the sequence or target resets the record and stops the active run.

import logging
import re
from collections.abc import AsyncIterator, Iterable, Iterator

from search_visualizer.models import (
    EmptyInput,
    PacingPolicy,
    SearchState,
    SearchStep,
    StepEvent,
)
from search_visualizer.stepper import SearchStepper

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_numbers(text: str) -> tuple[int, ...]:
    """
    Parse comma-separated input into a sorted tuple of integers.

    Each token contributes its leading integer ("7abc" → 7); tokens with no
    leading integer are dropped.
    """
    numbers: list[int] = []
    for token in text.split(","):
        match = _LEADING_INT.match(token.strip())
        if not match:
            continue
        try:
            numbers.append(int(match.group(0)))
        except ValueError:
            # beyond the interpreter's int conversion limit
            continue
    return tuple(sorted(numbers))


class SearchSession:
    """Explicit finite-state record of one visualizer session."""

    def __init__(
        self,
        sequence: Iterable[int] = (),
        target: int = 0,
        stepper: SearchStepper | None = None,
    ) -> None:
        self._stepper = stepper or SearchStepper()
        self.sequence: tuple[int, ...] = tuple(sorted(sequence))
        self.target = target
        self.state = SearchState.IDLE
        self.step: SearchStep | None = None
        self.description = ""
        self.error = ""

    @property
    def searching(self) -> bool:
        return self.state in (SearchState.VALIDATING, SearchState.STEPPING)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self._stepper.cancel()
        self.state = SearchState.IDLE
        self.step = None
        self.description = ""
        self.error = ""

    def set_input(self, text: str) -> bool:
        """Replace the sequence from raw text. Returns False if nothing parsed."""
        numbers = parse_numbers(text)
        if not numbers:
            self.error = EmptyInput().message
            return False
        self.set_sequence(numbers)
        return True

    def set_sequence(self, numbers: Iterable[int]) -> None:
        if self.searching:
            logger.debug("Sequence changed mid-run; resetting.")
        self.sequence = tuple(sorted(numbers))
        self.reset()

    def set_target(self, target: int) -> None:
        if self.searching:
            logger.debug("Target changed mid-run; resetting.")
        self.target = target
        self.reset()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def begin(self) -> bool:
        """Validate the current inputs. Returns True when stepping may start."""
        self.reset()
        self.state = SearchState.VALIDATING

        error = self._stepper.validate(self.sequence, self.target)
        if error is not None:
            logger.debug("Validation failed: %s", error.message)
            self.state = SearchState.IDLE
            self.error = error.message
            return False

        self.state = SearchState.STEPPING
        return True

    def apply(self, event: StepEvent) -> None:
        """Fold one emitted event into the record."""
        self.step = event.step
        self.description = event.description
        if event.step.found:
            self.state = SearchState.FOUND
        elif event.step.is_sentinel:
            self.state = SearchState.EXHAUSTED

    def start(self) -> Iterator[StepEvent]:
        """Validate, then stream unpaced events, applying each as it passes."""
        if not self.begin():
            return iter(())
        return self._forward(self._stepper.start(self.sequence, self.target))

    def _forward(self, events: Iterator[StepEvent]) -> Iterator[StepEvent]:
        for event in events:
            if self.state is not SearchState.STEPPING:
                return
            self.apply(event)
            yield event

    def play(self, pacing: PacingPolicy | None = None) -> AsyncIterator[StepEvent]:
        """Validate, then stream paced events, applying each as it passes."""
        if not self.begin():
            return _empty()
        return self._forward_async(self._stepper.play(self.sequence, self.target, pacing))

    async def _forward_async(self, events: AsyncIterator[StepEvent]) -> AsyncIterator[StepEvent]:
        async for event in events:
            if self.state is not SearchState.STEPPING:
                return
            self.apply(event)
            yield event


async def _empty() -> AsyncIterator[StepEvent]:
    return
    yield
