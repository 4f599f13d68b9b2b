# stepper.py
# Binary search stepping engine.
#
# The stepper owns the algorithm only. It never touches presentation or
# caller state — it yields immutable SearchStep records and the caller
# decides what to do with them.
#
# Control flow per iteration:
#   compute mid → emit inspect beat (unset) → compare → emit verdict beat
#   → shrink window (or stop on equal)
# Exhausting the window emits a single not-found sentinel.
#
# Pacing is injected (PacingPolicy); cancellation is observed between beats.

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator, Sequence

from search_visualizer.models import (
    Comparison,
    EmptyInput,
    OutOfRange,
    PacingPolicy,
    SearchStep,
    StepEvent,
    ValidationError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvalidSearchError(Exception):
    """Raised when a run is started on inputs that validate() rejects."""

    def __init__(self, error: ValidationError) -> None:
        super().__init__(error.message)
        self.error = error


# ---------------------------------------------------------------------------
# Pure algorithm
# ---------------------------------------------------------------------------


def validate(sequence: Sequence[int], target: int) -> ValidationError | None:
    """
    Check inputs once before a run starts.

    Returns None when the run may start, otherwise the blocking condition.
    """
    if not sequence:
        return EmptyInput()
    if target < sequence[0] or target > sequence[-1]:
        return OutOfRange(target=target, minimum=sequence[0], maximum=sequence[-1])
    return None


def run(sequence: Sequence[int], target: int) -> Iterator[SearchStep]:
    """
    Lazily yield every beat of a binary search for `target`.

    Each iteration yields two steps: the window with `mid` about to be
    inspected, then the same window carrying the verdict. The stream ends
    on an `equal` step or on the not-found sentinel.
    """
    left, right = 0, len(sequence) - 1

    while left <= right:
        mid = (left + right) // 2
        yield SearchStep(left=left, right=right, mid=mid)

        value = sequence[mid]
        if value == target:
            yield SearchStep(left=left, right=right, mid=mid, found=True, comparison=Comparison.EQUAL)
            return

        if value < target:
            yield SearchStep(left=left, right=right, mid=mid, comparison=Comparison.SMALLER)
            left = mid + 1
        else:
            yield SearchStep(left=left, right=right, mid=mid, comparison=Comparison.LARGER)
            right = mid - 1

    yield SearchStep.not_found()


def describe(step: SearchStep, target: int, sequence: Sequence[int]) -> str:
    """Render a step as a one-line explanation. Pure."""
    if step.is_sentinel:
        return f"Target {target} not found in the array."

    value = sequence[step.mid]
    if step.comparison is Comparison.EQUAL:
        return f"Found {target} at position {step.mid}."
    if step.comparison is Comparison.SMALLER:
        return f"{value} is too small, target {target} must be in the right half."
    if step.comparison is Comparison.LARGER:
        return f"{value} is too large, target {target} must be in the left half."
    return (
        f"Searching between indices {step.left} and {step.right}; "
        f"checking middle element ({value}) at position {step.mid}."
    )


# ---------------------------------------------------------------------------
# SearchStepper
# ---------------------------------------------------------------------------


class _Run:
    """Private handle for one run. Never shared between runs."""

    def __init__(self) -> None:
        self.cancelled = False
        self.started = False
        self._wakeup: asyncio.Event | None = None

    def cancel(self) -> None:
        self.cancelled = True
        if self._wakeup is not None:
            self._wakeup.set()

    async def pause(self, seconds: float) -> None:
        """Sleep for `seconds` unless cancelled first."""
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        if self._wakeup is None:
            self._wakeup = asyncio.Event()
            if self.cancelled:
                self._wakeup.set()
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


class SearchStepper:
    """
    Produces the events of one binary search at a time.

    Every call to start() or play() begins an independent run and cancels
    whatever run was active before. cancel() stops the active run at its
    next suspension point; nothing further is yielded from it.

    Example:
        stepper = SearchStepper()
        if stepper.validate(numbers, 14) is None:
            for event in stepper.start(numbers, 14):
                print(event.description)
    """

    def __init__(self) -> None:
        self._run: _Run | None = None

    @property
    def active(self) -> bool:
        """True once iteration of the current run has begun and until it ends."""
        return self._run is not None and self._run.started and not self._run.cancelled

    def validate(self, sequence: Sequence[int], target: int) -> ValidationError | None:
        return validate(sequence, target)

    def cancel(self) -> None:
        if self._run is not None and not self._run.cancelled:
            logger.debug("Cancelling active search run.")
            self._run.cancel()
        self._run = None

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def _open(self, sequence: Sequence[int], target: int) -> tuple[_Run, tuple[int, ...]]:
        """Validate eagerly and register a fresh run handle."""
        frozen = tuple(sequence)
        error = validate(frozen, target)
        if error is not None:
            raise InvalidSearchError(error)

        self.cancel()
        handle = _Run()
        self._run = handle
        logger.debug("Starting search for %d over %d element(s).", target, len(frozen))
        return handle, frozen

    def _close(self, handle: _Run) -> None:
        if self._run is handle:
            self._run = None

    def _events(self, handle: _Run, sequence: tuple[int, ...], target: int) -> Iterator[StepEvent]:
        handle.started = True
        for step in run(sequence, target):
            if handle.cancelled:
                return
            if step.comparison is not Comparison.UNSET:
                logger.debug("mid=%d verdict=%s", step.mid, step.comparison.value)
            if step.found:
                logger.info("Found %d at position %d.", target, step.mid)
            elif step.is_sentinel:
                logger.info("Target %d not found.", target)
            yield StepEvent(step=step, description=describe(step, target, sequence))

    # ------------------------------------------------------------------
    # Public streams
    # ------------------------------------------------------------------

    def start(self, sequence: Sequence[int], target: int) -> Iterator[StepEvent]:
        """
        Begin a run and return its lazy, unpaced event stream.

        Raises InvalidSearchError immediately if validate() rejects the inputs.
        """
        handle, frozen = self._open(sequence, target)
        return self._stream(handle, frozen, target)

    def _stream(self, handle: _Run, sequence: tuple[int, ...], target: int) -> Iterator[StepEvent]:
        try:
            yield from self._events(handle, sequence, target)
        finally:
            self._close(handle)

    def play(
        self,
        sequence: Sequence[int],
        target: int,
        pacing: PacingPolicy | None = None,
    ) -> AsyncIterator[StepEvent]:
        """
        Begin a run and return its paced event stream.

        Each event is followed by the pause pacing assigns to it. A cancel()
        during the pause ends the stream without yielding another event.
        Raises InvalidSearchError immediately if validate() rejects the inputs.
        """
        handle, frozen = self._open(sequence, target)
        return self._paced(handle, frozen, target, pacing or PacingPolicy())

    async def _paced(
        self,
        handle: _Run,
        sequence: tuple[int, ...],
        target: int,
        pacing: PacingPolicy,
    ) -> AsyncIterator[StepEvent]:
        try:
            for event in self._events(handle, sequence, target):
                yield event
                await handle.pause(pacing.delay_for(event.step))
                if handle.cancelled:
                    logger.debug("Run cancelled during pause.")
                    return
        finally:
            self._close(handle)
