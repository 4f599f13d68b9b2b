import asyncio

import pytest

from search_visualizer.models import (
    Comparison,
    EmptyInput,
    OutOfRange,
    PacingPolicy,
    SearchStep,
)
from search_visualizer.stepper import (
    InvalidSearchError,
    SearchStepper,
    describe,
    run,
    validate,
)

EVENS = [0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24, 26, 28]
ODDS = [1, 3, 5, 7, 9]

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_validate_accepts_target_in_range():
    assert validate(ODDS, 2) is None
    assert validate(ODDS, 1) is None
    assert validate(ODDS, 9) is None

def test_validate_rejects_empty_sequence():
    assert validate([], 3) == EmptyInput()

def test_validate_rejects_out_of_range_targets():
    below = validate(ODDS, 0)
    above = validate(ODDS, 10)
    assert below == OutOfRange(target=0, minimum=1, maximum=9)
    assert above == OutOfRange(target=10, minimum=1, maximum=9)
    assert above.message == "Target 10 is outside the range of the array (1 to 9)"

def test_start_refuses_invalid_inputs_without_emitting():
    stepper = SearchStepper()
    with pytest.raises(InvalidSearchError, match="outside the range") as exc_info:
        stepper.start(ODDS, 42)
    assert isinstance(exc_info.value.error, OutOfRange)
    assert stepper.active is False

def test_play_refuses_empty_sequence():
    stepper = SearchStepper()
    with pytest.raises(InvalidSearchError, match="valid numbers"):
        stepper.play([], 1)

# ---------------------------------------------------------------------------
# Algorithm
# ---------------------------------------------------------------------------

def test_run_finds_exact_middle_immediately():
    steps = list(run(EVENS, 14))
    assert steps == [
        SearchStep(left=0, right=14, mid=7),
        SearchStep(left=0, right=14, mid=7, found=True, comparison=Comparison.EQUAL),
    ]

def test_run_walks_to_not_found_sentinel():
    steps = list(run(ODDS, 2))
    assert [(s.left, s.right, s.mid, s.comparison) for s in steps] == [
        (0, 4, 2, Comparison.UNSET),
        (0, 4, 2, Comparison.LARGER),
        (0, 1, 0, Comparison.UNSET),
        (0, 1, 0, Comparison.SMALLER),
        (1, 1, 1, Comparison.UNSET),
        (1, 1, 1, Comparison.LARGER),
        (-1, -1, -1, Comparison.UNSET),
    ]
    assert steps[-1].is_sentinel
    assert not any(s.found for s in steps)

def test_run_single_element():
    steps = list(run([5], 5))
    assert steps[-1] == SearchStep(left=0, right=0, mid=0, found=True, comparison=Comparison.EQUAL)
    assert len(steps) == 2

def test_run_is_lazy():
    steps = run(EVENS, 2)
    assert next(steps) == SearchStep(left=0, right=14, mid=7)

def test_run_properties_over_many_sequences():
    for n in range(1, 18):
        sequence = [v * 3 for v in range(n)]
        for target in range(sequence[0], sequence[-1] + 1):
            steps = list(run(sequence, target))
            last = steps[-1]

            if target in sequence:
                assert last.found and sequence[last.mid] == target
            else:
                assert last.is_sentinel and not last.found
                assert not any(s.found for s in steps)

            windows = []
            for step in steps:
                if step.is_sentinel:
                    continue
                assert step.left <= step.mid <= step.right
                assert step.mid == (step.left + step.right) // 2
                if step.comparison is Comparison.UNSET:
                    windows.append((step.left, step.right))

            for (prev_l, prev_r), (l, r) in zip(windows, windows[1:]):
                assert prev_l <= l and r <= prev_r
                assert (r - l) < (prev_r - prev_l)
            assert len(windows) <= n.bit_length()

def test_every_inspect_beat_precedes_its_verdict():
    steps = [s for s in run(EVENS, 27) if not s.is_sentinel]
    for inspect, verdict in zip(steps[::2], steps[1::2]):
        assert inspect.comparison is Comparison.UNSET
        assert verdict.comparison is not Comparison.UNSET
        assert (inspect.left, inspect.right, inspect.mid) == (verdict.left, verdict.right, verdict.mid)

def test_run_with_duplicates_lands_on_a_matching_index():
    sequence = [1, 2, 2, 2, 3]
    last = list(run(sequence, 2))[-1]
    assert last.found and sequence[last.mid] == 2

# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

def test_describe_each_beat():
    inspect = SearchStep(left=0, right=4, mid=2)
    assert describe(inspect, 2, ODDS) == (
        "Searching between indices 0 and 4; checking middle element (5) at position 2."
    )
    larger = SearchStep(left=0, right=4, mid=2, comparison=Comparison.LARGER)
    assert describe(larger, 2, ODDS) == "5 is too large, target 2 must be in the left half."
    smaller = SearchStep(left=0, right=1, mid=0, comparison=Comparison.SMALLER)
    assert describe(smaller, 2, ODDS) == "1 is too small, target 2 must be in the right half."
    equal = SearchStep(left=0, right=4, mid=2, found=True, comparison=Comparison.EQUAL)
    assert describe(equal, 5, ODDS) == "Found 5 at position 2."
    assert describe(SearchStep.not_found(), 2, ODDS) == "Target 2 not found in the array."

def test_describe_is_idempotent():
    step = SearchStep(left=3, right=9, mid=6, comparison=Comparison.SMALLER)
    assert describe(step, 20, EVENS) == describe(step, 20, EVENS)

def test_steps_are_immutable():
    step = SearchStep(left=0, right=1, mid=0)
    with pytest.raises(Exception):
        step.mid = 1

# ---------------------------------------------------------------------------
# SearchStepper streams
# ---------------------------------------------------------------------------

def test_start_yields_described_events():
    stepper = SearchStepper()
    events = list(stepper.start(ODDS, 7))
    assert [e.step.comparison for e in events] == [
        Comparison.UNSET, Comparison.SMALLER,
        Comparison.UNSET, Comparison.EQUAL,
    ]
    assert events[-1].description == "Found 7 at position 3."
    assert stepper.active is False

def test_start_is_restartable():
    stepper = SearchStepper()
    first = list(stepper.start(ODDS, 3))
    second = list(stepper.start(ODDS, 3))
    assert first == second

def test_unstarted_stream_is_not_active():
    stepper = SearchStepper()
    events = stepper.start(ODDS, 3)
    assert stepper.active is False
    next(events)
    assert stepper.active is True
    list(events)
    assert stepper.active is False

def test_discarded_stream_leaves_stepper_idle():
    stepper = SearchStepper()
    stepper.start([1, 2, 3], 2)
    assert stepper.active is False

def test_cancel_stops_unpaced_stream():
    stepper = SearchStepper()
    events = stepper.start(EVENS, 1)
    next(events)
    stepper.cancel()
    assert list(events) == []
    assert stepper.active is False

def test_new_start_cancels_previous_run():
    stepper = SearchStepper()
    old = stepper.start(EVENS, 1)
    next(old)
    new = stepper.start(EVENS, 14)
    assert list(old) == []
    assert len(list(new)) == 2

@pytest.mark.asyncio
async def test_play_emits_all_events_without_delay():
    stepper = SearchStepper()
    events = [e async for e in stepper.play(ODDS, 2, PacingPolicy.immediate())]
    assert len(events) == 7
    assert events[-1].step.is_sentinel

@pytest.mark.asyncio
async def test_play_cancel_during_pause_stops_immediately():
    stepper = SearchStepper()
    stream = stepper.play(EVENS, 1, PacingPolicy(inspect=30, smaller=30, larger=30))

    first = await stream.__anext__()
    assert first.step.comparison is Comparison.UNSET

    asyncio.get_running_loop().call_later(0.05, stepper.cancel)
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(stream.__anext__(), timeout=2)
    assert stepper.active is False

@pytest.mark.asyncio
async def test_play_waits_between_steps():
    stepper = SearchStepper()
    pacing = PacingPolicy(inspect=0.05, smaller=0, larger=0, terminal=0)
    loop = asyncio.get_running_loop()
    began = loop.time()
    events = [e async for e in stepper.play(EVENS, 14, pacing)]
    assert len(events) == 2
    assert loop.time() - began >= 0.04

# ---------------------------------------------------------------------------
# Pacing
# ---------------------------------------------------------------------------

def test_pacing_delay_for_each_beat():
    pacing = PacingPolicy()
    assert pacing.delay_for(SearchStep(left=0, right=4, mid=2)) == 7.0
    assert pacing.delay_for(SearchStep(left=0, right=4, mid=2, comparison=Comparison.SMALLER)) == 7.0
    assert pacing.delay_for(SearchStep(left=0, right=4, mid=2, comparison=Comparison.LARGER)) == 5.0
    found = SearchStep(left=0, right=4, mid=2, found=True, comparison=Comparison.EQUAL)
    assert pacing.delay_for(found) == 0.0
    assert pacing.delay_for(SearchStep.not_found()) == 0.0

def test_pacing_speed_scales_delays():
    pacing = PacingPolicy(speed=2)
    assert pacing.delay_for(SearchStep(left=0, right=4, mid=2)) == 3.5
