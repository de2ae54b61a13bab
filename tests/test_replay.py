from collections import Counter

import pytest

from algorithms import Action, ActionKind
from bars import BarState
from engine import InvariantViolation, ReplayEngine, ReplayState

from conftest import MODES, build_engine, random_inputs


def merge_pair_engine(**kwargs):
    return build_engine("merge", [5, 3], **kwargs)


# ---------------------------------------------------------------------------
# tick gating
# ---------------------------------------------------------------------------
def test_tick_below_interval_changes_nothing():
    engine = merge_pair_engine()
    engine.set_speed_value(0.5)
    assert engine.tick(0.25) is False
    assert engine.cursor == 0
    assert engine.tick(0.25) is True
    assert engine.cursor == 1


def test_large_dt_applies_exactly_one_action():
    engine = merge_pair_engine()
    engine.set_speed_value(0.5)
    assert engine.tick(100.0) is True
    assert engine.cursor == 1


def test_tick_accumulates_elapsed_time():
    engine = merge_pair_engine()
    engine.set_speed_value(0.5)
    engine.tick(0.25)
    engine.tick(0.25)
    assert engine.counters.elapsed_time == 0.5


def test_paused_engine_ignores_ticks():
    engine = merge_pair_engine()
    engine.pause()
    assert engine.is_paused
    assert engine.tick(10.0) is False
    assert engine.cursor == 0
    assert engine.counters.elapsed_time == 0.0


def test_step_works_while_paused():
    engine = merge_pair_engine()
    engine.pause()
    assert engine.step() is True
    assert engine.cursor == 1
    assert engine.state == ReplayState.PAUSED


def test_toggle_play():
    engine = merge_pair_engine()
    engine.toggle_play()
    assert engine.state == ReplayState.PAUSED
    engine.toggle_play()
    assert engine.state == ReplayState.PLAYING


def test_unknown_speed_preset_falls_back_to_default():
    engine = merge_pair_engine()
    engine.set_speed("slow")
    assert engine.step_interval == 0.5
    engine.set_speed("warp")
    assert engine.step_interval == 0.1


# ---------------------------------------------------------------------------
# per-action effects on the merge of [5, 3]
# ---------------------------------------------------------------------------
def test_merge_pair_walkthrough():
    engine = merge_pair_engine()

    engine.step()   # Compare(0, 1)
    assert [b.state for b in engine.bars] == [BarState.COMPARING, BarState.COMPARING]
    assert engine.counters.comparisons == 1

    engine.step()   # TempPush(1, 3)
    assert engine.bars[0].state == BarState.IDLE
    assert engine.bars[1].state == BarState.SOURCING
    assert engine.temp_contents() == [[3]]
    assert engine.vacated == [False, True]
    assert engine.counters.current_memory == 8
    anim = engine.animation
    assert anim.is_temp_push and anim.source_index == 1 and anim.temp_target_index == 0
    assert anim.source_height_normalized == pytest.approx(3 / 5)

    engine.step()   # TempPush(0, 5)
    assert engine.temp_contents() == [[3, 5]]

    engine.step()   # Write(0, 3)
    assert engine.values() == [3, 3]
    assert engine.bars[0].state == BarState.SWAPPING
    assert engine.temp_contents() == [[5]]
    assert engine.vacated == [False, True]
    assert engine.animation.is_temp_push is False

    engine.step()   # Write(1, 5)
    assert engine.values() == [3, 5]
    assert engine.counters.operations == 2

    engine.step()   # TempClear
    assert engine.temp_contents() == [[]]
    assert engine.counters.current_memory == 0
    assert engine.counters.peak_memory == 8
    assert engine.animation is None

    engine.step()   # Done
    assert engine.is_finished
    assert all(b.state == BarState.SORTED for b in engine.bars)


def test_bubble_swap_marks_and_counts():
    engine = build_engine("bubble", [2, 1])
    engine.step()   # Compare
    engine.step()   # Swap
    assert engine.values() == [1, 2]
    assert [b.state for b in engine.bars] == [BarState.SWAPPING, BarState.SWAPPING]
    assert engine.counters.operations == 1
    engine.step()   # Settle(1)
    assert engine.bars[1].state == BarState.SORTED
    assert engine.bars[0].state == BarState.IDLE


def test_sorted_bars_stay_sorted():
    engine = build_engine("bubble", [3, 2, 1])
    settled = set()
    while not engine.is_finished:
        engine.step()
        now = {i for i, b in enumerate(engine.bars) if b.is_sorted}
        assert settled <= now
        settled = now


def test_parallel_marks_use_task_ownership():
    engine = build_engine("parallel_merge", [4, 3, 2, 1], task_count=2)
    engine.step()   # task 0 compares bars 0, 1
    assert engine.bars[0].state == BarState.TASK_OWNED
    assert engine.bars[0].task_id == 0
    engine.step()   # task 1 compares bars 2, 3
    assert engine.bars[2].task_id == 1
    assert engine.bars[0].state == BarState.IDLE


def test_merge_phase_sets_level():
    engine = build_engine("parallel_merge", [8, 7, 6, 5, 4, 3, 2, 1], task_count=4)
    levels = set()
    while not engine.is_finished:
        engine.step()
        levels.add(engine.counters.current_merge_level)
    assert levels == {0, 1, 2}


# ---------------------------------------------------------------------------
# whole-run properties
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("mode", MODES)
def test_live_multiset_is_conserved(mode):
    for values in random_inputs(seed=99, count=10, max_len=24):
        engine = build_engine(mode, values)
        expected = Counter(values)
        while not engine.is_finished:
            engine.step()
            assert Counter(engine.live_values()) == expected


@pytest.mark.parametrize("mode", MODES)
def test_peak_memory_never_decreases(mode):
    for values in random_inputs(seed=7, count=10, max_len=24):
        engine = build_engine(mode, values)
        peak = 0
        while not engine.is_finished:
            engine.step()
            assert engine.counters.peak_memory >= peak
            assert engine.counters.current_memory <= engine.counters.peak_memory
            peak = engine.counters.peak_memory


@pytest.mark.parametrize("mode", MODES)
def test_run_to_completion_sorts(mode, inputs):
    for values in inputs:
        engine = build_engine(mode, values)
        applied = engine.run_to_completion()
        assert applied == engine.total_actions
        assert engine.values() == sorted(values)
        assert engine.counters.current_memory == 0
        assert all(b.is_sorted for b in engine.bars)


def test_bubble_never_touches_memory():
    engine = build_engine("bubble", [9, 1, 5, 3])
    engine.run_to_completion()
    assert engine.counters.peak_memory == 0


def test_parallel_memory_sums_regions():
    engine = build_engine("parallel_merge", [4, 3, 2, 1], task_count=2)
    engine.step()   # task 0 compare
    engine.step()   # task 1 compare
    engine.step()   # task 0 push (8 bytes)
    engine.step()   # task 1 push (8 bytes)
    assert engine.counters.current_memory == 16
    assert engine.counters.peak_memory == 16


def test_empty_input_finishes_on_done():
    engine = build_engine("merge", [])
    assert engine.step() is True
    assert engine.is_finished
    assert engine.values() == []


# ---------------------------------------------------------------------------
# terminal state
# ---------------------------------------------------------------------------
def test_finished_is_idempotent():
    engine = merge_pair_engine()
    engine.run_to_completion()
    before = engine.snapshot()
    assert engine.step() is False
    assert engine.tick(10.0) is False
    engine.play()
    assert engine.state == ReplayState.FINISHED
    assert engine.snapshot() == before


def test_snapshot_is_detached_from_counters():
    engine = merge_pair_engine()
    snap = engine.snapshot()
    engine.step()
    assert snap.counters.comparisons == 0
    assert snap.cursor == 0


def test_snapshot_to_dict_shape():
    engine = merge_pair_engine()
    engine.step()
    data = engine.snapshot().to_dict()
    assert data["bars"][0] == {"value": 5, "state": "comparing", "task_id": None, "vacated": False}
    assert data["last_kind"] == "compare"
    assert data["total"] == 7


# ---------------------------------------------------------------------------
# corrupted logs
# ---------------------------------------------------------------------------
def test_out_of_range_index_raises():
    engine = ReplayEngine([1, 2], (Action(ActionKind.COMPARE, i=0, j=5),))
    with pytest.raises(InvariantViolation):
        engine.step()


def test_write_from_empty_region_raises():
    engine = ReplayEngine([1, 2], (Action(ActionKind.WRITE, i=0, value=1),))
    with pytest.raises(InvariantViolation):
        engine.step()


def test_write_value_mismatch_raises():
    log = (
        Action(ActionKind.TEMP_PUSH, i=1, value=2, memory_bytes=8),
        Action(ActionKind.WRITE, i=0, value=9, memory_bytes=8),
    )
    engine = ReplayEngine([1, 2], log)
    engine.step()
    with pytest.raises(InvariantViolation):
        engine.step()


def test_unknown_task_region_raises():
    log = (Action(ActionKind.TEMP_PUSH, i=0, value=1, task_id=3),)
    engine = ReplayEngine([1, 2], log, parallel=True, task_count=2)
    with pytest.raises(InvariantViolation):
        engine.step()


def test_empty_log_raises_on_step():
    engine = ReplayEngine([1], ())
    with pytest.raises(InvariantViolation):
        engine.step()


def test_invariant_violation_is_runtime_error():
    assert issubclass(InvariantViolation, RuntimeError)


@pytest.mark.parametrize("mode", MODES)
def test_tick_driven_run_moves_forward_one_action_at_most(mode):
    values = [38, 27, 43, 3, 9, 82, 10, 61, 5, 77, 3]
    engine = build_engine(mode, values)
    engine.set_speed_value(0.5)
    deltas = [0.125, 0.25, 0.125, 3.0, 0.5, 0.0625]

    ticks = 0
    while not engine.is_finished:
        before = engine.cursor
        engine.tick(deltas[ticks % len(deltas)])
        ticks += 1
        assert before <= engine.cursor <= before + 1
        assert engine.counters.peak_memory >= engine.counters.current_memory

    assert engine.values() == sorted(values)
    assert ticks > engine.total_actions


def test_rejected_write_leaves_operations_unchanged():
    log = (
        Action(ActionKind.TEMP_PUSH, i=1, value=2, memory_bytes=8),
        Action(ActionKind.WRITE, i=0, value=9, memory_bytes=8),
    )
    engine = ReplayEngine([1, 2], log)
    engine.step()
    with pytest.raises(InvariantViolation):
        engine.step()
    assert engine.counters.operations == 0
    assert engine.temp_contents() == [[2]]


def test_write_from_empty_region_is_not_counted():
    engine = ReplayEngine([1, 2], (Action(ActionKind.WRITE, i=0, value=1),))
    with pytest.raises(InvariantViolation):
        engine.step()
    assert engine.counters.operations == 0
