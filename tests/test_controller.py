import sys
import threading

import pytest

from engine import ConfigurationError, ModeController
from engine.controller import MAX_TASKS, clamp_tasks


def test_initial_values_in_range(controller):
    assert controller.size == 12
    assert all(1 <= v <= 1000 for v in controller.initial_values)
    assert controller.engine.cursor == 0


def test_same_seed_same_values():
    a = ModeController(size=20, seed=5)
    b = ModeController(size=20, seed=5)
    assert a.initial_values == b.initial_values
    assert a.log == b.log


@pytest.mark.parametrize("kwargs", [
    {"size": 0},
    {"size": -3},
    {"task_count": 0},
    {"mode": "quick"},
])
def test_bad_construction_raises(kwargs):
    with pytest.raises(ConfigurationError):
        ModeController(**kwargs)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ModeController(size=0)


def test_set_mode_same_mode_is_noop(controller):
    controller.step()
    engine = controller.engine
    assert controller.set_mode("merge") is False
    assert controller.engine is engine
    assert controller.engine.cursor == 1


def test_set_mode_keeps_values_and_restarts(controller):
    values = list(controller.initial_values)
    controller.step()
    assert controller.set_mode("bubble") is True
    assert controller.mode == "bubble"
    assert controller.initial_values == values
    assert controller.engine.cursor == 0
    assert controller.engine.values() == values
    assert controller.engine.counters.comparisons == 0


def test_unknown_mode_leaves_state_untouched(controller):
    log, engine = controller.log, controller.engine
    with pytest.raises(ConfigurationError):
        controller.set_mode("bogo")
    assert controller.mode == "merge"
    assert controller.log is log
    assert controller.engine is engine


def test_reset_draws_fresh_values_same_mode():
    ctl = ModeController(size=30, mode="bubble", seed=11)
    first = list(ctl.initial_values)
    ctl.reset()
    assert ctl.mode == "bubble"
    assert ctl.size == 30
    assert ctl.initial_values != first


def test_reset_sequence_is_deterministic():
    a = ModeController(size=15, seed=3)
    b = ModeController(size=15, seed=3)
    a.reset()
    b.reset()
    assert a.initial_values == b.initial_values


def test_load_replaces_values():
    ctl = ModeController(values=[5, 3, 9])
    assert ctl.initial_values == [5, 3, 9]
    ctl.engine.run_to_completion()
    assert ctl.engine.values() == [3, 5, 9]


@pytest.mark.parametrize("values", [[], [0, 4], [1, 1001]])
def test_load_rejects_bad_values(values):
    ctl = ModeController(size=4, seed=1)
    with pytest.raises(ConfigurationError):
        ctl.load(values)


def test_clamp_tasks():
    assert clamp_tasks(3, 12) == 3
    assert clamp_tasks(50, 12) == MAX_TASKS
    assert clamp_tasks(8, 5) == 5
    with pytest.raises(ConfigurationError):
        clamp_tasks(0, 12)


def test_task_count_regenerates_only_in_parallel_mode(controller):
    assert controller.set_task_count(2) is False
    assert controller.task_count == 2

    controller.set_mode("parallel_merge")
    assert controller.effective_tasks == 2
    assert controller.set_task_count(3) is True
    assert controller.effective_tasks == 3
    assert max(a.task_id for a in controller.log) <= 2


def test_task_count_clamped_change_is_noop():
    ctl = ModeController(size=12, mode="parallel_merge", task_count=8, seed=2)
    assert ctl.set_task_count(20) is False
    assert ctl.effective_tasks == MAX_TASKS


def test_task_count_zero_rejected(controller):
    with pytest.raises(ConfigurationError):
        controller.set_task_count(0)


def test_speed_survives_regeneration(controller):
    controller.set_speed("fast")
    controller.set_mode("bubble")
    assert controller.engine.step_interval == 0.03
    controller.set_speed("nonsense")
    assert controller.speed == "medium"


def test_snapshot_extra_fields(controller):
    controller.set_mode("parallel_merge")
    data = controller.snapshot().to_dict()
    assert data["mode"] == "parallel_merge"
    assert data["parallel"] is True
    assert data["task_count"] == 4
    assert len(data["bars"]) == 12
    assert len(data["temp_regions"]) == 4


@pytest.mark.parametrize("mode", ["merge", "parallel_merge"])
def test_concurrent_steps_finish_sorted(mode):
    previous = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        for trial in range(20):
            ctl = ModeController(size=64, mode=mode, task_count=4, seed=trial)
            errors = []

            def drive():
                try:
                    for _ in range(2000):
                        ctl.step()
                except Exception as exc:
                    errors.append(exc)

            workers = [threading.Thread(target=drive) for _ in range(4)]
            for w in workers:
                w.start()
            for w in workers:
                w.join()

            assert errors == []
            assert ctl.engine.is_finished
            assert ctl.engine.values() == sorted(ctl.initial_values)
            assert ctl.engine.cursor == len(ctl.log)
    finally:
        sys.setswitchinterval(previous)


def test_toggle_play_reports_paused(controller):
    assert controller.toggle_play() is True
    assert controller.toggle_play() is False
