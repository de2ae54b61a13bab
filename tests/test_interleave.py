from algorithms import Action, ActionKind, interleave


def tagged(task, n):
    return tuple(Action(ActionKind.COMPARE, i=k, task_id=task) for k in range(n))


def test_interleave_round_robin():
    a, b, c = tagged(0, 3), tagged(1, 1), tagged(2, 2)
    merged = interleave([a, b, c])
    assert [(x.task_id, x.i) for x in merged] == [
        (0, 0), (1, 0), (2, 0),
        (0, 1), (2, 1),
        (0, 2),
    ]


def test_interleave_preserves_each_log_order():
    logs = [tagged(t, t + 2) for t in range(4)]
    merged = interleave(logs)
    assert len(merged) == sum(len(log) for log in logs)
    for t, log in enumerate(logs):
        assert tuple(x for x in merged if x.task_id == t) == log


def test_interleave_edge_cases():
    assert interleave([]) == ()
    assert interleave([(), ()]) == ()
    assert interleave([tagged(0, 2)]) == tagged(0, 2)
