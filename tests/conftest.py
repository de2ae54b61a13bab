import random

import pytest

from algorithms import REGISTRY, get_algorithm
from engine import ModeController, ReplayEngine

MODES = list(REGISTRY)


def build_engine(mode, values, task_count=4):
    info = get_algorithm(mode)
    tasks = max(1, min(task_count, len(values))) if info.is_parallel else 1
    log = info.generate(values, task_count=tasks)
    return ReplayEngine(values, log, parallel=info.is_parallel, task_count=tasks)


def random_inputs(seed, count=25, max_len=40):
    rng = random.Random(seed)
    inputs = [[], [1], [2, 1], [3, 3, 3], [1, 2, 3, 4, 5], [5, 4, 3, 2, 1]]
    for _ in range(count):
        n = rng.randint(0, max_len)
        inputs.append([rng.randint(1, 1000) for _ in range(n)])
    return inputs


@pytest.fixture
def inputs():
    return random_inputs(seed=1234)


@pytest.fixture
def controller():
    return ModeController(size=12, mode="merge", task_count=4, seed=42)
