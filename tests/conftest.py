import math
import random

import pytest

from tour_ga.geometry import Point, PointMap


class ScriptedRandom(random.Random):
    """Replays a fixed list of ``random()`` draws."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def unit_square():
    return PointMap([Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)])


@pytest.fixture
def octagon():
    n = 8
    return PointMap(Point.polar(1.0, 2.0 * math.pi * i / n) for i in range(n))


@pytest.fixture
def small_map(rng):
    return PointMap.random(9, rng)
