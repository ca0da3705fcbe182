import math
import random

import pytest

from tour_ga.genomes import RandomKeyGenome, RemovalIndexGenome, SwapPathGenome, random_genome
from tour_ga.geometry import Point, PointMap
from tour_ga.recombination import KPoint, Uniform
from tour_ga.selection import (
    DEFAULT_SETTINGS,
    RouletteWheelSelection,
    Settings,
    offspring_target,
    select_index,
    selection_weights,
)


def population_of(kind, size, map_size, rng):
    return [random_genome(kind, map_size, rng) for _ in range(size)]


@pytest.mark.parametrize("kind", ["random_key", "removal_index", "swap_path"])
@pytest.mark.parametrize(
    "settings",
    [
        DEFAULT_SETTINGS,
        Settings(replace_ratio=0.5, elitist_ratio=0.0, crossover_prob=1.0, mutate_prob=1.0),
        Settings(replace_ratio=1.0, elitist_ratio=0.0, crossover_prob=0.5, mutate_prob=0.5),
        Settings(replace_ratio=0.1, elitist_ratio=0.05, crossover_prob=0.9, mutate_prob=0.1),
    ],
)
def test_population_size_is_preserved(kind, settings, small_map, rng):
    population = population_of(kind, 10, len(small_map), rng)
    for _ in range(5):
        RouletteWheelSelection.evolve(settings, small_map, population, Uniform(), fix=True, rng=rng)
        assert len(population) == 10
        assert all(isinstance(g, type(population[0])) for g in population)


def test_elitism_keeps_the_best(small_map, rng):
    population = population_of("random_key", 12, len(small_map), rng)
    for _ in range(10):
        losses = [g.evaluate(small_map) for g in population]
        best = min(losses)
        returned = RouletteWheelSelection.evolve(DEFAULT_SETTINGS, small_map, population, KPoint(2), rng=rng)
        after = [g.evaluate(small_map) for g in population]
        assert best in after
        assert returned <= best
        assert population[0].evaluate(small_map) <= best


def test_elitism_sorts_survivors_first(small_map, rng):
    population = population_of("removal_index", 8, len(small_map), rng)
    before = sorted(g.evaluate(small_map) for g in population)
    settings = Settings(replace_ratio=0.5, elitist_ratio=0.25, crossover_prob=0.9, mutate_prob=0.05)
    RouletteWheelSelection.evolve(settings, small_map, population, Uniform(), rng=rng)
    # two offspring replace the two worst; the six best keep their ranked slots
    assert [g.evaluate(small_map) for g in population[:6]] == before[:6]


def test_without_elitism_trim_is_positional(small_map, rng):
    population = population_of("random_key", 6, len(small_map), rng)
    kept = population[:5]
    settings = Settings(replace_ratio=0.1, elitist_ratio=0.0, crossover_prob=0.0, mutate_prob=0.0)
    RouletteWheelSelection.evolve(settings, small_map, population, Uniform(), rng=rng)
    assert population[:5] == kept
    assert population[5] not in kept


def test_returns_min_loss(small_map, rng):
    population = population_of("random_key", 10, len(small_map), rng)
    best = min(g.evaluate(small_map) for g in population)
    loss = RouletteWheelSelection.evolve(DEFAULT_SETTINGS, small_map, population, Uniform(), rng=rng)
    assert loss <= best
    assert loss <= min(g.evaluate(small_map) for g in population)


def test_repair_brings_square_to_optimum(unit_square, rng):
    population = [RandomKeyGenome([0.1, 0.3, 0.2, 0.4]) for _ in range(4)]
    settings = Settings(replace_ratio=1.0, elitist_ratio=0.0, crossover_prob=0.0, mutate_prob=0.0)
    loss = RouletteWheelSelection.evolve(settings, unit_square, population, Uniform(), fix=True, rng=rng)
    assert loss == pytest.approx(4.0)


def test_degenerate_geometry_does_not_raise(rng):
    points = PointMap([Point(0, 0)] * 5)
    population = population_of("random_key", 6, 5, rng)
    loss = RouletteWheelSelection.evolve(DEFAULT_SETTINGS, points, population, Uniform(), fix=True, rng=rng)
    assert loss == 0.0
    assert len(population) == 6


def test_nan_losses_do_not_raise(rng):
    points = PointMap([Point(float("nan"), 0.0), Point(1, 0), Point(0, 1), Point(1, 1)])
    population = population_of("removal_index", 6, 4, rng)
    RouletteWheelSelection.evolve(DEFAULT_SETTINGS, points, population, Uniform(), rng=rng)
    assert len(population) == 6


def test_empty_population_is_rejected(small_map, rng):
    with pytest.raises(ValueError):
        RouletteWheelSelection.evolve(DEFAULT_SETTINGS, small_map, [], Uniform(), rng=rng)


def test_evolve_is_reproducible(small_map):
    def run(seed):
        rng = random.Random(seed)
        population = population_of("swap_path", 10, len(small_map), rng)
        for _ in range(3):
            RouletteWheelSelection.evolve(DEFAULT_SETTINGS, small_map, population, KPoint(3), rng=rng)
        return [g.to_state() for g in population]

    assert run(3) == run(3)


def test_selection_weights_sum_to_one(rng):
    losses = [rng.uniform(1.0, 10.0) for _ in range(10)]
    weights = selection_weights(losses)
    assert math.fsum(weights) == pytest.approx(1.0)
    assert all(0.0 < w < 1.0 for w in weights)
    # proportional to raw loss: the longest tour gets the largest share
    assert weights.index(max(weights)) == losses.index(max(losses))


@pytest.mark.parametrize("losses", [[0.0, 0.0, 0.0], [1.0, float("nan"), 2.0], [1.0, float("inf")]])
def test_degenerate_losses_give_uniform_weights(losses):
    weights = selection_weights(losses)
    assert weights == [1.0 / len(losses)] * len(losses)


def test_offspring_target_floor():
    settings = Settings(replace_ratio=0.1, elitist_ratio=0.05, crossover_prob=0.9, mutate_prob=0.05)
    assert offspring_target(settings, 4) == 1
    assert offspring_target(DEFAULT_SETTINGS, 40) == 30
    assert offspring_target(Settings(replace_ratio=0.2, elitist_ratio=0.5), 10) == 1


def test_select_index_walks_cumulative_weight(scripted_rng):
    weights = [0.2, 0.3, 0.5]
    assert select_index(weights, scripted_rng([0.1])) == 0
    assert select_index(weights, scripted_rng([0.25])) == 1
    assert select_index(weights, scripted_rng([0.75])) == 2


def test_select_index_skips_excluded(scripted_rng):
    assert select_index([0.5, 0.5], scripted_rng([0.1]), exclude=0) == 1


def test_select_index_falls_back_to_last(scripted_rng):
    assert select_index([0.2, 0.2], scripted_rng([0.9])) == 1


@pytest.mark.parametrize(
    "kwargs",
    [{"replace_ratio": 1.5}, {"elitist_ratio": -0.1}, {"crossover_prob": 2.0}, {"mutate_prob": -1.0}],
)
def test_settings_validation(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)
