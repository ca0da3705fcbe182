import functools
import logging
import math
import random
from dataclasses import dataclass, fields
from typing import List, MutableSequence, Optional, Sequence, Tuple

from .genomes.base import Chromosome
from .geometry import PointMap
from .recombination import Recombinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    replace_ratio: float = 1.0
    elitist_ratio: float = 0.25
    crossover_prob: float = 0.9
    mutate_prob: float = 0.05

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{f.name} must be within [0, 1], got {value}")


DEFAULT_SETTINGS = Settings()


def _compare_losses(a: float, b: float) -> int:
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


_loss_key = functools.cmp_to_key(_compare_losses)


def selection_weights(losses: Sequence[float]) -> List[float]:
    n = len(losses)
    total = math.fsum(losses)
    if not math.isfinite(total) or total <= 0.0 or not all(math.isfinite(loss) for loss in losses):
        return [1.0 / n] * n
    return [loss / total for loss in losses]


def offspring_target(settings: Settings, n: int) -> int:
    return max(1, int((settings.replace_ratio - settings.elitist_ratio) * n))


def select_index(weights: Sequence[float], rng: random.Random, exclude: Optional[int] = None) -> int:
    threshold = rng.random()
    for j, weight in enumerate(weights):
        if threshold < weight and j != exclude:
            return j
        threshold -= weight
    return len(weights) - 1


class RouletteWheelSelection:
    @staticmethod
    def evolve(
        settings: Settings,
        points: PointMap,
        population: MutableSequence[Chromosome],
        recombinator: Recombinator,
        fix: bool = False,
        rng: random.Random = None,
    ) -> float:
        """
        Run one generation in place and return the smallest loss seen.

        Every genome is scored and weighted by its share of the total loss. With
        elitism the population is ranked best-first. Offspring are produced by
        weighted selection, recombination, point mutation and optional repair,
        appended, and the population is cut back to its original size by
        dropping pre-existing genomes from the back of the old ranking.
        """
        rng = rng or random.Random()
        n = len(population)
        if n == 0:
            raise ValueError("Cannot evolve an empty population")

        scored: List[Tuple[float, Chromosome]] = []
        min_loss = math.inf
        for genome in population:
            loss = genome.evaluate(points)
            scored.append((loss, genome))
            if loss < min_loss:
                min_loss = loss

        if settings.elitist_ratio > 0.0:
            scored.sort(key=lambda pair: _loss_key(pair[0]))
            population[:] = [genome for _, genome in scored]
        weights = selection_weights([loss for loss, _ in scored])

        target = offspring_target(settings, n)
        offspring = 0
        while offspring < target:
            first_index = select_index(weights, rng)
            second_index = select_index(weights, rng, exclude=first_index)

            first = population[first_index].copy()
            second = population[second_index].copy()
            if rng.random() < settings.crossover_prob:
                recombinator.recombine(first, second, rng)
            if rng.random() < settings.mutate_prob:
                first.point_mutation(rng.randrange(len(first)), rng)
            if rng.random() < settings.mutate_prob:
                second.point_mutation(rng.randrange(len(second)), rng)

            if fix:
                first.fix(points)
                second.fix(points)

            for child in (first, second):
                loss = child.evaluate(points)
                if loss < min_loss:
                    min_loss = loss

            population.append(first)
            offspring += 1
            if offspring < target:
                population.append(second)
                offspring += 1

        index = n - 1
        while len(population) > n:
            del population[index]
            index -= 1

        logger.debug("generation done: offspring=%d min_loss=%.6f", target, min_loss)
        return min_loss
