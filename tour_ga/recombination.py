import math
import random
from abc import ABC, abstractmethod

from .genomes.base import Chromosome


def _check_lengths(first: Chromosome, second: Chromosome) -> None:
    if len(first) != len(second):
        raise ValueError("Cannot recombine chromosomes of different lengths")


class Recombinator(ABC):
    name: str = "base"

    @abstractmethod
    def recombine(self, first: Chromosome, second: Chromosome, rng: random.Random) -> None:
        raise NotImplementedError


class KPoint(Recombinator):
    """
    Cuts the genomes at ``count`` jittered points spread evenly over their
    length and exchanges every resulting interval. A count of one is a plain
    single-point suffix swap.
    """

    name = "kpoint"

    def __init__(self, count: int):
        if count < 1:
            raise ValueError("KPoint crossover needs at least one cut point")
        self.count = count - 1

    @staticmethod
    def single_point(first: Chromosome, second: Chromosome, rng: random.Random) -> None:
        n = len(first)
        cut = int(rng.random() * n)
        first.crossover(second, cut, n)

    def recombine(self, first: Chromosome, second: Chromosome, rng: random.Random) -> None:
        _check_lengths(first, second)

        if self.count == 0:
            self.single_point(first, second, rng)
            return

        n = len(first)
        step = n / (self.count + 1)
        end = rng.random() * step
        for i in range(1, self.count + 1):
            start = end
            end = step * (rng.random() + i)
            lo = min(int(start), n)
            hi = min(int(math.floor(end + 0.5)), n)
            first.crossover(second, lo, hi)


class Uniform(Recombinator):
    """
    Run-length uniform crossover. Each locus starts a new run with probability
    ``weight``; runs alternate between swapped and kept, starting from a coin
    flip.
    """

    name = "uniform"

    def __init__(self, weight: float = 0.5):
        if not 0.0 < weight <= 0.5:
            raise ValueError("Weight must be on the interval (0.0, 0.5]")
        self.weight = weight

    def recombine(self, first: Chromosome, second: Chromosome, rng: random.Random) -> None:
        _check_lengths(first, second)

        n = len(first)
        copy = rng.random() < 0.5
        last_index = 0
        for i in range(1, n):
            if rng.random() > self.weight:
                continue
            if copy:
                first.crossover(second, last_index, i)
            copy = not copy
            last_index = i

        if copy:
            first.crossover(second, last_index, n)


def build_recombinator(name: str, segments: int = 1, weight: float = 0.5) -> Recombinator:
    if name == KPoint.name:
        return KPoint(segments)
    if name == Uniform.name:
        return Uniform(weight)
    raise ValueError(f"Unknown recombinator {name!r}; expected 'kpoint' or 'uniform'")
