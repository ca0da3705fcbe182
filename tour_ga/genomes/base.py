import random
from abc import ABC, abstractmethod
from typing import Dict, List, MutableSequence, Sequence

from ..geometry import PointMap


def path_length(points: PointMap, order: Sequence[int], closed: bool = False) -> float:
    dist = 0.0
    n = len(order)
    for i in range(n - 1):
        dist += points.dist(order[i], order[i + 1])
    if closed and n > 1:
        dist += points.dist(order[-1], order[0])
    return float(dist)


def reorder_by(points: PointMap, order: Sequence[int]) -> None:
    """
    Permute ``points`` in place so that ``points[i]`` ends up holding the point
    previously stored at ``order[i]``. Only pairwise swaps are used.
    """
    n = len(points)
    if len(order) != n:
        raise ValueError(f"Order of length {len(order)} does not match map of size {n}")
    slot_of = list(range(n))  # original index -> current slot
    held_by = list(range(n))  # current slot -> original index
    for i, original in enumerate(order):
        j = slot_of[original]
        if i == j:
            continue
        points.swap(i, j)
        displaced = held_by[i]
        held_by[i], held_by[j] = original, displaced
        slot_of[original], slot_of[displaced] = i, j


def slice_crossover(first: MutableSequence, second: MutableSequence, start: int, end: int) -> None:
    first[start:end], second[start:end] = second[start:end], first[start:end]


class Path(ABC):
    @abstractmethod
    def decode(self, points: PointMap) -> List[int]:
        raise NotImplementedError

    @abstractmethod
    def evaluate(self, points: PointMap) -> float:
        raise NotImplementedError

    def reorder(self, points: PointMap) -> None:
        reorder_by(points, self.decode(points))

    def fix(self, points: PointMap) -> None:
        """In-place repair hook; encodings without a repair step keep this no-op."""
        pass


class Chromosome(Path):
    kind: str = "base"

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def copy(self) -> "Chromosome":
        raise NotImplementedError

    @abstractmethod
    def crossover(self, other: "Chromosome", start: int, end: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def point_mutation(self, locus: int, rng: random.Random) -> None:
        raise NotImplementedError

    @abstractmethod
    def to_state(self) -> Dict:
        raise NotImplementedError

    def _check_partner(self, other: "Chromosome") -> None:
        if type(other) is not type(self):
            raise TypeError(f"Cannot cross {type(self).__name__} with {type(other).__name__}")
