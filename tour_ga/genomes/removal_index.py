from __future__ import annotations

import random
from typing import Dict, List, Sequence

from ..geometry import PointMap
from .base import Chromosome, path_length, slice_crossover


class RemovalIndexGenome(Chromosome):
    """
    Deletion-rank encoding. Locus ``i`` names which of the cities still left
    after ``i`` removals is visited next; the last city is whatever remains.
    """

    kind = "removal_index"

    def __init__(self, path: Sequence[int], map_size: int = None):
        self.path: List[int] = list(path)
        self.map_size = len(self.path) + 1 if map_size is None else map_size
        if self.map_size != len(self.path) + 1:
            raise ValueError(f"Removal path of length {len(self.path)} cannot encode {self.map_size} cities")
        for locus, value in enumerate(self.path):
            if not 0 <= value < self.locus_bound(locus):
                raise ValueError(f"Locus {locus} holds {value}, outside [0, {self.locus_bound(locus)})")

    @classmethod
    def random(cls, map_size: int, rng: random.Random = None) -> "RemovalIndexGenome":
        rng = rng or random.Random()
        genome = cls([0] * (map_size - 1), map_size)
        for locus in range(len(genome.path)):
            genome.path[locus] = rng.randrange(genome.locus_bound(locus))
        return genome

    @classmethod
    def in_order(cls, map_size: int) -> "RemovalIndexGenome":
        return cls([0] * (map_size - 1), map_size)

    def locus_bound(self, locus: int) -> int:
        # Full removal range: ``map_size - locus`` cities are left at this locus.
        # Initialization and mutation both draw from it.
        return self.map_size - locus

    def __len__(self) -> int:
        return len(self.path)

    def __repr__(self) -> str:
        return f"RemovalIndexGenome({self.path})"

    def copy(self) -> "RemovalIndexGenome":
        return RemovalIndexGenome(self.path, self.map_size)

    def decode(self, points: PointMap = None) -> List[int]:
        if points is not None and len(points) != self.map_size:
            raise ValueError(f"Genome encodes {self.map_size} cities, map has {len(points)}")
        remaining = list(range(self.map_size))
        order = [remaining.pop(index) for index in self.path]
        order.extend(remaining)
        return order

    def evaluate(self, points: PointMap) -> float:
        return path_length(points, self.decode(points), closed=True)

    def crossover(self, other: "RemovalIndexGenome", start: int, end: int) -> None:
        self._check_partner(other)
        slice_crossover(self.path, other.path, start, end)

    def point_mutation(self, locus: int, rng: random.Random) -> None:
        self.path[locus] = rng.randrange(self.locus_bound(locus))

    def to_state(self) -> Dict:
        return {"kind": self.kind, "path": list(self.path), "map_size": self.map_size}

    @classmethod
    def from_state(cls, state: Dict) -> "RemovalIndexGenome":
        return cls(state["path"], state["map_size"])
