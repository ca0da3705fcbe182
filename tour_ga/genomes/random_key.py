from __future__ import annotations

import functools
import random
from typing import Dict, List, Sequence

from ..geometry import PointMap
from .base import Chromosome, path_length, slice_crossover


def _compare_keys(a: float, b: float) -> int:
    # Unordered pairs (NaN) compare equal so the stable sort keeps index order.
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


class RandomKeyGenome(Chromosome):
    """
    Random-key encoding: one continuous key per city, the tour visits cities
    in ascending key order.
    """

    kind = "random_key"

    def __init__(self, key: Sequence[float]):
        self.key: List[float] = [float(k) for k in key]

    @classmethod
    def random(cls, map_size: int, rng: random.Random = None) -> "RandomKeyGenome":
        rng = rng or random.Random()
        return cls([rng.random() for _ in range(map_size)])

    def __len__(self) -> int:
        return len(self.key)

    def __repr__(self) -> str:
        return f"RandomKeyGenome({self.key})"

    def copy(self) -> "RandomKeyGenome":
        return RandomKeyGenome(self.key)

    def _check_map(self, points: PointMap) -> None:
        if len(points) != len(self.key):
            raise ValueError(f"Genome encodes {len(self.key)} cities, map has {len(points)}")

    def decode(self, points: PointMap = None) -> List[int]:
        if points is not None:
            self._check_map(points)
        key = self.key
        return sorted(
            range(len(key)),
            key=functools.cmp_to_key(lambda a, b: _compare_keys(key[a], key[b])),
        )

    def evaluate(self, points: PointMap) -> float:
        return path_length(points, self.decode(points), closed=True)

    def crossover(self, other: "RandomKeyGenome", start: int, end: int) -> None:
        self._check_partner(other)
        slice_crossover(self.key, other.key, start, end)

    def point_mutation(self, locus: int, rng: random.Random) -> None:
        self.key[locus] = rng.random()

    def fix(self, points: PointMap) -> None:
        """
        Local repair over the decoded order.

        Three passes at offsets 0, 1 and 2 walk width-4 windows with a stride of
        three. When visiting the two middle cities of a window in the opposite
        order shortens ``d(p0, p1) + d(p2, p3)``, their keys are exchanged so the
        improvement survives decoding. Afterwards the first two and (for more
        than five cities) the last two cities are checked against their
        neighbour at distance two.
        """
        self._check_map(points)
        size = len(self.key)
        if size < 3:
            return

        key = self.key
        order = self.decode(points)

        for offset in range(3):
            j = offset
            while j < size - 3:
                p0, p1, p2, p3 = order[j:j + 4]
                current = points.dist(p0, p1) + points.dist(p2, p3)
                alternative = points.dist(p0, p2) + points.dist(p1, p3)
                if alternative < current:
                    key[p1], key[p2] = key[p2], key[p1]
                    order[j + 1], order[j + 2] = p2, p1
                j += 3

        # start point
        anchor = order[2]
        if points.dist_sq(order[0], anchor) < points.dist_sq(order[1], anchor):
            key[order[0]], key[order[1]] = key[order[1]], key[order[0]]

        # end point
        if size > 5:
            anchor = order[size - 3]
            if points.dist_sq(order[size - 1], anchor) < points.dist_sq(order[size - 2], anchor):
                key[order[size - 2]], key[order[size - 1]] = key[order[size - 1]], key[order[size - 2]]

    def to_state(self) -> Dict:
        return {"kind": self.kind, "key": list(self.key)}

    @classmethod
    def from_state(cls, state: Dict) -> "RandomKeyGenome":
        return cls(state["key"])
