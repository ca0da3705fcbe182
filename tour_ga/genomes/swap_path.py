from __future__ import annotations

import random
from typing import Dict, Iterator, List, Sequence, Tuple

from ..geometry import PointMap
from .base import Chromosome, path_length, slice_crossover


class SwapPathGenome(Chromosome):
    """
    Transposition-sequence encoding: a flat buffer of index pairs applied in
    turn to the identity order. Scored as an open path.
    """

    kind = "swap_path"

    def __init__(self, swaps: Sequence[int], map_size: int):
        if len(swaps) % 2:
            raise ValueError("Swap buffer must hold an even number of indices")
        if any(not 0 <= s < map_size for s in swaps):
            raise ValueError(f"Swap indices must lie in [0, {map_size})")
        self.swaps: List[int] = list(swaps)
        self.map_size = map_size

    @classmethod
    def random(cls, map_size: int, swap_count: int, rng: random.Random = None) -> "SwapPathGenome":
        rng = rng or random.Random()
        return cls([rng.randrange(map_size) for _ in range(swap_count * 2)], map_size)

    def pairs(self) -> Iterator[Tuple[int, int]]:
        it = iter(self.swaps)
        return zip(it, it)

    def __len__(self) -> int:
        return len(self.swaps)

    def __repr__(self) -> str:
        return f"SwapPathGenome({self.swaps})"

    def copy(self) -> "SwapPathGenome":
        return SwapPathGenome(self.swaps, self.map_size)

    def decode(self, points: PointMap = None) -> List[int]:
        if points is not None and len(points) != self.map_size:
            raise ValueError(f"Genome encodes {self.map_size} cities, map has {len(points)}")
        order = list(range(self.map_size))
        for a, b in self.pairs():
            order[a], order[b] = order[b], order[a]
        return order

    def evaluate(self, points: PointMap) -> float:
        return path_length(points, self.decode(points))

    def reorder(self, points: PointMap) -> None:
        if len(points) != self.map_size:
            raise ValueError(f"Genome encodes {self.map_size} cities, map has {len(points)}")
        for a, b in self.pairs():
            points.swap(a, b)

    def crossover(self, other: "SwapPathGenome", start: int, end: int) -> None:
        self._check_partner(other)
        slice_crossover(self.swaps, other.swaps, start, end)

    def point_mutation(self, locus: int, rng: random.Random) -> None:
        self.swaps[locus] = rng.randrange(self.map_size)

    def to_state(self) -> Dict:
        return {"kind": self.kind, "swaps": list(self.swaps), "map_size": self.map_size}

    @classmethod
    def from_state(cls, state: Dict) -> "SwapPathGenome":
        return cls(state["swaps"], state["map_size"])
