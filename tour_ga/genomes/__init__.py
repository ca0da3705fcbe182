import random
from typing import Dict

from .base import Chromosome, Path, path_length, reorder_by, slice_crossover
from .random_key import RandomKeyGenome
from .removal_index import RemovalIndexGenome
from .swap_path import SwapPathGenome


GENOME_TYPES = {
    RemovalIndexGenome.kind: RemovalIndexGenome,
    RandomKeyGenome.kind: RandomKeyGenome,
    SwapPathGenome.kind: SwapPathGenome,
}


def random_genome(kind: str, map_size: int, rng: random.Random = None, swap_count: int = None) -> Chromosome:
    if kind not in GENOME_TYPES:
        raise ValueError(f"Unknown genome kind {kind!r}; expected one of {sorted(GENOME_TYPES)}")
    if kind == SwapPathGenome.kind:
        return SwapPathGenome.random(map_size, map_size if swap_count is None else swap_count, rng)
    return GENOME_TYPES[kind].random(map_size, rng)


def genome_from_state(state: Dict) -> Chromosome:
    kind = state.get("kind")
    if kind not in GENOME_TYPES:
        raise ValueError(f"Unknown genome kind {kind!r} in state")
    return GENOME_TYPES[kind].from_state(state)


__all__ = [
    "Chromosome",
    "Path",
    "path_length",
    "reorder_by",
    "slice_crossover",
    "RandomKeyGenome",
    "RemovalIndexGenome",
    "SwapPathGenome",
    "GENOME_TYPES",
    "random_genome",
    "genome_from_state",
]
