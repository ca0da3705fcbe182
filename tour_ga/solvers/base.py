import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx

from ..geometry import PointMap


Tour = List[int]


def tour_length(graph: nx.Graph, tour: Sequence[int]) -> float:
    dist = 0.0
    n = len(tour)
    if n < 2:
        return 0.0
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += graph[a][b]["weight"]
    return float(dist)


class Counter:
    """Counts search nodes visited by a solver."""

    def __init__(self):
        self.value = 0

    def increment(self) -> None:
        self.value += 1


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, points: PointMap) -> Tour:
        raise NotImplementedError


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float]

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
