import math
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, Union

import networkx as nx
import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @staticmethod
    def polar(radius: float, theta: float) -> "Point":
        return Point(radius * math.cos(theta), radius * math.sin(theta))

    def dist(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def dist_sq(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class PointMap:
    """
    Fixed-length, index-addressable sequence of 2-D points.
    Genomes read it to score tours and permute it in place to materialize one.
    """

    def __init__(self, points: Iterable[Point]):
        self._points: List[Point] = list(points)

    @classmethod
    def random(cls, count: int, rng: random.Random = None) -> "PointMap":
        rng = rng or random.Random()
        points = []
        for _ in range(count):
            theta = 2.0 * math.pi * rng.random()
            radius = rng.random()
            points.append(Point.polar(radius, theta))
        return cls(points)

    @classmethod
    def from_coordinates(cls, coords: Union[np.ndarray, Iterable[Tuple[float, float]]]) -> "PointMap":
        return cls(Point(float(x), float(y)) for x, y in coords)

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __setitem__(self, index: int, point: Point) -> None:
        self._points[index] = point

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __repr__(self) -> str:
        return f"PointMap({self._points!r})"

    def swap(self, first: int, second: int) -> None:
        pts = self._points
        pts[first], pts[second] = pts[second], pts[first]

    def to_list(self) -> List[Point]:
        return list(self._points)

    def copy(self) -> "PointMap":
        return PointMap(self._points)

    def dist(self, first: int, second: int) -> float:
        return self._points[first].dist(self._points[second])

    def dist_sq(self, first: int, second: int) -> float:
        return self._points[first].dist_sq(self._points[second])

    def as_array(self) -> np.ndarray:
        return np.array([(p.x, p.y) for p in self._points], dtype=float).reshape(-1, 2)

    def distance_matrix(self) -> np.ndarray:
        coords = self.as_array()
        diff = coords[:, None, :] - coords[None, :, :]
        return np.sqrt((diff ** 2).sum(axis=-1))

    def to_graph(self) -> nx.Graph:
        dist = self.distance_matrix()
        graph = nx.Graph()
        n = len(self._points)
        graph.add_nodes_from(range(n))
        for i in range(n):
            for j in range(i + 1, n):
                graph.add_edge(i, j, weight=float(dist[i, j]))
        return graph
