from contextlib import contextmanager
from typing import Iterator, List, MutableSequence, Optional, Tuple

from ..geometry import PointMap
from .base import Counter, Solver, Tour, tour_length
from .heuristics import nearest_neighbor_tour


def next_permutation(seq: MutableSequence) -> bool:
    """
    Advance ``seq`` to the next permutation in lexicographic order, in place.
    Returns False (leaving ``seq`` sorted ascending) once the last permutation
    has been passed.
    """
    i = len(seq) - 2
    while i >= 0 and seq[i] >= seq[i + 1]:
        i -= 1
    if i < 0:
        seq.reverse()
        return False
    j = len(seq) - 1
    while seq[j] <= seq[i]:
        j -= 1
    seq[i], seq[j] = seq[j], seq[i]
    seq[i + 1:] = reversed(seq[i + 1:])
    return True


def _closed_length(dist: List[List[float]], tour: Tour) -> float:
    total = 0.0
    for i in range(len(tour)):
        total += dist[tour[i - 1]][tour[i]]
    return total


def brute_force(points: PointMap, counter: Optional[Counter] = None) -> Tuple[Tour, float]:
    n = len(points)
    dist = points.distance_matrix().tolist()
    if n < 3:
        tour = list(range(n))
        return tour, _closed_length(dist, tour)

    # City 0 is pinned first; rotations of a cycle share a length.
    rest = list(range(1, n))
    best = [0] + rest
    best_length = _closed_length(dist, best)
    while next_permutation(rest):
        if counter is not None:
            counter.increment()
        tour = [0] + rest
        length = _closed_length(dist, tour)
        if length < best_length:
            best_length = length
            best = tour
    return best, best_length


@contextmanager
def _visiting(visited: List[bool], city: int) -> Iterator[None]:
    visited[city] = True
    try:
        yield
    finally:
        visited[city] = False


def branch_and_bound(points: PointMap, counter: Optional[Counter] = None) -> Tuple[Tour, float]:
    n = len(points)
    if n < 3:
        return brute_force(points, counter)

    dist = points.distance_matrix().tolist()
    nearest = [min(dist[i][j] for j in range(n) if j != i) for i in range(n)]

    graph = points.to_graph()
    best_tour = nearest_neighbor_tour(graph, 0)
    best_length = tour_length(graph, best_tour)

    visited = [False] * n
    stack = [0]

    def extend(current: int, accumulated: float) -> None:
        nonlocal best_tour, best_length
        if len(stack) == n:
            total = accumulated + dist[current][0]
            if total < best_length:
                best_length = total
                best_tour = list(stack)
            return
        for city in range(n):
            if visited[city]:
                continue
            if counter is not None:
                counter.increment()
            reached = accumulated + dist[current][city]
            with _visiting(visited, city):
                # Every city still to be left contributes at least its nearest-neighbour edge.
                bound = reached + nearest[city] + sum(nearest[u] for u in range(n) if not visited[u])
                if bound < best_length:
                    stack.append(city)
                    extend(city, reached)
                    stack.pop()

    with _visiting(visited, 0):
        extend(0, 0.0)
    return best_tour, best_length


class BruteForceSolver(Solver):
    name = "brute_force"

    def __init__(self):
        self.counter = Counter()

    def solve(self, points: PointMap) -> Tour:
        tour, _ = brute_force(points, self.counter)
        return tour


class BranchAndBoundSolver(Solver):
    name = "branch_and_bound"

    def __init__(self):
        self.counter = Counter()

    def solve(self, points: PointMap) -> Tour:
        tour, _ = branch_and_bound(points, self.counter)
        return tour
