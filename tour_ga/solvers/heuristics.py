import networkx as nx

from ..geometry import PointMap
from .base import Solver, Tour


def nearest_neighbor_tour(graph: nx.Graph, start: int) -> Tour:
    tour = [start]
    unvisited = set(graph.nodes())
    unvisited.remove(start)
    current = start
    while unvisited:
        # Ties resolve to the lowest index so the tour is reproducible.
        nxt = min(sorted(unvisited), key=lambda node: graph[current][node]["weight"])
        tour.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    return tour


class NearestNeighborSolver(Solver):
    name = "nearest_neighbor"

    def __init__(self, start: int = 0):
        self.start = start

    def solve(self, points: PointMap) -> Tour:
        if len(points) == 0:
            return []
        return nearest_neighbor_tour(points.to_graph(), self.start)
