from .base import Counter, Solver, SolveResult, Tour, tour_length
from .exact import (
    BranchAndBoundSolver,
    BruteForceSolver,
    branch_and_bound,
    brute_force,
    next_permutation,
)
from .heuristics import NearestNeighborSolver, nearest_neighbor_tour

__all__ = [
    "Counter",
    "Solver",
    "SolveResult",
    "Tour",
    "tour_length",
    "BranchAndBoundSolver",
    "BruteForceSolver",
    "branch_and_bound",
    "brute_force",
    "next_permutation",
    "NearestNeighborSolver",
    "nearest_neighbor_tour",
]
