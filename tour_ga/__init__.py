"""
Genetic search for short TSP tours over interchangeable genome encodings.
"""

__all__ = [
    "data",
    "evolutionary",
    "genomes",
    "geometry",
    "recombination",
    "selection",
    "solvers",
]
