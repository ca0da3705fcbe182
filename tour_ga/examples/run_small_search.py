import random

from tour_ga.evolutionary import EvolutionConfig, EvolutionarySearch
from tour_ga.geometry import PointMap
from tour_ga.solvers import branch_and_bound


def main():
    rng = random.Random(7)
    points = PointMap.random(9, rng)
    _, optimum = branch_and_bound(points)

    for genome in ("random_key", "removal_index"):
        cfg = EvolutionConfig(population_size=30, genome=genome, max_iterations=2000)
        search = EvolutionarySearch(cfg, points, rng=random.Random(cfg.random_seed))
        result = search.run(optimum)
        print(
            f"{genome}: generations={result.iterations} best={result.best_loss:.4f} "
            f"optimum={optimum:.4f} converged={result.converged}"
        )


if __name__ == "__main__":
    main()
