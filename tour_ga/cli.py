import argparse
import json
import logging
import random
import time
from pathlib import Path
from typing import Optional

from tour_ga.data import load_instance, load_tsplib_instances
from tour_ga.evolutionary import EvolutionConfig, EvolutionarySearch, compare_repair
from tour_ga.genomes import GENOME_TYPES, path_length
from tour_ga.geometry import PointMap
from tour_ga.selection import Settings
from tour_ga.solvers import (
    BranchAndBoundSolver,
    BruteForceSolver,
    NearestNeighborSolver,
    SolveResult,
    branch_and_bound,
    brute_force,
)


CHECKPOINT_PATH = Path("checkpoints/search_state.json")


def save_checkpoint(search: EvolutionarySearch, path: Path = CHECKPOINT_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(search.to_state(), indent=2))


def load_checkpoint(path: Path = CHECKPOINT_PATH, rng: random.Random = None) -> EvolutionarySearch:
    state = json.loads(path.read_text())
    return EvolutionarySearch.from_state(state, rng=rng)


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _settings_from_args(args) -> Settings:
    return Settings(
        replace_ratio=args.replace_ratio,
        elitist_ratio=args.elitist_ratio,
        crossover_prob=args.crossover_prob,
        mutate_prob=args.mutate_prob,
    )


def _config_from_args(args) -> EvolutionConfig:
    return EvolutionConfig(
        population_size=args.population,
        genome=args.genome,
        recombinator=args.recombinator,
        segments=args.segments,
        uniform_weight=args.uniform_weight,
        swap_count=args.swap_count,
        repair=not args.no_repair,
        max_iterations=args.max_iterations,
        prune_interval=args.prune_interval,
        random_seed=args.seed,
    )


def _load_points(args, rng: random.Random) -> PointMap:
    if args.tsplib:
        path = Path(args.tsplib)
        if path.is_dir():
            instances = load_tsplib_instances(path, max_nodes=args.max_nodes, max_instances=1)
            if not instances:
                raise RuntimeError(
                    f"No TSPLIB instances found in {path}. "
                    "Place .tsp files there before running."
                )
            inst = instances[0]
        else:
            inst = load_instance(path)
        log(f"loaded {inst.name} ({len(inst.points)} cities, optimum={inst.optimum})")
        return inst.points
    return PointMap.random(args.cities, rng)


def _target_length(points: PointMap, method: str) -> Optional[float]:
    if method == "exact":
        _, length = brute_force(points)
    elif method == "bnb":
        _, length = branch_and_bound(points)
    else:
        return None
    return length


def run(args) -> None:
    rng = random.Random(args.seed)
    checkpoint = Path(args.checkpoint) if args.checkpoint else None
    if args.resume and checkpoint and checkpoint.exists():
        log(f"Resuming from {checkpoint}")
        search = load_checkpoint(checkpoint, rng=rng)
        search.cfg.max_iterations = args.max_iterations
    else:
        points = _load_points(args, rng)
        search = EvolutionarySearch(_config_from_args(args), points, _settings_from_args(args), rng=rng)

    t0 = time.perf_counter()
    target = _target_length(search.points, args.target)
    if target is not None:
        log(f"target length {target:.6f} ({args.target}, {time.perf_counter() - t0:.2f}s)")

    try:
        result = search.run(target)
    except KeyboardInterrupt:
        log("Interrupted.")
        result = None
    finally:
        if checkpoint:
            save_checkpoint(search, checkpoint)
            log(f"Checkpoint saved to {checkpoint}")

    if result is not None:
        log(f"generations={result.iterations} best={result.best_loss:.6f} converged={result.converged}")
    genome, loss = search.best()
    order = genome.decode(search.points)
    print(f"best {genome.kind} loss={loss:.6f}")
    print("tour: " + " ".join(str(city) for city in order))


def baseline(args) -> None:
    rng = random.Random(args.seed)
    points = _load_points(args, rng)

    solvers = [("branch and bound", BranchAndBoundSolver())]
    if not args.skip_exact:
        solvers.insert(0, ("brute force", BruteForceSolver()))
    solvers.append(("nearest neighbour", NearestNeighborSolver()))

    results = []
    optimum = None
    for label, solver in solvers:
        t0 = time.perf_counter()
        tour = solver.solve(points)
        elapsed = time.perf_counter() - t0
        length = path_length(points, tour, closed=True)
        if optimum is None:
            optimum = length
        results.append((label, solver, SolveResult(tour, length, solver.name, optimum), elapsed))

    for label, solver, result, elapsed in results:
        nodes = getattr(solver, "counter", None)
        extra = f" nodes={nodes.value}" if nodes is not None else ""
        log(f"{label}: {result.length:.6f} gap={result.gap:.4f}{extra} time={elapsed:.2f}s")


def compare(args) -> None:
    rng = random.Random(args.seed)
    with_fix, without_fix = compare_repair(
        args.iterations, args.cities, _config_from_args(args), _settings_from_args(args), rng=rng
    )
    print(f"mean generations with repair={with_fix:.1f} without repair={without_fix:.1f}")


def _add_map_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cities", type=int, default=10)
    parser.add_argument("--tsplib", default=None, help="TSPLIB .tsp file or directory")
    parser.add_argument("--max-nodes", type=int, default=None)
    parser.add_argument("--seed", type=int, default=123)


def _add_ga_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--population", type=int, default=50)
    parser.add_argument("--genome", choices=sorted(GENOME_TYPES), default="random_key")
    parser.add_argument("--recombinator", choices=["kpoint", "uniform"], default="uniform")
    parser.add_argument("--segments", type=int, default=2)
    parser.add_argument("--uniform-weight", type=float, default=0.5)
    parser.add_argument("--swap-count", type=int, default=None)
    parser.add_argument("--no-repair", action="store_true")
    parser.add_argument("--max-iterations", type=int, default=1_000_000)
    parser.add_argument("--prune-interval", type=int, default=0)
    parser.add_argument("--replace-ratio", type=float, default=1.0)
    parser.add_argument("--elitist-ratio", type=float, default=0.25)
    parser.add_argument("--crossover-prob", type=float, default=0.9)
    parser.add_argument("--mutate-prob", type=float, default=0.05)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Genetic search for short TSP tours")
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve a population until the target length is reached")
    _add_map_args(run_parser)
    _add_ga_args(run_parser)
    run_parser.add_argument("--target", choices=["exact", "bnb", "none"], default="bnb")
    run_parser.add_argument("--checkpoint", default=None)
    run_parser.add_argument("--resume", action="store_true")
    run_parser.set_defaults(func=run)

    baseline_parser = subparsers.add_parser("baseline", help="Report exact and heuristic tour lengths")
    _add_map_args(baseline_parser)
    baseline_parser.add_argument("--skip-exact", action="store_true")
    baseline_parser.set_defaults(func=baseline)

    compare_parser = subparsers.add_parser("compare", help="Mean generations with and without repair")
    compare_parser.add_argument("--cities", type=int, default=10)
    compare_parser.add_argument("--seed", type=int, default=123)
    _add_ga_args(compare_parser)
    compare_parser.add_argument("--iterations", type=int, default=10)
    compare_parser.set_defaults(func=compare)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
