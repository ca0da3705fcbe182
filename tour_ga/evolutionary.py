import logging
import math
import random
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .genomes import Chromosome, genome_from_state, random_genome
from .geometry import PointMap
from .recombination import Recombinator, build_recombinator
from .selection import DEFAULT_SETTINGS, RouletteWheelSelection, Settings
from .solvers.exact import brute_force

logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    population_size: int = 50
    genome: str = "random_key"
    recombinator: str = "uniform"
    segments: int = 2
    uniform_weight: float = 0.5
    swap_count: Optional[int] = None
    repair: bool = True
    max_iterations: int = 1_000_000
    tolerance: float = 1e-5
    prune_interval: int = 0
    random_seed: int = 123


@dataclass
class RunResult:
    iterations: int
    best_loss: float
    converged: bool


class EvolutionarySearch:
    def __init__(
        self,
        config: EvolutionConfig,
        points: PointMap,
        settings: Settings = DEFAULT_SETTINGS,
        rng: random.Random = None,
        population: Sequence[Chromosome] = None,
    ):
        if config.population_size < 2:
            raise ValueError("Population needs at least two genomes to select parents")
        self.cfg = config
        self.points = points
        self.settings = settings
        self.rng = rng or random.Random(config.random_seed)
        self.recombinator: Recombinator = build_recombinator(
            config.recombinator, config.segments, config.uniform_weight
        )
        if population is None:
            population = [
                random_genome(config.genome, len(points), self.rng, swap_count=config.swap_count)
                for _ in range(config.population_size)
            ]
        self.population: List[Chromosome] = list(population)
        self.generation = 0
        self.best_loss = math.inf

    def step(self) -> float:
        loss = RouletteWheelSelection.evolve(
            self.settings, self.points, self.population, self.recombinator, self.cfg.repair, self.rng
        )
        self.generation += 1
        if loss < self.best_loss:
            self.best_loss = loss
            logger.info("generation %d: best loss %.6f", self.generation, loss)
        if self.cfg.prune_interval and self.generation % self.cfg.prune_interval == 0:
            self.prune_worst()
        return loss

    def run(self, target: Optional[float] = None) -> RunResult:
        goal = -math.inf if target is None else target
        start = self.generation
        while self.best_loss - goal > self.cfg.tolerance and self.generation - start < self.cfg.max_iterations:
            self.step()
        iterations = self.generation - start
        converged = target is not None and self.best_loss - goal <= self.cfg.tolerance
        if not converged and target is not None:
            logger.warning(
                "stopped after %d generations at %.6f (target %.6f)", iterations, self.best_loss, target
            )
        return RunResult(iterations=iterations, best_loss=self.best_loss, converged=converged)

    def best(self) -> Tuple[Chromosome, float]:
        best_genome = None
        best_score = math.inf
        for genome in self.population:
            score = genome.evaluate(self.points)
            if best_genome is None or score < best_score:
                best_genome = genome
                best_score = score
        return best_genome, best_score

    def prune_worst(self) -> None:
        """Evict the single worst genome, keeping at least two."""
        if len(self.population) <= 2:
            return
        scores = [g.evaluate(self.points) for g in self.population]
        worst = max(range(len(scores)), key=lambda i: scores[i] if not math.isnan(scores[i]) else math.inf)
        del self.population[worst]

    def to_state(self) -> Dict:
        return {
            "cfg": asdict(self.cfg),
            "settings": asdict(self.settings),
            "generation": self.generation,
            "best_loss": None if math.isinf(self.best_loss) else self.best_loss,
            "points": [(p.x, p.y) for p in self.points],
            "population": [g.to_state() for g in self.population],
        }

    @classmethod
    def from_state(cls, state: Dict, rng: random.Random = None) -> "EvolutionarySearch":
        cfg = EvolutionConfig(**state["cfg"])
        settings = Settings(**state["settings"])
        points = PointMap.from_coordinates(state["points"])
        population = [genome_from_state(g) for g in state["population"]]
        search = cls(cfg, points, settings=settings, rng=rng, population=population)
        search.generation = state.get("generation", 0)
        best_loss = state.get("best_loss")
        search.best_loss = math.inf if best_loss is None else best_loss
        return search


def compare_repair(
    iterations: int,
    city_count: int,
    config: EvolutionConfig = None,
    settings: Settings = DEFAULT_SETTINGS,
    rng: random.Random = None,
) -> Tuple[float, float]:
    """
    Mean generations needed to reach the exact optimum with and without
    repair. Both runs of an iteration start from the same population.
    """
    config = config or EvolutionConfig()
    rng = rng or random.Random(config.random_seed)
    total_with_fix = 0
    total_without_fix = 0
    for i in range(iterations):
        points = PointMap.random(city_count, rng)
        _, target = brute_force(points)
        population = [
            random_genome(config.genome, city_count, rng, swap_count=config.swap_count)
            for _ in range(config.population_size)
        ]
        for repair in (True, False):
            run_cfg = EvolutionConfig(**{**asdict(config), "repair": repair})
            search = EvolutionarySearch(
                run_cfg, points, settings, rng=rng, population=[g.copy() for g in population]
            )
            result = search.run(target)
            if repair:
                total_with_fix += result.iterations
            else:
                total_without_fix += result.iterations
        logger.info("%d/%d...", i + 1, iterations)
    return total_with_fix / iterations, total_without_fix / iterations
