from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import tsplib95

from .geometry import PointMap


@dataclass
class Instance:
    name: str
    path: Path
    points: PointMap
    optimum: Optional[float]


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _read_dimension(path: Path) -> Optional[int]:
    try:
        with path.open("r") as f:
            for line in f:
                if "DIMENSION" in line.upper():
                    parts = line.replace(":", " ").split()
                    for token in parts:
                        if token.isdigit():
                            return int(token)
        return None
    except OSError:
        return None


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            nodes = list(tour_file.tours[0])
            dist = 0.0
            for i in range(len(nodes)):
                a = nodes[i]
                b = nodes[(i + 1) % len(nodes)]
                dist += problem.get_weight(a, b)
            return float(dist)
        except Exception:
            continue
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    coords = problem.node_coords
    if not coords:
        raise ValueError(f"{path} has no 2-D node coordinates")
    points = PointMap.from_coordinates(tuple(coords[node][:2]) for node in sorted(coords))
    optimum = _load_optimum(problem, path)
    return Instance(name=problem.name or path.stem, path=path, points=points, optimum=optimum)


def load_tsplib_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    tsp_files = sorted(Path(root).glob("*.tsp"))
    instances: List[Instance] = []
    for p in tsp_files:
        if max_nodes is not None:
            dim = _read_dimension(p)
            if dim is not None and dim > max_nodes:
                continue
        instances.append(load_instance(p))
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances
