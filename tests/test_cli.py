import importlib
import json

import pytest

from tour_ga.cli import main


@pytest.mark.parametrize("module", [
    "tour_ga.cli",
    "tour_ga.genomes.random_key",
    "tour_ga.genomes.removal_index",
    "tour_ga.genomes.swap_path",
])
def test_modules_import(module):
    assert importlib.import_module(module) is not None


def test_baseline_reports_lengths(capsys):
    main(["baseline", "--cities", "6", "--seed", "4"])
    out = capsys.readouterr().out
    assert "nearest neighbour" in out
    assert "brute force" in out
    assert "branch and bound" in out


def test_baseline_reports_gap_and_nodes(capsys):
    main(["baseline", "--cities", "6", "--seed", "4", "--skip-exact"])
    lines = capsys.readouterr().out.splitlines()
    assert not any("brute force" in line for line in lines)
    (bnb,) = [line for line in lines if "branch and bound" in line]
    assert "gap=0.0000" in bnb
    assert "nodes=" in bnb
    (nn,) = [line for line in lines if "nearest neighbour" in line]
    assert "gap=" in nn
    assert "nodes=" not in nn


def test_run_writes_checkpoint(tmp_path, capsys):
    checkpoint = tmp_path / "state.json"
    main([
        "run", "--cities", "5", "--population", "20", "--target", "exact",
        "--max-iterations", "200", "--checkpoint", str(checkpoint),
    ])
    out = capsys.readouterr().out
    assert "best random_key" in out
    assert "tour:" in out
    state = json.loads(checkpoint.read_text())
    assert len(state["population"]) == 20

    main(["run", "--resume", "--checkpoint", str(checkpoint), "--target", "none", "--max-iterations", "3"])
    assert "generations=3" in capsys.readouterr().out


def test_compare(capsys):
    main(["compare", "--cities", "5", "--iterations", "1", "--population", "20", "--max-iterations", "100"])
    assert "mean generations" in capsys.readouterr().out
