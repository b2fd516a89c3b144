"""
Tests for grid conversion, route statistics, configuration and the console demo
"""

from pathlib import Path

import numpy as np
import pytest
import yaml
from pydantic import ValidationError

from fieldroute import (EMPTY, END, OBSTACLE, PATH, START, GridShapeError, PlannerConfig,
                        annotate_route, count_free_cells, coverage_percent, load_config,
                        route_statistics, to_cell_grid, to_occupancy)
from fieldroute.grid import grid_shape
from fieldroute.log import only_fieldroute, setup_logger
from fieldroute.main import main
from fieldroute.planner import plan_coverage

CONFIG_FILE = Path(__file__).parent / "config" / "planner.yaml"


# --- Grid conversion ---

def test_cell_grid_to_occupancy():
    cells = [
        [START, EMPTY, OBSTACLE],
        ["machine", PATH, END],
    ]
    occupancy = to_occupancy(cells)
    assert occupancy.dtype == np.int8
    assert occupancy.tolist() == [[0, 0, 1], [0, 0, 0]]


def test_occupancy_to_cell_grid():
    assert to_cell_grid([[0, 1], [1, 0]]) == [[EMPTY, OBSTACLE], [OBSTACLE, EMPTY]]
    assert to_cell_grid(np.array([[True, False]])) == [[OBSTACLE, EMPTY]]


def test_cell_grid_round_trip_keeps_obstacles():
    occupancy = np.array([[0, 1, 0], [1, 1, 0]])
    assert to_occupancy(to_cell_grid(occupancy)).tolist() == occupancy.tolist()


@pytest.mark.parametrize("grid", [None, [], [[]], [[0, 0], [0]], np.zeros(3), np.zeros((2, 0))])
def test_malformed_grids_rejected(grid):
    with pytest.raises(GridShapeError):
        grid_shape(grid)


def test_grid_shape_error_is_value_error():
    with pytest.raises(ValueError):
        to_occupancy([[0], [0, 0]])


def test_annotate_route_keeps_obstacle_under_end_marker():
    grid = [
        [0, 1],
        [0, 0],
    ]
    cells = annotate_route(grid, [(0, 0), (1, 0), (1, 1)], start=(0, 0), end=(0, 1))
    assert cells == [
        [START, OBSTACLE],
        [PATH, PATH],
    ]


def test_annotate_route_preserves_markers():
    grid = [
        [0, 0, 1],
        [0, 0, 0],
    ]
    route = [(0, 0), (1, 0), (1, 1), (0, 1), (1, 2)]
    cells = annotate_route(grid, route, start=(0, 0), end=(1, 2))
    assert cells == [
        [START, PATH, OBSTACLE],
        [PATH, PATH, END],
    ]
    assert grid == [[0, 0, 1], [0, 0, 0]]


# --- Statistics ---

def test_route_statistics_without_free_count():
    stats = route_statistics([(0, 0), (0, 1), (1, 1), (0, 1)])
    assert stats.total_distance == 3
    assert stats.covered_cells == 3
    assert stats.coverage_percent == 0.0


def test_route_statistics_with_free_count():
    stats = route_statistics([(0, 0), (0, 1), (1, 1)], total_free_cells=6)
    assert stats.coverage_percent == pytest.approx(50.0)


def test_route_statistics_counts_jumps_as_manhattan_steps():
    assert route_statistics([(0, 0), (2, 3)]).total_distance == 5


def test_route_statistics_empty_route():
    stats = route_statistics([], total_free_cells=0)
    assert stats.total_distance == 0
    assert stats.covered_cells == 0
    assert stats.coverage_percent == 0.0


def test_free_cells_and_percent():
    grid = [
        [0, 1],
        [0, 0],
    ]
    assert count_free_cells(grid) == 3
    assert coverage_percent([(0, 0), (1, 0)], grid) == pytest.approx(200 / 3)


# --- Config ---

def test_default_config():
    config = PlannerConfig()
    assert config.iteration_factor == 3
    assert config.max_search_expansions is None
    assert config.time_budget_s is None
    assert config.log_level == "INFO"


@pytest.mark.parametrize("field,value", [
    ("iteration_factor", 0),
    ("max_search_expansions", -5),
    ("time_budget_s", 0.0),
    ("log_level", "verbose"),
])
def test_invalid_config_values(field, value):
    with pytest.raises(ValidationError):
        PlannerConfig(**{field: value})


def test_log_level_normalised():
    assert PlannerConfig(log_level="debug").log_level == "DEBUG"


def test_load_shipped_config():
    config = load_config(CONFIG_FILE)
    assert config.iteration_factor == 3
    assert config.time_budget_s == pytest.approx(2.0)


def test_load_flat_config(tmp_path):
    path = tmp_path / "planner.yaml"
    path.write_text("iteration_factor: 5\nmax_search_expansions: 500\n", encoding="utf-8")
    config = load_config(path)
    assert config.iteration_factor == 5
    assert config.max_search_expansions == 500


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PlannerConfig()


def test_load_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_load_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("planner: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_load_invalid_values(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text("planner:\n  iteration_factor: -1\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


# --- Console demo ---

def test_demo_open_field(capsys):
    assert main(["--env", "open", "--size", "4"]) == 0
    out = capsys.readouterr().out
    assert "Coverage: 100.0%" in out
    assert "Status: complete" in out
    assert "Segments: 4" in out
    assert "Warning" not in out


def test_demo_unreachable_end(capsys):
    assert main(["--env", "split", "--size", "5", "--end", "0", "4"]) == 2
    out = capsys.readouterr().out
    assert "Coverage: 50.0%" in out


def test_demo_with_config():
    assert main(["--env", "obstacles", "--size", "20", "--config", str(CONFIG_FILE)]) == 0


# --- Logging ---

def test_log_filter_keeps_planner_records():
    assert only_fieldroute({"name": "fieldroute.planner"})
    assert only_fieldroute({"name": "fieldroute"})
    assert not only_fieldroute({"name": "numpy.core"})
    assert not only_fieldroute({"name": "fieldroute_extra"})


def test_setup_logger_writes_planner_file(tmp_path):
    try:
        setup_logger("DEBUG", log_dir=tmp_path)
        plan_coverage([[0, 0], [0, 0]], (0, 0))
    finally:
        setup_logger("INFO")
    log_files = list(tmp_path.glob("fieldroute_*.log"))
    assert len(log_files) == 1
    assert "coverage route" in log_files[0].read_text(encoding="utf-8")
