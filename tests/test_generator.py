"""End-to-end tests for generate(), its result object and configuration loading."""

from __future__ import annotations

import logging
import random

import pytest

from tilewfc import (
    ConfigurationError,
    EdgeCompatibilityTable,
    EdgeType,
    GenerationConfig,
    GenerationStatus,
    TerminationReason,
    TileCatalog,
    generate,
    generate_from_config,
)
from tilewfc.core.edges import EmptyCatalog, MissingEdgeRule
from tilewfc.core.generator import CellResult
from tilewfc.core.tile import NORTH

from tests.helpers import incompatible_collapsed_pairs

A, B, C, D = EdgeType.A, EdgeType.B, EdgeType.C, EdgeType.D


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    @pytest.mark.parametrize("width, height", [(1, 1), (3, 1), (1, 4), (5, 5), (12, 7)])
    def test_uniform_tile_always_succeeds(self, uniform_catalog, identity_table, width, height) -> None:
        result = generate(uniform_catalog, identity_table, width, height, random.Random(1))

        assert result.status is GenerationStatus.SUCCESS
        assert result.reason is TerminationReason.COMPLETED
        assert result.tile_indices() == [[0] * width for _ in range(height)]

    def test_missing_north_rule_fails_before_any_grid_work(self) -> None:
        catalog = TileCatalog.from_edges([(B, A, A, A)])
        result = generate(catalog, EdgeCompatibilityTable({A: A}), 4, 4, random.Random(1))

        assert result.status is GenerationStatus.VALIDATION_FAILED
        assert result.reason is TerminationReason.INVALID_RULES
        assert result.grid is None
        assert result.violations == (MissingEdgeRule(0, NORTH, B),)
        assert result.cells() == []

    def test_empty_catalog_fails_validation(self, identity_table) -> None:
        result = generate(TileCatalog(), identity_table, 2, 2)

        assert result.status is GenerationStatus.VALIDATION_FAILED
        assert EmptyCatalog() in result.violations

    @pytest.mark.parametrize("seed", range(10))
    def test_two_exclusive_tiles_resolve_to_same_tile(self, exclusive_catalog, identity_table, seed) -> None:
        result = generate(exclusive_catalog, identity_table, 2, 1, random.Random(seed))

        assert result.status is GenerationStatus.SUCCESS
        assert result.contradicted_cells() == []
        [[left, right]] = result.tile_indices()
        assert left == right

    def test_contradictory_strip_does_not_crash(self, identity_table) -> None:
        # each tile's north edge needs a south edge A above it; every south edge is B
        catalog = TileCatalog.from_edges([(A, A, B, A)])
        result = generate(catalog, identity_table, 1, 3, random.Random(5))

        assert result.status is GenerationStatus.INCOMPLETE
        assert result.reason is TerminationReason.STALLED
        assert result.contradicted_cells() == [(0, 1)]
        assert [c.collapsed for c in result.cells()] == [True, False, True]

    @pytest.mark.parametrize("seed", range(5))
    def test_cross_rules_without_partner_side_are_incomplete(self, seed) -> None:
        # A only meets B, and no tile shows B on its west side
        catalog = TileCatalog.from_edges([(C, A, C, A)])
        table = EdgeCompatibilityTable({A: B, B: A, C: C})
        result = generate(catalog, table, 3, 1, random.Random(seed))

        assert result.status is GenerationStatus.INCOMPLETE
        assert result.contradicted_cells() == [(1, 0)]
        assert incompatible_collapsed_pairs(result, catalog, table) == []


# =============================================================================
# Properties
# =============================================================================


class TestProperties:
    @pytest.mark.parametrize("seed", range(15))
    def test_collapsed_neighbors_are_compatible(self, stripe_catalog, identity_table, seed) -> None:
        result = generate(stripe_catalog, identity_table, 9, 9, random.Random(seed))
        assert incompatible_collapsed_pairs(result, stripe_catalog, identity_table) == []

    def test_cross_table_soundness(self) -> None:
        catalog = TileCatalog.from_edges([
            (A, B, A, B),
            (B, A, B, A),
            (C, D, C, D),
            (A, D, B, C),
        ])
        table = EdgeCompatibilityTable({A: B, B: A, C: D, D: C})
        for seed in range(15):
            result = generate(catalog, table, 7, 7, random.Random(seed))
            assert result.status is not GenerationStatus.VALIDATION_FAILED
            assert incompatible_collapsed_pairs(result, catalog, table) == []

    @pytest.mark.parametrize("width, height", [(1, 1), (2, 9), (10, 10), (16, 3)])
    def test_terminates_within_cap(self, stripe_catalog, identity_table, width, height) -> None:
        result = generate(stripe_catalog, identity_table, width, height, random.Random(width * height))
        assert result.iterations <= width * height * 10
        assert result.reason in (TerminationReason.COMPLETED, TerminationReason.STALLED)

    def test_same_seed_same_grid(self, stripe_catalog, identity_table) -> None:
        first = generate(stripe_catalog, identity_table, 12, 12, random.Random(424242))
        second = generate(stripe_catalog, identity_table, 12, 12, random.Random(424242))

        assert first.status is second.status
        assert first.cells() == second.cells()

    def test_different_seeds_usually_differ(self, stripe_catalog, identity_table) -> None:
        grids = {
            tuple(map(tuple, generate(stripe_catalog, identity_table, 10, 10, random.Random(s)).tile_indices()))
            for s in range(5)
        }
        assert len(grids) > 1


# =============================================================================
# Iteration cap and status
# =============================================================================


class TestIterationCap:
    def test_cap_reached_reports_incomplete(self, identity_table) -> None:
        catalog = TileCatalog.from_edges([(A, A, A, A), (A, A, A, A)])
        result = generate(catalog, identity_table, 3, 3, random.Random(0), max_iterations=4)

        assert result.status is GenerationStatus.INCOMPLETE
        assert result.reason is TerminationReason.ITERATION_CAP
        assert result.iterations == 4
        assert len(result.placements()) == 4
        assert result.grid is not None

    def test_cap_warning_is_logged(self, identity_table, caplog: pytest.LogCaptureFixture) -> None:
        catalog = TileCatalog.from_edges([(A, A, A, A), (A, A, A, A)])
        with caplog.at_level(logging.WARNING, logger="tilewfc"):
            generate(catalog, identity_table, 3, 3, random.Random(0), max_iterations=2)

        assert "reached max iterations (2)" in caplog.text

    def test_finishing_on_the_last_iteration_is_success(self, exclusive_catalog, identity_table) -> None:
        result = generate(exclusive_catalog, identity_table, 3, 3, random.Random(0), max_iterations=1)

        assert result.status is GenerationStatus.SUCCESS
        assert result.iterations == 1

    def test_default_cap_allows_one_collapse_per_cell(self, identity_table) -> None:
        catalog = TileCatalog.from_edges([(A, A, A, A), (A, A, A, A)])
        result = generate(catalog, identity_table, 4, 5, random.Random(0))

        assert result.status is GenerationStatus.SUCCESS
        assert result.iterations == 20

    @pytest.mark.parametrize("width, height", [(0, 3), (3, -1), (2.5, 2), ("3", 3), (True, 2)])
    def test_bad_dimensions_raise(self, uniform_catalog, identity_table, width, height) -> None:
        with pytest.raises(ConfigurationError):
            generate(uniform_catalog, identity_table, width, height)


# =============================================================================
# Result accessors
# =============================================================================


class TestGenerationResult:
    def test_cells_are_row_major(self, exclusive_catalog, identity_table) -> None:
        result = generate(exclusive_catalog, identity_table, 3, 2, random.Random(9))
        cells = result.cells()

        assert [(c.x, c.y) for c in cells] == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]
        assert all(isinstance(c, CellResult) and c.collapsed and not c.contradicted for c in cells)

    def test_placements_match_tile_indices(self, stripe_catalog, identity_table) -> None:
        result = generate(stripe_catalog, identity_table, 5, 4, random.Random(11))
        rows = result.tile_indices()

        for x, y, tile in result.placements():
            assert rows[y][x] == tile

    def test_raise_for_status_passes_through_valid_runs(self, uniform_catalog, identity_table) -> None:
        result = generate(uniform_catalog, identity_table, 2, 2)
        assert result.raise_for_status() is result
        assert result.ok

    def test_raise_for_status_carries_violations(self) -> None:
        catalog = TileCatalog.from_edges([(B, A, A, A)])
        result = generate(catalog, EdgeCompatibilityTable({A: A}), 2, 2)

        with pytest.raises(ConfigurationError) as excinfo:
            result.raise_for_status()
        assert excinfo.value.violations == (MissingEdgeRule(0, NORTH, B),)
        assert "North edge type B" in str(excinfo.value)

    def test_step_callback_is_forwarded(self, stripe_catalog, identity_table) -> None:
        steps = []
        result = generate(stripe_catalog, identity_table, 4, 4, random.Random(2),
                          step_callback=lambda pos, tile: steps.append((pos, tile)))
        assert len(steps) == result.iterations


# =============================================================================
# Configuration
# =============================================================================


def config_data(**overrides):
    data = {
        "width": 6,
        "height": 4,
        "seed": 99,
        "tiles": [
            {"name": "grass", "edges": {"north": "A", "east": "A", "south": "A", "west": "A"}, "payload": "grass.obj"},
            {"name": "water", "edges": {"North": "b", "East": "b", "South": "b", "West": "b"}},
        ],
        "compatibility": {"A": "A", "B": "B"},
    }
    data.update(overrides)
    return data


class TestGenerationConfig:
    def test_from_dict_builds_catalog_and_table(self) -> None:
        config = GenerationConfig.from_dict(config_data())

        assert config.width == 6
        assert config.seed == 99
        assert [t.name for t in config.catalog] == ["grass", "water"]
        assert config.catalog[0].payload == "grass.obj"
        assert config.catalog[1].west is B
        assert config.table == EdgeCompatibilityTable({A: A, B: B})

    def test_default_table_is_identity(self) -> None:
        data = config_data()
        del data["compatibility"]
        assert GenerationConfig.from_dict(data).table == EdgeCompatibilityTable.identity()

    def test_generate_from_config_is_reproducible(self) -> None:
        config = GenerationConfig.from_dict(config_data())
        first = generate_from_config(config)
        second = generate_from_config(config)

        assert first.status is GenerationStatus.SUCCESS
        assert first.tile_indices() == second.tile_indices()

    def test_max_iterations_is_honoured(self) -> None:
        data = config_data(tiles=[{"edges": {"north": "A", "east": "A", "south": "A", "west": "A"}}] * 2,
                           max_iterations=3)
        result = generate_from_config(GenerationConfig.from_dict(data))

        assert result.reason is TerminationReason.ITERATION_CAP
        assert result.iterations == 3

    @pytest.mark.parametrize("key", ["width", "height", "tiles"])
    def test_missing_key_raises(self, key: str) -> None:
        data = config_data()
        del data[key]
        with pytest.raises(ConfigurationError, match=key):
            GenerationConfig.from_dict(data)

    def test_unknown_edge_name_raises(self) -> None:
        data = config_data(tiles=[{"edges": {"north": "Q", "east": "A", "south": "A", "west": "A"}}])
        with pytest.raises(ConfigurationError):
            GenerationConfig.from_dict(data)

    def test_missing_side_raises(self) -> None:
        data = config_data(tiles=[{"edges": {"north": "A", "east": "A", "south": "A"}}])
        with pytest.raises(ConfigurationError, match="WEST"):
            GenerationConfig.from_dict(data)

    def test_zero_width_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            GenerationConfig.from_dict(config_data(width=0))

    def test_invalid_rules_surface_as_validation_failure(self) -> None:
        config = GenerationConfig.from_dict(config_data(compatibility={"A": "B"}))
        result = generate_from_config(config)

        assert result.status is GenerationStatus.VALIDATION_FAILED
        assert result.validation.asymmetric_pairs()
        assert result.validation.missing_edges()
