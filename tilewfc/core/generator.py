import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .edges import EdgeCompatibilityTable, ValidationResult
from .errors import ConfigurationError
from .grid import Grid
from .tile import CARDINAL, EdgeType, TileCatalog, TileDefinition
from .wfc_algorithm import StepCallback, TerminationReason, WFCEngine

logger = logging.getLogger(__name__)


class GenerationStatus(Enum):
    SUCCESS = "success"
    INCOMPLETE = "incomplete"
    VALIDATION_FAILED = "validation_failed"


@dataclass(frozen=True)
class CellResult:
    x: int
    y: int
    collapsed: bool
    final_state: Optional[int]
    contradicted: bool


@dataclass
class GenerationResult:
    """
    What a run hands back to the caller.

    ``grid`` is None when validation failed (nothing was allocated). Otherwise it is
    the final grid, including any contradicted or uncollapsed cells.
    """
    status: GenerationStatus
    reason: TerminationReason
    width: int
    height: int
    grid: Optional[Grid] = None
    validation: ValidationResult = field(default_factory=ValidationResult)
    iterations: int = 0

    @property
    def ok(self) -> bool:
        return self.status is GenerationStatus.SUCCESS

    @property
    def violations(self) -> Tuple[Any, ...]:
        return self.validation.violations

    def raise_for_status(self) -> "GenerationResult":
        '''
        Raises ConfigurationError when validation failed, otherwise returns self
        '''
        if self.status is GenerationStatus.VALIDATION_FAILED:
            raise ConfigurationError(
                "Invalid edge compatibility rules: " + "; ".join(self.validation.messages()),
                self.validation.violations,
            )
        return self

    def cells(self) -> List[CellResult]:
        '''
        Every cell in row-major order
        '''
        if self.grid is None:
            return []
        out = []
        for idx, cell in enumerate(self.grid.cells):
            x, y = self.grid.coord_of_index(idx)
            out.append(CellResult(x, y, cell.collapsed, cell.final_state if cell.collapsed else None,
                                  cell.is_contradicted))
        return out

    def tile_indices(self) -> List[List[Optional[int]]]:
        '''
        Rows of resolved tile indices, None where a cell never collapsed
        '''
        if self.grid is None:
            return []
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                cell = self.grid.cells[y * self.width + x]
                row.append(cell.final_state if cell.collapsed else None)
            rows.append(row)
        return rows

    def placements(self) -> List[Tuple[int, int, int]]:
        '''
        (x, y, tile_idx) for every collapsed cell, in row-major order
        '''
        return [(c.x, c.y, c.final_state) for c in self.cells() if c.collapsed]

    def contradicted_cells(self) -> List[Tuple[int, int]]:
        if self.grid is None:
            return []
        return [self.grid.coord_of_index(i) for i in self.grid.contradicted_indices()]


def _check_dimensions(width, height) -> None:
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"Grid {label} must be a positive integer, got {value!r}")


def generate(
    catalog: TileCatalog,
    table: EdgeCompatibilityTable,
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
    max_iterations: Optional[int] = None,
    step_callback: Optional[StepCallback] = None,
) -> GenerationResult:
    '''
    Fills a width x height grid with tile indices so that touching edges are compatible.

    Validation runs first; broken rules give a VALIDATION_FAILED result and no grid.
    Contradictions, stalls and the iteration cap give INCOMPLETE with whatever grid exists.
    '''
    _check_dimensions(width, height)

    validation = table.validate(catalog)
    if not validation:
        logger.error("Wave Function Collapse failed: Invalid edge compatibility rules (%d violations)",
                     len(validation.violations))
        return GenerationResult(GenerationStatus.VALIDATION_FAILED, TerminationReason.INVALID_RULES,
                                width, height, validation=validation)

    if max_iterations is None:
        max_iterations = width * height * 10

    # every cell starts with every tile possible
    grid = Grid(width, height, len(catalog))
    engine = WFCEngine(grid, catalog, table, rng, step_callback)

    logger.info("Generating %dx%d grid from %d tile types", width, height, len(catalog))
    reason, iterations = engine.run(max_iterations)

    status = GenerationStatus.SUCCESS if reason is TerminationReason.COMPLETED else GenerationStatus.INCOMPLETE
    logger.info("Generation finished: %s (%s) after %d collapses, %d/%d cells collapsed, %d contradicted",
                status.value, reason.value, iterations, grid.collapsed_count(), len(grid),
                len(grid.contradicted_indices()))

    return GenerationResult(status, reason, width, height, grid, validation, iterations)


@dataclass(frozen=True)
class GenerationConfig:
    """Everything a run needs, as supplied by a host form or a document."""
    catalog: TileCatalog
    table: EdgeCompatibilityTable
    width: int
    height: int
    seed: Optional[int] = None
    max_iterations: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationConfig":
        '''
        Builds a config from plain data:
            {"width": 8, "height": 8, "seed": 1,
             "tiles": [{"name": "grass", "edges": {"north": "A", ...}, "payload": ...}],
             "compatibility": {"A": "A"}}
        Without "compatibility" every edge type connects to itself.
        '''
        try:
            width = data["width"]
            height = data["height"]
            tile_specs = data["tiles"]
        except KeyError as e:
            raise ConfigurationError(f"Missing configuration key: {e.args[0]}") from e

        tiles = []
        for i, spec in enumerate(tile_specs):
            raw_edges = {str(k).upper(): v for k, v in spec.get("edges", {}).items()}
            missing = [d for d in CARDINAL if d not in raw_edges]
            if missing:
                raise ConfigurationError(f"Tile {i} has no edge for {', '.join(missing)}")
            edges = {d: EdgeType.parse(raw_edges[d]) for d in CARDINAL}
            tiles.append(TileDefinition(i, edges, spec.get("name", f"tile_{i}"), spec.get("payload")))

        rules: Optional[Dict[str, str]] = data.get("compatibility")
        table = EdgeCompatibilityTable.identity() if rules is None else EdgeCompatibilityTable.from_names(rules)

        config = cls(TileCatalog(tiles), table, width, height, data.get("seed"), data.get("max_iterations"))
        _check_dimensions(config.width, config.height)
        return config


def generate_from_config(config: GenerationConfig, step_callback: Optional[StepCallback] = None) -> GenerationResult:
    rng = random.Random(config.seed)
    return generate(config.catalog, config.table, config.width, config.height, rng,
                    config.max_iterations, step_callback)
