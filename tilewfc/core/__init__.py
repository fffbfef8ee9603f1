from .edges import (
    AsymmetricRule,
    EdgeCompatibilityTable,
    EmptyCatalog,
    MissingEdgeRule,
    ValidationResult,
    parse_compatibility_rules,
)
from .errors import CellStateError, ConfigurationError, WFCError
from .generator import (
    CellResult,
    GenerationConfig,
    GenerationResult,
    GenerationStatus,
    generate,
    generate_from_config,
)
from .grid import Cell, Grid
from .tile import CARDINAL, DIRECTIONS, EAST, NORTH, OPPOSITE, SOUTH, WEST, EdgeType, TileCatalog, TileDefinition
from .wfc_algorithm import TerminationReason, WFCEngine, build_adjacency
