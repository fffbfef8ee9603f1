# tile.py - Tile definitions for the 2D edge-matching WFC
# A tile is four edge types (one per side) plus an opaque payload the core never looks at.

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Tuple

from .errors import ConfigurationError

NORTH = "NORTH"
EAST = "EAST"
SOUTH = "SOUTH"
WEST = "WEST"

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

CARDINAL = [NORTH, EAST, SOUTH, WEST]

# (direction_name, (dx, dy))
# Row 0 is the northern edge of the grid, so North is y - 1.
DIRECTIONS = (
    (NORTH, (0, -1)),
    (EAST,  (1, 0)),
    (SOUTH, (0, 1)),
    (WEST,  (-1, 0)),
)


class EdgeType(Enum):
    """Tag on one side of a tile. Only equality matters."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @classmethod
    def parse(cls, value) -> "EdgeType":
        '''
        Resolves an edge type from a member, its name or its value (case-insensitive)
        '''
        if isinstance(value, cls):
            return value
        token = str(value).strip().upper()
        if token.startswith("TYPE_"):
            token = token[len("TYPE_"):]
        for member in cls:
            if token in (member.name.upper(), str(member.value).upper()):
                return member
        raise ConfigurationError(f"Unknown edge type: {value!r}")


@dataclass(frozen=True)
class TileDefinition:
    """
    One entry of the tile catalog.

    Args:
        index: Position of the tile in its catalog; the handle used everywhere else
        edges: Mapping of each cardinal direction to the edge type on that side
        name: Human readable identifier
        payload: Anything the presentation layer wants back (a mesh, an object name...)
    """
    index: int
    edges: Mapping[str, Any] = field(hash=False)
    name: str = ""
    payload: Any = field(default=None, compare=False)

    def __post_init__(self):
        missing = [d for d in CARDINAL if d not in self.edges]
        if missing:
            raise ConfigurationError(f"Tile {self.index} has no edge for {', '.join(missing)}")
        # freeze a private copy so callers can't change edges mid-run
        object.__setattr__(self, "edges", MappingProxyType({d: self.edges[d] for d in CARDINAL}))

    def edge(self, direction: str):
        return self.edges[direction]

    @property
    def north(self):
        return self.edges[NORTH]

    @property
    def east(self):
        return self.edges[EAST]

    @property
    def south(self):
        return self.edges[SOUTH]

    @property
    def west(self):
        return self.edges[WEST]


class TileCatalog:
    """Ordered, read-only collection of tile definitions."""

    def __init__(self, tiles: Iterable[TileDefinition] = ()):
        self._tiles: Tuple[TileDefinition, ...] = tuple(tiles)
        for i, tile in enumerate(self._tiles):
            if tile.index != i:
                raise ConfigurationError(f"Tile '{tile.name}' has index {tile.index} but sits at position {i}")

    @classmethod
    def from_edges(cls, specs: Iterable[Tuple[Any, ...]]) -> "TileCatalog":
        '''
        Builds a catalog from (north, east, south, west[, name[, payload]]) tuples
        '''
        tiles: List[TileDefinition] = []
        for i, spec in enumerate(specs):
            if len(spec) < 4:
                raise ConfigurationError(f"Tile {i} needs four edges (north, east, south, west), got {len(spec)}")
            north, east, south, west = spec[:4]
            name = spec[4] if len(spec) > 4 else f"tile_{i}"
            payload = spec[5] if len(spec) > 5 else None
            edges = {NORTH: north, EAST: east, SOUTH: south, WEST: west}
            tiles.append(TileDefinition(i, edges, name, payload))
        return cls(tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(self._tiles)

    def __getitem__(self, index: int) -> TileDefinition:
        return self._tiles[index]

    def __bool__(self) -> bool:
        return bool(self._tiles)

    def edge_types(self) -> set:
        '''
        Returns every edge type used by at least one tile on any side
        '''
        return {tile.edge(d) for tile in self._tiles for d in CARDINAL}

    def tiles_with_edge(self, edge, direction: str) -> List[int]:
        '''
        Returns the indices of the tiles that carry the given edge type on the given side
        '''
        if direction not in OPPOSITE:
            raise ValueError(f"Unknown direction: {direction!r}")
        return [tile.index for tile in self._tiles if tile.edge(direction) == edge]
