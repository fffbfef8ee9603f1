# edges.py - Edge compatibility rules
# Each edge type has at most one partner it may touch. The table is checked for
# symmetry and coverage before a run, never repaired.

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .errors import ConfigurationError
from .tile import CARDINAL, EdgeType, TileCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmptyCatalog:
    """The catalog has no tiles at all."""

    def describe(self) -> str:
        return "No tile types defined"


@dataclass(frozen=True)
class MissingEdgeRule:
    """A tile side uses an edge type that has no entry in the table."""
    tile_index: int
    direction: str
    edge: Any

    def describe(self) -> str:
        return f"Tile {self.tile_index} has {self.direction.title()} edge type {_edge_name(self.edge)} with no compatibility rule"


@dataclass(frozen=True)
class AsymmetricRule:
    """``edge -> partner`` is in the table but ``partner -> edge`` is not."""
    edge: Any
    partner: Any
    reverse: Optional[Any]

    def describe(self) -> str:
        back = _edge_name(self.reverse) if self.reverse is not None else "nothing"
        return (f"Edge compatibility is not symmetric: {_edge_name(self.edge)} -> {_edge_name(self.partner)}, "
                f"but {_edge_name(self.partner)} -> {back}")


def _edge_name(edge) -> str:
    return edge.name if isinstance(edge, EdgeType) else str(edge)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a table against a catalog. Falsy when any rule is broken."""
    violations: Tuple[Any, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.ok

    def missing_edges(self) -> List[MissingEdgeRule]:
        return [v for v in self.violations if isinstance(v, MissingEdgeRule)]

    def asymmetric_pairs(self) -> List[AsymmetricRule]:
        return [v for v in self.violations if isinstance(v, AsymmetricRule)]

    def messages(self) -> List[str]:
        return [v.describe() for v in self.violations]


class EdgeCompatibilityTable:
    """
    Read-only mapping of edge type -> the one edge type it may connect to.

    Lookups are directional: ``is_compatible(a, b)`` only consults the entry for ``a``.
    Whether the table is symmetric is a question for :meth:`validate`.
    """

    def __init__(self, rules: Optional[Mapping[Any, Any]] = None):
        self._rules: Dict[Any, Any] = dict(rules or {})

    @classmethod
    def identity(cls, edge_types=EdgeType) -> "EdgeCompatibilityTable":
        '''
        Returns the default table where every edge type connects to itself
        '''
        return cls({edge: edge for edge in edge_types})

    @classmethod
    def from_names(cls, rules: Mapping[str, str]) -> "EdgeCompatibilityTable":
        '''
        Builds a table from edge names, e.g. {"A": "A", "B": "C", "C": "B"}
        '''
        return cls({EdgeType.parse(a): EdgeType.parse(b) for a, b in rules.items()})

    def is_compatible(self, a, b) -> bool:
        partner = self._rules.get(a)
        if partner is None:
            return False
        return partner == b

    def partner(self, edge):
        return self._rules.get(edge)

    def __contains__(self, edge) -> bool:
        return edge in self._rules

    def __iter__(self) -> Iterator:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def items(self):
        return self._rules.items()

    def __eq__(self, other) -> bool:
        if not isinstance(other, EdgeCompatibilityTable):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self) -> str:
        pairs = ", ".join(f"{_edge_name(a)}={_edge_name(b)}" for a, b in self._rules.items())
        return f"EdgeCompatibilityTable({pairs})"

    def validate(self, catalog: TileCatalog) -> ValidationResult:
        '''
        Checks the table against a catalog: the catalog must not be empty,
        every edge used by a tile needs an entry, and every entry needs its reciprocal.
        Returns a report instead of raising; each violation is also logged as a warning.
        '''
        violations: list = []

        if len(catalog) == 0:
            violations.append(EmptyCatalog())
        else:
            for tile in catalog:
                for direction in CARDINAL:
                    edge = tile.edge(direction)
                    if edge not in self._rules:
                        violations.append(MissingEdgeRule(tile.index, direction, edge))

        for edge, partner in self._rules.items():
            reverse = self._rules.get(partner)
            if reverse != edge:
                violations.append(AsymmetricRule(edge, partner, reverse))

        for violation in violations:
            logger.warning(violation.describe())

        return ValidationResult(tuple(violations))


def parse_compatibility_rules(text: str) -> EdgeCompatibilityTable:
    '''
    Parses a compact rule string such as "A=A, B=C, C=B" into a table.
    Pairs are separated by commas, semicolons or newlines; ":" works as well as "=".
    '''
    rules: Dict[EdgeType, EdgeType] = {}
    for chunk in text.replace(";", ",").replace("\n", ",").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        sep = "=" if "=" in chunk else ":"
        if sep not in chunk:
            raise ConfigurationError(f"Rule {chunk!r} is not of the form EDGE=EDGE")
        left, right = (p.strip() for p in chunk.split(sep, 1))
        if not left or not right:
            raise ConfigurationError(f"Rule {chunk!r} is not of the form EDGE=EDGE")
        edge = EdgeType.parse(left)
        if edge in rules:
            raise ConfigurationError(f"Edge type {edge.name} has more than one rule")
        rules[edge] = EdgeType.parse(right)
    return EdgeCompatibilityTable(rules)
