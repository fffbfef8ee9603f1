from __future__ import annotations

from collections.abc import Iterator

import pytest

from tilewfc.core.edges import EdgeCompatibilityTable
from tilewfc.core.tile import EdgeType, TileCatalog
from tilewfc.logging_config import teardown_logging

A, B, C, D = EdgeType.A, EdgeType.B, EdgeType.C, EdgeType.D


@pytest.fixture
def identity_table() -> EdgeCompatibilityTable:
    return EdgeCompatibilityTable.identity()


@pytest.fixture
def uniform_catalog() -> TileCatalog:
    """A single tile with the same edge type on every side."""
    return TileCatalog.from_edges([(A, A, A, A, "floor")])


@pytest.fixture
def exclusive_catalog() -> TileCatalog:
    """Two tiles that only ever match themselves."""
    return TileCatalog.from_edges([(A, A, A, A, "grass"), (B, B, B, B, "water")])


@pytest.fixture
def stripe_catalog() -> TileCatalog:
    """Solid A, solid B and two half-and-half tiles (N, E, S, W)."""
    return TileCatalog.from_edges([
        (A, A, A, A, "solid_a"),
        (B, B, B, B, "solid_b"),
        (A, B, A, B, "stripe_ns"),
        (B, A, B, A, "stripe_ew"),
    ])


@pytest.fixture(autouse=True)
def reset_tilewfc_logger() -> Iterator[None]:
    """Leave the package logger the way the package configured it."""
    yield
    teardown_logging()
