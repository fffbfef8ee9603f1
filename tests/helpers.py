from __future__ import annotations

from collections.abc import Iterator

from tilewfc.core.edges import EdgeCompatibilityTable
from tilewfc.core.generator import GenerationResult
from tilewfc.core.tile import TileCatalog


def adjacent_pairs(width: int, height: int) -> Iterator[tuple[int, int, str]]:
    """Yield (index, neighbor_index, axis) for every east and south neighbor pair."""
    for y in range(height):
        for x in range(width):
            idx = y * width + x
            if x + 1 < width:
                yield idx, idx + 1, "horizontal"
            if y + 1 < height:
                yield idx, idx + width, "vertical"


def incompatible_collapsed_pairs(
    result: GenerationResult, catalog: TileCatalog, table: EdgeCompatibilityTable
) -> list[tuple[int, int]]:
    """Return every pair of adjacent collapsed cells whose touching edges don't match."""
    assert result.grid is not None
    cells = result.grid.cells
    bad = []
    for idx, n_idx, axis in adjacent_pairs(result.width, result.height):
        if not (cells[idx].collapsed and cells[n_idx].collapsed):
            continue
        tile = catalog[cells[idx].final_state]
        neighbor = catalog[cells[n_idx].final_state]
        if axis == "horizontal":
            ok = table.is_compatible(tile.east, neighbor.west)
        else:
            ok = table.is_compatible(tile.south, neighbor.north)
        if not ok:
            bad.append((idx, n_idx))
    return bad
