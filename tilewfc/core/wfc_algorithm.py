import logging
import random
from collections import deque
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from .edges import EdgeCompatibilityTable
from .errors import CellStateError
from .grid import Grid
from .tile import DIRECTIONS, OPPOSITE, TileCatalog

logger = logging.getLogger(__name__)

StepCallback = Callable[[Tuple[int, int], int], None]


class TerminationReason(Enum):
    COMPLETED = "completed"          # every cell collapsed
    STALLED = "stalled"              # no eligible cell left, some cells uncollapsed or contradicted
    ITERATION_CAP = "iteration_cap"  # ran out of iterations before finishing
    INVALID_RULES = "invalid_rules"  # validation failed, nothing was generated


def build_adjacency(catalog: TileCatalog, table: EdgeCompatibilityTable) -> Dict[str, Dict[int, Set[int]]]:
    '''
    For every direction and every tile, the set of tiles allowed to sit next to it in that direction.
    Tile j may sit at direction D of tile i when i's D edge is compatible with j's opposite edge.
    '''
    allowed = {d: {i: set() for i in range(len(catalog))} for d, _ in DIRECTIONS}
    for tile_a in catalog:                      # for each source tile
        for tile_b in catalog:                  # for each neighbor tile
            for direction, _ in DIRECTIONS:     # for each direction
                edge_a = tile_a.edge(direction)
                edge_b = tile_b.edge(OPPOSITE[direction])
                if table.is_compatible(edge_a, edge_b):
                    allowed[direction][tile_a.index].add(tile_b.index)
    return allowed


class WFCEngine:
    """
    Runs select -> collapse -> propagate over a grid until it is fully collapsed,
    stuck, or out of iterations. No backtracking: contradicted cells stay empty.
    """

    def __init__(self, grid: Grid, catalog: TileCatalog, table: EdgeCompatibilityTable,
                 rng: Optional[random.Random] = None, step_callback: Optional[StepCallback] = None):
        self.grid = grid
        self.catalog = catalog
        self.table = table
        self.rng = rng if rng is not None else random.Random()
        self.step_callback = step_callback
        self.adj = build_adjacency(catalog, table)

        # indices of the cells that propagation emptied, in the order it happened
        self.contradictions: List[int] = []

    def find_lowest_entropy_cell(self) -> Optional[int]:
        '''
        Returns the index of the uncollapsed, non-contradicted cell with the fewest possible tiles.
        Ties go to the first one in scan order. None when no cell qualifies.
        '''
        best_idx = None
        best_entropy = None

        for idx, cell in enumerate(self.grid.cells):
            # collapsed cells are done, empty ones can't be collapsed
            if cell.collapsed or not cell.possible_states:
                continue

            entropy = len(cell.possible_states)
            if best_entropy is None or entropy < best_entropy:
                best_entropy = entropy
                best_idx = idx

        return best_idx

    def collapse_cell(self, idx: int) -> int:
        '''
        Commits the cell at idx to one of its possible tiles, picked uniformly at random.
        Returns the chosen tile index.
        '''
        cell = self.grid[idx]

        if cell.collapsed:
            raise CellStateError(f"Cell {idx} is already collapsed to tile {cell.final_state}")
        if not cell.possible_states:
            raise CellStateError(f"Cell {idx} has no possible tiles left")

        # sorted so the same seed always picks the same tile
        choice = self.rng.choice(sorted(cell.possible_states))
        cell.possible_states = {choice}
        cell.final_state = choice
        cell.collapsed = True

        logger.debug("Collapsed cell %s to tile %d", self.grid.coord_of_index(idx), choice)
        return choice

    def propagate_constraints(self, origin_idx: int) -> None:
        '''
        Narrows the neighbors of origin_idx to the tiles its remaining states allow,
        then keeps going outward from every cell that changed (breadth first).
        A neighbor narrowed to a single tile is collapsed; one narrowed to nothing
        is left empty as a contradiction and the pass carries on.
        '''
        if not 0 <= origin_idx < len(self.grid):
            raise IndexError(f"Cell index {origin_idx} outside grid of {len(self.grid)} cells")

        q = deque([origin_idx])
        queued = {origin_idx}

        while q:
            idx = q.popleft()
            queued.discard(idx)

            possible_tiles_for_cell = self.grid.cells[idx].possible_states

            # a contradicted cell allows nothing; skipping it keeps the damage local
            if not possible_tiles_for_cell:
                continue

            for direction, neighbor_idx in self.grid.neighbors(idx):
                neighbor = self.grid.cells[neighbor_idx]

                if neighbor.collapsed or not neighbor.possible_states:
                    continue

                allowed_for_neighbor = set()
                for tile_idx in possible_tiles_for_cell:
                    allowed_for_neighbor.update(self.adj[direction][tile_idx])

                tiles_in_common = neighbor.possible_states & allowed_for_neighbor
                if len(tiles_in_common) == len(neighbor.possible_states):
                    continue

                neighbor.possible_states = tiles_in_common

                if len(tiles_in_common) == 1:
                    neighbor.collapsed = True
                    neighbor.final_state = next(iter(tiles_in_common))
                elif not tiles_in_common:
                    self.contradictions.append(neighbor_idx)
                    logger.debug("Contradiction at cell %s", self.grid.coord_of_index(neighbor_idx))

                if neighbor_idx not in queued:
                    q.append(neighbor_idx)
                    queued.add(neighbor_idx)

    def run(self, max_iterations: Optional[int] = None) -> Tuple[TerminationReason, int]:
        '''
        Loops select -> collapse -> propagate.
        Returns why it stopped and how many cells were collapsed by choice.
        '''
        if max_iterations is None:
            max_iterations = len(self.grid) * 10

        iterations = 0
        while iterations < max_iterations:
            if self.grid.is_fully_collapsed():
                return TerminationReason.COMPLETED, iterations

            idx = self.find_lowest_entropy_cell()
            if idx is None:
                return TerminationReason.STALLED, iterations

            tile_idx = self.collapse_cell(idx)
            if self.step_callback:
                self.step_callback(self.grid.coord_of_index(idx), tile_idx)

            self.propagate_constraints(idx)
            iterations += 1

        if self.grid.is_fully_collapsed():
            return TerminationReason.COMPLETED, iterations

        logger.warning("Wave Function Collapse reached max iterations (%d). Grid may be incomplete.", max_iterations)
        return TerminationReason.ITERATION_CAP, iterations
