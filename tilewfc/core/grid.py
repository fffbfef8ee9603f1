from dataclasses import dataclass, field
from typing import Generator, Iterator, List, Optional, Set, Tuple

from .tile import DIRECTIONS


@dataclass
class Cell:
    """
    One grid position.

    ``possible_states`` only ever shrinks. A cell is collapsed once it holds a
    single state; an empty set with ``collapsed`` False is a contradiction.
    """
    possible_states: Set[int] = field(default_factory=set)
    collapsed: bool = False
    final_state: Optional[int] = None

    @property
    def entropy(self) -> int:
        return len(self.possible_states)

    @property
    def is_contradicted(self) -> bool:
        return not self.collapsed and not self.possible_states


class Grid:
    def __init__(self, width: int, height: int, catalog_size: int = 0):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.cells: List[Cell] = []
        self.initialize(catalog_size)

    def initialize(self, catalog_size: int) -> None:
        '''
        Puts every cell back into full superposition (all catalog indices possible)
        '''
        self.cells = [Cell(set(range(catalog_size))) for _ in range(self.width * self.height)]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> Cell:
        if not 0 <= index < len(self.cells):
            raise IndexError(f"Cell index {index} outside grid of {len(self.cells)} cells")
        return self.cells[index]

    def index_of_cell(self, x: int, y: int) -> int:
        '''
        Returns the linear index of the cell at x, y (index = y * width + x)
        '''
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x

    def coord_of_index(self, index: int) -> Tuple[int, int]:
        '''
        Returns the x, y position of the cell at a linear index
        '''
        if not 0 <= index < len(self.cells):
            raise IndexError(f"Cell index {index} outside grid of {len(self.cells)} cells")
        return index % self.width, index // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, index: int) -> Generator[Tuple[str, int], None, None]:
        '''
        Yields (direction, neighbor_index) for each neighbor inside the grid
        '''
        x, y = self.coord_of_index(index)
        for direction, (dx, dy) in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield direction, ny * self.width + nx

    def is_fully_collapsed(self) -> bool:
        return all(cell.collapsed for cell in self.cells)

    def contradicted_indices(self) -> List[int]:
        return [i for i, cell in enumerate(self.cells) if cell.is_contradicted]

    def collapsed_count(self) -> int:
        return sum(1 for cell in self.cells if cell.collapsed)
