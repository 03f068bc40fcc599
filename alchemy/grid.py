"""
Grid state management for All That Glitters.
Handles cell states, rune occupancy and full-line detection.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .runes import Rune


class CellState(IntEnum):
    """Background state of a cell. GOLD is permanent for the round."""
    LEAD = 0
    GOLD = 1


@dataclass(frozen=True)
class Cell:
    """Read-only snapshot of a single grid cell."""
    x: int
    y: int
    state: CellState
    rune: Optional[Rune]

    @property
    def is_gold(self) -> bool:
        return self.state == CellState.GOLD

    @property
    def has_rune(self) -> bool:
        return self.rune is not None


class Grid:
    """Fixed-size grid of cells.

    Cell states and occupancy are numpy arrays indexed [y, x]; runes live in a
    flat list indexed y * width + x. The number of runes on the grid is kept
    up to date on every change so emptiness checks never rescan the board.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.states = np.zeros((height, width), dtype=np.int8)
        self.occupied = np.zeros((height, width), dtype=bool)
        self._runes: List[Optional[Rune]] = [None] * (width * height)
        self.rune_count = 0

    def reset(self):
        """Reset every cell to LEAD with no rune."""
        self.states.fill(CellState.LEAD)
        self.occupied.fill(False)
        self._runes = [None] * (self.width * self.height)
        self.rune_count = 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get a snapshot of the cell at (x, y), or None when out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return Cell(x, y, CellState(int(self.states[y, x])), self._runes[self._index(x, y)])

    def rune_at(self, x: int, y: int) -> Optional[Rune]:
        if not self.in_bounds(x, y):
            return None
        return self._runes[self._index(x, y)]

    def state_at(self, x: int, y: int) -> CellState:
        return CellState(int(self.states[y, x]))

    def set_rune(self, x: int, y: int, rune: Rune):
        """Put a rune into a cell, replacing whatever was there."""
        idx = self._index(x, y)
        if self._runes[idx] is None:
            self.rune_count += 1
        self._runes[idx] = rune
        self.occupied[y, x] = True

    def clear_rune(self, x: int, y: int) -> Optional[Rune]:
        """Remove and return the rune in a cell."""
        idx = self._index(x, y)
        rune = self._runes[idx]
        if rune is not None:
            self.rune_count -= 1
        self._runes[idx] = None
        self.occupied[y, x] = False
        return rune

    def set_state(self, x: int, y: int, state: CellState):
        self.states[y, x] = state

    def get_adjacent_positions(self, x: int, y: int) -> List[Tuple[int, int]]:
        """Orthogonal neighbours of (x, y) that exist on the grid."""
        neighbours = []
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                neighbours.append((nx, ny))
        return neighbours

    def get_adjacent_cells(self, x: int, y: int) -> List[Cell]:
        return [self.get_cell(nx, ny) for nx, ny in self.get_adjacent_positions(x, y)]

    def full_rows(self) -> List[int]:
        """Indices of rows where every cell holds a rune."""
        return [int(y) for y in np.flatnonzero(self.occupied.all(axis=1))]

    def full_columns(self) -> List[int]:
        """Indices of columns where every cell holds a rune."""
        return [int(x) for x in np.flatnonzero(self.occupied.all(axis=0))]

    def clear_line_to_gold(self, positions: List[Tuple[int, int]]):
        """Turn the given cells gold and empty them."""
        for x, y in positions:
            self.clear_rune(x, y)
            self.set_state(x, y, CellState.GOLD)

    def row_positions(self, y: int) -> List[Tuple[int, int]]:
        return [(x, y) for x in range(self.width)]

    def column_positions(self, x: int) -> List[Tuple[int, int]]:
        return [(x, y) for y in range(self.height)]

    def is_empty(self) -> bool:
        return self.rune_count == 0

    def is_all_gold(self) -> bool:
        return bool(np.all(self.states == CellState.GOLD))

    def gold_count(self) -> int:
        return int(np.count_nonzero(self.states == CellState.GOLD))

    def iter_cells(self) -> Iterator[Cell]:
        """Iterate over cell snapshots row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield self.get_cell(x, y)

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        """Immutable copy of the whole grid, one tuple per row."""
        return tuple(
            tuple(self.get_cell(x, y) for x in range(self.width))
            for y in range(self.height)
        )

    def copy(self) -> 'Grid':
        clone = Grid(self.width, self.height)
        clone.states = self.states.copy()
        clone.occupied = self.occupied.copy()
        clone._runes = list(self._runes)
        clone.rune_count = self.rune_count
        return clone

    def __str__(self):
        """String representation of the grid."""
        result = []
        for y in range(self.height):
            row = ""
            for x in range(self.width):
                rune = self._runes[self._index(x, y)]
                if rune is not None:
                    row += rune.glyph()
                elif self.states[y, x] == CellState.GOLD:
                    row += "█"
                else:
                    row += "·"
            result.append(row)
        return "\n".join(result)

    def __repr__(self):
        return f"Grid({self.width}x{self.height}, runes={self.rune_count}, gold={self.gold_count()})"
