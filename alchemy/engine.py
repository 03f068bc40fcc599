"""
Rules engine for All That Glitters.
Owns the grid, the current rune, the forge and scoring, and advances one
discrete player action at a time.
"""

import copy
import logging
import math
import random
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_FORGE_CAPACITY,
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
    SKILL_LEVELS,
    STARTING_RUNE_X,
    STARTING_RUNE_Y,
    board_clear_points,
    placement_points,
    row_clear_points,
)
from .exceptions import InvalidConfigException
from .grid import Cell, CellState, Grid
from .rankings import get_ranking
from .runes import Rune, create_rune, shares_property

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Configuration for a game."""
    grid_width: int = DEFAULT_GRID_WIDTH
    grid_height: int = DEFAULT_GRID_HEIGHT
    forge_capacity: int = DEFAULT_FORGE_CAPACITY
    cell_size: int = DEFAULT_CELL_SIZE  # Pixel hint for input mapping only
    skill_level: Optional[int] = None  # Overrides start_board when set
    start_board: int = 1
    origin: Tuple[int, int] = (STARTING_RUNE_X, STARTING_RUNE_Y)
    seed: Optional[int] = None

    def resolved_start_board(self) -> int:
        if self.skill_level is not None:
            return SKILL_LEVELS[self.skill_level]['start_board']
        return self.start_board

    def validate(self):
        """Raise InvalidConfigException if the config cannot describe a game."""
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise InvalidConfigException(
                f"Grid must be at least 1x1, got {self.grid_width}x{self.grid_height}"
            )
        if self.forge_capacity < 0:
            raise InvalidConfigException(f"Forge capacity cannot be negative: {self.forge_capacity}")
        if self.cell_size <= 0:
            raise InvalidConfigException(f"Cell size must be positive: {self.cell_size}")
        if self.skill_level is not None and self.skill_level not in SKILL_LEVELS:
            raise InvalidConfigException(f"Unknown skill level: {self.skill_level}")
        if self.start_board < 1:
            raise InvalidConfigException(f"Boards are numbered from 1, got {self.start_board}")
        ox, oy = self.origin
        if not (0 <= ox < self.grid_width and 0 <= oy < self.grid_height):
            raise InvalidConfigException(f"Origin {self.origin} lies outside the grid")


class PlacementResult(NamedTuple):
    """Outcome of place_rune."""
    placed: bool
    row_column_cleared: bool


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the engine for renderers and bots."""
    grid: Tuple[Tuple[Cell, ...], ...]
    current_rune: Optional[Rune]
    forge: Tuple[Rune, ...]
    forge_capacity: int
    score: int
    board: int
    placement_streak: int
    max_placement_streak: int
    boards_cleared: int
    selected_cell: Optional[Tuple[int, int]]
    game_over: bool
    level_complete: bool
    stats: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


class AlchemyEngine:
    """Main rules engine."""

    def __init__(self, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.config = config or GameConfig()
        try:
            self.config.validate()
        except InvalidConfigException as e:
            logger.debug("Rejected config %s: %s", self.config, e)
            raise

        self.rng = rng or random.Random(self.config.seed)
        self.clock = clock or time.time

        self.grid_width = self.config.grid_width
        self.grid_height = self.config.grid_height
        self.forge_capacity = self.config.forge_capacity
        self.cell_size = self.config.cell_size
        self.grid = Grid(self.grid_width, self.grid_height)

        # Game state
        self.current_rune: Optional[Rune] = None
        self._forge: List[Rune] = []
        self.selected_cell: Optional[Tuple[int, int]] = None
        self.board = self.config.resolved_start_board()
        self.score = 0
        self.game_start_time = 0.0

        # Game stats
        self.placement_streak = 0
        self.max_placement_streak = 0
        self.boards_cleared = 0
        self.runes_placed = 0
        self.lines_cleared = 0
        self.skulls_used = 0
        self.discards = 0
        self._board_completed = False

        # Callbacks
        self.on_rune_placed: Optional[Callable[[int, int, Rune], None]] = None
        self.on_line_cleared: Optional[Callable[[List[int], List[int]], None]] = None
        self.on_board_completed: Optional[Callable[[int, int], None]] = None

        self.init()

    @property
    def forge(self) -> Tuple[Rune, ...]:
        """Forge contents, oldest first."""
        return tuple(self._forge)

    def init(self, preserve_score: bool = False):
        """Reset the game. Without preserve_score this is a brand new game."""
        if not preserve_score:
            self.score = 0
            self.board = self.config.resolved_start_board()
            self.placement_streak = 0
            self.max_placement_streak = 0
            self.boards_cleared = 0
            self.runes_placed = 0
            self.lines_cleared = 0
            self.skulls_used = 0
            self.discards = 0
            self.game_start_time = self.clock()
        self._forge = []
        self._reset_round()
        logger.debug("Game initialised on board %d (score %d)", self.board, self.score)

    def _reset_round(self):
        """Empty the grid, seed the origin wild rune and draw a rune."""
        self.grid.reset()
        ox, oy = self.config.origin
        self.grid.set_rune(ox, oy, Rune.wild())
        self.current_rune = self._draw_rune()
        self.selected_cell = None
        self._board_completed = False

    def start_new_round(self):
        """Start the next board, keeping score, stats and all but one forge slot."""
        self.board += 1
        self.clear_forge_slot()
        self._reset_round()
        logger.debug("Round started on board %d", self.board)

    def _draw_rune(self) -> Rune:
        return create_rune(self.board, self.rng)

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get a snapshot of the cell at grid coordinates."""
        return self.grid.get_cell(x, y)

    def get_adjacent_cells(self, x: int, y: int) -> List[Cell]:
        """Get adjacent cells (horizontal/vertical only)."""
        return self.grid.get_adjacent_cells(x, y)

    def can_place_at(self, x: int, y: int) -> bool:
        """Check if the current rune can be placed at (x, y).

        The rune must share a property with every adjacent rune. With no
        adjacent runes the move is only legal on a completely empty grid.
        """
        if not self.grid.in_bounds(x, y) or self.grid.rune_at(x, y) is not None:
            return False
        if self.current_rune is None or self.current_rune.is_skull:
            return False

        neighbour_runes = [
            self.grid.rune_at(nx, ny)
            for nx, ny in self.grid.get_adjacent_positions(x, y)
            if self.grid.rune_at(nx, ny) is not None
        ]
        if not neighbour_runes:
            return self.grid.is_empty()

        return all(shares_property(self.current_rune, rune) for rune in neighbour_runes)

    def place_rune(self, x: int, y: int) -> PlacementResult:
        """Place the current rune at the given position."""
        if not self.can_place_at(x, y):
            return PlacementResult(False, False)

        rune = self.current_rune
        self.grid.set_rune(x, y, rune)
        self.score += placement_points(self.board)
        self.runes_placed += 1
        self.placement_streak += 1
        self.max_placement_streak = max(self.max_placement_streak, self.placement_streak)
        self.on_successful_placement()
        logger.debug("Placed %s at (%d, %d), score %d", rune, x, y, self.score)

        if self.on_rune_placed:
            self.on_rune_placed(x, y, rune)

        # Drawn before the clear pass, which may swap it for a wild rune
        self.current_rune = self._draw_rune()
        cleared = self.check_row_column_bonuses()
        self.selected_cell = None
        return PlacementResult(True, cleared)

    def check_row_column_bonuses(self) -> bool:
        """Clear every full row and column to gold and award line points.

        Rows and columns are both judged against the grid as it was before
        any clearing, so a cell can be cleared by its row and its column at
        once. Any clear empties the forge.
        """
        rows = self.grid.full_rows()
        columns = self.grid.full_columns()
        if not rows and not columns:
            return False

        points = row_clear_points(self.board)
        for y in rows:
            self.score += points
            self.grid.clear_line_to_gold(self.grid.row_positions(y))
        for x in columns:
            self.score += points
            self.grid.clear_line_to_gold(self.grid.column_positions(x))
        self.lines_cleared += len(rows) + len(columns)
        logger.debug("Cleared rows %s and columns %s on board %d", rows, columns, self.board)

        if self.grid.is_empty() and not self.grid.is_all_gold():
            self.current_rune = Rune.wild()
            logger.debug("Board wiped clean, granting a wild rune")

        self._forge = []

        if self.on_line_cleared:
            self.on_line_cleared(rows, columns)
        return True

    def discard_to_forge(self) -> bool:
        """Discard the current rune to the forge."""
        if self.current_rune is None or self.is_forge_full():
            return False

        self._forge.append(self.current_rune)
        self.current_rune = self._draw_rune()
        self.placement_streak = 0
        self.discards += 1
        self.selected_cell = None
        logger.debug("Discarded to forge (%d/%d)", len(self._forge), self.forge_capacity)
        return True

    def clear_forge_slot(self) -> bool:
        """Free the most recently filled forge slot, if any."""
        if self._forge:
            self._forge.pop()
            return True
        return False

    def on_successful_placement(self):
        """Each successful board action frees one forge slot."""
        self.clear_forge_slot()

    def can_skull_remove_at(self, x: int, y: int) -> bool:
        """A skull can remove any rune except a wild one."""
        if self.current_rune is None or not self.current_rune.is_skull:
            return False
        rune = self.grid.rune_at(x, y)
        return rune is not None and not rune.is_wild

    def use_skull_to_remove(self, x: int, y: int) -> bool:
        """Spend the current skull rune to remove the rune at (x, y)."""
        if not self.can_skull_remove_at(x, y):
            return False

        removed = self.grid.clear_rune(x, y)
        self.current_rune = self._draw_rune()
        self.skulls_used += 1
        self.on_successful_placement()
        self.selected_cell = None
        logger.debug("Skull removed %s at (%d, %d)", removed, x, y)
        return True

    def can_act_at(self, x: int, y: int) -> bool:
        """Whether the current rune can be used on (x, y), placement or skull."""
        if self.current_rune is not None and self.current_rune.is_skull:
            return self.can_skull_remove_at(x, y)
        return self.can_place_at(x, y)

    def valid_actions(self) -> List[Tuple[int, int]]:
        """All cells where the current rune can be placed or used."""
        return [
            (x, y)
            for y in range(self.grid_height)
            for x in range(self.grid_width)
            if self.can_act_at(x, y)
        ]

    def has_valid_placement(self) -> bool:
        """Check if the current rune can be placed or used anywhere."""
        if self.current_rune is None:
            return False
        for y in range(self.grid_height):
            for x in range(self.grid_width):
                if self.can_act_at(x, y):
                    return True
        return False

    def is_forge_full(self) -> bool:
        return len(self._forge) >= self.forge_capacity

    def is_game_over(self) -> bool:
        """Game over: forge is full and the current rune has nowhere to go."""
        return self.is_forge_full() and not self.has_valid_placement()

    def is_level_complete(self) -> bool:
        """Level complete: every cell is gold."""
        return self.grid.is_all_gold()

    def complete_board(self) -> bool:
        """Award the board clear bonus once per completed board."""
        if self._board_completed or not self.is_level_complete():
            return False

        points = board_clear_points(self.board)
        self.score += points
        self.boards_cleared += 1
        self._board_completed = True
        logger.debug("Board %d complete, +%d", self.board, points)

        if self.on_board_completed:
            self.on_board_completed(self.board, points)
        return True

    def select_cell(self, x: int, y: int) -> bool:
        """Set the hover hint if the current rune could act there."""
        if self.can_act_at(x, y):
            self.selected_cell = (x, y)
            return True
        self.selected_cell = None
        return False

    def screen_to_grid(self, screen_x: float, screen_y: float,
                       offset_x: float = 0, offset_y: float = 0) -> Tuple[int, int]:
        """Convert screen coordinates to grid coordinates. Not bounds checked."""
        x = math.floor((screen_x - offset_x) / self.cell_size)
        y = math.floor((screen_y - offset_y) / self.cell_size)
        return x, y

    def get_game_time_seconds(self) -> int:
        """Whole seconds since the game started."""
        return int(self.clock() - self.game_start_time)

    def get_stats(self) -> Dict[str, Any]:
        """Get current game statistics."""
        return {
            'board': self.board,
            'score': self.score,
            'rank': get_ranking(self.score).title,
            'boards_cleared': self.boards_cleared,
            'runes_placed': self.runes_placed,
            'lines_cleared': self.lines_cleared,
            'skulls_used': self.skulls_used,
            'discards': self.discards,
            'placement_streak': self.placement_streak,
            'max_placement_streak': self.max_placement_streak,
            'forge': len(self._forge),
            'gold_cells': self.grid.gold_count(),
            'game_time': self.get_game_time_seconds(),
        }

    def get_game_state(self) -> GameState:
        """Get an immutable snapshot of the current game."""
        return GameState(
            grid=self.grid.snapshot(),
            current_rune=self.current_rune,
            forge=self.forge,
            forge_capacity=self.forge_capacity,
            score=self.score,
            board=self.board,
            placement_streak=self.placement_streak,
            max_placement_streak=self.max_placement_streak,
            boards_cleared=self.boards_cleared,
            selected_cell=self.selected_cell,
            game_over=self.is_game_over(),
            level_complete=self.is_level_complete(),
            stats=MappingProxyType({
                'runes_placed': self.runes_placed,
                'lines_cleared': self.lines_cleared,
                'skulls_used': self.skulls_used,
                'discards': self.discards,
            }),
        )

    def copy(self) -> 'AlchemyEngine':
        """Independent copy for look-ahead. Callbacks are not carried over."""
        clone = AlchemyEngine.__new__(AlchemyEngine)
        clone.__dict__.update(self.__dict__)
        clone.grid = self.grid.copy()
        clone._forge = list(self._forge)
        clone.rng = copy.deepcopy(self.rng)
        clone.on_rune_placed = None
        clone.on_line_cleared = None
        clone.on_board_completed = None
        return clone

    def __str__(self):
        """String representation of the game state."""
        forge = " ".join(str(r) for r in self._forge) or "-"
        result = []
        result.append(f"Board: {self.board}")
        result.append(f"Score: {self.score}")
        result.append(f"Rune: {self.current_rune}")
        result.append(f"Forge: [{len(self._forge)}/{self.forge_capacity}] {forge}")
        result.append("")
        result.append(str(self.grid))
        return "\n".join(result)
