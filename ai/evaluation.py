"""
Heuristic evaluation for the All That Glitters bot.
Scores candidate actions by simulating them on a copy of the engine.
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np

from alchemy.constants import colors_for_board, symbols_for_board
from alchemy.engine import AlchemyEngine


@dataclass
class HeuristicWeights:
    """Weights for the move evaluation heuristics."""
    points: float = 0.05
    lines_cleared: float = 4.0
    gold: float = 0.5
    frontier: float = 0.3
    near_complete: float = 0.8
    forge: float = -1.5
    dead_cells: float = -0.6


class MoveEvaluator:
    """Evaluates grid positions and candidate moves."""

    def __init__(self, weights: HeuristicWeights = None):
        self.weights = weights or HeuristicWeights()

    def get_frontier(self, engine: AlchemyEngine) -> np.ndarray:
        """Empty cells orthogonally next to at least one rune."""
        occupied = engine.grid.occupied
        touching = np.zeros_like(occupied)
        touching[1:, :] |= occupied[:-1, :]
        touching[:-1, :] |= occupied[1:, :]
        touching[:, 1:] |= occupied[:, :-1]
        touching[:, :-1] |= occupied[:, 1:]
        return touching & ~occupied

    def count_dead_cells(self, engine: AlchemyEngine) -> int:
        """Empty cells where no normal rune from the board's palette fits.

        A candidate fits when it shares a color or a symbol with every normal
        neighbour. Only a wild rune can be placed in a dead cell.
        """
        grid = engine.grid
        candidates = [
            (color, symbol)
            for color in colors_for_board(engine.board)
            for symbol in symbols_for_board(engine.board)
        ]
        dead = 0
        for y in range(grid.height):
            for x in range(grid.width):
                if grid.rune_at(x, y) is not None:
                    continue
                runes = [
                    grid.rune_at(nx, ny)
                    for nx, ny in grid.get_adjacent_positions(x, y)
                    if grid.rune_at(nx, ny) is not None and grid.rune_at(nx, ny).is_normal
                ]
                if len(runes) < 2:
                    continue
                if not any(
                    all(r.color == color or r.symbol == symbol for r in runes)
                    for color, symbol in candidates
                ):
                    dead += 1
        return dead

    def count_near_complete_lines(self, engine: AlchemyEngine) -> int:
        """Rows and columns missing exactly one rune."""
        occupied = engine.grid.occupied
        rows = np.sum(occupied.sum(axis=1) == engine.grid_width - 1)
        columns = np.sum(occupied.sum(axis=0) == engine.grid_height - 1)
        return int(rows + columns)

    def evaluate_position(self, engine: AlchemyEngine) -> float:
        """Evaluate the grid as it stands, ignoring the score."""
        w = self.weights
        score = 0.0
        score += w.gold * engine.grid.gold_count()
        score += w.frontier * int(np.count_nonzero(self.get_frontier(engine)))
        score += w.near_complete * self.count_near_complete_lines(engine)
        score += w.forge * len(engine.forge)
        score += w.dead_cells * self.count_dead_cells(engine)
        return score

    def evaluate_placement(self, engine: AlchemyEngine, x: int, y: int) -> float:
        """Evaluate placing (or spending a skull) at (x, y)."""
        trial = engine.copy()
        if engine.current_rune is not None and engine.current_rune.is_skull:
            done = trial.use_skull_to_remove(x, y)
        else:
            done = trial.place_rune(x, y).placed
        if not done:
            return float('-inf')

        w = self.weights
        score = self.evaluate_position(trial)
        score += w.points * (trial.score - engine.score)
        score += w.lines_cleared * (trial.lines_cleared - engine.lines_cleared)
        return score

    def evaluate_discard(self, engine: AlchemyEngine) -> float:
        """Evaluate sending the current rune to the forge."""
        trial = engine.copy()
        if not trial.discard_to_forge():
            return float('-inf')
        return self.evaluate_position(trial)

    def get_detailed_evaluation(self, engine: AlchemyEngine) -> Dict[str, float]:
        """Get the individual features behind evaluate_position."""
        return {
            'gold_cells': engine.grid.gold_count(),
            'frontier': int(np.count_nonzero(self.get_frontier(engine))),
            'near_complete_lines': self.count_near_complete_lines(engine),
            'forge': len(engine.forge),
            'dead_cells': self.count_dead_cells(engine),
            'overall_score': self.evaluate_position(engine),
        }
