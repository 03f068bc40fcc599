"""
Rules engine for All That Glitters.
Contains the rune model, the grid, scoring tables and the game engine.
"""

from .engine import AlchemyEngine, GameConfig, GameState, PlacementResult
from .grid import Cell, CellState, Grid
from .runes import Rune, RuneKind, create_rune, shares_property
from .rankings import Ranking, get_ranking
from .exceptions import InvalidConfigException

__all__ = [
    'AlchemyEngine', 'GameConfig', 'GameState', 'PlacementResult',
    'Cell', 'CellState', 'Grid',
    'Rune', 'RuneKind', 'create_rune', 'shares_property',
    'Ranking', 'get_ranking',
    'InvalidConfigException',
]
