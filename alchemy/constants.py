"""
Game constants for All That Glitters.
Palettes, board-tier lookups, scoring formulas and special rune chances.
"""

from typing import Dict, List


# Zodiac symbols, in unlock order
ZODIAC_SYMBOLS = [
    'aries',
    'taurus',
    'gemini',
    'cancer',
    'leo',
    'virgo',
    'libra',
    'scorpio',
    'sagittarius',
    'capricorn',
    'aquarius',
    'pisces',
]

ZODIAC_UNICODE = {
    'aries': '♈',
    'taurus': '♉',
    'gemini': '♊',
    'cancer': '♋',
    'leo': '♌',
    'virgo': '♍',
    'libra': '♎',
    'scorpio': '♏',
    'sagittarius': '♐',
    'capricorn': '♑',
    'aquarius': '♒',
    'pisces': '♓',
}

# Rune colors, in unlock order
RUNE_COLORS = [
    'crimson',
    'azure',
    'amber',
    'emerald',
    'violet',
    'coral',
    'teal',
    'rose',
]

# Special rune chances (0-1)
WILD_CHANCE = 0.03
SKULL_CHANCE = 0.02

# Default geometry
DEFAULT_GRID_WIDTH = 9
DEFAULT_GRID_HEIGHT = 8
DEFAULT_FORGE_CAPACITY = 3
DEFAULT_CELL_SIZE = 48
STARTING_RUNE_X = 4
STARTING_RUNE_Y = 3

# Skill levels: starting board
SKILL_LEVELS: Dict[int, Dict] = {
    1: {'start_board': 1, 'label': 'Apprentice'},
    2: {'start_board': 4, 'label': 'Adept'},
    3: {'start_board': 7, 'label': 'Master'},
}


def symbol_count_for_board(board: int) -> int:
    """Number of zodiac symbols in play on a board.

    Board 1-3: 5 symbols, board 4-6: 8 symbols, board 7+: all 12.
    """
    if board <= 3:
        return 5
    if board <= 6:
        return 8
    return len(ZODIAC_SYMBOLS)


def color_count_for_board(board: int) -> int:
    """Number of rune colors in play on a board (4, 5, then all 8)."""
    if board <= 3:
        return 4
    if board <= 6:
        return 5
    return len(RUNE_COLORS)


def symbols_for_board(board: int) -> List[str]:
    return ZODIAC_SYMBOLS[:symbol_count_for_board(board)]


def colors_for_board(board: int) -> List[str]:
    return RUNE_COLORS[:color_count_for_board(board)]


# Scoring grows every three boards
def placement_points(board: int) -> int:
    """Points for placing a rune: 10, 10, 10, 12, 12, 12, 14..."""
    return 10 + ((board - 1) // 3) * 2


def row_clear_points(board: int) -> int:
    """Points per cleared row or column: 25, 25, 25, 30, 30, 30, 35..."""
    return 25 + ((board - 1) // 3) * 5


def board_clear_points(board: int) -> int:
    """Points for turning a whole board gold: 50, 60, 70..."""
    return 50 + (board - 1) * 10
