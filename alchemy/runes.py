"""
Rune definitions and generation for All That Glitters.
A rune is either a normal color+symbol token, a wild rune or a skull.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    SKULL_CHANCE,
    WILD_CHANCE,
    ZODIAC_UNICODE,
    colors_for_board,
    symbols_for_board,
)


class RuneKind(Enum):
    """The three mutually exclusive kinds of rune."""
    NORMAL = 'normal'
    WILD = 'wild'
    SKULL = 'skull'


@dataclass(frozen=True)
class Rune:
    """Immutable rune value.

    Normal runes carry a color and a symbol. Wild and skull runes carry
    neither.
    """
    kind: RuneKind = RuneKind.NORMAL
    color: Optional[str] = None
    symbol: Optional[str] = None

    def __post_init__(self):
        if self.kind == RuneKind.NORMAL:
            if self.color is None or self.symbol is None:
                raise ValueError("Normal rune needs both a color and a symbol")
        elif self.color is not None or self.symbol is not None:
            raise ValueError(f"{self.kind.value} rune cannot have a color or symbol")

    @classmethod
    def normal(cls, color: str, symbol: str) -> 'Rune':
        return cls(RuneKind.NORMAL, color, symbol)

    @classmethod
    def wild(cls) -> 'Rune':
        return cls(RuneKind.WILD)

    @classmethod
    def skull(cls) -> 'Rune':
        return cls(RuneKind.SKULL)

    @property
    def is_wild(self) -> bool:
        return self.kind == RuneKind.WILD

    @property
    def is_skull(self) -> bool:
        return self.kind == RuneKind.SKULL

    @property
    def is_normal(self) -> bool:
        return self.kind == RuneKind.NORMAL

    def glyph(self) -> str:
        """Single character used by the text renderer."""
        if self.is_wild:
            return '*'
        if self.is_skull:
            return '☠'
        return ZODIAC_UNICODE.get(self.symbol, '?')

    def __str__(self):
        if self.is_normal:
            return f"{self.color} {self.symbol}"
        return self.kind.value


def create_rune(board: int, rng: Optional[random.Random] = None) -> Rune:
    """Draw a random rune for the given board tier.

    A single roll decides the kind: below WILD_CHANCE gives a wild rune,
    below WILD_CHANCE + SKULL_CHANCE a skull, otherwise a normal rune whose
    color and symbol come uniformly from the palettes unlocked on this board.
    """
    rng = rng or random.Random()
    roll = rng.random()
    if roll < WILD_CHANCE:
        return Rune.wild()
    if roll < WILD_CHANCE + SKULL_CHANCE:
        return Rune.skull()

    color = rng.choice(colors_for_board(board))
    symbol = rng.choice(symbols_for_board(board))
    return Rune.normal(color, symbol)


def shares_property(rune_a: Optional[Rune], rune_b: Optional[Rune]) -> bool:
    """Check whether two runes may sit next to each other.

    Wild runes match anything in both directions, skulls never match, and
    normal runes match on color or symbol.
    """
    if rune_a is None or rune_b is None:
        return False
    if rune_a.is_wild or rune_b.is_wild:
        return True
    if rune_a.is_skull or rune_b.is_skull:
        return False
    return rune_a.color == rune_b.color or rune_a.symbol == rune_b.symbol
