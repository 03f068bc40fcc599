"""
Score rankings for All That Glitters.
"""

import math
from typing import List, NamedTuple, Optional, Tuple


class Ranking(NamedTuple):
    """Rank title for a score and the score that unlocks the next title."""
    title: str
    next_at: Optional[int]


# (min score, max score, title)
RANKINGS: List[Tuple[int, float, str]] = [
    (0, 399, 'Cursed'),
    (400, 699, 'Bungler'),
    (700, 999, 'Dabbler'),
    (1000, 1499, 'Junior Apprentice'),
    (1500, 1999, 'Apprentice'),
    (2000, 2499, 'Senior Apprentice'),
    (2500, 2999, 'Prestidigitator'),
    (3000, 3499, 'Hedge wizard'),
    (3500, 4499, 'Concoctionist'),
    (4500, 4999, 'Thaumaturge'),
    (5000, 5999, 'Transmuter'),
    (6000, 6999, 'Wizard 3rd class'),
    (7000, 7999, 'Wizard 2nd class'),
    (8000, 9999, 'Wizard 1st class'),
    (10000, 11999, 'Grand Wizard'),
    (12000, 13999, 'Alchemist 3rd class'),
    (14000, 15999, 'Alchemist 2nd class'),
    (16000, 19999, 'Alchemist 1st class'),
    (20000, 24999, 'Master Alchemist'),
    (25000, 29999, 'Grand Alchemist'),
    (30000, 39999, 'Supreme Alchemist'),
    (40000, math.inf, 'Grand Alchemical Emperor'),
]


def get_ranking(score: int) -> Ranking:
    """Look up the rank title for a score."""
    for low, high, title in RANKINGS:
        if low <= score <= high:
            next_at = None if high == math.inf else int(high) + 1
            return Ranking(title, next_at)
    return Ranking('Cursed', 400)
