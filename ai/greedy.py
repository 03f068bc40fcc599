"""
Greedy player for All That Glitters.
Picks the best single action for the current rune using MoveEvaluator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Any

from alchemy.engine import AlchemyEngine

from .evaluation import MoveEvaluator


class ActionKind(Enum):
    PLACE = 'place'
    SKULL = 'skull'
    DISCARD = 'discard'
    NONE = 'none'


@dataclass(frozen=True)
class Action:
    """A single player action."""
    kind: ActionKind
    x: int = -1
    y: int = -1


class GreedyPlayer:
    """Plays the move with the highest heuristic value."""

    def __init__(self, evaluator: Optional[MoveEvaluator] = None):
        self.evaluator = evaluator or MoveEvaluator()

    def choose_action(self, engine: AlchemyEngine) -> Action:
        """Choose an action for the current rune."""
        rune = engine.current_rune
        if rune is None:
            return Action(ActionKind.NONE)

        kind = ActionKind.SKULL if rune.is_skull else ActionKind.PLACE
        best_action = None
        best_score = float('-inf')
        for x, y in engine.valid_actions():
            score = self.evaluator.evaluate_placement(engine, x, y)
            if score > best_score:
                best_score = score
                best_action = Action(kind, x, y)

        if not engine.is_forge_full():
            # Discarding is only worth it when it beats every board move
            discard_score = self.evaluator.evaluate_discard(engine)
            if best_action is None or discard_score > best_score:
                return Action(ActionKind.DISCARD)

        return best_action or Action(ActionKind.NONE)

    def apply_action(self, engine: AlchemyEngine, action: Action) -> bool:
        """Execute an action on the engine."""
        if action.kind == ActionKind.PLACE:
            return engine.place_rune(action.x, action.y).placed
        if action.kind == ActionKind.SKULL:
            return engine.use_skull_to_remove(action.x, action.y)
        if action.kind == ActionKind.DISCARD:
            return engine.discard_to_forge()
        return False

    def play_turn(self, engine: AlchemyEngine) -> Action:
        """Choose and execute one action."""
        action = self.choose_action(engine)
        self.apply_action(engine, action)
        return action

    def play_game(self, engine: AlchemyEngine, max_turns: int = 10000) -> Dict[str, Any]:
        """Play until game over or max_turns, continuing through completed boards."""
        for _ in range(max_turns):
            if engine.is_level_complete():
                engine.complete_board()
                engine.start_new_round()
                continue
            if engine.is_game_over():
                break
            action = self.play_turn(engine)
            if action.kind == ActionKind.NONE:
                break
        return engine.get_stats()
