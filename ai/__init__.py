"""
AI module for All That Glitters.
Contains heuristic evaluation, a greedy player and a gymnasium environment.
"""

from .evaluation import MoveEvaluator, HeuristicWeights
from .greedy import Action, ActionKind, GreedyPlayer
from .environment import AlchemyEnv

__all__ = ['MoveEvaluator', 'HeuristicWeights', 'Action', 'ActionKind', 'GreedyPlayer', 'AlchemyEnv']
