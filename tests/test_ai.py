"""
Tests for the heuristic player and the gymnasium environment.
"""

import unittest
import numpy as np
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from alchemy.engine import AlchemyEngine, GameConfig
from alchemy.runes import Rune
from ai.evaluation import MoveEvaluator
from ai.greedy import Action, ActionKind, GreedyPlayer
from ai.environment import AlchemyEnv, encode_rune

CRIMSON_ARIES = Rune.normal('crimson', 'aries')


class TestMoveEvaluator(unittest.TestCase):

    def setUp(self):
        self.evaluator = MoveEvaluator()
        self.engine = AlchemyEngine(GameConfig(seed=3))

    def test_frontier_around_origin(self):
        frontier = self.evaluator.get_frontier(self.engine)
        self.assertEqual(int(np.count_nonzero(frontier)), 4)
        self.assertTrue(frontier[3, 3])
        self.assertFalse(frontier[3, 4])

    def test_invalid_placement_scores_negative_infinity(self):
        self.engine.current_rune = CRIMSON_ARIES
        self.assertEqual(self.evaluator.evaluate_placement(self.engine, 0, 0), float('-inf'))

    def test_evaluation_does_not_touch_engine(self):
        self.engine.current_rune = CRIMSON_ARIES
        self.evaluator.evaluate_placement(self.engine, 3, 3)
        self.evaluator.evaluate_discard(self.engine)
        self.assertIsNone(self.engine.get_cell(3, 3).rune)
        self.assertEqual(self.engine.forge, ())
        self.assertEqual(self.engine.score, 0)

    def test_line_completion_preferred(self):
        for x in range(8):
            self.engine.grid.set_rune(x, 2, CRIMSON_ARIES)
        self.engine.current_rune = CRIMSON_ARIES
        completing = self.evaluator.evaluate_placement(self.engine, 8, 2)
        other = self.evaluator.evaluate_placement(self.engine, 3, 3)
        self.assertGreater(completing, other)

    def test_cell_matching_each_neighbour_separately_is_alive(self):
        self.engine.grid.set_rune(0, 1, Rune.normal('crimson', 'aries'))
        self.engine.grid.set_rune(2, 1, Rune.normal('azure', 'leo'))
        self.assertEqual(self.evaluator.count_dead_cells(self.engine), 0)
        self.engine.current_rune = Rune.normal('crimson', 'leo')
        self.assertTrue(self.engine.can_place_at(1, 1))

    def test_dead_cells(self):
        self.engine.grid.set_rune(0, 1, Rune.normal('crimson', 'aries'))
        self.engine.grid.set_rune(2, 1, Rune.normal('azure', 'taurus'))
        self.engine.grid.set_rune(1, 0, Rune.normal('amber', 'gemini'))
        self.assertEqual(self.evaluator.count_dead_cells(self.engine), 1)

    def test_detailed_evaluation(self):
        metrics = self.evaluator.get_detailed_evaluation(self.engine)
        for key in ['gold_cells', 'frontier', 'near_complete_lines', 'forge', 'dead_cells', 'overall_score']:
            self.assertIn(key, metrics)


class TestGreedyPlayer(unittest.TestCase):

    def test_chooses_legal_action(self):
        engine = AlchemyEngine(GameConfig(seed=5))
        engine.current_rune = CRIMSON_ARIES
        action = GreedyPlayer().choose_action(engine)
        self.assertIn(action.kind, (ActionKind.PLACE, ActionKind.DISCARD))
        if action.kind == ActionKind.PLACE:
            self.assertIn((action.x, action.y), engine.valid_actions())

    def test_discards_when_stuck(self):
        engine = AlchemyEngine(GameConfig(seed=5))
        engine.current_rune = Rune.skull()
        self.assertEqual(GreedyPlayer().choose_action(engine), Action(ActionKind.DISCARD))

    def test_completes_line(self):
        engine = AlchemyEngine(GameConfig(seed=5))
        for x in range(8):
            engine.grid.set_rune(x, 2, CRIMSON_ARIES)
        engine.current_rune = CRIMSON_ARIES
        action = GreedyPlayer().play_turn(engine)
        self.assertEqual(action, Action(ActionKind.PLACE, 8, 2))
        self.assertEqual(engine.lines_cleared, 1)

    def test_play_game_finishes(self):
        engine = AlchemyEngine(GameConfig(seed=11))
        stats = GreedyPlayer().play_game(engine, max_turns=300)
        self.assertGreater(stats['score'], 0)
        self.assertGreaterEqual(stats['runes_placed'], 1)


class TestAlchemyEnv(unittest.TestCase):

    def setUp(self):
        self.env = AlchemyEnv()
        self.obs, self.info = self.env.reset(seed=123)

    def test_spaces(self):
        self.assertEqual(self.env.action_space.n, 9 * 8 + 1)
        self.assertTrue(self.env.observation_space.contains(self.obs))
        self.assertEqual(self.obs["rune_kind"][3, 4], 2)

    def test_seeded_reset_repeats(self):
        other = AlchemyEnv()
        obs, _ = other.reset(seed=123)
        np.testing.assert_array_equal(obs["current_rune"], self.obs["current_rune"])

    def test_invalid_action_penalised(self):
        obs, reward, terminated, truncated, info = self.env.step(3 * 9 + 4)
        self.assertEqual(reward, self.env.invalid_action_penalty)
        self.assertTrue(info["invalid_action"])
        self.assertFalse(terminated)

    def test_discard_action(self):
        obs, reward, terminated, truncated, info = self.env.step(self.env.discard_action)
        self.assertEqual(reward, 0.0)
        self.assertEqual(obs["forge"][0], 1)
        self.assertFalse(info["invalid_action"])

    def test_placement_rewarded(self):
        self.env.engine.current_rune = CRIMSON_ARIES
        obs, reward, terminated, truncated, info = self.env.step(3 * 9 + 3)
        self.assertEqual(reward, 10.0)
        self.assertEqual(obs["rune_color"][3, 3], 1)
        self.assertEqual(obs["rune_symbol"][3, 3], 1)

    def test_action_masks(self):
        self.env.engine.current_rune = CRIMSON_ARIES
        mask = self.env.action_masks()
        self.assertEqual(int(mask.sum()), 5)
        self.assertTrue(mask[self.env.discard_action])
        self.assertTrue(mask[3 * 9 + 3])

    def test_encode_rune(self):
        self.assertEqual(encode_rune(None), (0, 0, 0))
        self.assertEqual(encode_rune(Rune.skull()), (3, 0, 0))
        self.assertEqual(encode_rune(Rune.normal('rose', 'pisces')), (1, 8, 12))

    def test_ansi_render(self):
        env = AlchemyEnv(render_mode='ansi')
        env.reset(seed=1)
        self.assertIn("Score: 0", env.render())


if __name__ == '__main__':
    unittest.main()
