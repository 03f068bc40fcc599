"""
Gymnasium environment for All That Glitters.

Action Space:
    Discrete(width * height + 1). Action ``y * width + x`` places the current
    rune at (x, y), or spends it there when it is a skull. The last action
    discards the current rune to the forge.

Observation Space (Dict):
    - cell_state: (height, width) 0 lead, 1 gold
    - rune_kind: (height, width) 0 empty, 1 normal, 2 wild
    - rune_color: (height, width) 0 none, 1-8 palette index + 1
    - rune_symbol: (height, width) 0 none, 1-12 palette index + 1
    - current_rune: (kind, color, symbol) with kind 0 none, 1 normal, 2 wild, 3 skull
    - forge: number of filled forge slots
    - board: current board tier

Completed boards are banked and the next round starts inside ``step``, so an
episode lasts until game over or ``max_steps``.
"""

import random
from typing import Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from alchemy.constants import RUNE_COLORS, ZODIAC_SYMBOLS
from alchemy.engine import AlchemyEngine, GameConfig
from alchemy.runes import Rune, RuneKind

KIND_IDS = {RuneKind.NORMAL: 1, RuneKind.WILD: 2, RuneKind.SKULL: 3}


def encode_rune(rune: Optional[Rune]) -> tuple:
    """(kind, color, symbol) ids for a rune, all zero for no rune."""
    if rune is None:
        return 0, 0, 0
    if not rune.is_normal:
        return KIND_IDS[rune.kind], 0, 0
    return 1, RUNE_COLORS.index(rune.color) + 1, ZODIAC_SYMBOLS.index(rune.symbol) + 1


class AlchemyEnv(gym.Env):
    """All That Glitters as a single-agent environment. Reward is the score gained."""
    metadata = {'render_modes': ['human', 'ansi']}

    def __init__(self, config: Optional[GameConfig] = None, max_steps: int = 2000,
                 invalid_action_penalty: float = -5.0, render_mode: Optional[str] = None):
        super().__init__()
        self.config = config or GameConfig()
        self.config.validate()
        self.max_steps = max_steps
        self.invalid_action_penalty = invalid_action_penalty
        self.render_mode = render_mode

        self.width = self.config.grid_width
        self.height = self.config.grid_height
        self.discard_action = self.width * self.height
        self.action_space = spaces.Discrete(self.width * self.height + 1)

        grid_shape = (self.height, self.width)
        self.observation_space = spaces.Dict({
            "cell_state": spaces.Box(low=0, high=1, shape=grid_shape, dtype=np.int8),
            "rune_kind": spaces.Box(low=0, high=2, shape=grid_shape, dtype=np.int8),
            "rune_color": spaces.Box(low=0, high=len(RUNE_COLORS), shape=grid_shape, dtype=np.int8),
            "rune_symbol": spaces.Box(low=0, high=len(ZODIAC_SYMBOLS), shape=grid_shape, dtype=np.int8),
            "current_rune": spaces.Box(low=0, high=len(ZODIAC_SYMBOLS), shape=(3,), dtype=np.int8),
            "forge": spaces.Box(low=0, high=self.config.forge_capacity, shape=(1,), dtype=np.int8),
            "board": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
        })

        self.engine: Optional[AlchemyEngine] = None
        self.steps = 0

    def _get_observation(self):
        grid = self.engine.grid
        rune_kind = np.zeros((self.height, self.width), dtype=np.int8)
        rune_color = np.zeros((self.height, self.width), dtype=np.int8)
        rune_symbol = np.zeros((self.height, self.width), dtype=np.int8)
        for cell in grid.iter_cells():
            kind, color, symbol = encode_rune(cell.rune)
            rune_kind[cell.y, cell.x] = kind
            rune_color[cell.y, cell.x] = color
            rune_symbol[cell.y, cell.x] = symbol

        return {
            "cell_state": grid.states.astype(np.int8),
            "rune_kind": rune_kind,
            "rune_color": rune_color,
            "rune_symbol": rune_symbol,
            "current_rune": np.array(encode_rune(self.engine.current_rune), dtype=np.int8),
            "forge": np.array([len(self.engine.forge)], dtype=np.int8),
            "board": np.array([self.engine.board], dtype=np.int32),
        }

    def _get_info(self, invalid_action: bool = False):
        info = self.engine.get_stats()
        info["invalid_action"] = invalid_action
        return info

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        engine_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.engine = AlchemyEngine(self.config, rng=random.Random(engine_seed))
        self.steps = 0
        return self._get_observation(), self._get_info()

    def action_masks(self) -> np.ndarray:
        """Boolean mask of currently legal actions."""
        mask = np.zeros(self.action_space.n, dtype=bool)
        for x, y in self.engine.valid_actions():
            mask[y * self.width + x] = True
        mask[self.discard_action] = not self.engine.is_forge_full()
        return mask

    def _apply(self, action: int) -> bool:
        if action == self.discard_action:
            return self.engine.discard_to_forge()
        y, x = divmod(action, self.width)
        rune = self.engine.current_rune
        if rune is not None and rune.is_skull:
            return self.engine.use_skull_to_remove(x, y)
        return self.engine.place_rune(x, y).placed

    def step(self, action: int):
        if self.engine is None:
            raise RuntimeError("Call reset() before step()")
        if self.engine.is_game_over():
            return self._get_observation(), 0.0, True, False, self._get_info()

        self.steps += 1
        previous_score = self.engine.score
        performed = self._apply(int(action))

        if self.engine.is_level_complete():
            self.engine.complete_board()
            self.engine.start_new_round()

        reward = float(self.engine.score - previous_score)
        if not performed:
            reward += self.invalid_action_penalty

        terminated = self.engine.is_game_over()
        truncated = not terminated and self.steps >= self.max_steps
        if self.render_mode == 'human':
            self.render()
        return self._get_observation(), reward, terminated, truncated, self._get_info(not performed)

    def render(self):
        if self.engine is None:
            return None
        text = str(self.engine)
        if self.render_mode == 'ansi':
            return text
        print(text)
        return None

    def close(self):
        self.engine = None
