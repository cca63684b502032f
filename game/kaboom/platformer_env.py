"""
PlatformerEnv - Gymnasium wrapper around the Kaboom simulation
--------------------------------------------------------------
- Same Simulation the window runs, driven by actions instead of keys
- Discrete MultiDiscrete action space: [move(3), jump(2)]
- Vector observation: player state + top-K nearest enemies
- Reward: horizontal progress, minus a small time penalty
- Terminates when the last life is lost (hazards); truncates at max_steps

Used for scripted/random automated play and smoke testing of level layouts.

Quick test:
    python -m game.kaboom.platformer_env
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import DEFAULT_VARIANT, WorldConfig, build_world_config
from .controls import Action
from .simulation import Simulation
from .utils import clamp, seed_everything

# move: 0 stay, 1 left, 2 right
MOVE_ACTIONS = (None, Action.MOVE_LEFT, Action.MOVE_RIGHT)


class PlatformerEnv(gym.Env):
    """2D side-view platformer environment"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        variant: str = DEFAULT_VARIANT,
        level: Optional[str] = None,
        config: Optional[WorldConfig] = None,
        max_steps: int = 1800,  # 30s at 60 FPS
        k_enemies: int = 3,
        progress_scale: float = 1.0,
        time_penalty: float = 0.001,
    ):
        super().__init__()

        self.render_mode = render_mode
        self.config = config if config is not None else build_world_config(variant, level)
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.progress_scale = progress_scale
        self.time_penalty = time_penalty

        self.sim = Simulation(self.config)

        self.action_space = spaces.MultiDiscrete([3, 2])

        # Player: pos(2) vel(2) grounded(1); each enemy: rel pos(2)
        obs_dim = 2 + 2 + 1 + self.k_enemies * 2
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self._step_count = 0
        self._start_x = 0.0
        self._max_speed = max(self.config.physics.speed, self.config.physics.jump_power)

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self.sim.reset()
        self._step_count = 0
        self._start_x = self.sim.player.x

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, jump = int(action[0]), int(action[1])
        self._apply_action(move, jump)

        prev_x = self.sim.player.x
        self.sim.step()

        reward = self._compute_reward(prev_x)

        terminated = self.sim.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def _apply_action(self, move: int, jump: int):
        inputs = self.sim.inputs
        inputs.release(Action.MOVE_LEFT)
        inputs.release(Action.MOVE_RIGHT)
        target = MOVE_ACTIONS[move % 3]
        if target is not None:
            inputs.press(target)
        if jump:
            inputs.press(Action.JUMP)
        else:
            inputs.release(Action.JUMP)

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        p = self.sim.player
        w, h = self.config.width, self.config.height

        obs_parts = [
            (p.x / w) * 2 - 1,
            (p.y / h) * 2 - 1,
            clamp(p.vx / self._max_speed, -1, 1),
            clamp(p.vy / self._max_speed, -1, 1),
            1.0 if p.grounded else -1.0,
        ]

        enemies_sorted = sorted(
            self.sim.enemies,
            key=lambda e: (e.x - p.x) ** 2 + (e.y - p.y) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [clamp((e.x - p.x) / w, -1, 1), clamp((e.y - p.y) / h, -1, 1)]
            else:
                obs_parts += [0.0, 0.0]

        return np.clip(np.array(obs_parts, dtype=np.float32), -1.0, 1.0)

    def _compute_reward(self, prev_x: float) -> float:
        progress = (self.sim.player.x - prev_x) / self.config.width
        return float(self.progress_scale * progress - self.time_penalty)

    def _get_info(self) -> Dict[str, Any]:
        p = self.sim.player
        return {
            "x": p.x,
            "y": p.y,
            "grounded": p.grounded,
            "animation": p.animation.value,
            "distance": p.x - self._start_x,
            "step": self._step_count,
            "health": p.health,
            "lives": p.lives,
            "score": p.score,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import KaboomWindow
            self._window = KaboomWindow(self.sim)

        self._window._snapshot = self.sim.snapshot()
        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = False, seed: int = 42, max_steps: int = 600) -> Dict[str, Any]:
    """Run a random-policy episode and return its summary"""
    env = PlatformerEnv(render_mode="human" if render else None, max_steps=max_steps)
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0
    airborne_steps = 0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if not info["grounded"]:
            airborne_steps += 1

    env.close()
    return {
        "return": total,
        "steps": info["step"],
        "distance": info["distance"],
        "airborne_steps": airborne_steps,
    }


if __name__ == "__main__":
    summary = run_random_episode(render=True)
    print(f"Random episode return: {summary['return']:.3f}  "
          f"distance: {summary['distance']:.1f}  steps: {summary['steps']}")
