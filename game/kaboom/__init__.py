"""Kaboom - side-view platformer simulation core"""

from .animation import Animation, FrameTable
from .config import WorldConfig, PhysicsConfig, build_world_config, load_level
from .controls import Action, InputState, KeyMap
from .entities import Actor, Player, Enemy, EnemyMotion, Platform, Pickup, PickupKind, Hazard
from .simulation import Simulation, RenderSnapshot
from .platformer_env import PlatformerEnv, run_random_episode
from .utils import ConfigError

__all__ = [
    'Animation', 'FrameTable',
    'WorldConfig', 'PhysicsConfig', 'build_world_config', 'load_level',
    'Action', 'InputState', 'KeyMap',
    'Actor', 'Player', 'Enemy', 'EnemyMotion', 'Platform', 'Pickup', 'PickupKind', 'Hazard',
    'Simulation', 'RenderSnapshot',
    'PlatformerEnv', 'run_random_episode',
    'ConfigError',
]
