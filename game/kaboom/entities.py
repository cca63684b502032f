"""
Game entity dataclasses
"""

from dataclasses import dataclass
from enum import Enum

from .animation import Animation


class EnemyMotion(str, Enum):
    """How an enemy moves between ticks (enemies never receive input)"""
    STATIC = "static"
    DRIFT = "drift"  # sine-wave sway around origin_x


@dataclass
class Actor:
    """Kinematic body with an animation state. Canvas coordinates, y grows downward."""
    x: float
    y: float
    width: float
    height: float
    vx: float = 0.0
    vy: float = 0.0
    grounded: bool = False
    animation: Animation = Animation.IDLE
    frame: int = 0
    frame_timer: int = 0  # ticks since last frame advance
    kind: str = "player"

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Player(Actor):
    """Player-controlled actor with HUD stats"""
    health: int = 100
    max_health: int = 100
    bombs: int = 3
    max_bombs: int = 3
    score: int = 0
    tokens: int = 0
    lives: int = 3
    speed_boost_ticks: int = 0   # ticks of boosted run speed left
    invulnerable_ticks: int = 0  # hazards are ignored while > 0


@dataclass
class Enemy(Actor):
    """Enemy actor; moves only by its motion policy"""
    motion: EnemyMotion = EnemyMotion.STATIC
    origin_x: float = 0.0
    drift_amplitude: float = 50.0
    drift_rate: float = 0.1  # radians per tick


@dataclass(frozen=True)
class Platform:
    """Static axis-aligned rectangle, immutable after level load"""
    x: float
    y: float
    width: float
    height: float


class PickupKind(str, Enum):
    HEART = "heart"  # restores health
    SPEED = "speed"  # temporary run-speed boost
    COIN = "coin"    # score


@dataclass(frozen=True)
class Pickup:
    """Collectible placed by the level; removed from the world once touched"""
    x: float
    y: float
    kind: PickupKind
    width: float = 32.0
    height: float = 32.0


@dataclass(frozen=True)
class Hazard:
    """Static zone (spikes, water) that hurts the player on contact"""
    x: float
    y: float
    width: float
    height: float
    damage: int = 25
