"""
Simulation - owns the world state and advances it one tick at a time
---------------------------------------------------------------------
- Player driven by an InputState read once per tick
- Enemies moved by their motion policy (static or sine drift), never damaged
- Static platforms plus a flat ground line
- Pickups (heart, speed, coin) collected on contact; hazards cost health,
  and running out of health costs a life
- `running` flag checked at the top of every step; the menu action or the
  last lost life clears it
- Each step returns a RenderSnapshot for whatever draws the frame

Single-threaded: key events may mutate the InputState between steps, and
everything dispatched before a step is visible to that step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .animation import Animation, advance_frame, set_animation
from .config import (
    DEFAULT_VARIANT,
    LIFE_RULES,
    PICKUP_RULES,
    ActorSpawn,
    WorldConfig,
    build_world_config,
)
from .controls import Action, InputState
from .entities import Actor, Enemy, EnemyMotion, Hazard, Pickup, PickupKind, Platform, Player
from .physics import tick
from .utils import aabb_overlap, clamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActorView:
    """What the renderer needs to draw one actor"""
    kind: str
    x: float
    y: float
    width: float
    height: float
    animation: Animation
    frame: int


@dataclass(frozen=True)
class HudView:
    health: int
    max_health: int
    bombs: int
    max_bombs: int
    score: int
    tokens: int
    lives: int
    level: int
    boosted: bool = False
    invulnerable: bool = False


@dataclass(frozen=True)
class RenderSnapshot:
    tick: int
    running: bool
    width: float
    height: float
    ground_y: float
    player: ActorView
    enemies: Tuple[ActorView, ...]
    platforms: Tuple[Platform, ...]
    hud: HudView
    pickups: Tuple[Pickup, ...] = ()
    hazards: Tuple[Hazard, ...] = ()
    game_over: bool = False

    @property
    def actors(self) -> Tuple[ActorView, ...]:
        # draw order: enemies first, player on top
        return self.enemies + (self.player,)


def _view(actor: Actor) -> ActorView:
    return ActorView(
        kind=actor.kind,
        x=actor.x,
        y=actor.y,
        width=actor.width,
        height=actor.height,
        animation=actor.animation,
        frame=actor.frame,
    )


def _touches(actor: Actor, rect) -> bool:
    return aabb_overlap(actor.left, actor.top, actor.width, actor.height,
                        rect.x, rect.y, rect.width, rect.height)


class Simulation:
    """Kaboom world: one player, static/drifting enemies, platforms, pickups and hazards"""

    def __init__(self, config: Optional[WorldConfig] = None, inputs: Optional[InputState] = None):
        self.config = config if config is not None else build_world_config(DEFAULT_VARIANT)
        self.inputs = inputs if inputs is not None else InputState()

        # World state
        self.player: Player = None  # type: ignore
        self.enemies: List[Enemy] = []
        self.platforms: Tuple[Platform, ...] = tuple(self.config.platforms)
        self.hazards: Tuple[Hazard, ...] = tuple(self.config.hazards)
        self.pickups: List[Pickup] = []

        self.running = False
        self.game_over = False
        self.tick_count = 0

        # called after every reset (e.g. to drop a window's pressed-key bookkeeping)
        self._reset_listeners: List[Callable[[], None]] = []

        self.reset()

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def on_reset(self, callback: Callable[[], None]) -> None:
        self._reset_listeners.append(callback)

    def reset(self) -> RenderSnapshot:
        """Recreate actors and pickups at their spawn points and start running"""
        self.player = self._spawn_player(self.config.player)
        self.enemies = [self._spawn_enemy(s) for s in self.config.enemies]
        self.pickups = list(self.config.pickups)
        self.inputs.clear()
        self.tick_count = 0
        self.running = True
        self.game_over = False
        for callback in self._reset_listeners:
            callback()
        logger.debug("World %r reset: %d enemies, %d platforms, %d pickups",
                     self.config.name, len(self.enemies), len(self.platforms), len(self.pickups))
        return self.snapshot()

    def stop(self) -> None:
        if self.running:
            logger.debug("Simulation stopped at tick %d", self.tick_count)
        self.running = False

    @staticmethod
    def _spawn_player(spawn: ActorSpawn) -> Player:
        return Player(x=spawn.x, y=spawn.y, width=spawn.width, height=spawn.height, kind=spawn.kind)

    @staticmethod
    def _spawn_enemy(spawn: ActorSpawn) -> Enemy:
        return Enemy(
            x=spawn.x,
            y=spawn.y,
            width=spawn.width,
            height=spawn.height,
            kind=spawn.kind,
            motion=spawn.motion,
            origin_x=spawn.x,
        )

    # ----------------------------
    # Tick
    # ----------------------------

    def step(self) -> RenderSnapshot:
        if not self.running:
            return self.snapshot()

        inputs = self.inputs.snapshot()
        if inputs.is_held(Action.MENU):
            self.stop()
            return self.snapshot()

        cfg = self.config
        p = self.player
        physics = cfg.physics
        if p.speed_boost_ticks > 0:
            physics = replace(physics, speed=physics.speed * PICKUP_RULES["speed_multiplier"])
            p.speed_boost_ticks -= 1

        tick(
            p,
            inputs,
            self.platforms,
            cfg.ground_y,
            cfg.width,
            physics,
            cfg.frame_table(p.kind),
        )

        self._collect_pickups()
        self._check_hazards()

        for e in self.enemies:
            self._update_enemy(e)

        self.tick_count += 1
        return self.snapshot()

    def run(self, n_ticks: int) -> RenderSnapshot:
        """Step up to n_ticks times, stopping early if the loop stops"""
        snap = self.snapshot()
        for _ in range(n_ticks):
            if not self.running:
                break
            snap = self.step()
        return snap

    def _update_enemy(self, e: Enemy) -> None:
        if e.motion is EnemyMotion.DRIFT:
            x = e.origin_x + math.sin(self.tick_count * e.drift_rate) * e.drift_amplitude
            x = clamp(x, 0.0, self.config.width - e.width)
            e.vx = x - e.x
            e.x = x
            set_animation(e, Animation.RUN if e.vx != 0 else Animation.IDLE)
        advance_frame(e, self.config.frame_table(e.kind))

    # ----------------------------
    # Pickups, damage and lives
    # ----------------------------

    def _collect_pickups(self) -> None:
        remaining = []
        for k in self.pickups:
            if _touches(self.player, k):
                self.collect(k)
            else:
                remaining.append(k)
        self.pickups = remaining

    def collect(self, pickup: Pickup) -> None:
        """Apply a pickup's effect to the player"""
        p = self.player
        if pickup.kind is PickupKind.HEART:
            p.health = min(p.max_health, p.health + PICKUP_RULES["heart_heal"])
        elif pickup.kind is PickupKind.SPEED:
            # boosts never stack; a second one refreshes the timer
            p.speed_boost_ticks = PICKUP_RULES["speed_ticks"]
        elif pickup.kind is PickupKind.COIN:
            p.score += PICKUP_RULES["coin_points"]
            p.tokens = p.score * PICKUP_RULES["token_percent"] // 100
        logger.debug("Collected %s at tick %d", pickup.kind.value, self.tick_count)

    def _check_hazards(self) -> None:
        p = self.player
        if p.invulnerable_ticks > 0:
            p.invulnerable_ticks -= 1
            return
        for h in self.hazards:
            if _touches(p, h):
                self.hurt(h.damage)
                return

    def hurt(self, amount: int) -> None:
        """Take damage unless invulnerable; losing all health costs a life"""
        p = self.player
        if p.invulnerable_ticks > 0 or self.game_over:
            return
        p.health = max(0, p.health - amount)
        logger.debug("Player hit for %d, health %d", amount, p.health)
        if p.health == 0:
            self.lose_life()
        else:
            p.invulnerable_ticks = LIFE_RULES["hit_invulnerable_ticks"]

    def lose_life(self) -> None:
        p = self.player
        p.lives = max(0, p.lives - 1)
        if p.lives == 0:
            self.game_over = True
            logger.info("Game over at tick %d, score %d", self.tick_count, p.score)
            self.stop()
            return
        logger.info("Player lost a life, %d left", p.lives)
        self._respawn_player()

    def _respawn_player(self) -> None:
        # drop in from above the canvas at the spawn column, refilled
        p = self.player
        p.health = p.max_health
        p.bombs = p.max_bombs
        p.x = self.config.player.x
        p.y = -p.height
        p.vx = 0.0
        p.vy = LIFE_RULES["respawn_vy"]
        p.grounded = False
        p.speed_boost_ticks = 0
        p.invulnerable_ticks = LIFE_RULES["respawn_invulnerable_ticks"]
        set_animation(p, Animation.FALL)

    # ----------------------------
    # Output
    # ----------------------------

    def snapshot(self) -> RenderSnapshot:
        p = self.player
        return RenderSnapshot(
            tick=self.tick_count,
            running=self.running,
            width=self.config.width,
            height=self.config.height,
            ground_y=self.config.ground_y,
            player=_view(p),
            enemies=tuple(_view(e) for e in self.enemies),
            platforms=self.platforms,
            hud=HudView(
                health=p.health,
                max_health=p.max_health,
                bombs=p.bombs,
                max_bombs=p.max_bombs,
                score=p.score,
                tokens=p.tokens,
                lives=p.lives,
                level=self.config.level_number,
                boosted=p.speed_boost_ticks > 0,
                invulnerable=p.invulnerable_ticks > 0,
            ),
            pickups=tuple(self.pickups),
            hazards=self.hazards,
            game_over=self.game_over,
        )
