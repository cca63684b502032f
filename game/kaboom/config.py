"""
World configuration for the Kaboom platformer.

Variant presets and level layouts are plain dicts (easy to tweak and dump to
JSON); build_world_config() / load_level() turn them into validated
dataclasses the simulation consumes.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .animation import FrameTable
from .entities import EnemyMotion, Hazard, Pickup, PickupKind, Platform
from .utils import ConfigError

# Canvas shared by every variant
CANVAS_WIDTH = 1024
CANVAS_HEIGHT = 576

# ==============================================================================
# VARIANT PRESETS
# The game shipped in several variants with different tuning; each one is a
# preset over the same core.
# ==============================================================================

VARIANT_KABOOM = {
    "name": "kaboom",
    "description": "Platformer with floating platforms, enemies and HUD",
    "width": CANVAS_WIDTH,
    "height": CANVAS_HEIGHT,
    "ground_y": CANVAS_HEIGHT - 50,
    "physics": {"speed": 4.0, "jump_power": 12.0, "gravity": 0.6},
    "player": {"x": 100.0, "y": 300.0, "width": 48.0, "height": 48.0},
    "player_threshold": 10,  # ticks per player frame
    "enemy_threshold": 15,   # ticks per enemy frame
    "level": "level1",
}

VARIANT_SPRITES = {
    "name": "sprites",
    "description": "Single-screen sprite showcase, no platforms",
    "width": CANVAS_WIDTH,
    "height": CANVAS_HEIGHT,
    "ground_y": CANVAS_HEIGHT - 150,
    "physics": {"speed": 5.0, "jump_power": 15.0, "gravity": 0.8},
    "player": {"x": 100.0, "y": 400.0, "width": 64.0, "height": 64.0},
    "player_threshold": 8,
    "enemy_threshold": 8,
    "level": "empty",
}

VARIANTS = {
    "kaboom": VARIANT_KABOOM,
    "sprites": VARIANT_SPRITES,
}

DEFAULT_VARIANT = "kaboom"

# ==============================================================================
# LEVEL LAYOUTS
# ==============================================================================

LEVEL_1_PLATFORMS = [
    {"x": 200, "y": 400, "width": 192, "height": 32},
    {"x": 500, "y": 300, "width": 192, "height": 32},
    {"x": 350, "y": 200, "width": 192, "height": 32},
    {"x": 700, "y": 350, "width": 192, "height": 32},
    {"x": 150, "y": 150, "width": 192, "height": 32},
    {"x": 600, "y": 450, "width": 192, "height": 32},
]

# Coins along the ground (the first one sits in the spawn drop), potions on platforms
LEVEL_1_PICKUPS = [
    {"kind": "coin", "x": 108, "y": 430},
    {"kind": "coin", "x": 300, "y": 484},
    {"kind": "coin", "x": 450, "y": 484},
    {"kind": "coin", "x": 900, "y": 484},
    {"kind": "heart", "x": 430, "y": 158},
    {"kind": "speed", "x": 780, "y": 308},
]

# Spike strip on the ground between the first coins and the right edge
LEVEL_1_HAZARDS = [
    {"x": 520, "y": 510, "width": 60, "height": 16, "damage": 25},
]

LEVELS = {
    "level1": {
        "number": 1,
        "platforms": LEVEL_1_PLATFORMS,
        "enemies": [
            {"kind": "pirate", "x": 400, "y": 350},
            {"kind": "cucumber", "x": 600, "y": 250},
            {"kind": "pirate", "x": 800, "y": 450},
        ],
        "pickups": LEVEL_1_PICKUPS,
        "hazards": LEVEL_1_HAZARDS,
    },
    "level1-sway": {
        "number": 1,
        "platforms": LEVEL_1_PLATFORMS,
        "enemies": [
            {"kind": "pirate", "x": 400, "y": 350, "motion": "drift"},
            {"kind": "cucumber", "x": 600, "y": 250, "motion": "drift"},
            {"kind": "pirate", "x": 800, "y": 450, "motion": "drift"},
        ],
        "pickups": LEVEL_1_PICKUPS,
        "hazards": LEVEL_1_HAZARDS,
    },
    "empty": {
        "number": 1,
        "platforms": [],
        "enemies": [],
    },
}

# ==============================================================================
# PICKUPS, DAMAGE AND LIVES (durations in ticks, 60 ticks = 1 second)
# ==============================================================================

PICKUP_RULES = {
    "heart_heal": 50,          # health restored, capped at max_health
    "speed_multiplier": 1.5,   # run speed while boosted
    "speed_ticks": 300,        # 5 seconds
    "coin_points": 10,
    "token_percent": 10,       # tokens = 10% of score
}

LIFE_RULES = {
    "hit_invulnerable_ticks": 60,      # after taking damage
    "respawn_invulnerable_ticks": 120, # after losing a life
    "respawn_vy": 2.0,                 # respawn drops in from above the canvas
}

# ==============================================================================
# ANIMATION FRAME COUNTS (per actor kind)
# ==============================================================================

FRAME_COUNTS = {
    "player": {"idle": 5, "run": 5, "jump": 4, "fall": 2},
    "pirate": {"idle": 3, "run": 5, "jump": 4, "fall": 2},
    "cucumber": {"idle": 3, "run": 5, "jump": 4, "fall": 2},
}

ENEMY_SIZE = (48.0, 48.0)
PICKUP_SIZE = (32.0, 32.0)
HAZARD_DAMAGE = 25

# Sprite folders: <root>/<base>/<animation folder>/<n>.png
SPRITE_MANIFEST = {
    "player": {
        "base": "1-Player-Bomb Guy",
        "idle": "1-Idle",
        "run": "2-Run",
        "jump": "4-Jump",
        "fall": "5-Fall",
    },
    "pirate": {
        "base": "2-Enemy-Bald Pirate",
        "idle": "1-Idle",
        "run": "2-Run",
        "jump": "4-Jump",
        "fall": "5-Fall",
    },
    "cucumber": {
        "base": "3-Enemy-Cucumber",
        "idle": "1-Idle",
        "run": "2-Run",
        "jump": "4-Jump",
        "fall": "5-Fall",
    },
}

# Flat colours used when no image is available
PLACEHOLDER_COLORS = {
    "player": (255, 107, 107),
    "pirate": (139, 69, 19),
    "cucumber": (50, 205, 50),
    "platform": (102, 102, 102),
    "heart": (255, 68, 68),
    "speed": (0, 191, 255),
    "coin": (255, 215, 0),
    "hazard": (178, 34, 34),
    "ground": (139, 69, 19),
    "sky": (135, 206, 235),
}


# ----------------------------
# Validated config objects
# ----------------------------

@dataclass(frozen=True)
class PhysicsConfig:
    speed: float = 4.0
    jump_power: float = 12.0
    gravity: float = 0.6


@dataclass(frozen=True)
class ActorSpawn:
    x: float
    y: float
    width: float
    height: float
    kind: str = "player"
    motion: EnemyMotion = EnemyMotion.STATIC


@dataclass(frozen=True)
class WorldConfig:
    width: float
    height: float
    ground_y: float
    physics: PhysicsConfig
    player: ActorSpawn
    enemies: Tuple[ActorSpawn, ...] = ()
    platforms: Tuple[Platform, ...] = ()
    pickups: Tuple[Pickup, ...] = ()
    hazards: Tuple[Hazard, ...] = ()
    frames: Mapping[str, FrameTable] = field(default_factory=dict)
    level_number: int = 1
    name: str = DEFAULT_VARIANT

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"World size must be positive, got {self.width}x{self.height}")
        if not 0 < self.ground_y <= self.height:
            raise ConfigError(f"ground_y must be in (0, {self.height}], got {self.ground_y}")
        for spawn in (self.player,) + tuple(self.enemies):
            if spawn.width <= 0 or spawn.height <= 0:
                raise ConfigError(f"{spawn.kind}: actor size must be positive")
            if spawn.width > self.width:
                raise ConfigError(f"{spawn.kind}: actor is wider than the world")
            if spawn.kind not in self.frames:
                raise ConfigError(f"No frame table for actor kind {spawn.kind!r}")
        for p in self.platforms:
            if p.width <= 0 or p.height <= 0:
                raise ConfigError(f"Platform at ({p.x}, {p.y}) has non-positive size")
        for k in self.pickups:
            if k.width <= 0 or k.height <= 0:
                raise ConfigError(f"{k.kind.value} pickup at ({k.x}, {k.y}) has non-positive size")
        for h in self.hazards:
            if h.width <= 0 or h.height <= 0:
                raise ConfigError(f"Hazard at ({h.x}, {h.y}) has non-positive size")
            if h.damage < 1:
                raise ConfigError(f"Hazard at ({h.x}, {h.y}): damage must be >= 1, got {h.damage}")
        if self.physics.gravity <= 0:
            raise ConfigError("gravity must be positive")

    def frame_table(self, kind: str) -> FrameTable:
        return self.frames[kind]


# ----------------------------
# Builders
# ----------------------------

def _frame_tables(counts: Mapping[str, Any], player_threshold: int, enemy_threshold: int) -> Dict[str, FrameTable]:
    tables = {}
    for kind, table in counts.items():
        threshold = player_threshold if kind == "player" else enemy_threshold
        tables[kind] = FrameTable.from_dict(table, default_threshold=threshold)
    return tables


def world_config_from_dict(data: Mapping[str, Any]) -> WorldConfig:
    """
    Build a WorldConfig from a raw dict.

    Keys left out fall back to the preset named by ``variant`` (default
    "kaboom"); ``level`` names an entry of LEVELS, while inline
    ``platforms`` / ``enemies`` / ``pickups`` / ``hazards`` lists override it.
    """
    variant_name = data.get("variant", DEFAULT_VARIANT)
    if variant_name not in VARIANTS:
        raise ConfigError(f"Unknown variant: {variant_name!r} (expected one of {sorted(VARIANTS)})")
    raw = copy.deepcopy(VARIANTS[variant_name])
    raw.update({k: v for k, v in data.items() if k != "variant"})

    level_name = raw.get("level")
    if level_name is not None and level_name not in LEVELS:
        raise ConfigError(f"Unknown level: {level_name!r}")
    level = LEVELS.get(level_name, LEVELS["empty"])

    try:
        physics = PhysicsConfig(**raw["physics"])
        player = ActorSpawn(kind="player", **raw["player"])

        enemy_w, enemy_h = ENEMY_SIZE
        enemies = tuple(
            ActorSpawn(
                x=float(e["x"]),
                y=float(e["y"]),
                width=float(e.get("width", enemy_w)),
                height=float(e.get("height", enemy_h)),
                kind=e["kind"],
                motion=EnemyMotion(e.get("motion", "static")),
            )
            for e in raw.get("enemies", level["enemies"])
        )
        platforms = tuple(
            Platform(float(p["x"]), float(p["y"]), float(p["width"]), float(p["height"]))
            for p in raw.get("platforms", level["platforms"])
        )
        pickup_w, pickup_h = PICKUP_SIZE
        pickups = tuple(
            Pickup(
                x=float(k["x"]),
                y=float(k["y"]),
                kind=PickupKind(k["kind"]),
                width=float(k.get("width", pickup_w)),
                height=float(k.get("height", pickup_h)),
            )
            for k in raw.get("pickups", level.get("pickups", []))
        )
        hazards = tuple(
            Hazard(float(h["x"]), float(h["y"]), float(h["width"]), float(h["height"]),
                   int(h.get("damage", HAZARD_DAMAGE)))
            for h in raw.get("hazards", level.get("hazards", []))
        )
        frames = _frame_tables(
            raw.get("frames", FRAME_COUNTS),
            int(raw["player_threshold"]),
            int(raw["enemy_threshold"]),
        )
        return WorldConfig(
            width=float(raw["width"]),
            height=float(raw["height"]),
            ground_y=float(raw["ground_y"]),
            physics=physics,
            player=player,
            enemies=enemies,
            platforms=platforms,
            pickups=pickups,
            hazards=hazards,
            frames=frames,
            level_number=int(raw.get("number", level.get("number", 1))),
            name=raw.get("name", variant_name),
        )
    except (KeyError, TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid world config: {exc!r}") from exc


def build_world_config(variant: str = DEFAULT_VARIANT, level: Optional[str] = None) -> WorldConfig:
    """World config for a named variant, optionally on a different level"""
    data: Dict[str, Any] = {"variant": variant}
    if level is not None:
        data["level"] = level
    return world_config_from_dict(data)


def load_level(path: str) -> WorldConfig:
    """Load a JSON level file (same keys as world_config_from_dict)"""
    if not os.path.exists(path):
        raise ConfigError(f"Level file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top-level value must be an object")
    return world_config_from_dict(data)
