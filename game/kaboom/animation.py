"""
Animation state machine: closed set of animations, per-kind frame tables,
selection from kinematic state and timed frame advance.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, TYPE_CHECKING

from .utils import ConfigError

if TYPE_CHECKING:
    from .entities import Actor


class Animation(str, Enum):
    IDLE = "idle"
    RUN = "run"
    JUMP = "jump"
    FALL = "fall"

    @classmethod
    def parse(cls, name: str) -> "Animation":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown animation: {name!r}") from None


@dataclass(frozen=True)
class FrameSpec:
    count: int
    threshold: int  # ticks per frame


class FrameTable:
    """Frame count and advance threshold for every Animation of one actor kind"""

    def __init__(self, specs: Mapping[Animation, FrameSpec]):
        missing = [a.value for a in Animation if a not in specs]
        if missing:
            raise ConfigError(f"Frame table is missing animations: {', '.join(missing)}")
        for anim, spec in specs.items():
            if spec.count < 1:
                raise ConfigError(f"{anim.value}: frame count must be >= 1, got {spec.count}")
            if spec.threshold < 1:
                raise ConfigError(f"{anim.value}: threshold must be >= 1, got {spec.threshold}")
        self._specs: Dict[Animation, FrameSpec] = dict(specs)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], default_threshold: int = 10) -> "FrameTable":
        """
        Build from a config mapping. Values are either a frame count or a
        ``(count, threshold)`` pair / ``{"frames": .., "threshold": ..}`` dict.
        """
        specs = {}
        for name, value in data.items():
            try:
                anim = Animation.parse(name)
            except ValueError as exc:
                raise ConfigError(str(exc)) from None
            if isinstance(value, Mapping):
                spec = FrameSpec(int(value["frames"]), int(value.get("threshold", default_threshold)))
            elif isinstance(value, (tuple, list)):
                spec = FrameSpec(int(value[0]), int(value[1]))
            else:
                spec = FrameSpec(int(value), default_threshold)
            specs[anim] = spec
        return cls(specs)

    def frame_count(self, animation: Animation) -> int:
        return self._specs[animation].count

    def threshold(self, animation: Animation) -> int:
        return self._specs[animation].threshold

    def __eq__(self, other) -> bool:
        return isinstance(other, FrameTable) and self._specs == other._specs

    def __repr__(self) -> str:
        body = ", ".join(f"{a.value}={s.count}/{s.threshold}" for a, s in self._specs.items())
        return f"FrameTable({body})"


def select_animation(actor: "Actor") -> Animation:
    """Derive the animation from grounded/velocity state"""
    if actor.grounded:
        return Animation.IDLE if actor.vx == 0 else Animation.RUN
    return Animation.JUMP if actor.vy < 0 else Animation.FALL


def set_animation(actor: "Actor", animation: Animation) -> None:
    # switching restarts the cycle so frame stays within the new animation's range
    if actor.animation is animation:
        return
    actor.animation = animation
    actor.frame = 0
    actor.frame_timer = 0


def advance_frame(actor: "Actor", table: FrameTable) -> None:
    actor.frame_timer += 1
    if actor.frame_timer >= table.threshold(actor.animation):
        actor.frame_timer = 0
        actor.frame = (actor.frame + 1) % table.frame_count(actor.animation)
