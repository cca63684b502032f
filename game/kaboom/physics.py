"""
Per-tick kinematics for one actor.

The step order is fixed and collision tie-breaks depend on it: intent, jump,
gravity, Euler integration, ground check, platform landings, boundary clamp,
animation selection, frame advance. Constants are in units per tick, so the
step size is implicitly one tick.
"""

from __future__ import annotations

from typing import Iterable

from .animation import FrameTable, advance_frame, select_animation, set_animation
from .config import PhysicsConfig
from .controls import Action, InputSnapshot
from .entities import Actor, Platform
from .utils import clamp


def apply_intent(actor: Actor, inputs: InputSnapshot, physics: PhysicsConfig) -> None:
    # left is checked first, so it wins when both directions are held
    if inputs.is_held(Action.MOVE_LEFT):
        actor.vx = -physics.speed
    elif inputs.is_held(Action.MOVE_RIGHT):
        actor.vx = physics.speed
    else:
        actor.vx = 0.0

    # held jump re-triggers on every grounded tick (no debounce)
    if inputs.is_held(Action.JUMP) and actor.grounded:
        actor.vy = -physics.jump_power
        actor.grounded = False


def integrate(actor: Actor, physics: PhysicsConfig) -> None:
    actor.vy += physics.gravity
    actor.x += actor.vx
    actor.y += actor.vy


def resolve_ground(actor: Actor, ground_y: float) -> None:
    if actor.bottom >= ground_y:
        actor.y = ground_y - actor.height
        actor.vy = 0.0
        actor.grounded = True


def resolve_platforms(actor: Actor, platforms: Iterable[Platform]) -> None:
    """Land on platform tops only; sides and undersides are pass-through"""
    for p in platforms:
        # strict: touching edges do not overlap
        if not (actor.left < p.x + p.width and actor.right > p.x
                and actor.top < p.y + p.height and actor.bottom > p.y):
            continue
        if actor.vy > 0 and actor.top < p.y:
            actor.y = p.y - actor.height
            actor.vy = 0.0
            actor.grounded = True


def clamp_to_world(actor: Actor, world_width: float) -> None:
    actor.x = clamp(actor.x, 0.0, world_width - actor.width)


def tick(
    actor: Actor,
    inputs: InputSnapshot,
    platforms: Iterable[Platform],
    ground_y: float,
    world_width: float,
    physics: PhysicsConfig,
    frames: FrameTable,
) -> None:
    """Advance one actor by one fixed step. Never raises for in-range config."""
    apply_intent(actor, inputs, physics)
    integrate(actor, physics)

    actor.grounded = False
    resolve_ground(actor, ground_y)
    resolve_platforms(actor, platforms)

    clamp_to_world(actor, world_width)

    set_animation(actor, select_animation(actor))
    advance_frame(actor, frames)
