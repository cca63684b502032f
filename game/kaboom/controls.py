"""
Logical input actions and the held-state map the simulation reads once per tick.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Hashable, Mapping, Optional, Set


class Action(str, Enum):
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    JUMP = "jump"
    MENU = "menu"


# Host key names -> actions (A/D/W + arrows + space, Escape opens the menu)
DEFAULT_BINDINGS: Dict[str, Action] = {
    "A": Action.MOVE_LEFT,
    "LEFT": Action.MOVE_LEFT,
    "D": Action.MOVE_RIGHT,
    "RIGHT": Action.MOVE_RIGHT,
    "W": Action.JUMP,
    "UP": Action.JUMP,
    "SPACE": Action.JUMP,
    "ESCAPE": Action.MENU,
}


class InputState:
    """Held/not-held flag per Action, mutated by key events between ticks"""

    def __init__(self):
        self._held: Dict[Action, bool] = {a: False for a in Action}

    def press(self, action: Action) -> None:
        self._held[action] = True

    def release(self, action: Action) -> None:
        self._held[action] = False

    def is_held(self, action: Action) -> bool:
        return self._held[action]

    def clear(self) -> None:
        for a in self._held:
            self._held[a] = False

    def snapshot(self) -> "InputSnapshot":
        return InputSnapshot(frozenset(a for a, held in self._held.items() if held))

    def __repr__(self) -> str:
        held = ", ".join(a.value for a, h in self._held.items() if h)
        return f"InputState({held})"


class InputSnapshot:
    """Immutable view of the held actions, taken at the start of a tick"""

    __slots__ = ("held",)

    def __init__(self, held: FrozenSet[Action] = frozenset()):
        self.held = held

    @classmethod
    def of(cls, *actions: Action) -> "InputSnapshot":
        return cls(frozenset(actions))

    def is_held(self, action: Action) -> bool:
        return action in self.held


class KeyMap:
    """
    Translates host key codes into actions on an InputState.

    Any hashable can be a key (key names, arcade key codes). Unmapped keys
    are ignored and reported as None. When several keys share an action the
    action stays held until the last of them is released.
    """

    def __init__(self, bindings: Optional[Mapping[Hashable, Action]] = None):
        self.bindings: Dict[Hashable, Action] = dict(DEFAULT_BINDINGS if bindings is None else bindings)
        self._down: Dict[Action, Set[Hashable]] = {a: set() for a in Action}

    def action_for(self, key: Hashable) -> Optional[Action]:
        return self.bindings.get(key)

    def key_down(self, key: Hashable, state: InputState) -> Optional[Action]:
        action = self.action_for(key)
        if action is not None:
            self._down[action].add(key)
            state.press(action)
        return action

    def key_up(self, key: Hashable, state: InputState) -> Optional[Action]:
        action = self.action_for(key)
        if action is not None:
            self._down[action].discard(key)
            if not self._down[action]:
                state.release(action)
        return action

    def reset(self) -> None:
        for keys in self._down.values():
            keys.clear()
