import pytest

from game.kaboom.animation import (
    Animation,
    FrameSpec,
    FrameTable,
    advance_frame,
    select_animation,
    set_animation,
)
from game.kaboom.config import PhysicsConfig
from game.kaboom.controls import InputSnapshot
from game.kaboom.entities import Actor
from game.kaboom.physics import tick
from game.kaboom.utils import ConfigError


def table(count=5, threshold=10, overrides=None):
    specs = {a: FrameSpec(count, threshold) for a in Animation}
    specs.update(overrides or {})
    return FrameTable(specs)


class TestAnimationEnum:
    def test_parse_known_names(self):
        assert Animation.parse("idle") is Animation.IDLE
        assert Animation.parse("FALL") is Animation.FALL

    def test_parse_unknown_name(self):
        with pytest.raises(ValueError):
            Animation.parse("dance")


class TestFrameTable:
    def test_missing_animation_rejected(self):
        with pytest.raises(ConfigError, match="fall"):
            FrameTable({a: FrameSpec(1, 1) for a in Animation if a is not Animation.FALL})

    def test_zero_frames_rejected(self):
        with pytest.raises(ConfigError):
            table(overrides={Animation.RUN: FrameSpec(0, 10)})

    def test_zero_threshold_rejected(self):
        with pytest.raises(ConfigError):
            table(overrides={Animation.JUMP: FrameSpec(4, 0)})

    def test_from_dict_value_shapes(self):
        t = FrameTable.from_dict(
            {"idle": 5, "run": (14, 6), "jump": {"frames": 4, "threshold": 3}, "fall": 2},
            default_threshold=8,
        )
        assert t.frame_count(Animation.IDLE) == 5
        assert t.threshold(Animation.IDLE) == 8
        assert t.threshold(Animation.RUN) == 6
        assert t.frame_count(Animation.JUMP) == 4
        assert t.threshold(Animation.JUMP) == 3

    def test_from_dict_unknown_animation(self):
        with pytest.raises(ConfigError):
            FrameTable.from_dict({"idle": 1, "run": 1, "jump": 1, "fall": 1, "swim": 2})


class TestSelection:
    @pytest.mark.parametrize("grounded, vx, vy, expected", [
        (True, 0.0, 0.0, Animation.IDLE),
        (True, 4.0, 0.0, Animation.RUN),
        (True, -4.0, 0.0, Animation.RUN),
        (False, 0.0, -5.0, Animation.JUMP),
        (False, 4.0, 0.0, Animation.FALL),
        (False, 0.0, 3.0, Animation.FALL),
    ])
    def test_state_to_animation(self, grounded, vx, vy, expected):
        a = Actor(x=0, y=0, width=10, height=10, grounded=grounded, vx=vx, vy=vy)
        assert select_animation(a) is expected

    def test_switch_resets_frame_and_timer(self):
        a = Actor(x=0, y=0, width=10, height=10, frame=4, frame_timer=7)
        set_animation(a, Animation.FALL)
        assert a.animation is Animation.FALL
        assert (a.frame, a.frame_timer) == (0, 0)

    def test_same_animation_keeps_progress(self):
        a = Actor(x=0, y=0, width=10, height=10, frame=4, frame_timer=7)
        set_animation(a, Animation.IDLE)
        assert (a.frame, a.frame_timer) == (4, 7)


class TestFrameAdvance:
    def test_advances_on_threshold(self):
        t = table(count=5, threshold=10)
        a = Actor(x=0, y=0, width=10, height=10)
        for _ in range(9):
            advance_frame(a, t)
        assert a.frame == 0
        advance_frame(a, t)
        assert a.frame == 1
        assert a.frame_timer == 0

    def test_wraps_after_full_cycle(self):
        t = table(count=5, threshold=10)
        a = Actor(x=0, y=0, width=10, height=10)
        for i in range(5 * 10):
            advance_frame(a, t)
            assert 0 <= a.frame < 5
            if i == 5 * 10 - 2:
                assert a.frame == 4
        assert a.frame == 0

    def test_single_frame_animation_stays_at_zero(self):
        t = table(count=1, threshold=2)
        a = Actor(x=0, y=0, width=10, height=10)
        for _ in range(7):
            advance_frame(a, t)
            assert a.frame == 0

    def test_idle_cycle_through_tick(self):
        # standing still on the ground re-selects idle every tick and cycles its frames
        t = table(count=5, threshold=10)
        a = Actor(x=100, y=478, width=48, height=48, grounded=True)
        physics = PhysicsConfig()
        for _ in range(50):
            tick(a, InputSnapshot(), (), 526.0, 1024.0, physics, t)
            assert a.animation is Animation.IDLE
        assert a.frame == 0
