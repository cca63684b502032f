import math

import pytest

from game.kaboom.animation import Animation
from game.kaboom.config import build_world_config, world_config_from_dict
from game.kaboom.controls import Action, KeyMap
from game.kaboom.entities import EnemyMotion
from game.kaboom.simulation import Simulation


@pytest.fixture
def sim():
    return Simulation(build_world_config("kaboom"))


class TestLifecycle:
    def test_starts_running(self, sim):
        assert sim.running
        assert sim.tick_count == 0

    def test_menu_stops_the_loop(self, sim):
        sim.step()
        sim.inputs.press(Action.MENU)
        snap = sim.step()
        assert not sim.running
        assert not snap.running
        assert snap.tick == 1

    def test_step_after_stop_is_noop(self, sim):
        sim.stop()
        before = (sim.player.x, sim.player.y)
        snap = sim.step()
        assert (sim.player.x, sim.player.y) == before
        assert snap.tick == 0

    def test_run_stops_early(self, sim):
        sim.run(5)
        sim.inputs.press(Action.MENU)
        sim.run(100)
        assert sim.tick_count == 5

    def test_reset_restores_spawn(self, sim):
        sim.inputs.press(Action.MOVE_RIGHT)
        sim.run(30)
        sim.inputs.press(Action.MENU)
        sim.step()
        snap = sim.reset()
        assert sim.running
        assert (snap.player.x, snap.player.y) == (100.0, 300.0)
        assert not sim.inputs.is_held(Action.MOVE_RIGHT)
        assert snap.tick == 0


class TestPlayer:
    def test_spawn_falls_to_ground(self, sim):
        sim.run(24)
        assert sim.player.grounded
        assert sim.player.y == 478.0

    def test_input_between_ticks_seen_by_next_tick(self, sim):
        sim.run(24)
        sim.inputs.press(Action.MOVE_RIGHT)
        sim.step()
        assert sim.player.vx == 4.0
        assert sim.player.animation is Animation.RUN

    def test_player_lands_on_platform(self, sim):
        # walk under the platform at x=200..392, y=400 and jump onto it
        sim.run(24)
        sim.inputs.press(Action.MOVE_RIGHT)
        sim.run(40)
        sim.inputs.release(Action.MOVE_RIGHT)
        sim.inputs.press(Action.JUMP)
        sim.step()
        sim.inputs.release(Action.JUMP)
        sim.run(60)
        assert sim.player.grounded
        assert sim.player.y == 400.0 - sim.player.height


class TestEnemies:
    def test_static_enemies_do_not_move(self, sim):
        before = [(e.x, e.y) for e in sim.enemies]
        sim.run(100)
        assert [(e.x, e.y) for e in sim.enemies] == before

    def test_enemy_frames_advance_on_enemy_threshold(self, sim):
        sim.run(14)
        assert all(e.frame == 0 for e in sim.enemies)
        sim.step()
        assert all(e.frame == 1 for e in sim.enemies)
        assert all(e.animation is Animation.IDLE for e in sim.enemies)

    def test_enemy_frames_wrap(self, sim):
        # pirate/cucumber idle: 3 frames every 15 ticks
        sim.run(45)
        assert all(e.frame == 0 for e in sim.enemies)

    def test_drift_follows_sine(self):
        sim = Simulation(build_world_config("kaboom", "level1-sway"))
        first = sim.enemies[0]
        assert first.motion is EnemyMotion.DRIFT
        sim.step()
        assert first.x == pytest.approx(400.0)
        sim.step()
        assert first.x == pytest.approx(400.0 + math.sin(0.1) * 50.0)
        assert first.y == 350.0

    def test_drift_clamped_to_world(self):
        cfg = world_config_from_dict({
            "enemies": [{"kind": "pirate", "x": 990, "y": 100, "motion": "drift"}],
        })
        sim = Simulation(cfg)
        for _ in range(100):
            sim.step()
            assert 0.0 <= sim.enemies[0].x <= 1024.0 - 48.0

    def test_drifting_enemies_play_run(self):
        sim = Simulation(build_world_config("kaboom", "level1-sway"))
        sim.step()
        # sin(0) == 0: no movement on the first tick
        assert all(e.animation is Animation.IDLE for e in sim.enemies)
        sim.step()
        assert all(e.vx != 0 for e in sim.enemies)
        assert all(e.animation is Animation.RUN for e in sim.enemies)

    def test_static_enemies_stay_idle(self, sim):
        sim.run(50)
        assert all(e.animation is Animation.IDLE for e in sim.enemies)

    def test_drift_frames_in_range(self):
        sim = Simulation(build_world_config("kaboom", "level1-sway"))
        tables = sim.config.frames
        for _ in range(300):
            snap = sim.step()
            for e in snap.enemies:
                assert 0 <= e.frame < tables[e.kind].frame_count(e.animation)


class TestSnapshot:
    def test_contents(self, sim):
        snap = sim.step()
        assert snap.width == 1024.0
        assert snap.ground_y == 526.0
        assert len(snap.enemies) == 3
        assert len(snap.platforms) == 6
        assert snap.actors[-1] is snap.player
        assert snap.player.animation is Animation.FALL
        assert snap.hud.health == 100
        assert snap.hud.bombs == 3
        assert snap.hud.lives == 3
        assert snap.hud.level == 1

    def test_frame_always_in_range(self, sim):
        tables = sim.config.frames
        sim.inputs.press(Action.JUMP)
        sim.inputs.press(Action.MOVE_RIGHT)
        for i in range(400):
            if i == 200:
                sim.inputs.release(Action.MOVE_RIGHT)
                sim.inputs.press(Action.MOVE_LEFT)
            snap = sim.step()
            for a in snap.actors:
                assert 0 <= a.frame < tables[a.kind].frame_count(a.animation)

    def test_default_config(self):
        sim = Simulation()
        assert sim.config.name == "kaboom"


def single_pickup(kind, x=100, y=480):
    return Simulation(world_config_from_dict({
        "level": "empty",
        "pickups": [{"kind": kind, "x": x, "y": y}],
    }))


def floor_hazard(damage):
    # covers the ground strip; the falling player first touches it on tick 23
    return Simulation(world_config_from_dict({
        "level": "empty",
        "hazards": [{"x": 0, "y": 500, "width": 1024, "height": 26, "damage": damage}],
    }))


class TestPickups:
    def test_coin_in_spawn_drop_scores_without_input(self, sim):
        n = len(sim.pickups)
        snap = sim.run(24)
        assert snap.hud.score == 10
        assert snap.hud.tokens == 1
        assert len(sim.pickups) == n - 1
        assert len(snap.pickups) == n - 1

    def test_tokens_are_a_tenth_of_score(self):
        sim = Simulation(world_config_from_dict({
            "level": "empty",
            "pickups": [{"kind": "coin", "x": 100 + 40 * i, "y": 484} for i in range(3)],
        }))
        sim.run(24)
        sim.inputs.press(Action.MOVE_RIGHT)
        sim.run(40)
        assert sim.player.score == 30
        assert sim.player.tokens == 3
        assert sim.pickups == []

    def test_heart_heals(self):
        sim = single_pickup("heart")
        sim.player.health = 30
        sim.run(30)
        assert sim.player.health == 80
        assert sim.pickups == []

    def test_heart_capped_at_max(self):
        sim = single_pickup("heart")
        sim.player.health = 90
        snap = sim.run(30)
        assert snap.hud.health == 100

    def test_speed_boost_and_expiry(self):
        sim = single_pickup("speed")
        snap = sim.run(24)
        assert snap.hud.boosted
        sim.inputs.press(Action.MOVE_RIGHT)
        sim.step()
        assert sim.player.vx == pytest.approx(6.0)
        sim.player.speed_boost_ticks = 0
        snap = sim.step()
        assert sim.player.vx == 4.0
        assert not snap.hud.boosted

    def test_pickup_out_of_reach_stays(self):
        sim = single_pickup("coin", x=600, y=100)
        sim.run(60)
        assert sim.player.score == 0
        assert len(sim.pickups) == 1

    def test_reset_restores_pickups_and_stats(self, sim):
        sim.run(24)
        snap = sim.reset()
        assert snap.hud.score == 0
        assert len(snap.pickups) == len(sim.config.pickups)


class TestLives:
    def test_hazard_damage(self):
        sim = floor_hazard(25)
        sim.run(30)
        assert sim.player.health == 75
        assert sim.player.lives == 3

    def test_invulnerable_after_hit(self):
        sim = floor_hazard(25)
        snap = sim.run(60)
        assert snap.hud.health == 75
        assert snap.hud.invulnerable
        snap = sim.run(40)
        assert snap.hud.health == 50

    def test_losing_all_health_costs_a_life(self):
        sim = floor_hazard(100)
        sim.player.bombs = 0
        snap = sim.run(30)
        assert snap.hud.lives == 2
        assert snap.hud.health == 100
        assert snap.hud.bombs == 3
        assert sim.running

    def test_respawn_drops_in_from_above(self):
        sim = floor_hazard(100)
        sim.player.speed_boost_ticks = 50
        sim.run(30)
        p = sim.player
        assert p.x == 100.0
        assert p.y < 0
        assert not p.grounded
        assert p.animation is Animation.FALL
        assert p.invulnerable_ticks > 0
        assert p.speed_boost_ticks == 0

    def test_last_life_ends_the_game(self):
        sim = floor_hazard(100)
        sim.player.lives = 1
        snap = sim.run(100)
        assert sim.game_over
        assert not sim.running
        assert snap.game_over
        assert snap.hud.lives == 0
        assert snap.tick == 23

    def test_game_over_ignores_further_damage(self):
        sim = floor_hazard(100)
        sim.player.lives = 1
        sim.run(30)
        sim.hurt(50)
        assert sim.player.lives == 0

    def test_reset_after_game_over(self):
        sim = floor_hazard(100)
        sim.player.lives = 1
        sim.run(30)
        snap = sim.reset()
        assert not snap.game_over
        assert sim.running
        assert snap.hud.lives == 3

    def test_lose_life_directly(self, sim):
        sim.lose_life()
        assert sim.player.lives == 2
        assert sim.player.y == -sim.player.height


class TestResetListeners:
    def test_listener_runs_on_reset(self, sim):
        calls = []
        sim.on_reset(lambda: calls.append(sim.tick_count))
        sim.run(5)
        sim.reset()
        assert calls == [0]

    def test_key_map_forgets_keys_held_across_reset(self, sim):
        km = KeyMap()
        sim.on_reset(km.reset)
        km.key_down("A", sim.inputs)
        km.key_down("LEFT", sim.inputs)
        sim.reset()
        assert not sim.inputs.is_held(Action.MOVE_LEFT)
        # without the reset, the stale LEFT entry would keep the action held
        km.key_down("A", sim.inputs)
        km.key_up("A", sim.inputs)
        assert not sim.inputs.is_held(Action.MOVE_LEFT)
