"""
KaboomWindow - arcade host for the simulation
---------------------------------------------
- Key events feed the InputState through a KeyMap
- One simulation step per update callback; the window closes once the
  simulation stops (Escape)
- On game over the window stays open; Enter/R restarts the simulation
- Draws the RenderSnapshot: sky, ground band, platforms, hazards, pickups,
  actors, HUD
- Actors without an image are drawn as flat-coloured rectangles

Play:
    python -m game.kaboom.window --variant kaboom
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import arcade
from PIL import Image

from .assets import AssetProvider, PlaceholderAssets, SpriteFolderAssets, placeholder_color
from .config import DEFAULT_VARIANT, LEVELS, PLACEHOLDER_COLORS, VARIANTS, build_world_config, load_level
from .controls import Action, KeyMap
from .simulation import ActorView, RenderSnapshot, Simulation

logger = logging.getLogger(__name__)

ARCADE_BINDINGS = {
    arcade.key.A: Action.MOVE_LEFT,
    arcade.key.LEFT: Action.MOVE_LEFT,
    arcade.key.D: Action.MOVE_RIGHT,
    arcade.key.RIGHT: Action.MOVE_RIGHT,
    arcade.key.W: Action.JUMP,
    arcade.key.UP: Action.JUMP,
    arcade.key.SPACE: Action.JUMP,
    arcade.key.ESCAPE: Action.MENU,
}

# Accepted on the game-over screen
RESTART_KEYS = (arcade.key.ENTER, arcade.key.R)


class KaboomWindow(arcade.Window):
    """Arcade window that runs and draws a Simulation"""

    def __init__(
        self,
        sim: Simulation,
        assets: Optional[AssetProvider] = None,
        title: str = "Kaboom Pirate Game",
        fps: int = 60,
    ):
        super().__init__(int(sim.config.width), int(sim.config.height), title)
        self.sim = sim
        self.assets = assets if assets is not None else PlaceholderAssets()
        self.key_map = KeyMap(ARCADE_BINDINGS)
        # a reset clears the InputState, so the per-key bookkeeping must go too
        sim.on_reset(self.key_map.reset)
        self._textures: Dict[int, arcade.Texture] = {}
        self.set_update_rate(1 / fps)

        # Colors
        self.SKY_C = PLACEHOLDER_COLORS["sky"]
        self.GROUND_C = PLACEHOLDER_COLORS["ground"]
        self.PLATFORM_C = PLACEHOLDER_COLORS["platform"]
        self.HAZARD_C = PLACEHOLDER_COLORS["hazard"]
        self.BOOST_C = PLACEHOLDER_COLORS["speed"]
        self.PANEL_C = (173, 216, 230, 204)
        self.PANEL_EDGE_C = (70, 130, 180)
        self.HEALTH_C = (255, 68, 68)
        self.TEXT_C = (0, 0, 0)
        self.HINT_C = (255, 255, 255)

        self.background_color = self.SKY_C
        self._snapshot: RenderSnapshot = sim.snapshot()

    # ----------------------------
    # Input / update
    # ----------------------------

    def on_key_press(self, symbol: int, modifiers: int):
        if self.sim.game_over:
            if symbol in RESTART_KEYS:
                logger.info("Restarting after game over")
                self._snapshot = self.sim.reset()
            elif symbol == arcade.key.ESCAPE:
                self.close()
            return
        self.key_map.key_down(symbol, self.sim.inputs)

    def on_key_release(self, symbol: int, modifiers: int):
        self.key_map.key_up(symbol, self.sim.inputs)

    def on_update(self, delta_time: float):
        # fixed step: one tick per callback regardless of delta_time
        self._snapshot = self.sim.step()
        if not self.sim.running and not self.sim.game_over:
            logger.info("Returning to menu after %d ticks", self._snapshot.tick)
            self.close()

    # ----------------------------
    # Drawing
    # ----------------------------

    def _lrbt(self, x: float, y: float, w: float, h: float):
        """Canvas rect (y down) -> arcade left, right, bottom, top (y up)"""
        top = self.height - y
        return x, x + w, top - h, top

    def _texture(self, image: Image.Image) -> arcade.Texture:
        key = id(image)
        tex = self._textures.get(key)
        if tex is None:
            tex = arcade.Texture(image, hash=f"kaboom-{key}")
            self._textures[key] = tex
        return tex

    def _draw_actor(self, a: ActorView):
        left, right, bottom, top = self._lrbt(a.x, a.y, a.width, a.height)
        image = self.assets.frame(a.kind, a.animation, a.frame)
        if image is None:
            arcade.draw_lrbt_rectangle_filled(left, right, bottom, top, placeholder_color(a.kind))
            return
        arcade.draw_texture_rect(self._texture(image), arcade.LBWH(left, bottom, a.width, a.height))

    def on_draw(self):
        snap = self._snapshot
        self.clear()

        # Ground band
        arcade.draw_lrbt_rectangle_filled(*self._lrbt(0, snap.ground_y, snap.width, snap.height - snap.ground_y),
                                          self.GROUND_C)

        for p in snap.platforms:
            arcade.draw_lrbt_rectangle_filled(*self._lrbt(p.x, p.y, p.width, p.height), self.PLATFORM_C)

        for h in snap.hazards:
            arcade.draw_lrbt_rectangle_filled(*self._lrbt(h.x, h.y, h.width, h.height), self.HAZARD_C)

        for k in snap.pickups:
            arcade.draw_lrbt_rectangle_filled(*self._lrbt(k.x, k.y, k.width, k.height),
                                              placeholder_color(k.kind.value))

        # player blinks while invulnerable
        blink = snap.hud.invulnerable and (snap.tick // 6) % 2 == 1
        for a in snap.actors:
            if a is snap.player and blink:
                continue
            self._draw_actor(a)

        self._draw_hud(snap)
        if snap.game_over:
            self._draw_game_over(snap)

    def _draw_hud(self, snap: RenderSnapshot):
        hud = snap.hud

        # Left panel: health, bombs, score, tokens
        panel = self._lrbt(20, 20, 280, 120)
        arcade.draw_lrbt_rectangle_filled(*panel, self.PANEL_C)
        arcade.draw_lrbt_rectangle_outline(*panel, self.PANEL_EDGE_C, 2)

        arcade.draw_text(f"Health: {hud.health}/{hud.max_health}", 30, self.height - 45, self.HEALTH_C, 14)
        fill = 200 * max(0.0, min(1.0, hud.health / max(1, hud.max_health)))
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(*self._lrbt(30, 50, fill, 10), self.HEALTH_C)
        arcade.draw_lrbt_rectangle_outline(*self._lrbt(30, 50, 200, 10), self.PANEL_EDGE_C, 1)
        arcade.draw_text(f"Bombs: {hud.bombs}/{hud.max_bombs}", 30, self.height - 80, self.TEXT_C, 14)
        arcade.draw_text(f"Score: {hud.score}", 30, self.height - 100, self.TEXT_C, 14)
        arcade.draw_text(f"Tokens: {hud.tokens}", 30, self.height - 120, self.TEXT_C, 14)

        # Right panel: level and lives
        x0 = self.width - 300
        panel = self._lrbt(x0, 20, 280, 120)
        arcade.draw_lrbt_rectangle_filled(*panel, self.PANEL_C)
        arcade.draw_lrbt_rectangle_outline(*panel, self.PANEL_EDGE_C, 2)
        arcade.draw_text(f"Level {hud.level}", x0 + 10, self.height - 45, self.TEXT_C, 14)
        arcade.draw_text(f"Lives: {hud.lives}", x0 + 10, self.height - 70, self.TEXT_C, 14)
        arcade.draw_text(f"Anim: {snap.player.animation.value} #{snap.player.frame}",
                         x0 + 10, self.height - 95, self.TEXT_C, 12)
        if hud.boosted:
            arcade.draw_text("SPEED BOOST", x0 + 10, self.height - 120, self.BOOST_C, 12)

        arcade.draw_text("WASD/Arrows: Move | Space: Jump | ESC: Menu", 20, 20, self.HINT_C, 12)

    def _draw_game_over(self, snap: RenderSnapshot):
        arcade.draw_lrbt_rectangle_filled(0, self.width, 0, self.height, (0, 0, 0, 160))
        arcade.draw_text("GAME OVER", self.width / 2, self.height / 2 + 20, self.HINT_C, 36,
                         anchor_x="center")
        arcade.draw_text(f"Score: {snap.hud.score} | Enter/R: Restart | ESC: Quit",
                         self.width / 2, self.height / 2 - 30, self.HINT_C, 14, anchor_x="center")


def main():
    parser = argparse.ArgumentParser(description="Play the Kaboom platformer")
    parser.add_argument(
        "--variant",
        type=str,
        default=DEFAULT_VARIANT,
        choices=sorted(VARIANTS),
        help=f"Tuning preset (default: {DEFAULT_VARIANT})",
    )
    parser.add_argument(
        "--level",
        type=str,
        default=None,
        choices=sorted(LEVELS),
        help="Built-in level layout (default: the variant's own)",
    )
    parser.add_argument(
        "--level-file",
        type=str,
        default=None,
        help="JSON level file (overrides --variant/--level)",
    )
    parser.add_argument(
        "--sprites",
        type=str,
        default=None,
        help="Sprite root folder; placeholders are drawn when omitted",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.level_file:
        config = load_level(args.level_file)
    else:
        config = build_world_config(args.variant, args.level)

    assets = SpriteFolderAssets(args.sprites).load() if args.sprites else PlaceholderAssets()

    sim = Simulation(config)
    KaboomWindow(sim, assets)
    arcade.run()


if __name__ == "__main__":
    main()
