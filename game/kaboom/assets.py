"""
Asset providers: map (actor kind, animation, frame index) to an image.

The simulation never depends on assets. A provider returning None tells the
renderer to draw a flat-coloured rectangle instead.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from PIL import Image

from .animation import Animation
from .config import PLACEHOLDER_COLORS, SPRITE_MANIFEST

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

FALLBACK_COLOR: Color = PLACEHOLDER_COLORS["player"]


class AssetProvider(Protocol):
    def frame(self, kind: str, animation: Animation, index: int) -> Optional[Image.Image]:
        ...


def placeholder_color(kind: str) -> Color:
    return PLACEHOLDER_COLORS.get(kind, FALLBACK_COLOR)


class PlaceholderAssets:
    """Generated solid-colour images, one per kind, shared by every frame"""

    def __init__(self, size: Tuple[int, int] = (64, 64), colors: Optional[Mapping[str, Color]] = None):
        self.size = size
        self.colors = dict(PLACEHOLDER_COLORS if colors is None else colors)
        self._cache: Dict[str, Image.Image] = {}

    def frame(self, kind: str, animation: Animation, index: int) -> Optional[Image.Image]:
        img = self._cache.get(kind)
        if img is None:
            color = self.colors.get(kind, FALLBACK_COLOR)
            img = Image.new("RGBA", self.size, color + (255,))
            self._cache[kind] = img
        return img


class SpriteFolderAssets:
    """
    Sprite frames loaded from ``<root>/<base>/<animation folder>/<n>.png``.

    Frame files are numbered from 1. Loading stops at the first missing file;
    frames that cannot be read are skipped with a warning. Kinds or
    animations with no frames yield None so the renderer falls back.
    """

    def __init__(
        self,
        root: str,
        manifest: Optional[Mapping[str, Mapping[str, str]]] = None,
        max_frames: int = 5,
    ):
        self.root = root
        self.manifest = manifest if manifest is not None else SPRITE_MANIFEST
        self.max_frames = max_frames
        self.frames: Dict[Tuple[str, Animation], List[Image.Image]] = {}

    def load(self) -> "SpriteFolderAssets":
        loaded = 0
        for kind, entry in self.manifest.items():
            base = os.path.join(self.root, entry.get("base", kind))
            for anim in Animation:
                folder = entry.get(anim.value)
                if folder is None:
                    continue
                frames = self._load_frames(os.path.join(base, folder))
                if not frames:
                    logger.warning("No frames for %s/%s under %s", kind, anim.value, base)
                self.frames[(kind, anim)] = frames
                loaded += len(frames)
        logger.info("Loaded %d sprite frames from %s", loaded, self.root)
        return self

    def _load_frames(self, folder: str) -> List[Image.Image]:
        frames = []
        for i in range(1, self.max_frames + 1):
            path = os.path.join(folder, f"{i}.png")
            if not os.path.exists(path):
                break
            try:
                with Image.open(path) as img:
                    frames.append(img.convert("RGBA"))
            except OSError as exc:
                logger.warning("Failed to load sprite %s: %s", path, exc)
        return frames

    def frame(self, kind: str, animation: Animation, index: int) -> Optional[Image.Image]:
        frames = self.frames.get((kind, animation))
        if not frames:
            return None
        # frame tables may count more frames than were found on disk
        return frames[index % len(frames)]
