"""
Utility functions for game mechanics
"""

from __future__ import annotations
import random
from typing import Optional

import numpy as np


class ConfigError(ValueError):
    """Invalid world, level or frame table configuration"""


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def aabb_overlap(ax, ay, aw, ah, bx, by, bw, bh) -> bool:
    """Check if two axis-aligned boxes overlap (touching edges do not count)"""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
