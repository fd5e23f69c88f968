# wcloud/core/colors.py
"""
Colour selection strategies for rendering. A selector is called once per placed word,
in placement order, with the run's RNG.
"""

from __future__ import annotations

from typing import Callable

import matplotlib
import numpy as np
from matplotlib.colors import to_rgba
from PIL import ImageColor

from wcloud.core.config import (
    COLOR_LIGHTNESS_PCT,
    COLOR_SATURATION_PCT,
    GREY_LIGHTNESS_RANGE_PCT,
)
from wcloud.core.types import PlacedWord

RGBA = tuple[int, int, int, int]
ColorSelector = Callable[[PlacedWord, np.random.Generator], RGBA]


def parse_color(value: str) -> RGBA:
    """Parse '#rrggbb', '#rrggbbaa' or a named colour into 8-bit RGBA."""
    r, g, b, a = to_rgba(value)
    return (round(r * 255), round(g * 255), round(b * 255), round(a * 255))


def _hsl(hue: int, saturation_pct: int, lightness_pct: int) -> RGBA:
    r, g, b = ImageColor.getrgb(f"hsl({hue}, {saturation_pct}%, {lightness_pct}%)")[:3]
    return (r, g, b, 255)


def random_hue_color(word: PlacedWord, rng: np.random.Generator) -> RGBA:
    """Random hue at fixed saturation and lightness. Default selector."""
    return _hsl(int(rng.integers(0, 360)), COLOR_SATURATION_PCT, COLOR_LIGHTNESS_PCT)


def random_grey_color(word: PlacedWord, rng: np.random.Generator) -> RGBA:
    """Grey with random lightness, for dark backgrounds."""
    low, high = GREY_LIGHTNESS_RANGE_PCT
    return _hsl(0, 0, int(rng.integers(low, high)))


def _colormap(name: str):
    if name not in matplotlib.colormaps:
        raise ValueError(f"Unknown colormap: {name!r}")
    return matplotlib.colormaps[name]


def colormap_color(name: str) -> ColorSelector:
    """Selector sampling a matplotlib colormap at a random position."""
    cmap = _colormap(name)

    def select(word: PlacedWord, rng: np.random.Generator) -> RGBA:
        r, g, b, _ = cmap(float(rng.uniform(0.0, 1.0)))
        return (round(r * 255), round(g * 255), round(b * 255), 255)

    return select


def frequency_colormap_color(name: str) -> ColorSelector:
    """Selector mapping word frequency onto a colormap (no RNG draw)."""
    cmap = _colormap(name)

    def select(word: PlacedWord, rng: np.random.Generator) -> RGBA:
        r, g, b, _ = cmap(float(word.frequency))
        return (round(r * 255), round(g * 255), round(b * 255), 255)

    return select


COLOR_SELECTORS: dict[str, ColorSelector] = {
    "hue": random_hue_color,
    "grey": random_grey_color,
}


def get_color_selector(name: str) -> ColorSelector:
    """'hue', 'grey', 'cmap:<name>' (random position) or 'freq:<name>' (by frequency)."""
    if name in COLOR_SELECTORS:
        return COLOR_SELECTORS[name]
    kind, _, cmap_name = name.partition(":")
    if kind == "cmap" and cmap_name:
        return colormap_color(cmap_name)
    if kind == "freq" and cmap_name:
        return frequency_colormap_color(cmap_name)
    raise ValueError(f"Unknown color selector: {name!r}")
