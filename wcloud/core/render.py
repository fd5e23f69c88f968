# wcloud/core/render.py
"""
Canvas assembly: composite placed words onto a background with Pillow.
Debug overlay (occupancy grid + placement boxes) with matplotlib.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle
from PIL import Image, ImageDraw

from wcloud.core.colors import RGBA, ColorSelector, random_hue_color
from wcloud.core.config import BACKGROUND_RGBA, DEBUG_DPI, DEFAULT_SCALE, WORD_MARGIN_PX
from wcloud.core.text_metrics import load_font, text_extent
from wcloud.core.types import PlacedWord


def _word_tile(word: PlacedWord, color: RGBA, scale: float, font_path: str | None) -> Image.Image:
    """Word drawn on a transparent tile, rotated 90 degrees counter-clockwise if needed."""
    size = word.font_size * scale
    font = load_font(font_path, float(size))
    x_offset, w, h = text_extent(font, word.text)
    tile = Image.new("RGBA", (max(1, w), max(1, h)), (0, 0, 0, 0))
    ImageDraw.Draw(tile).text((x_offset, 0), word.text, font=font, fill=color)
    if word.rotated:
        tile = tile.transpose(Image.Transpose.ROTATE_90)
    return tile


def draw_word(
    canvas: Image.Image,
    word: PlacedWord,
    color: RGBA,
    scale: float = DEFAULT_SCALE,
    font_path: str | None = None,
    word_margin: int = WORD_MARGIN_PX,
) -> None:
    """Blend one word onto canvas. Glyphs start half a margin inside the placement box."""
    tile = _word_tile(word, color, scale, font_path)
    half = word_margin / 2.0
    x = int(round((word.position.x + half) * scale))
    y = int(round((word.position.y + half) * scale))
    w = min(tile.width, canvas.width - x)
    h = min(tile.height, canvas.height - y)
    if w <= 0 or h <= 0:
        return
    canvas.alpha_composite(tile.crop((0, 0, w, h)), dest=(x, y))


def render_word_cloud(
    placements: list[PlacedWord],
    width: int,
    height: int,
    rng: np.random.Generator,
    scale: float = DEFAULT_SCALE,
    background_color: RGBA = BACKGROUND_RGBA,
    color_func: ColorSelector = random_hue_color,
    font_path: str | None = None,
    word_margin: int = WORD_MARGIN_PX,
) -> Image.Image:
    """
    Composite placements, in order, onto a (width x height) x scale RGBA canvas.
    color_func draws from rng once per word, after placement has finished.
    """
    out_w = max(1, int(width * scale))
    out_h = max(1, int(height * scale))
    canvas = Image.new("RGBA", (out_w, out_h), tuple(background_color))
    for word in placements:
        color = color_func(word, rng)
        draw_word(canvas, word, color, scale=scale, font_path=font_path, word_margin=word_margin)
    return canvas


def render_debug(
    occupancy_grid: np.ndarray,
    placements: list[PlacedWord],
    output_path: str | Path,
    mask: np.ndarray | None = None,
) -> None:
    """Render occupancy grid with placement boxes outlined (rotated boxes dashed)."""
    h, w = occupancy_grid.shape
    fig = plt.figure(figsize=(w / DEBUG_DPI, h / DEBUG_DPI), dpi=DEBUG_DPI, constrained_layout=False)
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.axis("off")
    ax.imshow(occupancy_grid, cmap="Greys", vmin=0, vmax=1, interpolation="nearest")
    if mask is not None:
        ax.contour(mask != 0, levels=[0.5], colors="orange", linewidths=1)
    for word in placements:
        ax.add_patch(Rectangle(
            (word.position.x - 0.5, word.position.y - 0.5),
            word.rect.width,
            word.rect.height,
            fill=False,
            edgecolor="red",
            linewidth=1,
            linestyle="--" if word.rotated else "-",
        ))
    ax.set_xlim(-0.5, w - 0.5)
    ax.set_ylim(h - 0.5, -0.5)
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=DEBUG_DPI, facecolor="white")
    plt.close(fig)
