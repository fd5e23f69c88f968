# wcloud/core/text_metrics.py
"""
Glyph metrics with Pillow: pixel width/height of a word at a font size.
Fonts are loaded lazily and cached per (path, size).
"""

from __future__ import annotations

import math
import warnings
from functools import lru_cache

from PIL import ImageFont

from wcloud.core.config import DEFAULT_FONT_CANDIDATES, DEFAULT_FONT_PATH, LATIN_ONLY_FONTS
from wcloud.core.error_codes import FONT_LOAD_FAILED, WordCloudError

_font_warning_emitted: set[str] = set()


def _load_default_font(size: float):
    """Default font: configured path, then common system fonts, then Pillow's bundled font."""
    candidates = ([DEFAULT_FONT_PATH] if DEFAULT_FONT_PATH else []) + list(DEFAULT_FONT_CANDIDATES)
    for name in candidates:
        try:
            font = ImageFont.truetype(name, size=size)
        except OSError:
            continue
        if name in LATIN_ONLY_FONTS and "latin" not in _font_warning_emitted:
            _font_warning_emitted.add("latin")
            warnings.warn(f"No CJK font found; using {name}. Set WCLOUD_FONT_PATH for CJK text.", UserWarning)
        return font
    if "default" not in _font_warning_emitted:
        _font_warning_emitted.add("default")
        warnings.warn("No system font found; using Pillow's bundled default font.", UserWarning)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=512)
def load_font(font_path: str | None, size: float):
    """
    Load a font at the given pixel size. font_path=None uses the default font.
    An explicit path that cannot be decoded raises WordCloudError(font_load_failed).
    """
    if font_path is None:
        return _load_default_font(size)
    try:
        return ImageFont.truetype(font_path, size=size)
    except OSError as e:
        raise WordCloudError(FONT_LOAD_FAILED, f"{font_path}: {e}") from e


def check_font(font_path: str | None) -> None:
    """Fail early on an unreadable font before any layout work."""
    load_font(font_path, 12.0)


def text_extent(font, text: str) -> tuple[int, int, int]:
    """
    (x_offset, width_px, height_px) of text on one line. The box spans the advance length and
    the ink bounds, so glyphs with a negative left bearing or a right overhang fit inside it;
    draw at (x_offset, 0). Height is at least the font's ascent + descent.
    """
    left, _, right, bottom = font.getbbox(text)
    x0 = min(0, left)
    x1 = max(font.getlength(text), right)
    ascent, descent = font.getmetrics()
    height = max(ascent + descent, bottom)
    return (-int(math.floor(x0)), int(math.ceil(x1 - x0)), int(math.ceil(height)))


def measure_text_px(text: str, font_size: float, font_path: str | None = None) -> tuple[int, int]:
    """Return (width_px, height_px) of text on one line (see text_extent)."""
    _, width, height = text_extent(load_font(font_path, float(font_size)), text)
    return (width, height)


class GlyphMetrics:
    """Metrics provider bound to one font; callable as measure(text, font_size)."""

    def __init__(self, font_path: str | None = None) -> None:
        self.font_path = font_path
        check_font(font_path)

    def __call__(self, text: str, font_size: float) -> tuple[int, int]:
        return measure_text_px(text, font_size, self.font_path)
