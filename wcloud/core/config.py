# wcloud/core/config.py
"""
Central configuration for word cloud layout and rendering.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Canvas -----
DEFAULT_WIDTH_PX: int = 400
DEFAULT_HEIGHT_PX: int = 200

DEFAULT_SCALE: float = 1.0
"""Output image is rendered at scale x canvas size; placement stays at base resolution."""

BACKGROUND_RGBA: tuple[int, int, int, int] = (0, 0, 0, 255)
"""Library default background (opaque black)."""

CLI_BACKGROUND_RGBA: tuple[int, int, int, int] = (0, 0, 0, 0)
"""CLI default background (transparent) when --background-color is not given."""

MASK_PLACEABLE_VALUE: int = 0
"""Grayscale value of placeable mask pixels (black). Any other value is occupied."""

# ----- Tokenization -----
TOKEN_PATTERN: str = r"\w[\w']*"
"""Pre-tokenization regex: runs of word characters, apostrophes allowed after the first."""

MIN_WORD_LENGTH: int = 0
"""Segments with fewer characters are dropped."""

EXCLUDE_NUMBERS: bool = True
"""Drop all-digit segments."""

MAX_WORDS: int = 200
"""Truncation limit for the ranked word list; 0 = unlimited."""

# ----- Placement -----
MIN_FONT_SIZE: float = 4.0
MAX_FONT_SIZE: float | None = None
"""Optional cap on the first word's starting font size."""

FONT_STEP: float = 1.0
"""Amount the font size decays by when a word does not fit."""

WORD_MARGIN_PX: int = 2
"""Pixels added to each glyph bounding box before placement."""

ROTATE_CHANCE: float = 0.10
"""Probability that a word's first orientation is rotated 90 degrees."""

RELATIVE_SCALING: float = 0.5
"""Blend factor: size *= s * (freq / last_freq) + (1 - s)."""

FIRST_WORD_PROBE_HEIGHT_FRAC: float = 0.55
"""Font size (fraction of canvas height) used to measure the first word for the start-size heuristic."""

BELOW_MIN_FONT_POLICY: str = "stop"
"""What happens when frequency scaling drops below MIN_FONT_SIZE: 'stop' ends the run, 'skip' drops the word."""

# ----- Colors -----
COLOR_SATURATION_PCT: int = 100
COLOR_LIGHTNESS_PCT: int = 50
GREY_LIGHTNESS_RANGE_PCT: tuple[int, int] = (40, 100)

# ----- Determinism -----
SEED: int | None = None
"""Random seed for orientation, position and colour draws; None for non-deterministic."""

# ----- Fonts -----
DEFAULT_FONT_PATH: str | None = os.environ.get("WCLOUD_FONT_PATH") or None
"""Process-wide default font; read once at import. None = search DEFAULT_FONT_CANDIDATES."""

DEFAULT_FONT_CANDIDATES: tuple[str, ...] = (
    "NotoSansCJK-Regular.ttc",
    "NotoSansCJKsc-Regular.otf",
    "NotoSansSC-Regular.otf",
    "msyh.ttc",
    "simhei.ttf",
    "wqy-microhei.ttc",
    "DejaVuSans.ttf",
    "arial.ttf",
    "Arial.ttf",
)
"""Searched in order; CJK-capable fonts come before Latin-only ones so Chinese words get real glyphs."""

LATIN_ONLY_FONTS: frozenset[str] = frozenset({"DejaVuSans.ttf", "arial.ttf", "Arial.ttf"})
"""Fallback candidates without CJK coverage."""

# ----- Reports -----
REPORTS_DIR: str = "reports"
SCHEMA_VERSION: str = "1.0"

# ----- Debug rendering -----
DEBUG_DPI: int = 100
