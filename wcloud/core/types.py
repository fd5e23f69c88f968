# wcloud/core/types.py
"""
Dataclasses for ranked words, rectangles, anchors, placements and option groups.
Placements serialize through reporting.placement_to_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from wcloud.core.config import (
    BELOW_MIN_FONT_POLICY,
    EXCLUDE_NUMBERS,
    FONT_STEP,
    MAX_FONT_SIZE,
    MAX_WORDS,
    MIN_FONT_SIZE,
    MIN_WORD_LENGTH,
    RELATIVE_SCALING,
    ROTATE_CHANCE,
    TOKEN_PATTERN,
    WORD_MARGIN_PX,
)
from wcloud.core.error_codes import INVALID_OPTION, WordCloudError

BelowMinFontPolicy = Literal["stop", "skip"]
StopReason = Literal["completed", "font_below_minimum"]


@dataclass(frozen=True)
class WordFrequency:
    """A ranked word and its normalized weight in (0, 1]."""
    text: str
    weight: float


@dataclass(frozen=True)
class Rect:
    """Bounding box (margin included) of a word at a given size and orientation."""
    width: int
    height: int


@dataclass(frozen=True)
class Point:
    """Top-left placement anchor on the canvas."""
    x: int
    y: int


@dataclass(frozen=True)
class PlacedWord:
    """One committed placement. The ordered list of these is the layout output."""
    text: str
    font_size: float
    rect: Rect
    position: Point
    rotated: bool
    frequency: float
    index: int

    def bounds(self) -> tuple[int, int, int, int]:
        """Return (x0, y0, x1, y1), x1/y1 exclusive."""
        return (
            self.position.x,
            self.position.y,
            self.position.x + self.rect.width,
            self.position.y + self.rect.height,
        )


@dataclass
class PlacementOutcome:
    """Result of one word's size/orientation search."""
    text: str
    placed: PlacedWord | None
    font_size: float
    attempts: list[tuple[float, bool]] = field(default_factory=list)  # (font_size, rotated)


@dataclass(frozen=True)
class TokenizerOptions:
    """Frequency analyzer filters and limits."""
    pattern: str = TOKEN_PATTERN
    min_word_length: int = MIN_WORD_LENGTH
    exclude_numbers: bool = EXCLUDE_NUMBERS
    exclude_words: frozenset[str] = frozenset()
    max_words: int = MAX_WORDS
    extra_words: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlacementOptions:
    """Font-size search and orientation settings for the planner."""
    min_font_size: float = MIN_FONT_SIZE
    max_font_size: float | None = MAX_FONT_SIZE
    font_step: float = FONT_STEP
    word_margin: int = WORD_MARGIN_PX
    rotate_chance: float = ROTATE_CHANCE
    relative_scaling: float = RELATIVE_SCALING
    repeat: bool = False
    below_min_font: BelowMinFontPolicy = BELOW_MIN_FONT_POLICY  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not self.font_step > 0:
            raise WordCloudError(INVALID_OPTION, f"font_step={self.font_step}")
        if not 0.0 <= self.rotate_chance <= 1.0:
            raise WordCloudError(INVALID_OPTION, f"rotate_chance={self.rotate_chance}")
        if not 0.0 <= self.relative_scaling <= 1.0:
            raise WordCloudError(INVALID_OPTION, f"relative_scaling={self.relative_scaling}")
        if self.word_margin < 0:
            raise WordCloudError(INVALID_OPTION, f"word_margin={self.word_margin}")
        if self.below_min_font not in ("stop", "skip"):
            raise WordCloudError(INVALID_OPTION, f"below_min_font={self.below_min_font!r}")
