# wcloud/core/layout.py
"""
Word cloud orchestration: frequency analysis, occupancy setup, placement, rendering.
One RNG per run is threaded through orientation choice, position sampling and colours, in that order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from PIL import Image

from wcloud.core.colors import RGBA, ColorSelector, random_hue_color
from wcloud.core.config import (
    BACKGROUND_RGBA,
    DEFAULT_HEIGHT_PX,
    DEFAULT_SCALE,
    DEFAULT_WIDTH_PX,
    SEED,
)
from wcloud.core.error_codes import NO_WORDS, WordCloudError
from wcloud.core.io import validate_mask
from wcloud.core.placement import MeasureFn, plan_layout
from wcloud.core.render import render_word_cloud
from wcloud.core.sat import OccupancyMap
from wcloud.core.text_metrics import GlyphMetrics
from wcloud.core.tokenizer import Segmenter, analyze
from wcloud.core.types import (
    PlacedWord,
    PlacementOptions,
    StopReason,
    TokenizerOptions,
    WordFrequency,
)
from wcloud.core.validate import find_overlaps, rects_outside_mask

logger = logging.getLogger(__name__)


@dataclass
class LayoutSummary:
    """Summary of one word cloud layout run."""
    words: list[WordFrequency]
    placements: list[PlacedWord]
    failed_words: list[str]
    width: int
    height: int
    has_mask: bool
    seed: int | None
    start_font_size: float
    stop_reason: StopReason
    collisions_detected: int


def _as_word_frequencies(words: Iterable[WordFrequency | tuple[str, float]]) -> list[WordFrequency]:
    return [w if isinstance(w, WordFrequency) else WordFrequency(text=w[0], weight=float(w[1])) for w in words]


def layout_from_frequencies(
    words: Iterable[WordFrequency | tuple[str, float]],
    width: int = DEFAULT_WIDTH_PX,
    height: int = DEFAULT_HEIGHT_PX,
    mask: np.ndarray | None = None,
    placement_options: PlacementOptions | None = None,
    seed: int | None = SEED,
    font_path: str | None = None,
    measure: MeasureFn | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[LayoutSummary, OccupancyMap]:
    """
    Place already-ranked words (highest weight first). With a mask, the canvas takes the
    mask's shape and width/height are ignored. Returns the summary and the final occupancy.
    """
    ranked = _as_word_frequencies(words)
    if mask is not None:
        mask = validate_mask(mask)
    occupancy = OccupancyMap(width, height, mask=mask)
    if not ranked:
        raise WordCloudError(NO_WORDS)

    options = placement_options or PlacementOptions()
    if measure is None:
        measure = GlyphMetrics(font_path)
    if rng is None:
        rng = np.random.default_rng(seed)

    run = plan_layout(ranked, occupancy, measure, rng, options)

    collisions = len(find_overlaps(run.placements))
    if mask is not None:
        collisions += len(rects_outside_mask(run.placements, mask))
    if collisions:
        logger.warning("Layout has %d overlapping or out-of-mask placements", collisions)

    summary = LayoutSummary(
        words=ranked,
        placements=run.placements,
        failed_words=run.failed,
        width=occupancy.width,
        height=occupancy.height,
        has_mask=occupancy.has_mask,
        seed=seed,
        start_font_size=run.start_font_size,
        stop_reason=run.stop_reason,
        collisions_detected=collisions,
    )
    logger.info(
        "Placed %d of %d words on %dx%d canvas (stop reason: %s)",
        len(run.placements), len(ranked), occupancy.width, occupancy.height, run.stop_reason,
    )
    return summary, occupancy


def run_word_cloud_layout(
    text: str,
    width: int = DEFAULT_WIDTH_PX,
    height: int = DEFAULT_HEIGHT_PX,
    mask: np.ndarray | None = None,
    tokenizer_options: TokenizerOptions | None = None,
    placement_options: PlacementOptions | None = None,
    seed: int | None = SEED,
    font_path: str | None = None,
    segmenter: Segmenter | None = None,
    measure: MeasureFn | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[LayoutSummary, OccupancyMap]:
    """
    Analyze text and place the ranked words. Raises WordCloudError(no_words) when
    nothing survives filtering.
    """
    words = analyze(text, tokenizer_options, segmenter)
    if not words:
        raise WordCloudError(NO_WORDS)
    return layout_from_frequencies(
        words,
        width=width,
        height=height,
        mask=mask,
        placement_options=placement_options,
        seed=seed,
        font_path=font_path,
        measure=measure,
        rng=rng,
    )


def generate_word_cloud(
    text: str,
    width: int = DEFAULT_WIDTH_PX,
    height: int = DEFAULT_HEIGHT_PX,
    mask: np.ndarray | None = None,
    tokenizer_options: TokenizerOptions | None = None,
    placement_options: PlacementOptions | None = None,
    seed: int | None = SEED,
    font_path: str | None = None,
    scale: float = DEFAULT_SCALE,
    background_color: RGBA = BACKGROUND_RGBA,
    color_func: ColorSelector = random_hue_color,
    segmenter: Segmenter | None = None,
) -> tuple[Image.Image, LayoutSummary]:
    """Full pipeline: text -> layout -> RGBA image at scale x canvas size."""
    options = placement_options or PlacementOptions()
    rng = np.random.default_rng(seed)
    summary, _ = run_word_cloud_layout(
        text,
        width=width,
        height=height,
        mask=mask,
        tokenizer_options=tokenizer_options,
        placement_options=options,
        seed=seed,
        font_path=font_path,
        segmenter=segmenter,
        rng=rng,
    )
    image = render_word_cloud(
        summary.placements,
        summary.width,
        summary.height,
        rng,
        scale=scale,
        background_color=background_color,
        color_func=color_func,
        font_path=font_path,
        word_margin=options.word_margin,
    )
    return image, summary
