# wcloud/core/placement.py
"""
Greedy placement planner. Words are placed in ranked order; each word searches
font sizes downward from the inherited size, then retries in the other orientation,
picking a uniformly random free anchor from the occupancy map.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from wcloud.core.config import FIRST_WORD_PROBE_HEIGHT_FRAC
from wcloud.core.sat import OccupancyMap
from wcloud.core.types import (
    PlacedWord,
    PlacementOptions,
    PlacementOutcome,
    Rect,
    StopReason,
    WordFrequency,
)

logger = logging.getLogger(__name__)

MeasureFn = Callable[[str, float], tuple[int, int]]


@dataclass
class PlacementRun:
    """Planner output: committed placements in order, plus per-word outcomes."""
    placements: list[PlacedWord]
    outcomes: list[PlacementOutcome] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    start_font_size: float = 0.0
    stop_reason: StopReason = "completed"


def word_rect(measure: MeasureFn, text: str, font_size: float, margin: int, rotated: bool) -> Rect:
    """Bounding box plus margin; width and height swap when rotated."""
    w, h = measure(text, font_size)
    if rotated:
        return Rect(width=h + margin, height=w + margin)
    return Rect(width=w + margin, height=h + margin)


def next_font_size(font_size: float, font_step: float, min_font_size: float) -> float | None:
    """font_size - font_step, or None when that would drop below min_font_size (or to zero)."""
    nxt = font_size - font_step
    if nxt >= min_font_size and nxt > 0:
        return nxt
    return None


def initial_font_size(
    first_word: str,
    occupancy: OccupancyMap,
    measure: MeasureFn,
    options: PlacementOptions,
) -> float:
    """
    Starting size heuristic: measure the first word at a fraction of the canvas height,
    take its height/width ratio, and scale that to the canvas width. In mask mode the
    result shrinks by the free fraction of the canvas. Only a seed for the decay loop.
    """
    probe = word_rect(
        measure,
        first_word,
        occupancy.height * FIRST_WORD_PROBE_HEIGHT_FRAC,
        options.word_margin,
        rotated=False,
    )
    ratio = probe.height / max(1, probe.width)
    size = occupancy.width * ratio
    if occupancy.has_mask:
        size *= occupancy.free_fraction()
    if options.max_font_size is not None:
        size = min(size, options.max_font_size)
    return float(size)


def search_word(
    word: WordFrequency,
    font_size: float,
    occupancy: OccupancyMap,
    measure: MeasureFn,
    rng: np.random.Generator,
    options: PlacementOptions,
    index: int,
) -> PlacementOutcome:
    """
    Size/orientation search for one word (does not commit).

    The first orientation is drawn from rng with probability rotate_chance. Sizes decay
    by font_step while the box is larger than the canvas or no anchor is free. When the
    minimum is reached without a free anchor, the other orientation is tried once from
    the starting size. The returned font_size is the last size tried.
    """
    start_size = font_size
    rotated = bool(rng.random() < options.rotate_chance)
    tried_other = False
    outcome = PlacementOutcome(text=word.text, placed=None, font_size=font_size)

    while True:
        rect = word_rect(measure, word.text, font_size, options.word_margin, rotated)
        outcome.attempts.append((font_size, rotated))

        if rect.width > occupancy.width or rect.height > occupancy.height:
            nxt = next_font_size(font_size, options.font_step, options.min_font_size)
            if nxt is None:
                outcome.font_size = font_size
                return outcome
            font_size = nxt
            continue

        point = occupancy.find_space(rect, rng)
        if point is not None:
            outcome.font_size = font_size
            outcome.placed = PlacedWord(
                text=word.text,
                font_size=font_size,
                rect=rect,
                position=point,
                rotated=rotated,
                frequency=word.weight,
                index=index,
            )
            return outcome

        nxt = next_font_size(font_size, options.font_step, options.min_font_size)
        if nxt is not None:
            font_size = nxt
        elif not tried_other:
            rotated = not rotated
            tried_other = True
            font_size = start_size
        else:
            outcome.font_size = font_size
            return outcome


def plan_layout(
    words: list[WordFrequency],
    occupancy: OccupancyMap,
    measure: MeasureFn,
    rng: np.random.Generator,
    options: PlacementOptions | None = None,
) -> PlacementRun:
    """
    Place words in the given order, committing each success to the occupancy map.
    The font size carries over from word to word; a failed word keeps its decayed size.
    """
    options = options or PlacementOptions()
    run = PlacementRun(placements=[])
    if not words:
        return run

    font_size = initial_font_size(words[0].text, occupancy, measure, options)
    run.start_font_size = font_size
    last_freq = 1.0
    scale_sizes = not options.repeat and options.relative_scaling != 0.0

    for word in words:
        baseline = font_size
        if scale_sizes:
            font_size *= options.relative_scaling * (word.weight / last_freq) + (1.0 - options.relative_scaling)

        if font_size < options.min_font_size:
            if options.below_min_font == "skip":
                logger.debug("Skipping %r: scaled size %.2f below minimum", word.text, font_size)
                run.failed.append(word.text)
                font_size = baseline
                continue
            logger.debug("Stopping at %r: scaled size %.2f below minimum", word.text, font_size)
            run.stop_reason = "font_below_minimum"
            break

        outcome = search_word(word, font_size, occupancy, measure, rng, options, index=len(run.placements))
        run.outcomes.append(outcome)
        font_size = outcome.font_size
        if outcome.placed is None:
            logger.debug("No space for %r after %d attempts", word.text, len(outcome.attempts))
            run.failed.append(word.text)
            continue

        placed = outcome.placed
        occupancy.commit(placed.rect, placed.position)
        run.placements.append(placed)
        last_freq = word.weight
        logger.debug(
            "Placed %r at (%d, %d) size %.1f%s",
            placed.text, placed.position.x, placed.position.y, placed.font_size,
            " rotated" if placed.rotated else "",
        )

    return run
