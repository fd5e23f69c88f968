# wcloud/core/validate.py
"""
Post-hoc layout checks: pairwise rectangle overlap and mask coverage.
"""

from __future__ import annotations

import numpy as np

from wcloud.core.config import MASK_PLACEABLE_VALUE
from wcloud.core.types import PlacedWord


def rects_overlap(a: PlacedWord, b: PlacedWord) -> bool:
    """True if the two placement boxes share at least one cell."""
    ax0, ay0, ax1, ay1 = a.bounds()
    bx0, by0, bx1, by1 = b.bounds()
    return ax0 < bx1 and bx0 < ax1 and ay0 < by1 and by0 < ay1


def find_overlaps(placements: list[PlacedWord]) -> list[tuple[int, int]]:
    """Index pairs (i, j), i < j, of overlapping placements."""
    out: list[tuple[int, int]] = []
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            if rects_overlap(placements[i], placements[j]):
                out.append((i, j))
    return out


def rects_outside_mask(placements: list[PlacedWord], mask: np.ndarray) -> list[int]:
    """Indices of placements whose box covers a non-placeable mask pixel or leaves the canvas."""
    h, w = mask.shape
    blocked = mask != MASK_PLACEABLE_VALUE
    out: list[int] = []
    for i, word in enumerate(placements):
        x0, y0, x1, y1 = word.bounds()
        if x0 < 0 or y0 < 0 or x1 > w or y1 > h or blocked[y0:y1, x0:x1].any():
            out.append(i)
    return out
