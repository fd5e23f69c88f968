"""
Deterministic tests for overlap and mask-coverage checks.
"""

from __future__ import annotations

import numpy as np

from wcloud.core.types import PlacedWord, Point, Rect
from wcloud.core.validate import find_overlaps, rects_outside_mask, rects_overlap


def _word(x: int, y: int, w: int, h: int, i: int = 0) -> PlacedWord:
    return PlacedWord("w", 10.0, Rect(w, h), Point(x, y), False, 1.0, i)


def test_rects_overlap_and_touching() -> None:
    assert rects_overlap(_word(0, 0, 5, 5), _word(4, 4, 5, 5)) is True
    assert rects_overlap(_word(0, 0, 5, 5), _word(5, 0, 5, 5)) is False
    assert rects_overlap(_word(0, 0, 5, 5), _word(0, 5, 5, 5)) is False


def test_find_overlaps_pairs() -> None:
    words = [_word(0, 0, 10, 10, 0), _word(20, 20, 5, 5, 1), _word(5, 5, 10, 10, 2)]
    assert find_overlaps(words) == [(0, 2)]


def test_rects_outside_mask() -> None:
    mask = np.full((10, 10), 255, dtype=np.uint8)
    mask[2:8, 2:8] = 0
    inside = _word(2, 2, 6, 6)
    touching_edge = _word(1, 2, 3, 3)
    off_canvas = _word(8, 8, 5, 5)
    assert rects_outside_mask([inside, touching_edge, off_canvas], mask) == [1, 2]
