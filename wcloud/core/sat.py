# wcloud/core/sat.py
"""
Occupancy model: boolean grid plus summed-area table for O(1) rectangle-free queries.
Free-position search with reservoir sampling over candidate anchors.
See: https://blog.demofox.org/2018/04/16/prefix-sums-and-summed-area-tables/
"""

from __future__ import annotations

import numpy as np

from wcloud.core.config import MASK_PLACEABLE_VALUE
from wcloud.core.error_codes import DEGENERATE_CANVAS, MALFORMED_MASK, WordCloudError
from wcloud.core.types import Point, Rect


def summed_area_table(grid: np.ndarray) -> np.ndarray:
    """
    Padded table: shape (h + 1, w + 1), row 0 and column 0 are zero,
    table[y + 1, x + 1] = sum(grid[0:y + 1, 0:x + 1]).
    """
    h, w = grid.shape
    table = np.zeros((h + 1, w + 1), dtype=np.int64)
    table[1:, 1:] = np.cumsum(np.cumsum(grid, axis=1, dtype=np.int64), axis=0)
    return table


def mask_skip_rows(mask: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Per row, leftmost and rightmost placeable column of the mask.
    Rows with no placeable pixel get left = width, right = -1 (empty range).
    """
    placeable = mask == MASK_PLACEABLE_VALUE
    h, w = placeable.shape
    any_free = placeable.any(axis=1)
    left = np.where(any_free, placeable.argmax(axis=1), w)
    right = np.where(any_free, w - 1 - placeable[:, ::-1].argmax(axis=1), -1)
    return left.astype(np.int64), right.astype(np.int64)


class OccupancyMap:
    """
    Grid of occupied cells and its summed-area table, exclusively owned by one layout run.
    Cells only ever go from free to occupied.
    """

    def __init__(self, width: int, height: int, mask: np.ndarray | None = None) -> None:
        if mask is not None:
            if mask.ndim != 2 or mask.size == 0:
                raise WordCloudError(MALFORMED_MASK, f"shape={mask.shape}")
            height, width = mask.shape
        if width <= 0 or height <= 0:
            raise WordCloudError(DEGENERATE_CANVAS, f"{width}x{height}")
        self.width = int(width)
        self.height = int(height)
        if mask is None:
            self.grid = np.zeros((self.height, self.width), dtype=bool)
            self.skip_rows: tuple[np.ndarray, np.ndarray] | None = None
        else:
            self.grid = mask != MASK_PLACEABLE_VALUE
            self.skip_rows = mask_skip_rows(mask)
        self._sat = summed_area_table(self.grid)

    @property
    def has_mask(self) -> bool:
        return self.skip_rows is not None

    @property
    def table(self) -> np.ndarray:
        """Summed-area table with the grid's dimensions (view, read-only by convention)."""
        return self._sat[1:, 1:]

    def free_fraction(self) -> float:
        """Share of cells not yet occupied."""
        return 1.0 - float(self._sat[-1, -1]) / float(self.grid.size)

    def region_sum(self, x: int, y: int, width: int, height: int) -> int:
        s = self._sat
        return int(s[y + height, x + width] - s[y, x + width] - s[y + height, x] + s[y, x])

    def region_is_empty(self, x: int, y: int, width: int, height: int) -> bool:
        """True iff the rectangle lies on the canvas and none of its cells is occupied."""
        if x < 0 or y < 0 or width < 0 or height < 0:
            return False
        if x + width > self.width or y + height > self.height:
            return False
        return self.region_sum(x, y, width, height) == 0

    def query(self, rect: Rect, point: Point) -> bool:
        return self.region_is_empty(point.x, point.y, rect.width, rect.height)

    def commit(self, rect: Rect, point: Point) -> None:
        """Mark the rectangle occupied and rebuild the table from its top row down."""
        x0 = max(0, point.x)
        y0 = max(0, point.y)
        x1 = min(self.width, point.x + rect.width)
        y1 = min(self.height, point.y + rect.height)
        if x0 >= x1 or y0 >= y1:
            return
        self.grid[y0:y1, x0:x1] = True
        self.rebuild(start_row=y0)

    def rebuild(self, start_row: int = 0) -> None:
        """
        Recompute table rows for grid rows >= start_row. Rows above only sum cells
        above start_row, so they stay valid.
        """
        partial = np.cumsum(np.cumsum(self.grid[start_row:], axis=1, dtype=np.int64), axis=0)
        self._sat[start_row + 1:, 1:] = partial + self._sat[start_row, 1:]

    def free_anchors(self, rect: Rect) -> np.ndarray:
        """
        Boolean array over anchors x in [0, width - rect.width), y in [0, height - rect.height):
        True where the rectangle would be entirely free. Each cell costs four table lookups.
        In mask mode, columns outside the row's skip range are ruled out.
        """
        max_x = self.width - rect.width
        max_y = self.height - rect.height
        if max_x <= 0 or max_y <= 0:
            return np.zeros((max(0, max_y), max(0, max_x)), dtype=bool)
        s = self._sat
        w, h = rect.width, rect.height
        sums = (
            s[h:h + max_y, w:w + max_x]
            - s[0:max_y, w:w + max_x]
            - s[h:h + max_y, 0:max_x]
            + s[0:max_y, 0:max_x]
        )
        free = sums == 0
        if self.skip_rows is not None:
            left, right = self.skip_rows
            cols = np.arange(max_x)
            free &= cols >= left[:max_y, None]
            free &= cols <= (right[:max_y] - w + 1)[:, None]
        return free

    def find_space(self, rect: Rect, rng: np.random.Generator) -> Point | None:
        """
        Uniformly random free anchor, or None.

        Reservoir sampling (size 1) over the row-major candidate stream: each row's
        free anchors arrive as a batch of k after `seen` earlier candidates, and take
        over the reservoir with probability k / (seen + k), landing on a uniform
        member of the batch. One draw per non-empty row.
        """
        free = self.free_anchors(rect)
        seen = 0
        choice: Point | None = None
        for y in range(free.shape[0]):
            xs = np.flatnonzero(free[y])
            k = len(xs)
            if k == 0:
                continue
            seen += k
            r = int(rng.integers(seen))
            if r < k:
                choice = Point(int(xs[r]), y)
        return choice
