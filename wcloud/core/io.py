# wcloud/core/io.py
"""
Load input text, exclude-word lists and mask images.
Mask convention: black (0) pixels are placeable, every other value is occupied.
"""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from wcloud.core.config import MASK_PLACEABLE_VALUE
from wcloud.core.error_codes import (
    MALFORMED_MASK,
    MASK_LOAD_FAILED,
    TEXT_LOAD_FAILED,
    WordCloudError,
)


def load_text(path: str | Path) -> str:
    """Read UTF-8 text. Raises WordCloudError(text_load_failed) if unreadable."""
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise WordCloudError(TEXT_LOAD_FAILED, f"{p}: {e}") from e


def parse_exclude_words(text: str) -> frozenset[str]:
    """Newline-separated words, stripped and lower-cased; blank lines ignored."""
    return frozenset(line.strip().lower() for line in text.splitlines() if line.strip())


def load_exclude_words(path: str | Path) -> frozenset[str]:
    return parse_exclude_words(load_text(path))


def validate_mask(mask: np.ndarray) -> np.ndarray:
    """
    Return mask as a 2-D uint8 array. Raises WordCloudError(malformed_mask) when it is
    not 2-D, empty, or has no placeable pixel.
    """
    arr = np.asarray(mask)
    if arr.ndim != 2 or arr.size == 0:
        raise WordCloudError(MALFORMED_MASK, f"shape={arr.shape}")
    if not (arr == MASK_PLACEABLE_VALUE).any():
        raise WordCloudError(MALFORMED_MASK, "no placeable pixels")
    return arr.astype(np.uint8, copy=False)


def decode_mask(data: bytes) -> np.ndarray:
    """Decode image bytes to a validated grayscale mask."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            gray = img.convert("L")
            arr = np.array(gray)
    except (UnidentifiedImageError, OSError) as e:
        raise WordCloudError(MASK_LOAD_FAILED, str(e)) from e
    return validate_mask(arr)


def load_mask(path: str | Path) -> np.ndarray:
    """Read and decode a mask image file."""
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise WordCloudError(MASK_LOAD_FAILED, f"{p}: {e}") from e
    return decode_mask(data)
