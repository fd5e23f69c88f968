"""
Structured error codes for word cloud runs.
Fatal conditions raise WordCloudError carrying one of these keys; the CLI maps keys to user-facing messages.
Words that cannot be placed are not errors (see placement.py).
"""

from __future__ import annotations

NO_WORDS = "no_words"
DEGENERATE_CANVAS = "degenerate_canvas"
MALFORMED_MASK = "malformed_mask"
MASK_LOAD_FAILED = "mask_load_failed"
FONT_LOAD_FAILED = "font_load_failed"
TEXT_LOAD_FAILED = "text_load_failed"
INVALID_OPTION = "invalid_option"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    NO_WORDS: "No placeable words left after filtering. Check the input text, min word length and exclude list.",
    DEGENERATE_CANVAS: "Canvas has zero width or height. Use a positive width and height.",
    MALFORMED_MASK: "Mask must be a non-empty grayscale image with at least one black (placeable) pixel.",
    MASK_LOAD_FAILED: "Mask image could not be read or decoded.",
    FONT_LOAD_FAILED: "Font file could not be read or decoded.",
    TEXT_LOAD_FAILED: "Input text could not be read.",
    INVALID_OPTION: "Option value out of range. Font step must be positive, rotate chance and relative scaling within 0..1, margin non-negative.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)


class WordCloudError(ValueError):
    """Fatal configuration or input error. error_key is one of the constants above."""

    def __init__(self, error_key: str, detail: str | None = None) -> None:
        self.error_key = error_key
        self.detail = detail
        message = user_message(error_key)
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
