# wcloud/core/tokenizer.py
"""
Frequency analysis: raw text -> ranked, normalized (word, weight) list.

Pipeline: regex pre-tokenization, dictionary segmentation (jieba), filters,
counting, case-folding merge, normalization, sort, truncation.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, Protocol

import jieba

from wcloud.core.types import TokenizerOptions, WordFrequency

logger = logging.getLogger(__name__)

_WORD_CHAR = re.compile(r"\w")


class Segmenter(Protocol):
    """Splits a chunk of text into word units."""

    def cut(self, text: str) -> Iterable[str]: ...

    def add_word(self, word: str) -> None: ...


class JiebaSegmenter:
    """
    Dictionary segmenter backed by its own jieba.Tokenizer, so registered words
    do not leak into the process-wide jieba dictionary.
    """

    def __init__(self, extra_words: Iterable[str] = ()) -> None:
        self._tokenizer = jieba.Tokenizer()
        for word in extra_words:
            self.add_word(word)

    def add_word(self, word: str) -> None:
        self._tokenizer.add_word(word)

    def cut(self, text: str) -> Iterable[str]:
        return self._tokenizer.cut(text, cut_all=False, HMM=False)


def _keep_segment(segment: str, options: TokenizerOptions, excluded: frozenset[str]) -> bool:
    if not _WORD_CHAR.search(segment):
        return False
    if len(segment) < options.min_word_length:
        return False
    if options.exclude_numbers and segment.isdigit():
        return False
    return segment.lower() not in excluded


def count_words(
    text: str,
    options: TokenizerOptions | None = None,
    segmenter: Segmenter | None = None,
) -> Counter[str]:
    """Occurrences per exact surface form, after pre-tokenization, segmentation and filtering."""
    options = options or TokenizerOptions()
    segmenter = segmenter or JiebaSegmenter(options.extra_words)
    pattern = re.compile(options.pattern)
    excluded = frozenset(w.lower() for w in options.exclude_words)

    counts: Counter[str] = Counter()
    for match in pattern.finditer(text):
        for segment in segmenter.cut(match.group()):
            segment = segment.strip()
            if _keep_segment(segment, options, excluded):
                counts[segment] += 1
    return counts


def merge_case_variants(counts: dict[str, int]) -> dict[str, int]:
    """
    Group surface forms equal under lower-casing. Each group is represented by its most
    frequent form (ties: lexicographically greater form) and carries the summed count.
    """
    groups: dict[str, list[tuple[int, str]]] = {}
    for form, n in counts.items():
        groups.setdefault(form.lower(), []).append((n, form))
    merged: dict[str, int] = {}
    for members in groups.values():
        _, representative = max(members)
        merged[representative] = sum(n for n, _ in members)
    return merged


def normalize_frequencies(counts: dict[str, int], max_words: int = 0) -> list[WordFrequency]:
    """
    Divide by the maximum count, sort by weight descending then text ascending,
    truncate to max_words (0 = unlimited).
    """
    if not counts:
        return []
    max_count = max(counts.values())
    ranked = sorted(
        (WordFrequency(text=form, weight=n / max_count) for form, n in counts.items()),
        key=lambda wf: (-wf.weight, wf.text),
    )
    if max_words > 0:
        ranked = ranked[:max_words]
    return ranked


def analyze(
    text: str,
    options: TokenizerOptions | None = None,
    segmenter: Segmenter | None = None,
) -> list[WordFrequency]:
    """
    Full frequency analysis. Returns an empty list when nothing survives filtering;
    callers treat that as fatal (see layout.run_word_cloud_layout).
    """
    options = options or TokenizerOptions()
    counts = count_words(text, options, segmenter)
    merged = merge_case_variants(counts)
    ranked = normalize_frequencies(merged, options.max_words)
    logger.debug(
        "Analyzed text: %d surface forms, %d after case merge, %d ranked",
        len(counts), len(merged), len(ranked),
    )
    return ranked
