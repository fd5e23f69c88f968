# wcloud/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (placements schema) and run_metadata.json.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from wcloud.core.config import (
    DEFAULT_FONT_PATH,
    FIRST_WORD_PROBE_HEIGHT_FRAC,
    REPORTS_DIR,
    SCHEMA_VERSION,
)
from wcloud.core.types import PlacedWord, PlacementOptions, TokenizerOptions

if TYPE_CHECKING:
    from wcloud.core.layout import LayoutSummary


def placement_to_dict(word: PlacedWord) -> dict:
    """One placement entry of layout.json."""
    return {
        "index": word.index,
        "text": word.text,
        "font_size": word.font_size,
        "frequency": word.frequency,
        "rotated": word.rotated,
        "position": {"x": word.position.x, "y": word.position.y},
        "rect": {"width": word.rect.width, "height": word.rect.height},
    }


def layout_to_dict(summary: LayoutSummary) -> dict:
    """Exact structure for layout.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "canvas": {
            "width": summary.width,
            "height": summary.height,
            "mask": summary.has_mask,
        },
        "words": [{"text": w.text, "weight": w.weight} for w in summary.words],
        "placements": [placement_to_dict(p) for p in summary.placements],
        "failed": list(summary.failed_words),
        "summary": {
            "seed": summary.seed,
            "n_words": len(summary.words),
            "n_placed": len(summary.placements),
            "start_font_size": summary.start_font_size,
            "stop_reason": summary.stop_reason,
            "collisions_detected": summary.collisions_detected,
        },
    }


def run_metadata_dict(
    run_name: str,
    text_source: str,
    seed: int | None,
    tokenizer_options: TokenizerOptions,
    placement_options: PlacementOptions,
    scale: float,
    font_path: str | None,
    mask_path: str | None = None,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    tok = asdict(tokenizer_options)
    tok["exclude_words"] = sorted(tokenizer_options.exclude_words)
    tok["extra_words"] = list(tokenizer_options.extra_words)
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "text_source": text_source,
        "mask_path": mask_path,
        "seed": seed,
        "scale": scale,
        "font_path": font_path,
        "tokenizer": tok,
        "placement": asdict(placement_options),
        "config": {
            "DEFAULT_FONT_PATH": DEFAULT_FONT_PATH,
            "FIRST_WORD_PROBE_HEIGHT_FRAC": FIRST_WORD_PROBE_HEIGHT_FRAC,
            "SCHEMA_VERSION": SCHEMA_VERSION,
        },
    }


def ensure_report_dir(report_dir: str | Path | None = None, run_name: str | None = None) -> Path:
    """
    Create and return the report directory: report_dir when given, otherwise
    REPORTS_DIR/<run_name>, with a UTC timestamp standing in for a missing run name.
    """
    if report_dir is None:
        name = run_name or datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        report_dir = Path(REPORTS_DIR) / name
    out = Path(report_dir)
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(report_dir: Path, summary: LayoutSummary) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    path.write_text(json.dumps(layout_to_dict(summary), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def write_run_metadata_json(report_dir: Path, metadata: dict) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    path.write_text(json.dumps(metadata, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
