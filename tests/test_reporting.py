"""
Validate layout.json shape and run metadata; JSON round trip.
"""

from __future__ import annotations

import json
from pathlib import Path

from wcloud.core.layout import LayoutSummary
from wcloud.core.reporting import (
    ensure_report_dir,
    layout_to_dict,
    placement_to_dict,
    run_metadata_dict,
    write_layout_json,
    write_run_metadata_json,
)
from wcloud.core.types import (
    PlacedWord,
    PlacementOptions,
    Point,
    Rect,
    TokenizerOptions,
    WordFrequency,
)


def _minimal_summary() -> LayoutSummary:
    placed = PlacedWord(
        text="云",
        font_size=24.0,
        rect=Rect(26, 30),
        position=Point(5, 7),
        rotated=False,
        frequency=1.0,
        index=0,
    )
    return LayoutSummary(
        words=[WordFrequency("云", 1.0), WordFrequency("词", 0.5)],
        placements=[placed],
        failed_words=["词"],
        width=100,
        height=50,
        has_mask=False,
        seed=42,
        start_font_size=30.0,
        stop_reason="completed",
        collisions_detected=0,
    )


REQUIRED_KEYS = [
    "schema_version",
    ("canvas", "width"),
    ("canvas", "height"),
    ("canvas", "mask"),
    "words",
    "placements",
    "failed",
    ("summary", "seed"),
    ("summary", "n_words"),
    ("summary", "n_placed"),
    ("summary", "stop_reason"),
    ("summary", "collisions_detected"),
]


def test_layout_schema_required_keys_exist() -> None:
    data = layout_to_dict(_minimal_summary())
    for key in REQUIRED_KEYS:
        if isinstance(key, tuple):
            obj = data
            for k in key:
                assert k in obj, f"Missing key: {key}"
                obj = obj[k]
        else:
            assert key in data, f"Missing key: {key}"
    assert data["schema_version"] == "1.0"


def test_placement_to_dict() -> None:
    d = placement_to_dict(_minimal_summary().placements[0])
    assert d["position"] == {"x": 5, "y": 7}
    assert d["rect"] == {"width": 26, "height": 30}
    assert d["rotated"] is False


def test_layout_json_roundtrip(tmp_path) -> None:
    summary = _minimal_summary()
    report_dir = ensure_report_dir(tmp_path / "out" / "run1")
    assert report_dir.is_dir()
    path = write_layout_json(report_dir, summary)
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["placements"][0]["text"] == "云"
    assert loaded["failed"] == ["词"]
    assert loaded["summary"]["n_placed"] == 1


def test_run_metadata_json(tmp_path) -> None:
    meta = run_metadata_dict(
        run_name="run1",
        text_source="input.txt",
        seed=3,
        tokenizer_options=TokenizerOptions(exclude_words=frozenset({"b", "a"})),
        placement_options=PlacementOptions(),
        scale=1.0,
        font_path=None,
    )
    path = write_run_metadata_json(tmp_path, meta)
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["tokenizer"]["exclude_words"] == ["a", "b"]
    assert loaded["placement"]["min_font_size"] == 4.0
    assert "timestamp_utc" in loaded


def test_ensure_report_dir_defaults_under_reports(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    named = ensure_report_dir(run_name="nightly")
    assert named == Path("reports") / "nightly"
    assert (tmp_path / "reports" / "nightly").is_dir()
    stamped = ensure_report_dir()
    assert stamped.parent == Path("reports")
    assert stamped.is_dir()
