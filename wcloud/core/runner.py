# wcloud/core/runner.py
"""
CLI entrypoint: read text (file or stdin), optional mask, build layout, render PNG.
Optional layout.json / run_metadata.json reports and a debug overlay.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from wcloud.core.colors import RGBA, ColorSelector, get_color_selector, parse_color
from wcloud.core.config import (
    BELOW_MIN_FONT_POLICY,
    CLI_BACKGROUND_RGBA,
    DEFAULT_HEIGHT_PX,
    DEFAULT_SCALE,
    DEFAULT_WIDTH_PX,
    EXCLUDE_NUMBERS,
    FONT_STEP,
    MAX_FONT_SIZE,
    MAX_WORDS,
    MIN_FONT_SIZE,
    MIN_WORD_LENGTH,
    RELATIVE_SCALING,
    ROTATE_CHANCE,
    TOKEN_PATTERN,
    WORD_MARGIN_PX,
)
from wcloud.core.error_codes import WordCloudError
from wcloud.core.io import load_exclude_words, load_mask, load_text
from wcloud.core.layout import generate_word_cloud
from wcloud.core.types import PlacementOptions, TokenizerOptions

logger = logging.getLogger(__name__)


def _color_arg(value: str) -> ColorSelector:
    try:
        return get_color_selector(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _background_arg(value: str) -> RGBA:
    try:
        return parse_color(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid color: {value!r}") from e


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="wcloud", description="Generate word clouds!")
    p.add_argument("--text", type=str, default=None, help="File of words to build the word cloud with (default: stdin)")
    p.add_argument("--regex", type=str, default=TOKEN_PATTERN, help="Custom regex to tokenize words with")
    p.add_argument("--width", type=int, default=DEFAULT_WIDTH_PX, help="Width of the word cloud")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT_PX, help="Height of the word cloud")
    p.add_argument("--scale", type=float, default=DEFAULT_SCALE, help="Scale of the final image, relative to width and height")
    p.add_argument("--background-color", type=_background_arg, default=None, dest="background_color", help="Background color, e.g. '#ffffff' or 'white'")
    p.add_argument("--color", type=_color_arg, default="hue", help="Word colors: 'hue', 'grey', 'cmap:<name>' or 'freq:<name>'")
    p.add_argument("--margin", type=int, default=WORD_MARGIN_PX, help="Spacing between words (px)")
    p.add_argument("--max-words", type=int, default=MAX_WORDS, dest="max_words", help="Maximum number of words (0 = unlimited)")
    p.add_argument("--min-font-size", type=float, default=MIN_FONT_SIZE, dest="min_font_size", help="Minimum font size for words")
    p.add_argument("--max-font-size", type=float, default=MAX_FONT_SIZE, dest="max_font_size", help="Maximum font size for words")
    p.add_argument("--random-seed", type=int, default=None, dest="random_seed", help="Seed for reproducible word clouds")
    p.add_argument("--repeat", action="store_true", help="Disable frequency-relative font scaling between words")
    p.add_argument("--font-step", type=float, default=FONT_STEP, dest="font_step", help="Font size decrease when no space is found")
    p.add_argument("--rotate-chance", type=float, default=ROTATE_CHANCE, dest="rotate_chance", help="Chance that words are rotated (0.0 - 1.0)")
    p.add_argument("--relative-scaling", type=float, default=RELATIVE_SCALING, dest="relative_scaling", help="Impact of word frequency on font size (0.0 - 1.0)")
    p.add_argument("--below-min-font", choices=("stop", "skip"), default=BELOW_MIN_FONT_POLICY, dest="below_min_font", help="When scaling drops below the minimum size: stop the run or skip the word")
    p.add_argument("--min-word-length", type=int, default=MIN_WORD_LENGTH, dest="min_word_length", help="Minimum length of words")
    p.add_argument("--keep-numbers", action="store_true", dest="keep_numbers", help="Keep all-digit words")
    p.add_argument("--mask", type=str, default=None, help="Mask image; any color other than black (#000) means there is no space")
    p.add_argument("--exclude-words", type=str, default=None, dest="exclude_words", help="Newline-separated list of words to exclude")
    p.add_argument("--word", action="append", default=[], dest="extra_words", help="Extra dictionary word for segmentation (repeatable)")
    p.add_argument("-f", "--font", type=str, default=None, help="Font file used for the word cloud")
    p.add_argument("-o", "--output", type=str, required=True, help="Output path of the word cloud image")
    p.add_argument("--report-dir", type=str, default=None, dest="report_dir", help="Write layout.json and run_metadata.json here")
    p.add_argument("--run-name", type=str, default=None, dest="run_name", help="Write reports to reports/<run-name>/ when --report-dir is not given")
    p.add_argument("--debug-image", type=str, default=None, dest="debug_image", help="Write an occupancy/placement overlay PNG here")
    return p.parse_args(argv)


def _run(args: argparse.Namespace) -> None:
    text = load_text(args.text) if args.text else sys.stdin.read()
    mask = load_mask(args.mask) if args.mask else None
    exclude = load_exclude_words(args.exclude_words) if args.exclude_words else frozenset()

    tokenizer_options = TokenizerOptions(
        pattern=args.regex,
        min_word_length=args.min_word_length,
        exclude_numbers=EXCLUDE_NUMBERS and not args.keep_numbers,
        exclude_words=exclude,
        max_words=args.max_words,
        extra_words=tuple(args.extra_words),
    )
    placement_options = PlacementOptions(
        min_font_size=args.min_font_size,
        max_font_size=args.max_font_size,
        font_step=args.font_step,
        word_margin=args.margin,
        rotate_chance=args.rotate_chance,
        relative_scaling=args.relative_scaling,
        repeat=args.repeat,
        below_min_font=args.below_min_font,
    )
    background = args.background_color if args.background_color is not None else CLI_BACKGROUND_RGBA

    image, summary = generate_word_cloud(
        text,
        width=args.width,
        height=args.height,
        mask=mask,
        tokenizer_options=tokenizer_options,
        placement_options=placement_options,
        seed=args.random_seed,
        font_path=args.font,
        scale=args.scale,
        background_color=background,
        color_func=args.color,
    )
    output = Path(args.output)
    if output.suffix.lower() in (".jpg", ".jpeg"):
        image = image.convert("RGB")
    image.save(output)
    print(output)

    if args.report_dir or args.run_name:
        from wcloud.core.reporting import (
            ensure_report_dir,
            run_metadata_dict,
            write_layout_json,
            write_run_metadata_json,
        )

        report_dir = ensure_report_dir(args.report_dir, args.run_name)
        print(write_layout_json(report_dir, summary))
        metadata = run_metadata_dict(
            run_name=report_dir.name,
            text_source=args.text or "<stdin>",
            seed=args.random_seed,
            tokenizer_options=tokenizer_options,
            placement_options=placement_options,
            scale=args.scale,
            font_path=args.font,
            mask_path=args.mask,
        )
        print(write_run_metadata_json(report_dir, metadata))

    if args.debug_image:
        from wcloud.core.render import render_debug
        from wcloud.core.sat import OccupancyMap

        occupancy = OccupancyMap(summary.width, summary.height, mask=mask)
        for word in summary.placements:
            occupancy.commit(word.rect, word.position)
        render_debug(occupancy.grid, summary.placements, args.debug_image, mask=mask)
        print(args.debug_image)

    print(f"Placed {len(summary.placements)} of {len(summary.words)} words")


def main(argv: list[str] | None = None) -> None:
    # Configure logging from env (e.g. LOG_LEVEL=DEBUG for development)
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level_name, logging.INFO))

    args = _parse_args(argv)
    try:
        _run(args)
    except WordCloudError as e:
        logger.error("%s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
