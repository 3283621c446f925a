#!/usr/bin/env python3
"""
reduce_colors.py
Reduce RGBA images to a median-cut palette, optionally with error diffusion.

Usage:
  python reduce_colors.py INPUT [--outdir DIR] [--colors K] [--dither] [--swatch] [--debug]

Input:
  Any Pillow-readable image, or a folder of them (non-recursive).

Output:
  PNG. Writes <stem>_reduced.png next to INPUT, or into --outdir.
  --swatch appends a strip showing the palette, most used colour first.

Notes:
  Palette extraction and mapping come from the reduced_color package.
  CPU bound and single-threaded; files in a folder are processed in name order.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from reduced_color.constants import DEFAULT_K_MAX, IMAGE_EXTS, OUTPUT_SUFFIX
from reduced_color.diffusion import dither_and_map
from reduced_color.errors import QuantizeError
from reduced_color.image_io import (
    append_swatch,
    is_image_file,
    load_image_rgba,
    save_image_rgba,
)
from reduced_color.nearest import map_to_palette, palette_distance_report
from reduced_color.palette import build_palette
from reduced_color.utils import (
    colour_usage_report,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)


# CLI args


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        colors: maximum palette size
        dither: bool, map with error diffusion
        swatch: bool, append palette strip
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="reduce_colors",
        description="Reduce image(s) to a median-cut palette.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--colors",
        type=int,
        default=DEFAULT_K_MAX,
        help=f"Maximum palette size (default {DEFAULT_K_MAX}).",
    )
    parser.add_argument(
        "--dither", action="store_true", help="Use error diffusion when mapping"
    )
    parser.add_argument(
        "--swatch", action="store_true", help="Append a palette strip under the image"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def output_path_for(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


# Per-file processing


def _process_single_image(
    src_path: Path,
    out_path: Path,
    colors: int,
    dither: bool,
    swatch: bool,
    debug: bool,
) -> None:
    """
    Process a single image path end-to-end:
      load -> palette -> map (optionally dithered) -> save -> report.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height, width = rgba.shape[0], rgba.shape[1]
    if debug:
        debug_log(key_value_pairs_to_string([("Loaded", f"{width}x{height}")]))

    t_load = time.perf_counter()
    palette = build_palette(rgba, colors, debug=debug)
    t_palette = time.perf_counter()

    if dither:
        mapped = dither_and_map(rgba, palette, width, debug=debug)
    else:
        mapped = map_to_palette(rgba, palette, debug=debug)
    t_map = time.perf_counter()

    if debug:
        mean_d2, max_d2 = palette_distance_report(rgba, palette)
        debug_log(
            key_value_pairs_to_string(
                [("Mean dist2", mean_d2), ("Max dist2", max_d2)]
            )
        )

    out_img = append_swatch(mapped, palette) if swatch else mapped
    out_path = save_image_rgba(out_path, out_img)
    t_save = time.perf_counter()

    total_pixels = width * height
    log(f"Wrote {out_path.name} | size={width}x{height} | palette_size={len(palette)}")
    log("Colours used:")
    for hex_code, alpha, count in colour_usage_report(mapped.reshape(-1, 4)):
        share = count / total_pixels if total_pixels else 0.0
        log(f"  {hex_code}  a={alpha}: {count:,}  ({format_percentage(share)})")
    log(f"Total pixels: {total_pixels:,}")

    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_save - t_start)}  "
            f"(load={format_seconds_compact(t_load - t_start)}, "
            f"palette={format_seconds_compact(t_palette - t_load)}, "
            f"map={format_seconds_compact(t_map - t_palette)}, "
            f"save={format_seconds_compact(t_save - t_map)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_save - t_start)}")


def _process_one(path: Path, args: argparse.Namespace) -> bool:
    """Process a single file, logging failures instead of raising. Returns success."""
    try:
        _process_single_image(
            path,
            output_path_for(path, args.outdir),
            args.colors,
            args.dither,
            args.swatch,
            args.debug,
        )
    except (QuantizeError, OSError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def collect_images(folder: Path) -> List[Path]:
    """Readable image files directly inside folder, by name, skipping our own outputs."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
        and is_image_file(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. Returns 0 on success, 1 if any file failed,
    2 if the source does not exist.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [
            ("Colours", args.colors),
            ("Dither", bool(args.dither)),
            ("Swatch", bool(args.swatch)),
        ],
        debug=False,
    )

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    if not src.is_dir():
        return 0 if _process_one(src, args) else 1

    files = collect_images(src)
    if not files:
        warn(f"no images found in {src}")
    if args.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files))]))

    results = [_process_one(p, args) for p in files]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
