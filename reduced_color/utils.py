# reduced_color/utils.py
from __future__ import annotations

"""
Shared utilities for reduced_color.

Includes time formatting, row chunking, a colour usage report for quantized
output, and tidy print-based logging used by the core (debug=True) and the CLI.
"""

from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import HexStr, U8Rows, rgb_to_hex


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Stage timing for debug lines: 12.3ms, 1.234s or 2m 5.0s."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Per-image total for the summary line, one decimal below a minute."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Row helpers


def split_rows_into_chunks(total: int, chunk: int) -> List[Tuple[int, int]]:
    """[start, end) row spans of at most chunk rows, for bounding mapper memory."""
    chunk = max(1, int(chunk))
    return [(start, min(start + chunk, total)) for start in range(0, total, chunk)]


def colour_usage_report(rgba_rows: U8Rows) -> List[Tuple[HexStr, int, int]]:
    """
    Count colours in quantized output.

    Returns a list of (hex, alpha, count) sorted by count descending.
    """
    if rgba_rows.shape[0] == 0:
        return []
    uniques, counts = np.unique(rgba_rows, axis=0, return_counts=True)
    report: List[Tuple[HexStr, int, int]] = []
    for row, count in sorted(zip(uniques.tolist(), counts.tolist()), key=lambda x: -x[1]):
        report.append((rgb_to_hex(row), int(row[3]), int(count)))
    return report


#  CLI / progress logging


def enable_line_buffered_stdout() -> None:
    """Flush each report line as it is printed, where stdout allows it."""
    import sys

    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Render flags such as Dither and Swatch as on/off."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Counts with thousands separators, distances to three decimals at most."""
    if isinstance(value, bool):
        return format_bool_on_off(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def format_percentage(x: float, decimals: int = 1) -> str:
    """Format a 0..1 share as a percentage."""
    return f"{x * 100.0:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Join (name, value) pairs into one line, e.g.
      Palette: 16  Cache hits: 1,204
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Colours: 256  Dither: on  Swatch: off
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Header printed before each image."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    import sys

    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    "format_percentage",
    # rows / report
    "split_rows_into_chunks",
    "colour_usage_report",
    # logging
    "enable_line_buffered_stdout",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
