# retro_paint/utils.py
from __future__ import annotations

"""
Shared utilities for retro_paint.

Includes time formatting, the palette usage report, and tidy print-based
logging used by the CLI.
"""

import sys
from typing import Any, Iterable, List, Optional, TextIO, Tuple

import numpy as np

from .buffer import PixelBuffer
from .constants import PALETTE_SIZE


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Palette usage


def colour_usage_report(buffer: PixelBuffer) -> List[Tuple[int, str, int]]:
    """
    Count how often each palette index is used.

    Returns a list of (index, hex, count) sorted by count descending, then index.
    """
    if buffer.width == 0 or buffer.height == 0:
        return []
    counts = np.bincount(buffer.pixels.reshape(-1), minlength=PALETTE_SIZE)
    used = np.nonzero(counts)[0]
    report: List[Tuple[int, str, int]] = [
        (int(i), buffer.read_palette(int(i)).hex, int(counts[i])) for i in used
    ]
    report.sort(key=lambda row: (-row[2], row[0]))
    return report


#  CLI output


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
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
    section: str,
    pairs: Iterable[Tuple[str, Any]],
    debug: bool,
    out: Optional[TextIO] = None,
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Files: 3  Jobs: 2  Fill index: 14
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line, out)


def print_banner(title: str, out: Optional[TextIO] = None) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", file=out or sys.stdout, flush=True)


def log(message: str, out: Optional[TextIO] = None) -> None:
    """Plain log line. `out` lets parallel jobs capture their own output."""
    print(message, file=out or sys.stdout, flush=True)


def debug_log(message: str, out: Optional[TextIO] = None) -> None:
    """Debug log line."""
    print(f"[debug] {message}", file=out or sys.stdout, flush=True)


def warn(message: str, out: Optional[TextIO] = None) -> None:
    """Warning log line."""
    print(f"[warn] {message}", file=out or sys.stdout, flush=True)


def error(message: str, out: Optional[TextIO] = None) -> None:
    """Error log line, to stderr unless a capture stream is given."""
    print(f"[error] {message}", file=out or sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "colour_usage_report",
    "enable_line_buffered_stdout",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
