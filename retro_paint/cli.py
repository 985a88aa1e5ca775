"""
retro_paint.cli
Convert images to the 256-colour VGA palette and paint regions with flood fill.

Usage:
  retro-paint INPUT [--outdir DIR] [--fill X Y]... [--index N] [--clear N]
              [--palette-act FILE] [--jobs N] [--debug]

Steps per image:
  load -> quantise to palette -> optional clear -> fills in order -> expand -> save

Input:
  Any Pillow-readable image, or a folder of them. Alpha is ignored.

Output:
  Opaque PNG. Writes <stem>_retro.png next to INPUT unless --outdir is given.

Notes:
  Fill starts outside the image are reported and skipped.
  Folder mode skips files Pillow cannot parse, runs --jobs files in parallel
  and prints each file's output, errors included, in order.
"""

from __future__ import annotations

import argparse
import io
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from .buffer import PixelBuffer
from .constants import DEFAULT_FILL_INDEX, OUTPUT_SUFFIX
from .core_types import check_palette_index
from .image_io import (
    is_image_file,
    load_image_packed,
    read_act_palette,
    save_packed_png,
)
from .palette_data import Palette
from .quantize import from_raster, to_raster
from .utils import (
    colour_usage_report,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)


@dataclass
class RunOptions:
    fills: List[Tuple[int, int]] = field(default_factory=list)
    fill_index: int = DEFAULT_FILL_INDEX
    clear_index: Optional[int] = None
    palette: Optional[Palette] = None
    outdir: Optional[Path] = None
    debug: bool = False


# CLI args


def _palette_index(text: str) -> int:
    try:
        return check_palette_index(int(text, 0))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retro-paint",
        description="Quantise image(s) to the 256-colour VGA palette and flood fill regions.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--fill",
        nargs=2,
        type=int,
        action="append",
        metavar=("X", "Y"),
        default=None,
        help="Flood fill starting at pixel X Y. Repeatable; applied in order.",
    )
    parser.add_argument(
        "--index",
        type=_palette_index,
        default=DEFAULT_FILL_INDEX,
        help=f"Palette index used by --fill (default {DEFAULT_FILL_INDEX}).",
    )
    parser.add_argument(
        "--clear",
        type=_palette_index,
        default=None,
        metavar="N",
        help="Clear the whole buffer to index N before filling.",
    )
    parser.add_argument(
        "--palette-act",
        type=Path,
        default=None,
        help="Quantise against a 256-entry ACT palette instead of VGA.",
    )
    parser.add_argument(
        "--jobs", type=int, default=1, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose fill details")
    return parser


# Per-file processing


def output_path_for(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


def paint_buffer(
    buffer: PixelBuffer, options: RunOptions, out: Optional[TextIO] = None
) -> int:
    """Apply the clear and fill requests. Returns the change notifications raised."""
    notifications = 0

    def _count() -> None:
        nonlocal notifications
        notifications += 1

    buffer.subscribe(_count)
    try:
        if options.clear_index is not None:
            buffer.clear(options.clear_index)
        for x, y in options.fills:
            if not buffer.is_inside(x, y):
                warn(
                    f"fill start ({x}, {y}) outside {buffer.width}x{buffer.height}; skipped",
                    out,
                )
                continue
            before = buffer.get_pixel(x, y)
            t0 = time.perf_counter()
            spans = buffer.fill(x, y, options.fill_index)
            if options.debug:
                debug_log(
                    key_value_pairs_to_string(
                        [
                            ("Fill", f"({x}, {y})"),
                            ("From", before),
                            ("To", options.fill_index),
                            ("Spans", spans),
                            ("Time", format_seconds_compact(time.perf_counter() - t0)),
                        ]
                    ),
                    out,
                )
    finally:
        buffer.unsubscribe(_count)
    return notifications


def process_single_image(
    src_path: Path, options: RunOptions, out: Optional[TextIO] = None
) -> Path:
    """
    Process one image end-to-end:
      load -> quantise -> paint -> expand -> save -> report.
    """
    t_start = time.perf_counter()
    dst = output_path_for(src_path, options.outdir)

    print_banner(src_path.name, out)

    raster = load_image_packed(src_path)
    height, width = raster.shape
    palette = options.palette.copy() if options.palette is not None else None
    buffer = from_raster(raster, width, height, palette=palette)
    t_quant = time.perf_counter()

    if options.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Quantise", format_seconds_compact(t_quant - t_start)),
                ]
            ),
            out,
        )

    notifications = paint_buffer(buffer, options, out)

    dst.parent.mkdir(parents=True, exist_ok=True)
    written = save_packed_png(dst, to_raster(buffer))
    t_end = time.perf_counter()

    log(f"Wrote {written.name} | size={width}x{height} | fills={len(options.fills)}", out)
    if options.debug:
        debug_log(f"change notifications: {notifications:,}", out)
    log("Colours used:", out)
    for index, hex_code, count in colour_usage_report(buffer):
        log(f"  [{index:3d}] {hex_code}: {count:,}", out)
    log(f"Total time {format_total_duration_compact(t_end - t_start)}", out)
    return written


def _process_captured(path: Path, options: RunOptions) -> Tuple[str, bool]:
    """Run one file with its output captured, so parallel jobs print in order."""
    buf = io.StringIO()
    try:
        process_single_image(path, options, buf)
    except (OSError, ValueError) as exc:
        error(f"{path.name}: {exc}", buf)
        return buf.getvalue(), False
    return buf.getvalue(), True


def _collect_files(src: Path) -> List[Path]:
    files = [
        p
        for p in src.iterdir()
        if not p.stem.endswith(OUTPUT_SUFFIX) and is_image_file(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles a single file or a folder. Returns 0 on success, 1 if any file
    failed, 2 for a missing input or unreadable palette.
    """
    enable_line_buffered_stdout()
    args = build_parser().parse_args(argv)

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    palette = None
    if args.palette_act is not None:
        try:
            palette = read_act_palette(args.palette_act)
        except (OSError, ValueError) as exc:
            error(f"failed to read palette: {exc}")
            return 2

    options = RunOptions(
        fills=[(int(x), int(y)) for x, y in (args.fill or [])],
        fill_index=args.index,
        clear_index=args.clear,
        palette=palette,
        outdir=args.outdir,
        debug=args.debug,
    )

    files = _collect_files(src) if src.is_dir() else [src]
    jobs = max(1, int(args.jobs))
    print_config_line(
        "run",
        [
            ("Files", len(files)),
            ("Jobs", jobs),
            ("Fills", len(options.fills)),
            ("Fill index", options.fill_index),
            ("Palette", args.palette_act.name if args.palette_act else "vga"),
        ],
        debug=False,
    )

    failures = 0
    if jobs == 1:
        for path in files:
            try:
                process_single_image(path, options)
            except (OSError, ValueError) as exc:
                error(f"{path.name}: {exc}")
                failures += 1
    else:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            futures = [ex.submit(_process_captured, p, options) for p in files]
            results = [f.result() for f in futures]
        print("".join(text for text, _ok in results), end="", flush=True)
        failures = sum(1 for _text, ok in results if not ok)

    log(f"Completed {len(files) - failures} file(s), {failures} failure(s).")
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
