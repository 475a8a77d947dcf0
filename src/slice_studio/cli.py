"""
Command-line entry point.

Slice an image into a grid and export the chosen slices as a stored ZIP:

    slice-studio slice storyboard.png --mode 3x3 --select 1,2,5 -o exports/
    slice-studio slice poster.png --rows 2 --cols 3 --col-splits 0.3,0.7
    slice-studio zip a.png b.png --output pair.zip
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PIL import UnidentifiedImageError

from slice_studio import __version__
from slice_studio.archive import ExportError, write_slices_zip, write_zip
from slice_studio.core.models import Axis, ZipEntry
from slice_studio.enhance import (
    ClientConfig,
    EnhanceConfig,
    GenerationClient,
    enhance_processing_area,
)
from slice_studio.enhance.config import ASPECT_RATIO_OPTIONS, IMAGE_SIZE_OPTIONS
from slice_studio.slicing import SLICE_MODES, GridEditor
from slice_studio.workspace import SlicerSession

logger = logging.getLogger("slice_studio")


def _parse_float_list(raw: str) -> List[float]:
    try:
        return [float(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers: {raw!r}")


def _parse_int_list(raw: str) -> List[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers: {raw!r}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="slice-studio",
        description="Grid-slice images and export slices as a ZIP archive.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    slice_cmd = sub.add_parser("slice", help="Slice an image and export a ZIP")
    slice_cmd.add_argument("image", type=Path, help="Image to slice")
    slice_cmd.add_argument(
        "--mode",
        choices=[mode.id for mode in SLICE_MODES],
        default=SLICE_MODES[0].id,
        help="Preset grid (ignored when --rows/--cols/--*-splits are given)",
    )
    slice_cmd.add_argument("--rows", type=int, help="Custom row count (1-8)")
    slice_cmd.add_argument("--cols", type=int, help="Custom column count (1-8)")
    slice_cmd.add_argument("--row-splits", type=_parse_float_list, help="Row breakpoints, e.g. 0.3,0.6")
    slice_cmd.add_argument("--col-splits", type=_parse_float_list, help="Column breakpoints")
    slice_cmd.add_argument(
        "--select",
        type=_parse_int_list,
        help="1-based slice positions to export in this order (default: all)",
    )
    slice_cmd.add_argument("-o", "--output", type=Path, default=Path("."), help="Output directory")
    slice_cmd.add_argument("--enhance", action="store_true", help="Enhance slices via the backend first")
    slice_cmd.add_argument("--api-base", help="Backend base URL (default: $SLICE_STUDIO_API_BASE)")
    slice_cmd.add_argument("--token", help="Backend token (default: $SLICE_STUDIO_TOKEN)")
    slice_cmd.add_argument("--model", default=EnhanceConfig.model, help="Enhancement model")
    slice_cmd.add_argument("--image-size", choices=IMAGE_SIZE_OPTIONS, default=EnhanceConfig.image_size)
    slice_cmd.add_argument("--aspect-ratio", choices=ASPECT_RATIO_OPTIONS, default=EnhanceConfig.aspect_ratio)

    zip_cmd = sub.add_parser("zip", help="Pack files into a stored ZIP")
    zip_cmd.add_argument("files", type=Path, nargs="+", help="Files to pack (stored by base name)")
    zip_cmd.add_argument("-o", "--output", type=Path, required=True, help="Archive path")

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_editor(args: argparse.Namespace) -> GridEditor:
    """Grid editor from --mode or the custom grid flags."""
    editor = GridEditor(args.mode)
    custom = any(
        value is not None for value in (args.rows, args.cols, args.row_splits, args.col_splits)
    )
    if not custom:
        return editor

    rows = args.rows if args.rows is not None else editor.row_count
    cols = args.cols if args.cols is not None else editor.col_count
    for count, splits, flag in ((args.rows, args.row_splits, "rows"), (args.cols, args.col_splits, "cols")):
        if count is not None and splits and len(splits) != count - 1:
            raise ValueError(f"--{flag} {count} needs {count - 1} breakpoints, got {len(splits)}")
    editor.set_grid_size(Axis.ROW, rows)
    editor.set_grid_size(Axis.COL, cols)
    if args.row_splits:
        editor.set_breakpoints(Axis.ROW, args.row_splits)
    if args.col_splits:
        editor.set_breakpoints(Axis.COL, args.col_splits)
    return editor


def run_slice(args: argparse.Namespace) -> Path:
    session = SlicerSession(build_editor(args))
    session.load_image(args.image)
    slices = session.perform_slice()

    if args.select:
        by_position = {item.index + 1: item for item in slices}
        missing = [pos for pos in args.select if pos not in by_position]
        if missing:
            raise ExportError(f"No slice at position(s) {missing} in a {session.editor.grid_label} grid")
        session.add_to_processing([by_position[pos].id for pos in args.select])
    else:
        session.add_all_to_processing()

    if args.enhance:
        client_config = (
            ClientConfig(args.api_base, token=args.token)
            if args.api_base
            else ClientConfig.from_env()
        )
        enhance_config = EnhanceConfig(
            model=args.model,
            image_size=args.image_size,
            aspect_ratio=args.aspect_ratio,
        )
        report = enhance_processing_area(session, GenerationClient(client_config), enhance_config)
        if not report.completed:
            logger.warning(
                f"Enhanced {report.enhanced}/{report.total} slices; stopped: {report.error}"
            )

    return write_slices_zip(session.export_entries(), args.output)


def run_zip(args: argparse.Namespace) -> Path:
    names = [path.name for path in args.files]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ExportError(f"Duplicate archive name(s): {', '.join(duplicates)}")

    entries = []
    for path in args.files:
        try:
            entries.append(ZipEntry(path.name, path.read_bytes()))
        except OSError as e:
            raise ExportError(f"Cannot read {path}: {e}") from e
    return write_zip(entries, args.output)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "slice":
            output = run_slice(args)
        else:
            output = run_zip(args)
    except (ExportError, ValueError, OSError, UnidentifiedImageError) as e:
        logger.error(str(e))
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
