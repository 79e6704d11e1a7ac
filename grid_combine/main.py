# main.py
"""
Command line entry point for Grid Combine.
Loads images, computes the grid layout, and exports the composite.
"""
import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtGui import QGuiApplication

from . import config
from .compositor import render
from .layout import compute_layout
from .models import InvalidImageDimensions, Settings
from .preview import layout_payload
from .utils.image_export import default_filename, save_raster
from .utils.image_loader import ImageLoader


def configure_logging(
    log_path: Optional[Path] = None, level: Optional[str] = None
) -> logging.Logger:
    """Configure and return the application logger.

    Handler setup is idempotent so repeated calls (e.g. from tests) do not
    duplicate output.  Records go to stderr, keeping stdout free for layout
    output, and to a rotating file when ``log_path`` is given.
    """
    logger = logging.getLogger(config.LOGGER_NAME)
    level_name = (level or os.environ.get(config.LOG_LEVEL_ENV) or "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(config.LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.LOG_MAX_BYTES,
            backupCount=config.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def _quality(value: str) -> int:
    quality = int(value)
    if not config.QUALITY_MIN <= quality <= config.QUALITY_MAX:
        raise argparse.ArgumentTypeError(
            f"must be between {config.QUALITY_MIN} and {config.QUALITY_MAX}"
        )
    return quality


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-combine",
        description="Combine images into a single grid image.",
    )
    parser.add_argument("images", nargs="+", help="Source image files, in grid order")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output file (default: grid_combine_<timestamp>.png in the current directory)",
    )
    parser.add_argument("--mode", choices=config.LAYOUT_MODES, default=config.DEFAULT_MODE)
    parser.add_argument("--width", type=float, default=config.DEFAULT_WIDTH,
                        help="Total width in width_col mode")
    parser.add_argument("--height", type=float, default=config.DEFAULT_HEIGHT,
                        help="Total height in height_row mode")
    parser.add_argument("--cols", type=int, default=config.DEFAULT_COLUMNS)
    parser.add_argument("--rows", type=int, default=config.DEFAULT_ROWS)
    parser.add_argument("--gap", type=float, default=config.DEFAULT_GAP)
    parser.add_argument("--background", default=config.DEFAULT_BACKGROUND)
    parser.add_argument("--fit", choices=config.FIT_MODES, default=config.DEFAULT_FIT_MODE)
    parser.add_argument("--anchor", choices=config.ANCHORS, default=config.DEFAULT_ANCHOR)
    parser.add_argument(
        "--quality", type=_quality, default=config.QUALITY_DEFAULT,
        help=f"JPEG/WEBP quality ({config.QUALITY_MIN}-{config.QUALITY_MAX})",
    )
    parser.add_argument("--print-layout", action="store_true",
                        help="Print the layout as JSON instead of exporting")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        mode=args.mode,
        width=args.width,
        height=args.height,
        cols=args.cols,
        rows=args.rows,
        gap=args.gap,
        background_color=args.background,
        fit_mode=args.fit,
        anchor=args.anchor,
    )


def _ensure_gui_application() -> QGuiApplication:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([sys.argv[0]])
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = configure_logging(args.log_file, "DEBUG" if args.verbose else None)
    settings = settings_from_args(args)

    _ensure_gui_application()
    images = ImageLoader().load_many(args.images)
    if not images:
        logger.error("None of the %d given files could be loaded", len(args.images))
        return 1

    try:
        layout = compute_layout(images, settings)
    except InvalidImageDimensions as exc:
        logger.error("Cannot lay out images: %s", exc)
        return 1

    if args.print_layout:
        json.dump(layout_payload(layout, settings), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    output = args.output or Path.cwd() / default_filename()
    try:
        raster = render(layout, settings)
        saved = save_raster(raster, output, quality=args.quality)
    except (ValueError, OSError) as exc:
        logger.error("Export failed: %s", exc)
        return 1

    logger.info("Combined %d images into %s", len(images), saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
