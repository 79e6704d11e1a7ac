"""Encoding of rendered rasters to image files."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from PIL import Image
from PySide6.QtGui import QImage

from .. import config

from .validation import normalize_extensions, validate_output_path

logger = logging.getLogger("grid_combine.export")

EXPORT_EXTENSIONS = normalize_extensions(config.EXPORT_FORMATS)


def default_filename(timestamp_ms: Optional[int] = None) -> str:
    """Return ``grid_combine_<epoch-ms>.png``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{config.EXPORT_FILENAME_PREFIX}_{timestamp_ms}{config.EXPORT_DEFAULT_EXTENSION}"


def raster_to_pil(raster: QImage) -> Image.Image:
    """Convert a rendered ``QImage`` into an RGBA Pillow image.

    Raises:
        ValueError: If ``raster`` is null (an empty layout)
    """
    if raster.isNull():
        raise ValueError("Cannot convert an empty raster")
    rgba = raster.convertToFormat(QImage.Format_RGBA8888)
    width, height = rgba.width(), rgba.height()
    data = bytes(rgba.constBits())
    return Image.frombuffer(
        "RGBA", (width, height), data, "raw", "RGBA", rgba.bytesPerLine(), 1
    )


def _format_for(path: Path) -> str:
    fmt = path.suffix[1:].upper()
    if fmt == 'JPG':
        fmt = 'JPEG'
    return fmt


def _save_params(fmt: str, quality: int) -> Dict[str, Any]:
    save_params: Dict[str, Any] = {'format': fmt}
    if fmt == 'JPEG':
        save_params.update({
            'quality': quality,
            'optimize': True,
            'progressive': True,
            'subsampling': '4:2:0',
        })
    elif fmt == 'WEBP':
        save_params.update({
            'quality': quality,
            'method': 6,
        })
    elif fmt == 'PNG':
        save_params.update({
            'optimize': True,
            'compress_level': 6,
        })
    return save_params


def save_raster(
    raster: QImage,
    output_path: Union[str, Path],
    *,
    quality: int = config.QUALITY_DEFAULT,
) -> Path:
    """Encode ``raster`` to ``output_path``; the format follows the suffix.

    Formats without an alpha channel (JPEG, BMP) are flattened to RGB.

    Returns:
        Path: The resolved path written

    Raises:
        ValueError: If the raster is empty, the path is invalid, or
            ``quality`` is out of range
    """
    if not config.QUALITY_MIN <= quality <= config.QUALITY_MAX:
        raise ValueError(
            f"Quality must be between {config.QUALITY_MIN} and {config.QUALITY_MAX}"
        )
    safe_path = validate_output_path(output_path, EXPORT_EXTENSIONS)
    image = raster_to_pil(raster)

    fmt = _format_for(safe_path)
    if fmt in ('JPEG', 'BMP'):
        image = image.convert('RGB')

    try:
        image.save(str(safe_path), **_save_params(fmt, quality))
    except OSError as e:
        logger.error("Failed to save %s: %s", safe_path, e)
        raise
    logger.info("Saved %dx%d image to %s", image.width, image.height, safe_path)
    return safe_path


__all__ = ["EXPORT_EXTENSIONS", "default_filename", "raster_to_pil", "save_raster"]
