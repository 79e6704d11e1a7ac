"""Decoding of source files into drawable images for the grid engine.

Files are decoded with Pillow (EXIF orientation applied) and converted to
``QImage`` handles the compositor can draw.  A file that passes path
validation but cannot be decoded is replaced by a fixed-size placeholder so
layout geometry stays well defined.
"""
from __future__ import annotations

import logging
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from threading import Event
from typing import Iterable, List, Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtGui import QColor, QImage

from .. import config
from ..cache import CachedImage, ImageCache, cache_key, get_cache
from ..models import SourceImage

from .validation import PathValidationError, normalize_extensions, validate_image_path

logger = logging.getLogger("grid_combine.loader")


class ImageLoadError(Exception):
    """Raised when a source path is rejected before decoding."""


class LoadCancelledError(ImageLoadError):
    """Raised when a batch load is cancelled; no partial result is returned."""


def pil_to_qimage(image: Image.Image) -> QImage:
    """Convert a Pillow image into a detached RGBA ``QImage``."""
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    view = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    # copy() detaches from ``data`` before it is garbage collected
    return view.copy()


def placeholder_image(size: int = config.PLACEHOLDER_SIZE) -> QImage:
    """Return the stand-in image used for undecodable files."""
    image = QImage(size, size, QImage.Format_ARGB32)
    image.fill(QColor(*config.PLACEHOLDER_COLOR))
    return image


def decode_image(path: Path) -> CachedImage:
    """Decode ``path`` with its EXIF orientation applied.

    Raises:
        UnidentifiedImageError: If Pillow cannot identify the file
        OSError: If the file cannot be read or is truncated
        DecompressionBombError: If the pixel count exceeds Pillow's limit
    """
    with Image.open(path) as img:
        oriented = ImageOps.exif_transpose(img)
        qimage = pil_to_qimage(oriented)
    return CachedImage(qimage, qimage.width(), qimage.height())


class ImageLoader:
    """Loads source images, with caching and batch concurrency."""

    VALID_EXTENSIONS = normalize_extensions(config.SUPPORTED_IMAGE_FORMATS)

    def __init__(
        self,
        cache: Optional[ImageCache] = None,
        max_workers: int = config.LOADER_MAX_WORKERS,
    ) -> None:
        self._cache = cache
        self.max_workers = max(1, max_workers)

    @property
    def cache(self) -> ImageCache:
        return self._cache if self._cache is not None else get_cache()

    def load(self, image_path: Union[str, Path]) -> SourceImage:
        """Load a single image.

        Raises:
            ImageLoadError: If the path is a URL, missing, or has an
                unsupported extension
        """
        try:
            safe_path = validate_image_path(image_path, self.VALID_EXTENSIONS)
        except PathValidationError as exc:
            raise ImageLoadError(f"Cannot load {image_path}: {exc}") from exc

        entry = self._decode_cached(safe_path)
        return SourceImage(
            id=uuid.uuid4().hex[:9],
            width=entry.width,
            height=entry.height,
            handle=entry.image,
            name=safe_path.name,
        )

    def _decode_cached(self, path: Path) -> CachedImage:
        key = cache_key(path)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            entry = decode_image(path)
        except (UnidentifiedImageError, Image.DecompressionBombError,
                OSError, ValueError) as exc:
            logger.warning("Could not decode %s, using placeholder: %s", path, exc)
            image = placeholder_image()
            return CachedImage(image, image.width(), image.height())

        self.cache.put(key, entry)
        return entry

    def load_many(
        self,
        image_paths: Iterable[Union[str, Path]],
        *,
        cancel: Optional[Event] = None,
    ) -> List[SourceImage]:
        """Load ``image_paths`` concurrently, preserving their order.

        Rejected paths are logged and skipped.  Setting ``cancel`` aborts
        the batch with :class:`LoadCancelledError`.
        """
        paths = list(image_paths)
        if not paths:
            return []

        pool = ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths)))
        try:
            futures: List[Future] = [pool.submit(self.load, p) for p in paths]
            images: List[SourceImage] = []
            for path, future in zip(paths, futures):
                if cancel is not None and cancel.is_set():
                    raise LoadCancelledError("Image loading was cancelled")
                try:
                    images.append(future.result())
                except ImageLoadError as exc:
                    logger.warning("Skipping invalid image %s: %s", path, exc)
            if cancel is not None and cancel.is_set():
                raise LoadCancelledError("Image loading was cancelled")
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

        if len(images) < len(paths):
            logger.info("Loaded %d of %d requested images.", len(images), len(paths))
        return images


__all__ = [
    "ImageLoadError",
    "ImageLoader",
    "LoadCancelledError",
    "decode_image",
    "pil_to_qimage",
    "placeholder_image",
]
