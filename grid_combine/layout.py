"""Grid layout calculation.

Turns an ordered image list and a :class:`~grid_combine.models.Settings`
record into an exact :class:`~grid_combine.models.Layout`.  Two strategies
exist and are selected by fit mode:

``uniform``
    Every cell shares one size derived from a single target aspect ratio.
    Used by ``average``, ``portrait``, ``landscape`` and ``max_dimensions``.
``shelf``
    Used by ``original``.  Cells keep each image's own aspect ratio and rows
    (or columns) are packed like shelves, so no two cells need share a size.

All functions here are pure; identical inputs give identical layouts.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Sequence, Tuple

from . import config
from .models import EMPTY_LAYOUT, Cell, Layout, Settings, SourceImage

logger = logging.getLogger("grid_combine.layout")


# ----------------------------------------------------------------------
# Target ratio
# ----------------------------------------------------------------------
def _average_ratio(images: Sequence[SourceImage], ratios: List[float]) -> float:
    return sum(ratios) / len(ratios)


def _portrait_ratio(images: Sequence[SourceImage], ratios: List[float]) -> float:
    return min(ratios)


def _landscape_ratio(images: Sequence[SourceImage], ratios: List[float]) -> float:
    return max(ratios)


def _max_dimensions_ratio(images: Sequence[SourceImage], ratios: List[float]) -> float:
    # Width and height maxima may come from different images.
    return max(img.width for img in images) / max(img.height for img in images)


_TARGET_RATIOS: Dict[str, Callable[[Sequence[SourceImage], List[float]], float]] = {
    config.FIT_AVERAGE: _average_ratio,
    config.FIT_PORTRAIT: _portrait_ratio,
    config.FIT_LANDSCAPE: _landscape_ratio,
    config.FIT_MAX_DIMENSIONS: _max_dimensions_ratio,
}


def target_ratio(images: Sequence[SourceImage], fit_mode: str) -> float:
    """Return the shared cell aspect ratio for a uniform grid.

    Unknown fit modes fall back to the average ratio.

    Raises:
        ValueError: If ``images`` is empty
        InvalidImageDimensions: If any image has no usable aspect ratio
    """
    if not images:
        raise ValueError("Cannot derive a target ratio from an empty image set")
    ratios = [img.ratio for img in images]
    return _TARGET_RATIOS.get(fit_mode, _average_ratio)(images, ratios)


# ----------------------------------------------------------------------
# Grid shape
# ----------------------------------------------------------------------
def _is_width_col(settings: Settings) -> bool:
    return settings.mode == config.MODE_WIDTH_COL


def grid_shape(count: int, settings: Settings) -> Tuple[int, int]:
    """Return ``(num_rows, num_cols)`` for ``count`` images.

    The configured count for the active mode is clamped to at least one.
    """
    if _is_width_col(settings):
        num_cols = max(1, settings.cols)
        return math.ceil(count / num_cols), num_cols
    num_rows = max(1, settings.rows)
    return num_rows, math.ceil(count / num_rows)


def _track_size(total: float, tracks: int, gap: float) -> float:
    """Size of one of ``tracks`` equal tracks spanning ``total``."""
    return max(0.0, (total - (tracks - 1) * gap) / tracks)


def _span(tracks: int, size: float, gap: float) -> float:
    return tracks * size + max(0, tracks - 1) * gap


def _cell_ratio(width: float, height: float, fallback: float) -> float:
    return width / height if width > 0 and height > 0 else fallback


# ----------------------------------------------------------------------
# Strategies
# ----------------------------------------------------------------------
def _uniform_layout(images: Sequence[SourceImage], settings: Settings, gap: float) -> Layout:
    num_rows, num_cols = grid_shape(len(images), settings)
    ratio = target_ratio(images, settings.fit_mode)

    if _is_width_col(settings):
        cell_w = _track_size(settings.width, num_cols, gap)
        cell_h = cell_w / ratio
        total_w = settings.width
        total_h = _span(num_rows, cell_h, gap)
    else:
        cell_h = _track_size(settings.height, num_rows, gap)
        cell_w = cell_h * ratio
        total_w = _span(num_cols, cell_w, gap)
        total_h = settings.height

    cell_ratio = _cell_ratio(cell_w, cell_h, ratio)
    cells = []
    for i, img in enumerate(images):
        row, col = divmod(i, num_cols)
        cells.append(Cell(
            x=col * (cell_w + gap),
            y=row * (cell_h + gap),
            width=cell_w,
            height=cell_h,
            image=img,
            img_ratio=img.ratio,
            cell_ratio=cell_ratio,
        ))
    return Layout(total_w, total_h, tuple(cells))


def _rows_of(images: Sequence[SourceImage], per_row: int) -> List[Sequence[SourceImage]]:
    return [images[i:i + per_row] for i in range(0, len(images), per_row)]


def _shelf_layout(images: Sequence[SourceImage], settings: Settings, gap: float) -> Layout:
    num_rows, num_cols = grid_shape(len(images), settings)
    cells: List[Cell] = []

    if _is_width_col(settings):
        cell_w = _track_size(settings.width, num_cols, gap)
        row_top = 0.0
        for row in _rows_of(images, num_cols):
            heights = [cell_w / img.ratio for img in row]
            row_h = max(heights)
            for col, (img, h) in enumerate(zip(row, heights)):
                cells.append(Cell(
                    x=col * (cell_w + gap),
                    y=row_top + (row_h - h) / 2,
                    width=cell_w,
                    height=h,
                    image=img,
                    img_ratio=img.ratio,
                    cell_ratio=img.ratio,
                ))
            row_top += row_h + gap
        total_h = max(0.0, row_top - gap)
        return Layout(settings.width, total_h, tuple(cells))

    cell_h = _track_size(settings.height, num_rows, gap)
    total_w = 0.0
    for r, row in enumerate(_rows_of(images, num_cols)):
        x = 0.0
        for img in row:
            w = cell_h * img.ratio
            cells.append(Cell(
                x=x,
                y=r * (cell_h + gap),
                width=w,
                height=cell_h,
                image=img,
                img_ratio=img.ratio,
                cell_ratio=img.ratio,
            ))
            x += w + gap
        total_w = max(total_w, x - gap)
    return Layout(total_w, settings.height, tuple(cells))


_STRATEGIES: Dict[str, Callable[[Sequence[SourceImage], Settings, float], Layout]] = {
    "uniform": _uniform_layout,
    "shelf": _shelf_layout,
}


def strategy_for(fit_mode: str) -> str:
    """Return the name of the layout strategy used for ``fit_mode``."""
    return "shelf" if fit_mode == config.FIT_ORIGINAL else "uniform"


def compute_layout(images: Sequence[SourceImage], settings: Settings) -> Layout:
    """Compute the cell layout for ``images`` under ``settings``.

    Args:
        images: Ordered images; order defines row-major placement
        settings: Grid settings

    Returns:
        Layout: Canvas size and ordered cells; the empty layout for no images

    Raises:
        InvalidImageDimensions: If an image has a zero, negative or
            non-finite dimension
    """
    if not images:
        return EMPTY_LAYOUT

    gap = max(0.0, settings.gap)
    strategy = strategy_for(settings.fit_mode)
    layout = _STRATEGIES[strategy](images, settings, gap)
    logger.debug(
        "Computed %s layout for %d images: %.2fx%.2f",
        strategy, len(images), layout.total_width, layout.total_height,
    )
    return layout


def check_cells_disjoint(cells: Sequence[Cell], tolerance: float = config.OVERLAP_TOLERANCE) -> None:
    """Verify that no two cells overlap.

    Cells that merely share an edge are fine.  ``tolerance`` absorbs float
    error from accumulated offsets.

    Raises:
        ValueError: If two cells overlap
    """
    drawable = [c for c in cells if not c.is_empty]
    for i, a in enumerate(drawable):
        for b in drawable[i + 1:]:
            if (a.x < b.right - tolerance and b.x < a.right - tolerance
                    and a.y < b.bottom - tolerance and b.y < a.bottom - tolerance):
                raise ValueError(
                    f"Cells for '{a.image.id}' and '{b.image.id}' overlap"
                )


__all__ = [
    "compute_layout",
    "target_ratio",
    "grid_shape",
    "strategy_for",
    "check_cells_disjoint",
]
