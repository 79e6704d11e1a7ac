# compositor.py
"""
Raster compositing for a computed layout.
Replays the layout's cells onto a QImage using the same placements as the preview.
"""
import logging

from PySide6.QtCore import QRectF
from PySide6.QtGui import QColor, QImage, QPainter

from . import config
from .fit import place_cell
from .layout import check_cells_disjoint
from .models import Cell, Layout, Settings

logger = logging.getLogger("grid_combine.compositor")


def background_color(settings: Settings) -> QColor:
    """Return the fill colour for ``settings``, falling back to the default."""
    color = QColor(settings.background_color)
    if not color.isValid():
        logger.warning(
            "Invalid background colour %r, using %s",
            settings.background_color, config.DEFAULT_BACKGROUND,
        )
        color = QColor(config.DEFAULT_BACKGROUND)
    return color


def _drawable(cell: Cell) -> QImage:
    handle = cell.image.handle
    if not isinstance(handle, QImage) or handle.isNull():
        raise ValueError(
            f"Image '{cell.image.id}' is not decoded; load it before rendering"
        )
    return handle


def render(layout: Layout, settings: Settings) -> QImage:
    """Render ``layout`` into a new ARGB32 image.

    The canvas is filled with the background colour, then each cell is
    clipped to its rectangle and its image drawn at the resolved placement.
    An empty layout yields a null 0x0 image.

    Raises:
        ValueError: If cells overlap or a cell's image is not a decoded QImage
    """
    width, height = layout.raster_size
    if width <= 0 or height <= 0:
        return QImage()

    check_cells_disjoint(layout.cells)

    canvas = QImage(width, height, QImage.Format_ARGB32)
    canvas.fill(background_color(settings))

    painter = QPainter()
    painter.begin(canvas)
    try:
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        for cell in layout.cells:
            if cell.is_empty:
                continue
            source = _drawable(cell)
            placement = place_cell(cell, settings)
            painter.save()
            painter.setClipRect(QRectF(*cell.rect()))
            painter.drawImage(QRectF(*placement.target_rect()), source)
            painter.restore()
    finally:
        painter.end()

    logger.info(
        "Rendered %d cells into %dx%d raster", len(layout.cells), width, height
    )
    return canvas
