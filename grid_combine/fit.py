"""Anchor and fit resolution for a single image inside a single cell.

The preview surface and the compositor both go through :func:`place_cell`,
so what is shown on screen and what is exported always agree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import config
from .models import Cell, Layout, Settings

COVER = "cover"
CONTAIN = "contain"


@dataclass(frozen=True, slots=True)
class Placement:
    """Where a cell's image lands on the canvas.

    ``offset_x``/``offset_y`` are relative to the cell origin and may be
    negative when a cover fit overflows the cell.
    """

    cell: Cell
    offset_x: float
    offset_y: float
    render_width: float
    render_height: float

    @property
    def x(self) -> float:
        return self.cell.x + self.offset_x

    @property
    def y(self) -> float:
        return self.cell.y + self.offset_y

    def target_rect(self) -> Tuple[float, float, float, float]:
        """Absolute rectangle the image is scaled into."""
        return (self.x, self.y, self.render_width, self.render_height)


def fit_strategy_for(fit_mode: str) -> str:
    """Return the fit strategy used for cells of ``fit_mode``.

    Only ``max_dimensions`` letterboxes; every other mode crops.
    """
    return CONTAIN if fit_mode == config.FIT_MAX_DIMENSIONS else COVER


def resolve_render_size(
    cell_w: float,
    cell_h: float,
    img_ratio: float,
    strategy: str,
    cell_ratio: Optional[float] = None,
) -> Tuple[float, float]:
    """Scale an image of ``img_ratio`` against a ``cell_w`` x ``cell_h`` box.

    Args:
        cell_w: Cell width
        cell_h: Cell height
        img_ratio: Image aspect ratio (width / height)
        strategy: ``"cover"`` to fill the cell, ``"contain"`` to fit inside it
        cell_ratio: Cell aspect ratio; derived from the box when omitted

    Returns:
        Tuple[float, float]: Rendered width and height
    """
    if cell_ratio is None:
        cell_ratio = cell_w / cell_h if cell_h > 0 else img_ratio

    wider = img_ratio > cell_ratio
    if strategy == CONTAIN:
        if wider:
            return cell_w, cell_w / img_ratio
        return cell_h * img_ratio, cell_h

    if wider:
        return cell_h * img_ratio, cell_h
    return cell_w, cell_w / img_ratio


def parse_anchor(anchor: Optional[str]) -> Tuple[float, float]:
    """Decompose an anchor token into normalised ``(ax, ay)`` coordinates.

    The vertical part is read from the first token, the horizontal part from
    any token; anything unspecified sits at ``0.5``.
    """
    ax = ay = 0.5
    if not anchor or anchor == "center":
        return ax, ay

    parts = anchor.split("-")
    if parts[0] == "top":
        ay = 0.0
    elif parts[0] == "bottom":
        ay = 1.0

    if "left" in parts:
        ax = 0.0
    elif "right" in parts:
        ax = 1.0
    return ax, ay


def resolve_anchor_offset(
    cell_w: float,
    cell_h: float,
    render_w: float,
    render_h: float,
    anchor: Optional[str],
) -> Tuple[float, float]:
    """Return the signed offset of the rendered image inside its cell."""
    ax, ay = parse_anchor(anchor)
    return (cell_w - render_w) * ax, (cell_h - render_h) * ay


def place_cell(cell: Cell, settings: Settings) -> Placement:
    """Resolve render size and anchor offset for ``cell``."""
    strategy = fit_strategy_for(settings.fit_mode)
    render_w, render_h = resolve_render_size(
        cell.width, cell.height, cell.img_ratio, strategy, cell.cell_ratio
    )
    offset_x, offset_y = resolve_anchor_offset(
        cell.width, cell.height, render_w, render_h, settings.anchor
    )
    return Placement(cell, offset_x, offset_y, render_w, render_h)


def place_layout(layout: Layout, settings: Settings) -> List[Placement]:
    return [place_cell(cell, settings) for cell in layout.cells]


__all__ = [
    "COVER",
    "CONTAIN",
    "Placement",
    "fit_strategy_for",
    "resolve_render_size",
    "parse_anchor",
    "resolve_anchor_offset",
    "place_cell",
    "place_layout",
]
