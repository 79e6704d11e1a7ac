"""Serializable layout description for preview surfaces."""

from __future__ import annotations

from typing import Any, Dict

from .fit import Placement, place_layout
from .models import Layout, Settings


def _placement_to_dict(placement: Placement) -> Dict[str, Any]:
    cell = placement.cell
    return {
        "id": cell.image.id,
        "name": cell.image.name,
        "x": cell.x,
        "y": cell.y,
        "width": cell.width,
        "height": cell.height,
        "imgRatio": cell.img_ratio,
        "cellRatio": cell.cell_ratio,
        "render": {
            "offsetX": placement.offset_x,
            "offsetY": placement.offset_y,
            "width": placement.render_width,
            "height": placement.render_height,
        },
    }


def layout_payload(layout: Layout, settings: Settings) -> Dict[str, Any]:
    """Describe ``layout`` for a preview surface.

    Each cell carries the same render placement the compositor uses, so a
    surface positioning elements from this payload matches the export.
    """
    return {
        "totalWidth": layout.total_width,
        "totalHeight": layout.total_height,
        "settings": settings.to_dict(),
        "cells": [_placement_to_dict(p) for p in place_layout(layout, settings)],
    }
