"""Grid Combine: lay out and composite a set of images on a regular grid.

The geometry modules imported here are Qt-free.  Rendering lives in
:mod:`grid_combine.compositor`, which needs PySide6.
"""

from .fit import (
    CONTAIN,
    COVER,
    Placement,
    fit_strategy_for,
    parse_anchor,
    place_cell,
    place_layout,
    resolve_anchor_offset,
    resolve_render_size,
)
from .layout import check_cells_disjoint, compute_layout, grid_shape, target_ratio
from .models import (
    Cell,
    GridCombineError,
    InvalidImageDimensions,
    Layout,
    Settings,
    SourceImage,
)
from .preview import layout_payload
from .sequence import move_image, move_image_by_id, remove_image

__version__ = "0.1.0"

__all__ = [
    "CONTAIN",
    "COVER",
    "Cell",
    "GridCombineError",
    "InvalidImageDimensions",
    "Layout",
    "Placement",
    "Settings",
    "SourceImage",
    "check_cells_disjoint",
    "compute_layout",
    "fit_strategy_for",
    "grid_shape",
    "layout_payload",
    "move_image",
    "move_image_by_id",
    "parse_anchor",
    "place_cell",
    "place_layout",
    "remove_image",
    "resolve_anchor_offset",
    "resolve_render_size",
    "target_ratio",
]
