"""Value objects shared by the layout, fit and compositing stages.

Everything here is immutable so a layout computed for one set of inputs can
be handed to a preview surface and to the compositor without either side
being able to disturb the other.  Drawable handles are opaque to this module;
only their intrinsic dimensions are read.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Tuple

from . import config


class GridCombineError(Exception):
    """Base class for errors raised by the grid engine."""


class InvalidImageDimensions(GridCombineError, ValueError):
    """Raised when an image has no usable aspect ratio."""

    def __init__(self, image_id: str, width: Any, height: Any) -> None:
        super().__init__(
            f"Image '{image_id}' has invalid dimensions {width}x{height}"
        )
        self.image_id = image_id
        self.width = width
        self.height = height


@dataclass(frozen=True, slots=True)
class SourceImage:
    """A decoded image handed to the engine by its caller.

    Attributes:
        id (str): Stable identifier, used for reordering and removal
        width (int): Intrinsic pixel width
        height (int): Intrinsic pixel height
        handle (Any): Drawable pixel data, a ``QImage`` for the compositor
        name (str): Display name, usually the source file name
    """

    id: str
    width: int
    height: int
    handle: Any = field(default=None, compare=False, repr=False)
    name: str = ""

    @property
    def ratio(self) -> float:
        """Return ``width / height``.

        Raises:
            InvalidImageDimensions: If either dimension is not a positive
                finite number
        """
        if not _is_positive(self.width) or not _is_positive(self.height):
            raise InvalidImageDimensions(self.id, self.width, self.height)
        return self.width / self.height


def _is_positive(value: Any) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


@dataclass(frozen=True, slots=True)
class Settings:
    """Grid settings for a single layout computation."""

    mode: str = config.DEFAULT_MODE
    width: float = config.DEFAULT_WIDTH
    height: float = config.DEFAULT_HEIGHT
    cols: int = config.DEFAULT_COLUMNS
    rows: int = config.DEFAULT_ROWS
    gap: float = config.DEFAULT_GAP
    background_color: str = config.DEFAULT_BACKGROUND
    fit_mode: str = config.DEFAULT_FIT_MODE
    anchor: str = config.DEFAULT_ANCHOR

    def with_changes(self, **changes: Any) -> "Settings":
        """Return a copy of the settings with ``changes`` applied."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the settings to the camelCase record used by front ends."""
        data = asdict(self)
        data["backgroundColor"] = data.pop("background_color")
        data["fitMode"] = data.pop("fit_mode")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from a settings record.

        Missing keys fall back to the defaults.  Both camelCase and
        snake_case keys are accepted for the two compound names.

        Raises:
            ValueError: If ``mode``, ``fitMode`` or ``anchor`` is unknown
        """
        defaults = cls()
        mode = data.get("mode", defaults.mode)
        fit_mode = data.get("fitMode", data.get("fit_mode", defaults.fit_mode))
        anchor = data.get("anchor", defaults.anchor)

        if mode not in config.LAYOUT_MODES:
            raise ValueError(f"Unknown layout mode: {mode}")
        if fit_mode not in config.FIT_MODES:
            raise ValueError(f"Unknown fit mode: {fit_mode}")
        if anchor not in config.ANCHORS:
            raise ValueError(f"Unknown anchor: {anchor}")

        return cls(
            mode=mode,
            width=float(data.get("width", defaults.width)),
            height=float(data.get("height", defaults.height)),
            cols=int(data.get("cols", defaults.cols)),
            rows=int(data.get("rows", defaults.rows)),
            gap=float(data.get("gap", defaults.gap)),
            background_color=str(
                data.get("backgroundColor",
                         data.get("background_color", defaults.background_color))
            ),
            fit_mode=fit_mode,
            anchor=anchor,
        )


@dataclass(frozen=True, slots=True)
class Cell:
    """One grid slot: its rectangle and the image assigned to it."""

    x: float
    y: float
    width: float
    height: float
    image: SourceImage
    img_ratio: float
    cell_ratio: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """Return True when the cell has no drawable area."""
        return self.width <= 0 or self.height <= 0

    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class Layout:
    """Overall canvas size plus the ordered cells."""

    total_width: float
    total_height: float
    cells: Tuple[Cell, ...] = ()

    @property
    def raster_size(self) -> Tuple[int, int]:
        """Pixel size of a raster holding this layout.

        Fractional totals are truncated, matching how a canvas backing store
        is sized from a float extent.
        """
        return int(self.total_width), int(self.total_height)


EMPTY_LAYOUT = Layout(0, 0, ())
