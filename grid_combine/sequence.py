"""Helpers for maintaining the ordered image list.

Placement order is list order, so reordering and removal are expressed as
pure list operations that return a new list.
"""

from __future__ import annotations

from typing import List, Sequence

from .models import SourceImage


def move_image(images: Sequence[SourceImage], old_index: int, new_index: int) -> List[SourceImage]:
    """Move the image at ``old_index`` so it ends up at ``new_index``.

    Raises:
        IndexError: If either index is outside the list
    """
    count = len(images)
    for index in (old_index, new_index):
        if not -count <= index < count:
            raise IndexError(f"Index {index} out of range for {count} images")
    items = list(images)
    moved = items.pop(old_index)
    items.insert(new_index % count, moved)
    return items


def move_image_by_id(images: Sequence[SourceImage], active_id: str, over_id: str) -> List[SourceImage]:
    """Move the image ``active_id`` into the slot occupied by ``over_id``."""
    if active_id == over_id:
        return list(images)
    return move_image(images, index_of(images, active_id), index_of(images, over_id))


def remove_image(images: Sequence[SourceImage], image_id: str) -> List[SourceImage]:
    """Return ``images`` without the entry whose id is ``image_id``."""
    return [img for img in images if img.id != image_id]


def index_of(images: Sequence[SourceImage], image_id: str) -> int:
    for index, img in enumerate(images):
        if img.id == image_id:
            return index
    raise KeyError(f"Image '{image_id}' not found")


__all__ = ["move_image", "move_image_by_id", "remove_image", "index_of"]
