"""Loading, validation and export helpers around the grid engine."""

from . import image_export, image_loader, validation

__all__ = ["image_export", "image_loader", "validation"]
