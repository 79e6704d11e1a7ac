"""Path validation for image inputs and exported files."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union
from urllib.parse import urlparse


class PathValidationError(ValueError):
    """Raised when a user-supplied path is rejected."""


def _has_url_scheme(path_str: str) -> bool:
    """Return True if *path_str* looks like a URL with a scheme.

    Single-letter schemes such as ``"C"`` are Windows drive letters.
    """
    parsed = urlparse(path_str)
    return bool(parsed.scheme and len(parsed.scheme) > 1)


def normalize_extensions(exts: Iterable[str]) -> set[str]:
    """Return *exts* as lower-case suffixes with a leading dot."""
    return {f".{ext.lower().lstrip('.')}" for ext in exts}


def _check_suffix(p: Path, allowed_exts: Iterable[str]) -> None:
    if p.suffix.lower() not in normalize_extensions(allowed_exts):
        raise PathValidationError(f"Unsupported file extension: {p.suffix or '(none)'}")


def validate_image_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate a source image *path* and return it resolved.

    The path must name an existing regular file with an allowed extension
    and must not be a URL.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise PathValidationError("URLs are not allowed")

    p = Path(path_str).expanduser()
    try:
        p = p.resolve(strict=True)
    except FileNotFoundError as exc:
        raise PathValidationError(f"File does not exist: {path_str}") from exc

    if not p.is_file():
        raise PathValidationError(f"Not a file: {path_str}")

    _check_suffix(p, allowed_exts)
    return p


def validate_output_path(path: Union[str, Path], allowed_exts: Iterable[str]) -> Path:
    """Validate the destination of an exported raster.

    The parent directory must already exist; the file itself may not.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise PathValidationError("URLs are not allowed")

    p = Path(path_str).expanduser().resolve()
    if not p.parent.is_dir():
        raise PathValidationError(f"Directory does not exist: {p.parent}")
    if p.exists() and not p.is_file():
        raise PathValidationError(f"Not a file: {path_str}")

    _check_suffix(p, allowed_exts)
    return p
