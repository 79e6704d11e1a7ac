import pytest

from grid_combine import config
from grid_combine.utils.validation import (
    PathValidationError,
    normalize_extensions,
    validate_image_path,
    validate_output_path,
)

IMAGE_EXTS = normalize_extensions(config.SUPPORTED_IMAGE_FORMATS)


def test_normalize_extensions():
    assert normalize_extensions(["PNG", ".jpg"]) == {".png", ".jpg"}


def test_validate_image_path_rejects_urls():
    with pytest.raises(PathValidationError):
        validate_image_path("http://example.com/a.png", IMAGE_EXTS)


def test_validate_image_path_rejects_bad_extension(tmp_path):
    f = tmp_path / "evil.txt"
    f.write_text("not an image")
    with pytest.raises(PathValidationError):
        validate_image_path(f, IMAGE_EXTS)


def test_validate_image_path_rejects_missing_file(tmp_path):
    with pytest.raises(ValueError, match="does not exist"):
        validate_image_path(tmp_path / "gone.png", IMAGE_EXTS)


def test_validate_image_path_rejects_directory(tmp_path):
    folder = tmp_path / "folder.png"
    folder.mkdir()
    with pytest.raises(PathValidationError, match="Not a file"):
        validate_image_path(folder, IMAGE_EXTS)


def test_validate_image_path_resolves(tmp_path):
    f = tmp_path / "ok.PNG"
    f.write_bytes(b"")
    assert validate_image_path(f, IMAGE_EXTS) == f.resolve()


def test_validate_output_path_checks_directory(tmp_path):
    with pytest.raises(PathValidationError):
        validate_output_path(tmp_path / "missing" / "out.png", {".png"})


def test_validate_output_path_checks_extension(tmp_path):
    with pytest.raises(PathValidationError):
        validate_output_path(tmp_path / "out.gif", {".png"})
    assert validate_output_path(tmp_path / "out.png", {".png"}) == (tmp_path / "out.png").resolve()
