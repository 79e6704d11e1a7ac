import logging
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip(
    "PySide6.QtGui",
    reason="PySide6 GUI bindings required for compositor tests",
    exc_type=ImportError,
)

from PySide6.QtGui import QColor, QGuiApplication, QImage, QPainter  # noqa: E402

from grid_combine.compositor import render  # noqa: E402
from grid_combine.layout import compute_layout  # noqa: E402
from grid_combine.models import Cell, Layout, Settings, SourceImage  # noqa: E402


@pytest.fixture(scope="module")
def qt_app() -> QGuiApplication:
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    return app


def solid(image_id, width, height, color):
    image = QImage(width, height, QImage.Format_ARGB32)
    image.fill(QColor(color))
    return SourceImage(image_id, width, height, handle=image)


def two_tone(image_id, width, height, left, right):
    image = QImage(width, height, QImage.Format_ARGB32)
    painter = QPainter(image)
    painter.fillRect(0, 0, width // 2, height, QColor(left))
    painter.fillRect(width // 2, 0, width - width // 2, height, QColor(right))
    painter.end()
    return SourceImage(image_id, width, height, handle=image)


def color_at(raster, x, y):
    return raster.pixelColor(x, y).name()


def raster_bytes(raster):
    return bytes(raster.constBits())


def test_cells_and_gap_are_painted(qt_app):
    settings = Settings(mode="width_col", width=220, cols=2, gap=20,
                        background_color="#00ff00", fit_mode="average")
    images = [solid("r", 10, 10, "red"), solid("b", 10, 10, "blue")]
    raster = render(compute_layout(images, settings), settings)

    assert (raster.width(), raster.height()) == (220, 100)
    assert color_at(raster, 50, 50) == "#ff0000"
    assert color_at(raster, 110, 50) == "#00ff00"
    assert color_at(raster, 170, 50) == "#0000ff"


@pytest.mark.parametrize(
    "anchor, left_sample, right_sample",
    [
        ("top-left", "#ff0000", "#ff0000"),
        ("top-right", "#0000ff", "#0000ff"),
        ("center", "#ff0000", "#0000ff"),
    ],
)
def test_cover_crop_follows_anchor(qt_app, anchor, left_sample, right_sample):
    # portrait picks the square ratio, so the wide image is cropped.
    settings = Settings(mode="width_col", width=200, cols=2, gap=0,
                        fit_mode="portrait", anchor=anchor)
    images = [two_tone("wide", 20, 10, "red", "blue"), solid("sq", 10, 10, "green")]
    raster = render(compute_layout(images, settings), settings)

    assert (raster.width(), raster.height()) == (200, 100)
    assert color_at(raster, 25, 50) == left_sample
    assert color_at(raster, 75, 50) == right_sample
    assert color_at(raster, 150, 50) == QColor("green").name()


def test_overflow_is_clipped_to_its_cell(qt_app):
    # The cropped image is drawn last and overflows leftwards into cell 0.
    settings = Settings(mode="width_col", width=200, cols=2, gap=0,
                        fit_mode="portrait", anchor="top-right")
    images = [solid("sq", 10, 10, "green"), two_tone("wide", 20, 10, "red", "blue")]
    raster = render(compute_layout(images, settings), settings)

    assert color_at(raster, 50, 50) == QColor("green").name()
    assert color_at(raster, 150, 50) == "#0000ff"


def test_max_dimensions_letterboxes(qt_app):
    settings = Settings(mode="width_col", width=250, cols=2, gap=0,
                        background_color="#00ff00", fit_mode="max_dimensions")
    images = [solid("wide", 100, 50, "red"), solid("tall", 40, 80, "blue")]
    raster = render(compute_layout(images, settings), settings)

    assert (raster.width(), raster.height()) == (250, 100)
    assert color_at(raster, 62, 5) == "#00ff00"
    assert color_at(raster, 62, 50) == "#ff0000"
    assert color_at(raster, 130, 50) == "#00ff00"
    assert color_at(raster, 187, 50) == "#0000ff"


def test_original_mode_fills_background_around_short_images(qt_app):
    settings = Settings(mode="width_col", width=400, cols=2, gap=0,
                        background_color="#00ff00", fit_mode="original")
    images = [solid("wide", 200, 100, "red"), solid("sq", 100, 100, "blue")]
    raster = render(compute_layout(images, settings), settings)

    assert (raster.width(), raster.height()) == (400, 200)
    assert color_at(raster, 100, 20) == "#00ff00"
    assert color_at(raster, 100, 100) == "#ff0000"
    assert color_at(raster, 100, 180) == "#00ff00"
    assert color_at(raster, 300, 100) == "#0000ff"


def test_render_is_byte_identical_across_runs(qt_app):
    settings = Settings(mode="height_row", height=90, rows=2, gap=3,
                        fit_mode="average", anchor="bottom-left")
    images = [two_tone("a", 30, 17, "red", "blue"), solid("b", 11, 23, "yellow"),
              two_tone("c", 40, 40, "black", "white")]

    first = render(compute_layout(images, settings), settings)
    second = render(compute_layout(images, settings), settings)
    assert raster_bytes(first) == raster_bytes(second)


def test_cell_order_has_no_visible_effect(qt_app):
    settings = Settings(mode="width_col", width=300, cols=3, gap=5, fit_mode="landscape")
    images = [two_tone("a", 30, 17, "red", "blue"), solid("b", 11, 23, "yellow"),
              solid("c", 40, 40, "black")]
    layout = compute_layout(images, settings)
    reversed_layout = Layout(layout.total_width, layout.total_height, tuple(reversed(layout.cells)))

    assert raster_bytes(render(layout, settings)) == raster_bytes(render(reversed_layout, settings))


def test_fractional_canvas_is_truncated(qt_app):
    settings = Settings(mode="width_col", width=100, cols=3, gap=0, fit_mode="average")
    layout = compute_layout([solid("a", 10, 10, "red")], settings)
    raster = render(layout, settings)
    assert (raster.width(), raster.height()) == (100, 33)


def test_empty_layout_renders_null_image(qt_app):
    assert render(Layout(0, 0, ()), Settings()).isNull()


def test_undecoded_image_is_rejected(qt_app):
    settings = Settings(width=100, cols=1)
    layout = compute_layout([SourceImage("pending", 10, 10)], settings)
    with pytest.raises(ValueError, match="pending"):
        render(layout, settings)


def test_overlapping_cells_are_rejected(qt_app):
    a = solid("a", 10, 10, "red")
    b = solid("b", 10, 10, "blue")
    layout = Layout(100, 100, (
        Cell(0, 0, 60, 60, a, 1.0, 1.0),
        Cell(40, 40, 60, 60, b, 1.0, 1.0),
    ))
    with pytest.raises(ValueError, match="overlap"):
        render(layout, Settings())


def test_invalid_background_falls_back_to_default(qt_app, caplog):
    settings = Settings(width=100, cols=1, gap=0, background_color="not-a-colour",
                        fit_mode="max_dimensions")
    layout = compute_layout([solid("wide", 100, 50, "red"), solid("tall", 50, 100, "blue")], settings)
    with caplog.at_level(logging.WARNING, logger="grid_combine.compositor"):
        raster = render(layout, settings)

    assert "Invalid background colour" in caplog.text
    assert color_at(raster, 50, 5) == "#ffffff"
