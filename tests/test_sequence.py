import pytest

from grid_combine.models import SourceImage
from grid_combine.sequence import index_of, move_image, move_image_by_id, remove_image


@pytest.fixture
def images():
    return [SourceImage(name, 10, 10) for name in ("a", "b", "c", "d")]


def ids(images):
    return [img.id for img in images]


def test_move_image_forward(images):
    assert ids(move_image(images, 0, 2)) == ["b", "c", "a", "d"]


def test_move_image_backward(images):
    assert ids(move_image(images, 3, 1)) == ["a", "d", "b", "c"]


def test_move_image_leaves_input_untouched(images):
    move_image(images, 0, 3)
    assert ids(images) == ["a", "b", "c", "d"]


def test_move_image_rejects_out_of_range(images):
    with pytest.raises(IndexError):
        move_image(images, 0, 4)


def test_move_image_by_id(images):
    assert ids(move_image_by_id(images, "d", "a")) == ["d", "a", "b", "c"]
    assert ids(move_image_by_id(images, "b", "b")) == ["a", "b", "c", "d"]


def test_remove_image(images):
    assert ids(remove_image(images, "c")) == ["a", "b", "d"]
    assert ids(remove_image(images, "missing")) == ["a", "b", "c", "d"]


def test_index_of_unknown_id(images):
    with pytest.raises(KeyError):
        index_of(images, "zzz")
