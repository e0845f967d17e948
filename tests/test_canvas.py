import numpy as np
import pytest

from pnmraster.models.canvas import Canvas, SampleKind
from pnmraster.models.errors import InvalidGeometry, InvalidSample, OutOfBounds, UnsupportedOperation
from pnmraster.models.geometry import Color


def test_blank_color_canvas():
    canvas = Canvas.blank(3, 2, SampleKind.COLOR)
    assert canvas.size() == (3, 2)
    assert canvas.pixels.shape == (2, 3, 3)
    assert canvas.magic == "P3"
    assert canvas.channel_depth == 3
    assert canvas.max_intensity == 255
    assert canvas.at(2, 1) == (0, 0, 0)


def test_blank_bitmap_has_no_max_intensity():
    canvas = Canvas.blank(4, 4, SampleKind.BITMAP)
    assert canvas.max_intensity is None
    assert canvas.at(0, 0) is False
    with pytest.raises(InvalidSample):
        Canvas.blank(4, 4, SampleKind.BITMAP, max_intensity=1)


@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-1, 3)])
def test_blank_rejects_non_positive_dimensions(width, height):
    with pytest.raises(InvalidGeometry):
        Canvas.blank(width, height, SampleKind.GRAYSCALE)


def test_blank_rejects_max_intensity_out_of_range():
    with pytest.raises(InvalidSample):
        Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=256)
    with pytest.raises(InvalidSample):
        Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=0)


@pytest.mark.parametrize("x, y", [(3, 0), (0, 2), (-1, 0), (0, -1)])
def test_at_out_of_bounds(x, y):
    canvas = Canvas.blank(3, 2, SampleKind.GRAYSCALE)
    with pytest.raises(OutOfBounds):
        canvas.at(x, y)


def test_out_of_bounds_is_index_error():
    canvas = Canvas.blank(3, 2, SampleKind.GRAYSCALE)
    with pytest.raises(IndexError):
        canvas.at(5, 5)


def test_set_never_grows_grid():
    canvas = Canvas.blank(3, 2, SampleKind.COLOR)
    with pytest.raises(OutOfBounds):
        canvas.set(3, 2, (1, 2, 3))
    assert canvas.size() == (3, 2)
    assert canvas.pixels.shape == (2, 3, 3)
    assert not canvas.pixels.any()


def test_set_and_at_per_kind():
    color = Canvas.blank(2, 2, SampleKind.COLOR)
    color.set(1, 0, Color(10, 20, 30))
    assert color.at(1, 0) == (10, 20, 30)

    gray = Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=10)
    gray.set(0, 1, 7)
    assert gray.at(0, 1) == 7

    bitmap = Canvas.blank(2, 2, SampleKind.BITMAP)
    bitmap.set(1, 1, True)
    assert bitmap.at(1, 1) is True


def test_set_rejects_values_outside_max_intensity():
    gray = Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=10)
    with pytest.raises(InvalidSample):
        gray.set(0, 0, 11)
    color = Canvas.blank(2, 2, SampleKind.COLOR, max_intensity=100)
    with pytest.raises(InvalidSample):
        color.set(0, 0, (0, 101, 0))
    with pytest.raises(InvalidSample):
        color.set(0, 0, (1, 2))
    bitmap = Canvas.blank(2, 2, SampleKind.BITMAP)
    with pytest.raises(InvalidSample):
        bitmap.set(0, 0, 2)
    assert not gray.pixels.any()
    assert not color.pixels.any()


def test_copy_is_independent():
    original = Canvas.blank(3, 3, SampleKind.COLOR, max_intensity=200)
    original.set(1, 1, (5, 6, 7))
    clone = original.copy()
    assert clone == original
    assert clone.magic == original.magic
    assert clone.max_intensity == 200

    clone.set(1, 1, (0, 0, 0))
    assert original.at(1, 1) == (5, 6, 7)
    assert not np.shares_memory(clone.pixels, original.pixels)


def test_derive_bitmap_uses_strictly_greater_than_half_max():
    gray = Canvas.from_array(np.array([[5, 6], [0, 10]]), SampleKind.GRAYSCALE, max_intensity=10)
    bitmap = gray.derive_bitmap()
    assert bitmap.kind is SampleKind.BITMAP
    assert bitmap.magic == "P1"
    assert bitmap.at(0, 0) is False
    assert bitmap.at(1, 0) is True
    assert bitmap.at(0, 1) is False
    assert bitmap.at(1, 1) is True


def test_derive_bitmap_truncates_odd_max():
    gray = Canvas.from_array(np.array([[3, 4]]), SampleKind.GRAYSCALE, max_intensity=7)
    bitmap = gray.derive_bitmap()
    assert bitmap.at(0, 0) is False
    assert bitmap.at(1, 0) is True


def test_derive_bitmap_with_explicit_threshold():
    gray = Canvas.from_array(np.array([[100, 200]]), SampleKind.GRAYSCALE)
    bitmap = gray.derive_bitmap(threshold=150)
    assert [bitmap.at(0, 0), bitmap.at(1, 0)] == [False, True]


def test_derive_bitmap_requires_grayscale():
    with pytest.raises(UnsupportedOperation):
        Canvas.blank(2, 2, SampleKind.COLOR).derive_bitmap()


def test_set_max_intensity():
    gray = Canvas.from_array(np.array([[3, 9]]), SampleKind.GRAYSCALE, max_intensity=255)
    gray.set_max_intensity(10)
    assert gray.max_intensity == 10
    with pytest.raises(InvalidSample):
        gray.set_max_intensity(8)
    assert gray.max_intensity == 10
    with pytest.raises(UnsupportedOperation):
        Canvas.blank(1, 1, SampleKind.BITMAP).set_max_intensity(1)


def test_from_array_validates_shape_and_range():
    with pytest.raises(InvalidSample):
        Canvas.from_array(np.zeros((2, 2)), SampleKind.COLOR)
    with pytest.raises(InvalidSample):
        Canvas.from_array(np.array([[0, 300]]), SampleKind.GRAYSCALE)
    with pytest.raises(InvalidSample):
        Canvas.from_array(np.array([[0, 2]]), SampleKind.BITMAP)


def test_from_array_copies_input():
    source = np.zeros((2, 2), dtype=np.uint8)
    canvas = Canvas.from_array(source, SampleKind.GRAYSCALE)
    source[0, 0] = 9
    assert canvas.at(0, 0) == 0


def test_equality_considers_kind_and_max():
    a = Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=10)
    b = Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=10)
    c = Canvas.blank(2, 2, SampleKind.GRAYSCALE, max_intensity=11)
    assert a == b
    assert a != c


@pytest.mark.parametrize("value", [np.array([1]), np.array([0, 1]), "1", 1.0])
def test_bitmap_rejects_non_scalar_samples(value):
    bitmap = Canvas.blank(2, 2, SampleKind.BITMAP)
    with pytest.raises(InvalidSample):
        bitmap.set(0, 0, value)
    assert not bitmap.pixels.any()


def test_bitmap_accepts_numpy_scalars():
    bitmap = Canvas.blank(2, 1, SampleKind.BITMAP)
    bitmap.set(0, 0, np.uint8(1))
    bitmap.set(1, 0, np.bool_(True))
    assert bitmap.at(0, 0) is True
    assert bitmap.at(1, 0) is True


def test_replace_pixels_allows_new_size_same_layout():
    canvas = Canvas.blank(3, 2, SampleKind.COLOR)
    canvas.replace_pixels(np.zeros((3, 2, 3), dtype=np.uint8))
    assert canvas.size() == (2, 3)


@pytest.mark.parametrize("pixels", [
    np.zeros((2, 3), dtype=np.uint8),
    np.zeros((2, 3, 3), dtype=np.int64),
    np.zeros((0, 3, 3), dtype=np.uint8),
])
def test_replace_pixels_rejects_incompatible_arrays(pixels):
    canvas = Canvas.blank(3, 2, SampleKind.COLOR)
    with pytest.raises(InvalidGeometry):
        canvas.replace_pixels(pixels)
    assert canvas.size() == (3, 2)
