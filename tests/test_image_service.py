import numpy as np
import pytest
from PIL import Image

from pnmraster.models.canvas import Canvas, SampleKind
from pnmraster.services.image_service import ImageService


@pytest.fixture
def service():
    return ImageService()


def test_to_pil_grayscale_rescales_to_255(service):
    canvas = Canvas.from_array(np.array([[0, 5, 10]]), SampleKind.GRAYSCALE, max_intensity=10)
    image = service.to_pil(canvas)
    assert image.mode == "L"
    assert image.size == (3, 1)
    assert [image.getpixel((x, 0)) for x in range(3)] == [0, 128, 255]


def test_to_pil_color(service):
    canvas = Canvas.blank(2, 1, SampleKind.COLOR)
    canvas.set(1, 0, (10, 20, 30))
    image = service.to_pil(canvas)
    assert image.mode == "RGB"
    assert image.getpixel((1, 0)) == (10, 20, 30)


def test_to_pil_bitmap_set_pixels_are_black(service):
    canvas = Canvas.from_array(np.array([[True, False]]), SampleKind.BITMAP)
    image = service.to_pil(canvas)
    assert image.mode == "1"
    assert image.getpixel((0, 0)) == 0
    assert image.getpixel((1, 0)) == 255


def test_from_pil_color(service):
    canvas = service.from_pil(Image.new("RGB", (2, 1), (10, 20, 30)))
    assert canvas.kind is SampleKind.COLOR
    assert canvas.max_intensity == 255
    assert canvas.at(1, 0) == (10, 20, 30)


def test_from_pil_bitmap_marks_dark_pixels(service):
    image = Image.new("L", (2, 1), 0)
    image.putpixel((1, 0), 255)
    canvas = service.from_pil(image, SampleKind.BITMAP)
    assert canvas.kind is SampleKind.BITMAP
    assert canvas.at(0, 0) is True
    assert canvas.at(1, 0) is False


def test_load_image_and_save_preview(service, tmp_path):
    canvas = Canvas.blank(4, 3, SampleKind.GRAYSCALE)
    canvas.set(2, 1, 200)
    path = service.save_preview(canvas, tmp_path / "preview.png")
    loaded = service.load_image(path, SampleKind.GRAYSCALE)
    assert loaded == canvas


def test_load_image_errors(service, tmp_path):
    with pytest.raises(FileNotFoundError):
        service.load_image(tmp_path / "missing.png")
    garbage = tmp_path / "garbage.png"
    garbage.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        service.load_image(garbage)
