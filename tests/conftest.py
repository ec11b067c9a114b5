import io
import os

import pytest
from PIL import Image


def create_test_image(size=(40, 24), color=(200, 30, 60, 255)):
    """Create an RGBA image with a gradient so resizes are not trivial."""
    img = Image.new("RGBA", size, color)
    width, height = size
    for x in range(width):
        for y in range(0, height, 3):
            img.putpixel((x, y), (x * 255 // max(width - 1, 1), y * 255 // max(height - 1, 1), 128, 255))
    return img


def png_bytes(size=(40, 24), color=(200, 30, 60, 255)):
    buffer = io.BytesIO()
    create_test_image(size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PNGTOICO_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("PNGTOICO_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_png(tmp_path):
    """Factory writing a PNG file into tmp_path and returning its path."""
    def _make(name="logo.png", size=(40, 24), color=(200, 30, 60, 255)):
        path = tmp_path / name
        path.write_bytes(png_bytes(size, color))
        return path
    return _make
