import io

import pytest
from PIL import Image

from services.meme import MemeGenerationError, add_caption_to_image


def _open(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data))


def test_caption_output_is_png_with_same_size(jpeg_bytes):
    output = add_caption_to_image(jpeg_bytes, "when the code", "works first try")
    image = _open(output)
    assert image.format == "PNG"
    assert image.size == (320, 240)


def test_caption_draws_on_image(png_bytes):
    output = add_caption_to_image(png_bytes, "top", "bottom")
    original = _open(png_bytes).convert("RGBA")
    captioned = _open(output).convert("RGBA")
    assert original.tobytes() != captioned.tobytes()


def test_empty_captions_leave_pixels_unchanged(png_bytes):
    output = add_caption_to_image(png_bytes, None, "   ")
    original = _open(png_bytes).convert("RGBA")
    captioned = _open(output).convert("RGBA")
    assert original.tobytes() == captioned.tobytes()


def test_long_caption_is_handled(png_bytes):
    caption = "this is a very long meme caption that will certainly need wrapping across lines"
    output = add_caption_to_image(png_bytes, caption, caption)
    assert _open(output).size == (320, 240)


def test_empty_image_is_rejected():
    with pytest.raises(MemeGenerationError):
        add_caption_to_image(b"", "top", "bottom")


def test_unreadable_image_is_rejected():
    with pytest.raises(MemeGenerationError):
        add_caption_to_image(b"\x89PNG-not-really", "top", "bottom")
