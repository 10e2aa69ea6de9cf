import base64

import pytest

from models.image import ImageAnalysisRequest
from services.image import (
    InvalidImageDataError,
    decode_image_data,
    extract_image_metadata,
    is_valid_image_bytes,
    validate_analysis_request,
)


def _request(image_bytes: bytes, **kwargs) -> ImageAnalysisRequest:
    return ImageAnalysisRequest(
        image_data=base64.b64encode(image_bytes).decode(),
        content_type=kwargs.pop("content_type", "image/png"),
        **kwargs,
    )


def _fields(errors):
    return [error["field"] for error in errors]


def test_valid_png_request_has_no_errors(png_bytes):
    assert validate_analysis_request(_request(png_bytes)) == []


def test_valid_jpeg_request_has_no_errors(jpeg_bytes):
    assert validate_analysis_request(_request(jpeg_bytes, content_type="image/jpeg")) == []


def test_empty_request_reports_image_data_and_content_type():
    errors = validate_analysis_request(ImageAnalysisRequest())
    assert _fields(errors) == ["imageData", "contentType"]


@pytest.mark.parametrize("length, valid", [(199, False), (200, True), (500, True), (501, False)])
def test_description_length_boundaries(png_bytes, length, valid):
    request = ImageAnalysisRequest.model_construct(
        image_data=base64.b64encode(png_bytes).decode(),
        content_type="image/png",
        description_length=length,
    )
    errors = validate_analysis_request(request)
    assert ("descriptionLength" not in _fields(errors)) == valid


def test_invalid_base64_is_reported():
    request = ImageAnalysisRequest(image_data="not-valid-base64!!!", content_type="image/png")
    errors = validate_analysis_request(request)
    assert errors == [{"field": "imageData", "message": "Invalid base64 image data"}]


def test_non_image_bytes_are_reported():
    gif = b"GIF89a" + b"\x00" * 16
    errors = validate_analysis_request(_request(gif, content_type="image/jpeg"))
    assert len(errors) == 1
    assert "not a valid JPEG or PNG" in errors[0]["message"]


def test_magic_bytes():
    assert is_valid_image_bytes(b"\xff\xd8\xff\xe0")
    assert is_valid_image_bytes(b"\x89PNG\r\n\x1a\n")
    assert not is_valid_image_bytes(b"\xff\xd8")
    assert not is_valid_image_bytes(b"")


def test_decode_strips_data_url_prefix(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    assert decode_image_data(f"data:image/png;base64,{encoded}") == png_bytes


def test_decode_rejects_garbage():
    with pytest.raises(InvalidImageDataError):
        decode_image_data("%%%")


def test_extract_image_metadata(png_bytes):
    metadata = extract_image_metadata("req_test", png_bytes)
    assert metadata["width"] == 320
    assert metadata["height"] == 240
    assert metadata["format"] == "PNG"


def test_extract_image_metadata_handles_truncated_data():
    metadata = extract_image_metadata("req_test", b"\x89PNG")
    assert "error" in metadata
    assert metadata["size"] == 4
