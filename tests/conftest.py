import io
import os
import tempfile

# 테스트 중 로그 파일은 임시 디렉토리에 기록
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "image_gc_api_test_logs"))

import pytest
from fastapi.testclient import TestClient
from PIL import Image


def _image_bytes(fmt: str, size=(320, 240), color=(40, 120, 200)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


@pytest.fixture
def client():
    from main import app
    with TestClient(app) as test_client:
        yield test_client
