import asyncio
import json
from types import SimpleNamespace

import pytest

import services.vision as vision
from services.vision import NO_DESCRIPTION, VisionAnalysisError, normalize_analysis


def _fake_client(content=None, error=None):
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        if error:
            raise error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def test_normalize_filters_low_confidence_and_duplicate_tags():
    payload = {
        "caption": "A cat sitting on a sofa",
        "confidence": 0.91,
        "tags": [
            {"name": "cat", "confidence": 0.99},
            {"name": "Cat", "confidence": 0.95},
            {"name": "sofa", "confidence": 0.8},
            {"name": "dog", "confidence": 0.2},
            {"name": "", "confidence": 0.9},
        ],
    }
    result = normalize_analysis(payload, min_tag_confidence=0.6)
    assert result == {"description": "A cat sitting on a sofa", "tags": ["cat", "sofa"], "confidence": 0.91}


def test_normalize_accepts_plain_string_tags():
    result = normalize_analysis({"caption": "x", "tags": ["tree", "sky"]})
    assert result["tags"] == ["tree", "sky"]


def test_normalize_defaults_and_clamps():
    result = normalize_analysis({"confidence": 7})
    assert result["description"] == NO_DESCRIPTION
    assert result["tags"] == []
    assert result["confidence"] == 1.0

    assert normalize_analysis({"confidence": "bad"})["confidence"] == 0.0
    assert normalize_analysis({"confidence": -0.5})["confidence"] == 0.0


def test_analyze_image_with_openai(monkeypatch, png_bytes):
    content = json.dumps({
        "caption": "A blue square",
        "confidence": 0.75,
        "tags": [{"name": "blue", "confidence": 0.9}, {"name": "square", "confidence": 0.7}],
    })
    client, calls = _fake_client(content=content)
    monkeypatch.setattr(vision, "VISION_PROVIDER", "openai")
    monkeypatch.setattr(vision, "get_openai_client", lambda for_images=False: client)

    result = asyncio.run(vision.analyze_image("req_test", png_bytes, "image/png"))

    assert result["description"] == "A blue square"
    assert result["tags"] == ["blue", "square"]
    assert result["confidence"] == 0.75
    assert result["processing_time_ms"] >= 0

    image_part = calls[0]["messages"][1]["content"][1]
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,")


def test_analyze_image_wraps_provider_errors(monkeypatch, png_bytes):
    client, _ = _fake_client(error=RuntimeError("service unavailable"))
    monkeypatch.setattr(vision, "VISION_PROVIDER", "openai")
    monkeypatch.setattr(vision, "get_openai_client", lambda for_images=False: client)

    with pytest.raises(VisionAnalysisError, match="service unavailable"):
        asyncio.run(vision.analyze_image("req_test", png_bytes, "image/png"))


def test_analyze_image_rejects_unparseable_response(monkeypatch, png_bytes):
    client, _ = _fake_client(content="I cannot help with that.")
    monkeypatch.setattr(vision, "VISION_PROVIDER", "openai")
    monkeypatch.setattr(vision, "get_openai_client", lambda for_images=False: client)

    with pytest.raises(VisionAnalysisError):
        asyncio.run(vision.analyze_image("req_test", png_bytes, "image/png"))


def test_analyze_image_rejects_unknown_provider(monkeypatch, png_bytes):
    monkeypatch.setattr(vision, "VISION_PROVIDER", "unknown")
    with pytest.raises(VisionAnalysisError):
        asyncio.run(vision.analyze_image("req_test", png_bytes, "image/png"))


def test_analyze_image_rejects_empty_bytes():
    with pytest.raises(ValueError):
        asyncio.run(vision.analyze_image("req_test", b"", "image/png"))
