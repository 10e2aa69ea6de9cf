import time
from typing import Any, Dict, List

from config import VISION_PROVIDER, OPENAI_VISION_MODEL, GEMINI_API_KEY, GEMINI_MODEL, MIN_TAG_CONFIDENCE
from logger import logger
from services.image import encode_image_data
from services.llm import get_openai_client, parse_json_content, OpenAIServiceError
from utils.helpers import elapsed_ms

NO_DESCRIPTION = "No description available"

ANALYSIS_PROMPT = """\
Analyze this image. Return ONLY a valid JSON object with exactly these fields:
{
  "caption": "<one sentence, gender-neutral description of the image>",
  "confidence": <number between 0 and 1, how confident you are in the caption>,
  "tags": [{"name": "<single lowercase word or short phrase>", "confidence": <number between 0 and 1>}]
}
List up to 20 tags, most relevant first."""


class VisionAnalysisError(Exception):
    """이미지 분석 호출 실패 또는 응답 파싱 실패"""


def _clamp(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    return min(1.0, max(0.0, score))


def normalize_analysis(payload: Dict[str, Any], min_tag_confidence: float = MIN_TAG_CONFIDENCE) -> Dict[str, Any]:
    """제공자 응답을 (설명, 태그, 신뢰도) 형태로 정규화합니다.

    신뢰도가 min_tag_confidence 미만인 태그는 제외하고, 중복 태그는 처음 것만 남깁니다.
    """
    caption = str(payload.get("caption") or "").strip() or NO_DESCRIPTION

    tags: List[str] = []
    seen = set()
    for item in payload.get("tags") or []:
        if isinstance(item, dict):
            name = str(item.get("name") or "").strip()
            confidence = _clamp(item.get("confidence", 1.0))
        else:
            name = str(item).strip()
            confidence = 1.0
        if not name or confidence < min_tag_confidence:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        tags.append(name)

    return {
        "description": caption,
        "tags": tags,
        "confidence": _clamp(payload.get("confidence", 0.0)),
    }


async def _analyze_with_openai(image_bytes: bytes, content_type: str) -> Dict[str, Any]:
    client = get_openai_client()
    data_url = f"data:{content_type};base64,{encode_image_data(image_bytes)}"
    response = await client.chat.completions.create(
        model=OPENAI_VISION_MODEL,
        messages=[
            {"role": "system", "content": "You are an image analysis service. You describe images precisely and neutrally."},
            {"role": "user", "content": [
                {"type": "text", "text": ANALYSIS_PROMPT},
                {"type": "image_url", "image_url": {"url": data_url}},
            ]},
        ],
        max_tokens=600,
        temperature=0.2,
        response_format={"type": "json_object"},
    )
    return parse_json_content(response.choices[0].message.content or "")


async def _analyze_with_gemini(image_bytes: bytes, content_type: str) -> Dict[str, Any]:
    import google.generativeai as genai

    genai.configure(api_key=GEMINI_API_KEY)
    model = genai.GenerativeModel(model_name=GEMINI_MODEL)
    response = await model.generate_content_async([
        ANALYSIS_PROMPT,
        {"mime_type": content_type, "data": image_bytes},
    ])
    return parse_json_content(response.text)


async def analyze_image(request_id: str, image_bytes: bytes, content_type: str = "image/jpeg") -> Dict[str, Any]:
    """이미지를 분석하여 설명, 태그, 신뢰도를 반환합니다.

    Returns:
        {"description", "tags", "confidence", "processing_time_ms"}
    Raises:
        ValueError: 이미지 데이터가 비어 있는 경우
        VisionAnalysisError: 외부 분석 서비스 호출 실패
    """
    if not image_bytes:
        raise ValueError("Image data cannot be empty")

    logger.info(f"[{request_id}] 이미지 분석 시작: 제공자={VISION_PROVIDER}, 크기={len(image_bytes)} bytes")
    start_time = time.perf_counter()

    try:
        if VISION_PROVIDER == "openai":
            payload = await _analyze_with_openai(image_bytes, content_type)
        elif VISION_PROVIDER == "gemini":
            payload = await _analyze_with_gemini(image_bytes, content_type)
        else:
            raise VisionAnalysisError(f"지원되지 않는 분석 제공자: {VISION_PROVIDER}")
    except VisionAnalysisError:
        raise
    except OpenAIServiceError as e:
        raise VisionAnalysisError(f"Image analysis response could not be parsed: {e}") from e
    except Exception as e:
        logger.exception(f"[{request_id}] 이미지 분석 중 오류 ({elapsed_ms(start_time)}ms 경과): {e}")
        raise VisionAnalysisError(f"Image analysis failed: {e}") from e

    result = normalize_analysis(payload)
    result["processing_time_ms"] = elapsed_ms(start_time)

    logger.info(
        f"[{request_id}] 이미지 분석 완료: 소요시간={result['processing_time_ms']}ms, "
        f"태그={len(result['tags'])}개, 신뢰도={result['confidence']:.2f}"
    )
    return result
