import base64
import json
import re
import time
from typing import Any, Dict, List, Tuple

from openai import AsyncOpenAI, AsyncAzureOpenAI

from config import (
    OPENAI_API_KEY, OPENAI_ENDPOINT, OPENAI_API_VERSION, OPENAI_CHAT_MODEL,
    OPENAI_IMAGE_MODEL, OPENAI_IMAGE_ENDPOINT, OPENAI_IMAGE_API_KEY, OPENAI_TIMEOUT,
)
from logger import logger
from utils.helpers import elapsed_ms


class OpenAIServiceError(Exception):
    """OpenAI 호출 실패 또는 응답 파싱 실패"""


def get_openai_client(for_images: bool = False):
    """OpenAI 클라이언트를 생성합니다. 엔드포인트가 설정되면 Azure OpenAI 를 사용합니다."""
    endpoint = OPENAI_IMAGE_ENDPOINT if for_images else OPENAI_ENDPOINT
    api_key = OPENAI_IMAGE_API_KEY if for_images else OPENAI_API_KEY

    if endpoint:
        return AsyncAzureOpenAI(
            azure_endpoint=endpoint,
            api_key=api_key,
            api_version=OPENAI_API_VERSION,
            timeout=OPENAI_TIMEOUT,
        )
    return AsyncOpenAI(api_key=api_key, timeout=OPENAI_TIMEOUT)


def parse_json_content(content: str) -> Dict[str, Any]:
    """모델 응답에서 JSON 객체를 추출합니다. 코드 펜스나 앞뒤 설명이 섞여 있어도 처리합니다."""
    text = content.strip()
    text = re.sub(r"^```(?:json)?\s*|\s*```$", "", text)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    match = re.search(r"\{[\s\S]*\}", text)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass

    raise OpenAIServiceError("모델 응답을 JSON으로 파싱할 수 없습니다.")


def _usage_tokens(response) -> int:
    usage = getattr(response, "usage", None)
    return int(getattr(usage, "total_tokens", 0) or 0)


async def _complete_chat(system_prompt: str, prompt: str, max_tokens: int, temperature: float = 0.7) -> Tuple[str, int]:
    client = get_openai_client()
    response = await client.chat.completions.create(
        model=OPENAI_CHAT_MODEL,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ],
        max_tokens=max_tokens,
        temperature=temperature,
    )
    content = (response.choices[0].message.content or "").strip()
    return content, _usage_tokens(response)


async def enhance_description(request_id: str, basic_description: str, tags: List[str], target_length: int) -> Tuple[str, int, int]:
    """기본 설명과 태그를 바탕으로 이미지 생성용 상세 설명을 만듭니다.

    Returns:
        (향상된 설명, 사용 토큰 수, 소요시간 ms)
    """
    if target_length <= 0:
        raise ValueError("target_length 는 0보다 커야 합니다")

    logger.info(f"[{request_id}] 설명 향상 시작: 목표 {target_length} 단어")
    start_time = time.perf_counter()

    prompt = (
        "I have an image with the following basic description:\n"
        f"\"{basic_description}\"\n\n"
        f"The image has been tagged with these elements: {', '.join(tags)}\n\n"
        "Please enhance this description to be more detailed and comprehensive.\n"
        f"The enhanced description should be approximately {target_length} words "
        "and suitable for image generation with DALL-E.\n\n"
        "Enhanced description:"
    )

    try:
        description, tokens = await _complete_chat(
            "You are an expert image description enhancer.", prompt, max_tokens=800
        )
    except Exception as e:
        logger.exception(f"[{request_id}] 설명 향상 중 오류: {e}")
        raise OpenAIServiceError(f"Description enhancement failed: {e}") from e

    if not description:
        raise OpenAIServiceError("Description enhancement returned an empty response")

    processing_time = elapsed_ms(start_time)
    logger.info(f"[{request_id}] 설명 향상 완료: 소요시간={processing_time}ms, 토큰={tokens}")
    return description, tokens, processing_time


async def generate_detailed_description(request_id: str, tags: List[str], target_length: int, confidence_score: float = 0.0) -> Tuple[str, int, int]:
    """태그만으로 상세 설명을 생성합니다. (분석 캡션이 없을 때 사용)"""
    if target_length <= 0:
        raise ValueError("target_length 는 0보다 커야 합니다")

    logger.info(f"[{request_id}] 태그 {len(tags)}개로 상세 설명 생성 시작")
    start_time = time.perf_counter()

    prompt = (
        f"Based on these image tags: {', '.join(tags)}\n"
        f"Analysis confidence: {confidence_score:.0%}\n\n"
        f"Create a detailed visual description of approximately {target_length} words "
        "suitable for image generation.\n"
        "Focus on concrete visual elements and composition.\n\n"
        "Detailed description:"
    )

    try:
        description, tokens = await _complete_chat(
            "You are an expert at creating detailed image descriptions from tags.", prompt, max_tokens=800
        )
    except Exception as e:
        logger.exception(f"[{request_id}] 상세 설명 생성 중 오류: {e}")
        raise OpenAIServiceError(f"Detailed description generation failed: {e}") from e

    processing_time = elapsed_ms(start_time)
    logger.info(f"[{request_id}] 상세 설명 생성 완료: 소요시간={processing_time}ms")
    return description, tokens, processing_time


async def generate_meme_caption(request_id: str, tags: List[str], confidence_score: float = 0.0) -> Tuple[str, str, int, int]:
    """태그를 바탕으로 밈 캡션(상단/하단 텍스트)을 생성합니다.

    Returns:
        (상단 텍스트, 하단 텍스트, 사용 토큰 수, 소요시간 ms)
    """
    logger.info(f"[{request_id}] 밈 캡션 생성 시작: 태그 {len(tags)}개, 신뢰도={confidence_score:.2f}")
    start_time = time.perf_counter()

    prompt = (
        f"Create a funny meme caption for an image with these elements: {', '.join(tags)}\n\n"
        "Respond in JSON format:\n"
        "{\"topText\": \"TOP CAPTION\", \"bottomText\": \"BOTTOM CAPTION\"}\n\n"
        "Keep captions short (3-7 words each). Make it humorous and relatable."
    )

    try:
        content, tokens = await _complete_chat(
            "You are a meme caption generator. Create funny, relatable captions.",
            prompt,
            max_tokens=150,
            temperature=0.9,
        )
    except Exception as e:
        logger.exception(f"[{request_id}] 밈 캡션 생성 중 오류: {e}")
        raise OpenAIServiceError(f"Meme caption generation failed: {e}") from e

    payload = parse_json_content(content)
    top_text = str(payload.get("topText") or "").strip()
    bottom_text = str(payload.get("bottomText") or "").strip()
    if not top_text and not bottom_text:
        raise OpenAIServiceError("Meme caption response did not contain topText or bottomText")

    processing_time = elapsed_ms(start_time)
    logger.info(f"[{request_id}] 밈 캡션 생성 완료: 소요시간={processing_time}ms, 캡션='{top_text} / {bottom_text}'")
    return top_text, bottom_text, tokens, processing_time


async def generate_image(request_id: str, description: str) -> Tuple[bytes, str, int, int]:
    """설명으로 새 이미지를 생성합니다. (DALL-E)

    Returns:
        (이미지 바이트, content type, 사용 토큰 수, 소요시간 ms)
    """
    if not description or not description.strip():
        raise ValueError("description 이 비어 있습니다")

    logger.info(f"[{request_id}] DALL-E 이미지 생성 시작: 모델={OPENAI_IMAGE_MODEL}")
    start_time = time.perf_counter()

    try:
        client = get_openai_client(for_images=True)
        response = await client.images.generate(
            model=OPENAI_IMAGE_MODEL,
            prompt=description,
            size="1024x1024",
            quality="standard",
            response_format="b64_json",
            n=1,
        )
        image_bytes = base64.b64decode(response.data[0].b64_json)
    except Exception as e:
        logger.exception(f"[{request_id}] 이미지 생성 중 오류: {e}")
        raise OpenAIServiceError(f"Image generation failed: {e}") from e

    processing_time = elapsed_ms(start_time)
    logger.info(f"[{request_id}] 이미지 생성 완료: 소요시간={processing_time}ms, 크기={len(image_bytes)} bytes")

    # DALL-E 는 토큰 사용량을 보고하지 않음
    return image_bytes, "image/png", 0, processing_time
