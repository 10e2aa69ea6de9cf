"""
이미지 처리 파이프라인

분석 → (모드별) 설명 향상 + 이미지 재생성 / 밈 캡션 + 텍스트 합성.
외부 서비스 오류는 예외로 던지지 않고 metrics.error_info 에 기록한다.
"""
from logger import logger
from models.image import ImageAnalysisRequest, ImageAnalysisResult, ProcessingMetrics, ProcessingMode
from services.description_builder import build_rich_description
from services.image import encode_image_data
from services.llm import (
    enhance_description, generate_detailed_description, generate_image, generate_meme_caption, OpenAIServiceError,
)
from services.meme import add_caption_to_image, MemeGenerationError
from services.vision import analyze_image, VisionAnalysisError, NO_DESCRIPTION
from utils.helpers import truncate_text


async def _run_meme_generation(request_id: str, image_bytes: bytes, result: ImageAnalysisResult) -> None:
    try:
        top_text, bottom_text, tokens, caption_time = await generate_meme_caption(
            request_id, result.tags, result.confidence_score
        )
    except OpenAIServiceError as e:
        logger.error(f"[{request_id}] 밈 캡션 단계 실패: {e}")
        result.metrics.add_error(str(e))
        return

    result.metrics.description_tokens_used = tokens
    result.metrics.description_generation_time_ms = caption_time
    result.meme_caption = f"{top_text}\n{bottom_text}"

    try:
        meme_bytes = add_caption_to_image(image_bytes, top_text, bottom_text)
    except MemeGenerationError as e:
        logger.error(f"[{request_id}] 밈 합성 단계 실패: {e}")
        result.metrics.add_error(str(e))
        return

    result.meme_image_data = encode_image_data(meme_bytes)


async def _run_image_regeneration(request_id: str, description_length: int, result: ImageAnalysisResult) -> None:
    try:
        if result.description == NO_DESCRIPTION:
            # 분석 캡션이 없으면 태그만으로 설명 생성
            enhanced, tokens, description_time = await generate_detailed_description(
                request_id, result.tags, description_length, result.confidence_score
            )
        else:
            enhanced, tokens, description_time = await enhance_description(
                request_id, result.description, result.tags, description_length
            )
        result.description = enhanced
        result.metrics.description_tokens_used = tokens
        result.metrics.description_generation_time_ms = description_time
    except OpenAIServiceError as e:
        # LLM 실패 시 태그 기반 설명으로 대체하고 재생성은 계속 진행
        logger.warning(f"[{request_id}] 설명 향상 실패, 태그 기반 설명으로 대체: {e}")
        result.metrics.add_error(str(e))
        result.description = build_rich_description(result.tags, result.confidence_score, description_length)

    try:
        image_bytes, content_type, regen_tokens, regen_time = await generate_image(request_id, result.description)
    except OpenAIServiceError as e:
        logger.error(f"[{request_id}] 이미지 재생성 단계 실패: {e}")
        result.metrics.add_error(str(e))
        return

    result.regenerated_image_data = encode_image_data(image_bytes)
    result.regenerated_image_content_type = content_type
    result.metrics.image_regeneration_time_ms = regen_time
    result.metrics.regeneration_tokens_used = regen_tokens


async def process_image(request_id: str, request: ImageAnalysisRequest, image_bytes: bytes) -> ImageAnalysisResult:
    """검증된 요청을 처리하여 결과 모델을 반환합니다."""
    logger.info(f"[{request_id}] 이미지 처리 시작: 모드={request.mode.value}, 파일={request.file_name or '(unnamed)'}")

    result = ImageAnalysisResult(metrics=ProcessingMetrics())

    try:
        analysis = await analyze_image(request_id, image_bytes, request.content_type)
    except VisionAnalysisError as e:
        logger.error(f"[{request_id}] 분석 단계 실패: {e}")
        result.metrics.add_error(str(e))
        return result

    result.description = analysis["description"]
    result.tags = analysis["tags"]
    result.confidence_score = analysis["confidence"]
    result.metrics.image_analysis_time_ms = analysis["processing_time_ms"]
    logger.debug(f"[{request_id}] 분석 결과: 설명='{truncate_text(result.description, 100)}', 태그={result.tags}")

    if request.mode == ProcessingMode.MEME_GENERATION:
        await _run_meme_generation(request_id, image_bytes, result)
    else:
        await _run_image_regeneration(request_id, request.description_length, result)

    logger.info(
        f"[{request_id}] 이미지 처리 완료: 총 소요시간={result.metrics.total_processing_time_ms}ms, "
        f"완료여부={result.is_complete(request.mode)}"
    )
    return result
