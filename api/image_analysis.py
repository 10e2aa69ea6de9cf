from fastapi import APIRouter

from models.image import ImageAnalysisRequest, ImageAnalysisResult
from models.diagnostics import ProblemDetails
from services.image import decode_image_data, validate_analysis_request, extract_image_metadata
from services.processing import process_image
from api.errors import problem_response
from utils.helpers import generate_request_id
from logger import logger

router = APIRouter(prefix="/images")


@router.post(
    "/analyze",
    response_model=ImageAnalysisResult,
    responses={400: {"model": ProblemDetails}, 500: {"model": ProblemDetails}},
)
async def analyze_uploaded_image(request: ImageAnalysisRequest):
    """업로드된 이미지를 분석하고 모드에 따라 이미지를 재생성하거나 밈을 만듭니다.

    - imageData: base64 인코딩된 JPEG/PNG 이미지
    - contentType: 이미지 MIME 타입
    - descriptionLength: 설명 목표 단어 수 (200 ~ 500)
    - mode: "ImageRegeneration" 또는 "MemeGeneration"
    """
    request_id = generate_request_id()
    logger.info(
        f"[{request_id}] 이미지 분석 요청 수신: 파일='{request.file_name}', "
        f"타입={request.content_type}, 모드={request.mode.value}, 설명길이={request.description_length}"
    )

    # 외부 호출 전에 검증
    errors = validate_analysis_request(request)
    if errors:
        logger.warning(f"[{request_id}] 요청 검증 실패: {errors}")
        return problem_response(400, "Validation Error", errors[0]["message"], errors)

    image_bytes = decode_image_data(request.image_data)
    metadata = extract_image_metadata(request_id, image_bytes)
    logger.info(
        f"[{request_id}] 이미지 정보: {metadata.get('width')}x{metadata.get('height')}, "
        f"형식={metadata.get('format')}, 크기={metadata['size']} bytes"
    )

    try:
        return await process_image(request_id, request, image_bytes)
    except Exception as e:
        logger.exception(f"[{request_id}] 이미지 처리 중 예외 발생: {e}")
        return problem_response(500, "Processing Error", f"이미지 처리 중 오류 발생: {str(e)}")


@router.get("/health")
def image_analysis_health():
    return {"status": "Healthy", "service": "ImageAnalysis"}
