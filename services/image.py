import base64
import binascii
import io
from typing import Any, Dict, List

from PIL import Image, UnidentifiedImageError

from config import DESCRIPTION_LENGTH_MIN, DESCRIPTION_LENGTH_MAX
from logger import logger
from models.image import ImageAnalysisRequest

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG"


class InvalidImageDataError(ValueError):
    """base64 디코딩 실패"""


def decode_image_data(image_data: str) -> bytes:
    """base64 문자열을 바이트로 디코딩합니다. data URL 접두사는 제거합니다."""
    if image_data.startswith("data:") and "," in image_data:
        image_data = image_data.split(",", 1)[1]
    try:
        return base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageDataError(f"Invalid base64 image data: {e}") from e


def encode_image_data(image_bytes: bytes) -> str:
    return base64.b64encode(image_bytes).decode("utf-8")


def is_valid_image_bytes(image_bytes: bytes) -> bool:
    """JPEG(FF D8 FF) 또는 PNG(89 50 4E 47) 시그니처인지 확인합니다."""
    return image_bytes.startswith(JPEG_SIGNATURE) or image_bytes.startswith(PNG_SIGNATURE)


def validate_analysis_request(request: ImageAnalysisRequest) -> List[Dict[str, str]]:
    """요청을 검증하고 오류 목록을 반환합니다. 빈 목록이면 유효한 요청입니다."""
    errors = []

    if not request.image_data:
        errors.append({"field": "imageData", "message": "Image data is required"})
    if not request.content_type:
        errors.append({"field": "contentType", "message": "Content type is required"})

    length = request.description_length
    if length < DESCRIPTION_LENGTH_MIN or length > DESCRIPTION_LENGTH_MAX:
        errors.append({
            "field": "descriptionLength",
            "message": f"DescriptionLength must be between {DESCRIPTION_LENGTH_MIN} and "
                       f"{DESCRIPTION_LENGTH_MAX}. Provided: {length}",
        })

    if request.image_data:
        try:
            image_bytes = decode_image_data(request.image_data)
        except InvalidImageDataError:
            errors.append({"field": "imageData", "message": "Invalid base64 image data"})
        else:
            # 확장자만 바꾼 비이미지 파일이 외부 AI 서비스로 전달되지 않도록 차단
            if not is_valid_image_bytes(image_bytes):
                errors.append({
                    "field": "imageData",
                    "message": "The uploaded file is not a valid JPEG or PNG image.",
                })

    return errors


def extract_image_metadata(request_id: str, image_bytes: bytes) -> Dict[str, Any]:
    """이미지 데이터에서 메타데이터를 추출합니다."""
    logger.debug(f"[{request_id}] 이미지 메타데이터 추출 시작")

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return {
                "width": img.width,
                "height": img.height,
                "format": img.format,
                "mode": img.mode,
                "size": len(image_bytes),
            }
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"[{request_id}] 이미지 메타데이터 추출 중 오류: {e}")
        return {"size": len(image_bytes), "error": f"메타데이터 추출 실패: {str(e)}"}
