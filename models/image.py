from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from config import DESCRIPTION_LENGTH_MIN, DESCRIPTION_LENGTH_MAX, DEFAULT_DESCRIPTION_LENGTH


class CamelModel(BaseModel):
    """JSON 키는 camelCase, 파이썬 속성은 snake_case 로 사용하는 기본 모델"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessingMode(str, Enum):
    """처리 모드: 결과 모델에서 어떤 출력 그룹을 채울지 결정"""
    IMAGE_REGENERATION = "ImageRegeneration"  # 분석 → 설명 → 이미지 재생성
    MEME_GENERATION = "MemeGeneration"        # 분석 → 캡션 → 원본 이미지에 텍스트 합성


# 기존 클라이언트가 보내는 숫자 값 (0, 1) 호환
_MODE_BY_INDEX = {0: ProcessingMode.IMAGE_REGENERATION, 1: ProcessingMode.MEME_GENERATION}


class ImageAnalysisRequest(CamelModel):
    image_data: str = Field(default="", description="base64 인코딩된 이미지 데이터")
    content_type: str = Field(default="", description="MIME 타입 (image/jpeg, image/png)")
    file_name: str = Field(default="", description="원본 파일명")
    description_length: int = Field(
        default=DEFAULT_DESCRIPTION_LENGTH,
        ge=DESCRIPTION_LENGTH_MIN,
        le=DESCRIPTION_LENGTH_MAX,
        description="생성할 설명의 목표 단어 수",
    )
    mode: ProcessingMode = Field(default=ProcessingMode.IMAGE_REGENERATION, description="처리 모드")

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            if value not in _MODE_BY_INDEX:
                raise ValueError(f"지원되지 않는 처리 모드: {value}")
            return _MODE_BY_INDEX[value]
        return value


class ProcessingMetrics(CamelModel):
    """처리 단계별 소요시간과 토큰 사용량"""
    image_analysis_time_ms: int = Field(default=0, ge=0)
    description_generation_time_ms: int = Field(default=0, ge=0)
    image_regeneration_time_ms: int = Field(default=0, ge=0)
    description_tokens_used: int = Field(default=0, ge=0)
    regeneration_tokens_used: int = Field(default=0, ge=0)
    error_info: Optional[str] = None

    @computed_field(alias="totalProcessingTimeMs")
    @property
    def total_processing_time_ms(self) -> int:
        # 저장하지 않고 읽을 때마다 다시 계산
        return (
            self.image_analysis_time_ms
            + self.description_generation_time_ms
            + self.image_regeneration_time_ms
        )

    def add_error(self, message: str) -> None:
        """오류 메시지를 error_info 에 누적합니다."""
        if self.error_info:
            self.error_info = f"{self.error_info}; {message}"
        else:
            self.error_info = message


class ImageAnalysisResult(CamelModel):
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    confidence_score: float = 0.0
    regenerated_image_data: Optional[str] = None
    regenerated_image_content_type: str = "image/png"
    metrics: ProcessingMetrics = Field(default_factory=ProcessingMetrics)
    meme_image_data: Optional[str] = None
    meme_caption: Optional[str] = None

    def populated_mode(self) -> Optional[ProcessingMode]:
        """출력이 채워진 모드를 반환합니다. 둘 다 비어 있으면 None."""
        regenerated = bool(self.regenerated_image_data)
        meme = bool(self.meme_image_data)
        if regenerated and not meme:
            return ProcessingMode.IMAGE_REGENERATION
        if meme and not regenerated:
            return ProcessingMode.MEME_GENERATION
        return None

    def is_complete(self, mode: ProcessingMode) -> bool:
        return self.populated_mode() == mode
