from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

from models.image import CamelModel


class ProblemDetails(BaseModel):
    """오류 응답 모델 (400/500)"""
    title: str
    status: int
    detail: str
    errors: List[Dict[str, str]] = []


class HealthCheckEntry(BaseModel):
    key: str
    status: str
    duration: float
    description: Optional[str] = None


class HealthReport(BaseModel):
    """헬스체크 집계 결과"""
    status: str
    duration: float
    entries: List[HealthCheckEntry] = []


class ClientLogEntry(CamelModel):
    """브라우저 클라이언트에서 전송하는 로그"""
    message: str = ""
    level: str = "Information"
    timestamp: Optional[str] = None
    url: Optional[str] = None
    session_id: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
