from fastapi import APIRouter

from models.diagnostics import HealthReport
from services.health_checks import run_health_checks, HEALTHY

router = APIRouter()


@router.get("/health", response_model=HealthReport)
async def health():
    """외부 AI 서비스 연결 상태를 포함한 헬스체크 (항상 200, 상태는 본문으로 전달)"""
    return await run_health_checks()


@router.get("/alive")
def alive():
    return {"status": HEALTHY}
