import asyncio
import time
from typing import List, Optional

import aiohttp

from config import VISION_PROVIDER, OPENAI_ENDPOINT, OPENAI_API_KEY, GEMINI_API_KEY, HEALTH_CHECK_TIMEOUT
from logger import logger
from models.diagnostics import HealthCheckEntry, HealthReport

HEALTHY = "Healthy"
UNHEALTHY = "Unhealthy"

OPENAI_DEFAULT_ENDPOINT = "https://api.openai.com/v1"
GEMINI_DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com"


def _duration_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


async def check_endpoint(key: str, endpoint: Optional[str], api_key: Optional[str]) -> HealthCheckEntry:
    """설정 여부와 HEAD 요청으로 외부 엔드포인트 도달 가능 여부를 확인합니다.

    401/403 을 포함한 모든 HTTP 응답은 도달 가능으로 간주합니다. (API 사용량 소모 없음)
    """
    start_time = time.perf_counter()

    if not endpoint:
        return HealthCheckEntry(key=key, status=UNHEALTHY, duration=0.0, description=f"{key} endpoint is not configured")
    if not api_key:
        return HealthCheckEntry(key=key, status=UNHEALTHY, duration=0.0, description=f"{key} API key is not configured")

    try:
        timeout = aiohttp.ClientTimeout(total=HEALTH_CHECK_TIMEOUT)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.head(endpoint, allow_redirects=False) as response:
                status_code = response.status
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"헬스체크 실패: {key} ({endpoint}): {e}")
        return HealthCheckEntry(
            key=key, status=UNHEALTHY, duration=_duration_ms(start_time),
            description=f"{key} endpoint is unreachable: {e}",
        )

    return HealthCheckEntry(
        key=key, status=HEALTHY, duration=_duration_ms(start_time),
        description=f"{key} endpoint reachable (HTTP {status_code})",
    )


def _vision_target():
    if VISION_PROVIDER == "gemini":
        return GEMINI_DEFAULT_ENDPOINT, GEMINI_API_KEY
    return OPENAI_ENDPOINT or OPENAI_DEFAULT_ENDPOINT, OPENAI_API_KEY


async def run_health_checks() -> HealthReport:
    """모든 외부 의존성 헬스체크를 병렬로 실행하고 집계합니다."""
    start_time = time.perf_counter()

    vision_endpoint, vision_key = _vision_target()
    entries: List[HealthCheckEntry] = list(await asyncio.gather(
        check_endpoint("vision", vision_endpoint, vision_key),
        check_endpoint("openai", OPENAI_ENDPOINT or OPENAI_DEFAULT_ENDPOINT, OPENAI_API_KEY),
    ))

    status = HEALTHY if all(entry.status == HEALTHY for entry in entries) else UNHEALTHY
    report = HealthReport(status=status, duration=_duration_ms(start_time), entries=entries)
    logger.debug(f"헬스체크 완료: 상태={status}, 소요시간={report.duration}ms")
    return report
