# main.py - 이미지 분석/재생성/밈 생성 API 서버
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import os
import asyncio

from logger import logger
from config import APP_ENV, APP_VERSION, HOST, PORT

logger.info(f"API 서버 초기화 중... (환경={APP_ENV})")

# 내부 모듈 가져오기
from api.image_analysis import router as image_analysis_router
from api.diagnostics import router as diagnostics_router
from api.client_log import router as client_log_router
from api.health import router as health_router
from api.errors import validation_exception_handler
from api.middleware import CorrelationIdMiddleware

KEEPALIVE = int(os.getenv("KEEPALIVE", 65))
MAX_REQUESTS = int(os.getenv("MAX_REQUESTS", 1000))
MAX_REQUESTS_JITTER = int(os.getenv("MAX_REQUESTS_JITTER", 50))

# 태그 메타데이터 정의
tags_metadata = [
    {
        "name": "이미지 분석 API",
        "description": "이미지 분석, 이미지 재생성, 밈 생성 엔드포인트",
    },
    {
        "name": "진단 API",
        "description": "설정 진단 및 클라이언트 로그 수집 엔드포인트",
    },
    {
        "name": "시스템 상태",
        "description": "헬스체크 엔드포인트",
    }
]

app = FastAPI(
    title="이미지 분석/재생성 API",
    description="외부 AI 서비스를 이용한 이미지 분석, 설명 생성, 이미지 재생성 및 밈 생성 API",
    openapi_tags=tags_metadata,
    version=APP_VERSION,
)

# 검증 오류는 400 ProblemDetails 로 반환
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)
app.add_middleware(CorrelationIdMiddleware)

# 라우터 등록
app.include_router(image_analysis_router, prefix="/api", tags=["이미지 분석 API"])
app.include_router(diagnostics_router, prefix="/api", tags=["진단 API"])
app.include_router(client_log_router, prefix="/api", tags=["진단 API"])
app.include_router(health_router, tags=["시스템 상태"])  # /health, /alive (접두사 없음)

if __name__ == "__main__":
    import hypercorn.asyncio
    from hypercorn.config import Config

    logger.info(f"서버 시작: bind={HOST}:{PORT}, keepalive={KEEPALIVE}, max_requests={MAX_REQUESTS}")

    hypercorn_config = Config()
    hypercorn_config.bind = [f"{HOST}:{PORT}"]
    hypercorn_config.keep_alive_timeout = KEEPALIVE
    hypercorn_config.max_requests = MAX_REQUESTS
    hypercorn_config.max_requests_jitter = MAX_REQUESTS_JITTER
    hypercorn_config.worker_class = "uvloop"

    logger.info("Hypercorn 서버 시작 중...")
    asyncio.run(hypercorn.asyncio.serve(app, hypercorn_config))
