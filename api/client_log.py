import logging

from fastapi import APIRouter, Request

from api.errors import problem_response
from models.diagnostics import ClientLogEntry
from logger import logger

router = APIRouter(prefix="/log")

# 클라이언트 로그 레벨 문자열 → logging 레벨
LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "information": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_log_level(level: str) -> int:
    return LEVELS.get((level or "").strip().lower(), logging.INFO)


@router.post("/client")
async def log_client_message(entry: ClientLogEntry, request: Request):
    """브라우저 클라이언트 로그를 서버 로그로 전달합니다."""
    if not entry.message or not entry.message.strip():
        return problem_response(400, "Validation Error", "Log message is required",
                                [{"field": "message", "message": "Log message is required"}])

    properties = {
        "source": "Client",
        "clientTimestamp": entry.timestamp,
        "userAgent": request.headers.get("user-agent", ""),
        "clientUrl": entry.url or "unknown",
        "sessionId": entry.session_id or "unknown",
        "correlationId": request.state.correlation_id,
    }
    for key, value in entry.properties.items():
        properties[f"client_{key}"] = value

    logger.log(parse_log_level(entry.level), f"[CLIENT] {entry.message} {properties}")
    return {"success": True}
