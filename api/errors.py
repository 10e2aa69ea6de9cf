from typing import Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logger import logger
from models.diagnostics import ProblemDetails


def problem_response(status_code: int, title: str, detail: str, errors: Optional[List[Dict[str, str]]] = None) -> JSONResponse:
    """오류를 ProblemDetails 형식의 JSON 응답으로 변환합니다."""
    problem = ProblemDetails(title=title, status=status_code, detail=detail, errors=errors or [])
    return JSONResponse(status_code=status_code, content=problem.model_dump())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문 검증 실패는 422 대신 400 으로 반환합니다."""
    errors = []
    for error in exc.errors():
        # loc 예: ("body", "descriptionLength")
        field = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        errors.append({"field": field, "message": error.get("msg", "Invalid value")})

    logger.warning(f"요청 검증 실패: {request.url.path} {errors}")
    return problem_response(
        400,
        "Validation Error",
        "; ".join(f"{e['field']}: {e['message']}" for e in errors),
        errors,
    )
