import time
from typing import List, Optional
from datetime import datetime, timezone


def generate_request_id() -> str:
    """고유한 요청 ID를 생성합니다."""
    return f"req_{int(time.time() * 1000)}"


def elapsed_ms(start_time: float) -> int:
    """start_time(time.perf_counter 기준) 이후 경과 시간을 밀리초 정수로 반환합니다."""
    return max(0, int(round((time.perf_counter() - start_time) * 1000)))


def truncate_text(text: str, max_length: int = 200) -> str:
    """텍스트를 지정된 길이로 자릅니다."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_list(items: List[str]) -> str:
    """['a', 'b', 'c'] => 'a, b, and c'"""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + f", and {items[-1]}"


def mask_value(value: Optional[str]) -> str:
    """설정값의 가운데 부분을 마스킹합니다.

    예: "sk-abcdef123456" => "sk-*********456"
    """
    if not value:
        return "(not set)"

    if len(value) <= 8:
        return "*" * len(value)

    visible = min(4, len(value) // 4)
    return value[:visible] + "*" * (len(value) - visible * 2) + value[-visible:]


def format_iso_date(dt: Optional[datetime] = None) -> str:
    """ISO 8601 형식의 날짜 문자열을 반환합니다."""
    if dt is None:
        dt = datetime.now(timezone.utc)
    return dt.isoformat()
