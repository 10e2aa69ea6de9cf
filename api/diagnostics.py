import os
import platform
import socket

from fastapi import APIRouter

import config
from utils.helpers import mask_value, format_iso_date

router = APIRouter(prefix="/diag")

# 마스킹 대상 (비밀값/엔드포인트)
MASKED_KEYS = [
    "OPENAI_ENDPOINT",
    "OPENAI_API_KEY",
    "OPENAI_IMAGE_ENDPOINT",
    "OPENAI_IMAGE_API_KEY",
    "GEMINI_API_KEY",
]

# 그대로 노출해도 되는 값
PLAIN_KEYS = [
    "VISION_PROVIDER",
    "MIN_TAG_CONFIDENCE",
    "OPENAI_CHAT_MODEL",
    "OPENAI_VISION_MODEL",
    "OPENAI_IMAGE_MODEL",
    "GEMINI_MODEL",
]


def collect_configuration() -> dict:
    configuration = {key: mask_value(getattr(config, key, None)) for key in MASKED_KEYS}
    for key in PLAIN_KEYS:
        value = getattr(config, key, None)
        configuration[key] = None if value is None else str(value)
    return configuration


@router.get("")
def get_diagnostics():
    """마스킹된 설정값과 실행 환경 정보를 반환합니다."""
    return {
        "environment": config.APP_ENV,
        "machineName": socket.gethostname(),
        "osVersion": platform.platform(),
        "pythonVersion": platform.python_version(),
        "processId": os.getpid(),
        "timestamp": format_iso_date(),
        "configuration": collect_configuration(),
    }
