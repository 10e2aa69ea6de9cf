# config.py - 환경변수(.env 포함)에서 서비스 설정을 로드
import os
from dotenv import load_dotenv

load_dotenv()

# 실행 환경
APP_ENV = os.getenv("APP_ENV", "Development")
APP_NAME = "image_gc_api"
APP_VERSION = "1.0.0"

# 로그 설정
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 이미지 분석 제공자: "openai" (비전 모델) 또는 "gemini"
VISION_PROVIDER = os.getenv("VISION_PROVIDER", "openai").lower()
MIN_TAG_CONFIDENCE = float(os.getenv("MIN_TAG_CONFIDENCE", 0.6))

# OpenAI / Azure OpenAI 설정
# OPENAI_ENDPOINT 가 지정되면 Azure OpenAI 로 접속
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_ENDPOINT = os.getenv("OPENAI_ENDPOINT", "")
OPENAI_API_VERSION = os.getenv("OPENAI_API_VERSION", "2024-06-01")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o")
OPENAI_VISION_MODEL = os.getenv("OPENAI_VISION_MODEL", OPENAI_CHAT_MODEL)
OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3")
OPENAI_IMAGE_ENDPOINT = os.getenv("OPENAI_IMAGE_ENDPOINT", OPENAI_ENDPOINT)
OPENAI_IMAGE_API_KEY = os.getenv("OPENAI_IMAGE_API_KEY", OPENAI_API_KEY)
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", 60.0))

# Gemini 설정 (VISION_PROVIDER=gemini 일 때 사용)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# 요청 제한
DESCRIPTION_LENGTH_MIN = 200
DESCRIPTION_LENGTH_MAX = 500
DEFAULT_DESCRIPTION_LENGTH = 200

# 헬스체크 타임아웃 (초)
HEALTH_CHECK_TIMEOUT = float(os.getenv("HEALTH_CHECK_TIMEOUT", 5))

# 서버 설정
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8002))
