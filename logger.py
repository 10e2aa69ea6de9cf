import logging
import sys
import os
import datetime
from contextvars import ContextVar

from config import LOG_DIR, LOG_LEVEL, APP_NAME

# 요청별 Correlation ID (미들웨어에서 설정)
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


class CorrelationIdFilter(logging.Filter):
    """모든 로그 레코드에 현재 요청의 correlation_id 를 추가"""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


# 로그 디렉토리 생성
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

# 오늘 날짜를 기반으로 로그 파일명 생성
current_date = datetime.datetime.now().strftime("%Y-%m-%d")
LOG_FILE = os.path.join(LOG_DIR, f"{APP_NAME}_{current_date}.log")

logger = logging.getLogger(APP_NAME)
logger.setLevel(logging.DEBUG)

# 중복 핸들러 방지
if not logger.handlers:
    # 파일 핸들러 (DEBUG 레벨로 모든 로그 저장)
    file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    # 콘솔 핸들러 (설정된 레벨 이상만 출력)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s'
    )
    correlation_filter = CorrelationIdFilter()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        handler.addFilter(correlation_filter)
        logger.addHandler(handler)

# 상위 로거로의 전파 방지
logger.propagate = False
