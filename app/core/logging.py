"""
로깅 설정

structlog를 표준 logging 위에 구성합니다. 각 모듈은
structlog.get_logger(__name__)으로 로거를 생성하고 키-값 필드로 기록합니다.
"""

import logging
import sys

import structlog

from app.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """
    structlog 처리기 체인과 루트 로거를 설정합니다.

    Args:
        settings: 애플리케이션 설정 (log_level, log_format 사용)
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    # 외부 라이브러리 로그 레벨 낮춤
    for name in ("httpx", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)
