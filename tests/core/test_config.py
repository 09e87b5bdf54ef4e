"""
설정(Config) 관련 테스트
"""

import json
import logging

import structlog

from app.core.config import Settings
from app.core.logging import setup_logging


def test_config_from_env(monkeypatch):
    """환경 변수로부터 설정을 로드하는지 테스트"""
    monkeypatch.setenv("REDIS_HOST", "test-redis")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("REDIS_DB", "0")
    monkeypatch.setenv("REDIS_PASSWORD", "")
    monkeypatch.setenv("LOCK_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("CART_TTL_DAYS", "3")

    settings = Settings()

    assert settings.redis_host == "test-redis"
    assert settings.redis_port == 6380
    assert settings.lock_retry_attempts == 5
    assert settings.cart_ttl_seconds == 3 * 24 * 3600


def test_default_values():
    """기본값 확인 (재고 TTL 1시간, 락 30초, 주문 캐시 7일)"""
    settings = Settings()

    assert settings.stock_ttl_seconds == 3600
    assert settings.lock_timeout_seconds == 30
    assert settings.product_cache_ttl_seconds == 300
    assert settings.order_status_ttl_seconds == 7 * 24 * 3600
    assert settings.dashboard_ttl_seconds == 3600


def test_redis_url_with_password():
    settings = Settings(redis_host="cache", redis_port=6379, redis_db=2, redis_password="pw")

    assert settings.redis_url == "redis://:pw@cache:6379/2"


def test_redis_url_without_password():
    settings = Settings(redis_host="cache", redis_port=6379, redis_db=0, redis_password="")

    assert settings.redis_url == "redis://cache:6379/0"


def test_setup_logging_json_output(capsys):
    """json 형식 설정 시 이벤트와 필드가 한 줄의 JSON으로 출력되는지 테스트"""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        setup_logging(Settings(log_level="INFO", log_format="json"))
        structlog.get_logger("sales.test").info("Order paid", order_id="O1")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Order paid"
        assert record["order_id"] == "O1"
        assert record["level"] == "info"
        assert record["logger"] == "sales.test"
    finally:
        structlog.reset_defaults()
        root_logger.handlers = saved_handlers
        root_logger.setLevel(saved_level)
