"""
커스텀 예외 정의

재고 부족, 상태 전이 거부 등 예상 가능한 비즈니스 결과는 예외가 아니라
ServiceResult(app.core.results)로 반환됩니다. 이 모듈의 예외는 요청을
더 이상 진행할 수 없는 저장소 장애에만 사용됩니다.
"""

import functools

import structlog
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)


class PersistenceException(Exception):
    """
    Redis 또는 데이터베이스에 접근할 수 없거나 쓰기가 실패했을 때 발생하는 예외

    HTTP Status Code: 503 Service Unavailable
    """

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        self.message = f"Store operation '{operation}' failed"
        if cause is not None:
            self.message = f"{self.message}: {cause}"
        super().__init__(self.message)


def store_operation(func):
    """
    저장소 오류(RedisError, SQLAlchemyError)를 PersistenceException으로 변환하는 데코레이터

    이미 PersistenceException으로 변환된 예외는 그대로 전파합니다.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (RedisError, SQLAlchemyError) as e:
            logger.error("Store operation failed", operation=func.__qualname__, error=str(e))
            raise PersistenceException(func.__qualname__, e) from e

    return wrapper
