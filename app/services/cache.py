"""
Redis 캐시 보조 함수

읽기 캐시(cache-aside)와 쓰기 후 갱신/무효화 정책을 명시적인 함수로 제공합니다.
"""

import json
from typing import Any, Callable, Iterable, Optional

import structlog
from redis import Redis

logger = structlog.get_logger(__name__)


def get_or_load(
    redis: Redis,
    key: str,
    loader: Callable[[], Optional[Any]],
    ttl_seconds: int,
) -> Optional[Any]:
    """
    캐시에서 값을 조회하고, 없으면 loader로 읽어와 캐시에 저장합니다.

    값은 JSON으로 직렬화됩니다. loader가 None을 반환하면 캐시에 저장하지 않습니다
    (존재하지 않는 값은 캐싱하지 않음).

    Args:
        redis: Redis 클라이언트
        key: 캐시 키
        loader: 캐시 미스 시 영구 저장소에서 값을 읽는 함수
        ttl_seconds: 캐시 TTL (초)

    Returns:
        캐시 또는 loader에서 얻은 값, 없으면 None
    """
    cached = redis.get(key)
    if cached is not None:
        return json.loads(cached)

    value = loader()
    if value is None:
        return None

    redis.set(key, json.dumps(value), ex=ttl_seconds)
    logger.debug("Cache loaded", key=key)
    return value


def put_and_invalidate(
    redis: Redis,
    key: Optional[str] = None,
    value: Any = None,
    ttl_seconds: Optional[int] = None,
    invalidate: Iterable[str] = (),
) -> None:
    """
    영구 저장소 쓰기 이후 캐시를 갱신하고 관련 캐시 키를 삭제합니다.

    Args:
        redis: Redis 클라이언트
        key: 새 값을 기록할 캐시 키 (없으면 무효화만 수행)
        value: 기록할 값 (문자열은 그대로, 그 외는 JSON 직렬화)
        ttl_seconds: 캐시 TTL (초)
        invalidate: 삭제할 캐시 키 목록
    """
    pipe = redis.pipeline(transaction=True)
    if key is not None:
        payload = value if isinstance(value, str) else json.dumps(value)
        pipe.set(key, payload, ex=ttl_seconds)
    stale_keys = list(invalidate)
    if stale_keys:
        pipe.delete(*stale_keys)
    pipe.execute()
