"""Redis 기반 실시간 재고 원장 서비스."""

import time
import uuid
from typing import Optional

import structlog
from redis import Redis

from app.core.config import Settings
from app.core.exceptions import store_operation
from app.core.keys import RedisKeys
from app.core.results import ErrorKind, ServiceResult

logger = structlog.get_logger(__name__)

# 조건부 재고 감소 스크립트
#
# GET + 재고 확인 + DECRBY를 Redis 안에서 하나의 연산으로 실행합니다.
# 결과가 음수가 되는 감소는 수행하지 않으므로 재고는 음수로 관찰되지 않습니다.
# 키가 없으면 재고 0으로 취급합니다.
#
# KEYS[1] = 재고 키, ARGV[1] = 감소 수량, ARGV[2] = TTL(초)
# 반환: 남은 재고 (0 이상), 재고 부족 시 -1
DECREASE_SCRIPT = """
local current_stock = tonumber(redis.call("GET", KEYS[1]) or "0")
local quantity = tonumber(ARGV[1])

if current_stock < quantity then
    return -1
end

local remaining = redis.call("DECRBY", KEYS[1], quantity)
redis.call("EXPIRE", KEYS[1], ARGV[2])
return remaining
"""

# 소유권 확인 후 락 해제 스크립트 (GET + 비교 + DEL)
RELEASE_LOCK_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
else
    return 0
end
"""


class InventoryService:
    """
    상품별 재고 카운터(일반 / 타임세일)를 관리하는 재고 원장.

    재고 부족은 정상적인 결과로 반환하고, Redis 장애만 PersistenceException으로
    전파합니다.
    """

    def __init__(self, redis: Redis, settings: Settings):
        self.redis = redis
        self.settings = settings

    # ------------------------------------------------------------------
    # 일반 재고
    # ------------------------------------------------------------------

    def set_stock(self, product_id: str, quantity: int) -> None:
        """재고를 무조건 덮어씁니다."""
        self._set(RedisKeys.stock(product_id), quantity)
        logger.info("Set stock", product_id=product_id, stock=quantity)

    def get_stock(self, product_id: str) -> int:
        """
        현재 재고를 조회합니다.

        Returns:
            현재 재고 수량. 키가 없으면 0 (품절로 취급)
        """
        return self._get(RedisKeys.stock(product_id))

    def increase_stock(self, product_id: str, delta: int) -> int:
        """
        재고를 원자적으로 증가시키고 새 재고를 반환합니다.

        Raises:
            ValueError: delta가 0 이하
        """
        new_stock = self._increase(RedisKeys.stock(product_id), delta)
        logger.info(
            "Increased stock", product_id=product_id, delta=delta, new_stock=new_stock
        )
        return new_stock

    def decrease_stock(self, product_id: str, delta: int) -> Optional[int]:
        """
        재고를 원자적으로 감소시킵니다.

        Returns:
            감소 후 재고, 재고가 부족하거나 delta가 0 이하이면 None (재고는 변경되지 않음)
        """
        new_stock = self._decrease(RedisKeys.stock(product_id), delta)
        if new_stock is None:
            logger.warning("Stock not decreased", product_id=product_id, delta=delta)
        else:
            logger.info(
                "Decreased stock", product_id=product_id, delta=delta, new_stock=new_stock
            )
        return new_stock

    def deduct_stock(self, product_id: str, quantity: int) -> bool:
        """
        재고를 차감합니다.

        재고 확인과 차감이 하나의 Lua 스크립트에서 실행되므로 동시에 호출되어도
        초과 판매가 발생하지 않습니다.

        Returns:
            차감 성공 시 True, 재고 부족 또는 수량 오류 시 False
        """
        return self.decrease_stock(product_id, quantity) is not None

    def release_stock(self, product_id: str, quantity: int) -> int:
        """선점했던 재고를 원장에 반환합니다."""
        new_stock = self.increase_stock(product_id, quantity)
        logger.info("Released stock", product_id=product_id, quantity=quantity)
        return new_stock

    def lock_stock(self, product_id: str, quantity: int) -> ServiceResult[int]:
        """
        상품별 락을 획득한 상태에서 재고를 차감합니다.

        플로우:
        1. 락 획득 시도 (재시도 포함, 토큰 발급)
        2. 재고 차감
        3. 토큰이 일치하는 경우에만 락 해제

        Args:
            product_id: 상품 ID
            quantity: 차감 수량

        Returns:
            성공 시 남은 재고,
            실패 시 VALIDATION (수량 오류), INSUFFICIENT_STOCK 또는
            CONCURRENCY_CONFLICT (락 획득 실패)
        """
        return self._lock_and_deduct(RedisKeys.stock(product_id), quantity)

    def batch_lock_stock(self, product_quantities: dict[str, int]) -> ServiceResult[None]:
        """
        여러 상품의 재고를 모두 차감하거나 하나도 차감하지 않습니다.

        중간에 실패하면 이미 차감한 상품의 재고를 반환합니다.
        """
        locked: list[tuple[str, int]] = []
        for product_id, quantity in product_quantities.items():
            try:
                result = self.lock_stock(product_id, quantity)
            except Exception:
                self._rollback_locked(locked)
                raise

            if not result.ok:
                logger.error(
                    "Failed to lock stock, rolling back",
                    product_id=product_id,
                    rolled_back=len(locked),
                )
                self._rollback_locked(locked)
                return ServiceResult.failure(result.error, result.message)

            locked.append((product_id, quantity))

        return ServiceResult.success()

    @store_operation
    def stock_exists(self, product_id: str) -> bool:
        return bool(self.redis.exists(RedisKeys.stock(product_id)))

    @store_operation
    def delete_stock(self, product_id: str) -> None:
        self.redis.delete(RedisKeys.stock(product_id))
        logger.info("Deleted stock", product_id=product_id)

    @store_operation
    def batch_get_stock(self, product_ids: list[str]) -> list[int]:
        """여러 상품의 재고를 한 번의 MGET으로 조회합니다."""
        if not product_ids:
            return []
        values = self.redis.mget([RedisKeys.stock(pid) for pid in product_ids])
        return [int(value) if value is not None else 0 for value in values]

    def check_stock(self, product_id: str, required_quantity: int) -> bool:
        return self.get_stock(product_id) >= required_quantity

    def batch_check_stock(self, product_quantities: dict[str, int]) -> dict[str, bool]:
        product_ids = list(product_quantities)
        stocks = self.batch_get_stock(product_ids)
        return {
            product_id: stock >= product_quantities[product_id]
            for product_id, stock in zip(product_ids, stocks)
        }

    def get_stock_info(self, product_id: str) -> dict:
        """재고 상세 정보 (현재 재고, 키 존재 여부, 조회 시각)"""
        return {
            "product_id": product_id,
            "current_stock": self.get_stock(product_id),
            "exists": self.stock_exists(product_id),
            "timestamp": int(time.time() * 1000),
        }

    # ------------------------------------------------------------------
    # 타임세일 재고 (seckill_stock 네임스페이스)
    # ------------------------------------------------------------------

    def set_flash_stock(self, sale_id: str, product_id: str, quantity: int) -> None:
        self._set(RedisKeys.flash_stock(sale_id, product_id), quantity)
        logger.info(
            "Set flash sale stock", sale_id=sale_id, product_id=product_id, stock=quantity
        )

    def get_flash_stock(self, sale_id: str, product_id: str) -> int:
        return self._get(RedisKeys.flash_stock(sale_id, product_id))

    def increase_flash_stock(self, sale_id: str, product_id: str, delta: int) -> int:
        return self._increase(RedisKeys.flash_stock(sale_id, product_id), delta)

    def decrease_flash_stock(
        self, sale_id: str, product_id: str, delta: int
    ) -> Optional[int]:
        new_stock = self._decrease(RedisKeys.flash_stock(sale_id, product_id), delta)
        if new_stock is None:
            logger.warning(
                "Flash sale stock not decreased",
                sale_id=sale_id,
                product_id=product_id,
                delta=delta,
            )
        return new_stock

    def deduct_flash_stock(self, sale_id: str, product_id: str, quantity: int) -> bool:
        return self.decrease_flash_stock(sale_id, product_id, quantity) is not None

    def lock_flash_stock(
        self, sale_id: str, product_id: str, quantity: int
    ) -> ServiceResult[int]:
        return self._lock_and_deduct(RedisKeys.flash_stock(sale_id, product_id), quantity)

    # ------------------------------------------------------------------
    # 내부 구현
    # ------------------------------------------------------------------

    @store_operation
    def _set(self, stock_key: str, quantity: int) -> None:
        self.redis.set(stock_key, quantity, ex=self.settings.stock_ttl_seconds)

    @store_operation
    def _get(self, stock_key: str) -> int:
        stock = self.redis.get(stock_key)
        if stock is None:
            return 0
        try:
            return int(stock)
        except ValueError:
            logger.error("Invalid stock value", key=stock_key, value=stock)
            return 0

    @store_operation
    def _increase(self, stock_key: str, delta: int) -> int:
        if delta <= 0:
            raise ValueError(f"Stock delta must be greater than 0: {delta}")
        pipe = self.redis.pipeline(transaction=True)
        pipe.incrby(stock_key, delta)
        pipe.expire(stock_key, self.settings.stock_ttl_seconds)
        new_stock, _ = pipe.execute()
        return int(new_stock)

    @store_operation
    def _decrease(self, stock_key: str, delta: int) -> Optional[int]:
        if delta <= 0:
            return None
        result = self.redis.eval(
            DECREASE_SCRIPT, 1, stock_key, delta, self.settings.stock_ttl_seconds
        )
        result = int(result)
        return result if result >= 0 else None

    @store_operation
    def _acquire_lock(self, stock_key: str) -> Optional[str]:
        """
        TTL을 설정하여 SETNX로 락을 획득합니다.

        Returns:
            획득 성공 시 락 토큰 (UUID), 이미 락이 점유 중이면 None
        """
        lock_id = str(uuid.uuid4())
        acquired = self.redis.set(
            RedisKeys.lock(stock_key),
            lock_id,
            nx=True,
            ex=self.settings.lock_timeout_seconds,
        )
        return lock_id if acquired else None

    @store_operation
    def _release_lock(self, stock_key: str, lock_id: str) -> bool:
        """토큰이 일치하는 경우에만 락을 해제합니다."""
        result = self.redis.eval(
            RELEASE_LOCK_SCRIPT, 1, RedisKeys.lock(stock_key), lock_id
        )
        return bool(result)

    def _lock_and_deduct(self, stock_key: str, quantity: int) -> ServiceResult[int]:
        if quantity <= 0:
            return ServiceResult.failure(
                ErrorKind.VALIDATION, "Quantity must be greater than 0"
            )

        max_retries = self.settings.lock_retry_attempts
        retry_delay = self.settings.lock_retry_delay_ms / 1000.0  # ms를 초로 변환

        for attempt in range(max_retries):
            lock_id = self._acquire_lock(stock_key)

            if lock_id is not None:
                try:
                    remaining = self._decrease(stock_key, quantity)
                finally:
                    if not self._release_lock(stock_key, lock_id):
                        logger.warning("Lock expired before release", key=stock_key)

                if remaining is None:
                    return ServiceResult.failure(
                        ErrorKind.INSUFFICIENT_STOCK,
                        f"Insufficient stock for {stock_key}: requested {quantity}",
                    )
                return ServiceResult.success(remaining)

            if attempt < max_retries - 1:
                time.sleep(retry_delay)

        logger.warning("Failed to acquire stock lock", key=stock_key)
        return ServiceResult.failure(
            ErrorKind.CONCURRENCY_CONFLICT,
            f"Failed to acquire lock for {stock_key} after {max_retries} retries",
        )

    def _rollback_locked(self, locked: list[tuple[str, int]]) -> None:
        for product_id, quantity in locked:
            self.release_stock(product_id, quantity)
