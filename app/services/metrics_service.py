"""
실시간 매출 집계 서비스

결제된 주문을 대시보드 카운터와 판매 랭킹에 한 번만 반영합니다.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from redis import Redis
from redis.exceptions import RedisError

from app.core.config import Settings
from app.core.exceptions import PersistenceException, store_operation
from app.core.keys import RedisKeys
from app.models import Order
from app.schemas.dashboard import DashboardResponse
from app.services.ranking_service import RankingService

logger = structlog.get_logger(__name__)


class MetricsService:
    """
    주문 집계 서비스

    주문별 집계 마커(order:stats:{order_id})를 SET NX로 먼저 선점한 뒤에만
    카운터를 증가시키므로, 같은 주문이 여러 번 전달되어도 한 번만 집계됩니다.
    """

    def __init__(self, redis: Redis, settings: Settings, ranking: RankingService):
        self.redis = redis
        self.settings = settings
        self.ranking = ranking

    def record(self, order: Order, amount: Optional[Decimal] = None) -> bool:
        """
        결제된 주문을 오늘의 대시보드와 랭킹에 반영합니다.

        플로우:
        1. 집계 마커 선점 (SET NX EX), 이미 있으면 아무것도 하지 않음
        2. MULTI/EXEC 파이프라인으로 카운터, 대시보드, 랭킹 점수 증가
        3. 파이프라인 실패 시 마커를 삭제하고 예외 발생

        Args:
            order: 결제된 주문
            amount: 집계 금액 (기본값: 실결제 금액)

        Returns:
            이번 호출에서 집계되었으면 True, 이미 집계된 주문이면 False

        Raises:
            PersistenceException: Redis 쓰기 실패
        """
        marker = RedisKeys.order_stats(order.order_id)
        if not self._claim(marker):
            logger.info("Order already counted", order_id=order.order_id)
            return False

        amount = float(amount if amount is not None else order.actual_amount)
        dashboard_key = RedisKeys.dashboard(date.today())
        ttl = self.settings.dashboard_ttl_seconds

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.incr(RedisKeys.STAT_ORDERS_TODAY)
            pipe.expire(RedisKeys.STAT_ORDERS_TODAY, ttl)
            pipe.incrbyfloat(RedisKeys.STAT_SALES_TODAY, amount)
            pipe.expire(RedisKeys.STAT_SALES_TODAY, ttl)
            pipe.hincrbyfloat(dashboard_key, "total_amount", amount)
            pipe.hincrby(dashboard_key, "order_count", 1)
            pipe.expire(dashboard_key, ttl)
            for item in order.items:
                self.ranking.add_sales_score(item.product_id, item.quantity, pipe)
                self.ranking.add_purchase_score(item.product_id, float(item.amount), pipe)
            pipe.execute()
        except RedisError as e:
            self._release(marker)
            logger.error(
                "Failed to record order metrics", order_id=order.order_id, error=str(e)
            )
            raise PersistenceException("MetricsService.record", e) from e

        logger.info("Order counted", order_id=order.order_id, amount=amount)
        return True

    def record_completion(self, order: Order) -> bool:
        """
        완료된 주문의 상품별 판매 금액을 일/주/월 랭킹과 인기 상품에 반영합니다.

        완료 마커(order:stats:{order_id}:completed)로 한 번만 반영됩니다.
        """
        marker = RedisKeys.order_completion_stats(order.order_id)
        if not self._claim(marker):
            return False

        try:
            pipe = self.redis.pipeline(transaction=True)
            for item in order.items:
                amount = float(item.amount)
                self.ranking.add_sales_score(item.product_id, amount, pipe)
                self.ranking.add_weekly_sales_score(item.product_id, amount, pipe)
                self.ranking.add_monthly_sales_score(item.product_id, amount, pipe)
                self.ranking.add_purchase_score(item.product_id, amount, pipe)
            pipe.execute()
        except RedisError as e:
            self._release(marker)
            raise PersistenceException("MetricsService.record_completion", e) from e

        logger.info("Order completion counted", order_id=order.order_id)
        return True

    @store_operation
    def get_dashboard(self, day: Optional[date] = None) -> DashboardResponse:
        """
        일자별 대시보드 집계를 조회합니다.

        오늘 날짜의 대시보드 해시가 없으면 stat:*:today 카운터를 사용합니다.
        """
        day = day or date.today()
        data = self.redis.hgetall(RedisKeys.dashboard(day))

        total_amount = float(data.get("total_amount", 0) or 0)
        order_count = int(data.get("order_count", 0) or 0)
        if not data and day == date.today():
            total_amount = float(self.redis.get(RedisKeys.STAT_SALES_TODAY) or 0)
            order_count = int(self.redis.get(RedisKeys.STAT_ORDERS_TODAY) or 0)

        avg_price = total_amount / order_count if order_count else 0.0
        return DashboardResponse(
            date=day,
            total_amount=total_amount,
            order_count=order_count,
            avg_price=round(avg_price, 2),
        )

    @store_operation
    def is_counted(self, order_id: str) -> bool:
        return bool(self.redis.exists(RedisKeys.order_stats(order_id)))

    @store_operation
    def clear_markers(self, order_id: str) -> None:
        self.redis.delete(
            RedisKeys.order_stats(order_id),
            RedisKeys.order_completion_stats(order_id),
        )

    @store_operation
    def _claim(self, marker: str) -> bool:
        return bool(
            self.redis.set(
                marker, "1", nx=True, ex=self.settings.order_stats_ttl_seconds
            )
        )

    def _release(self, marker: str) -> None:
        try:
            self.redis.delete(marker)
        except RedisError as e:
            logger.error("Failed to release metrics marker", key=marker, error=str(e))
