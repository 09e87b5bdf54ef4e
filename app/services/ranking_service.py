"""
판매 랭킹 서비스

Redis Sorted Set 기반의 점수 누적형 리더보드입니다. 점수는 증가만 합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from redis import Redis
from redis.client import Pipeline

from app.core.exceptions import store_operation
from app.core.keys import RedisKeys


class Leaderboard(str, Enum):
    """리더보드 종류 (값은 Redis 키)"""

    DAILY_SALES = RedisKeys.RANK_DAILY_SALE
    WEEKLY_SALES = RedisKeys.RANK_WEEKLY_SALE
    MONTHLY_SALES = RedisKeys.RANK_MONTHLY_SALE
    HOT_PRODUCTS = RedisKeys.HOT_PRODUCTS


@dataclass(frozen=True)
class RankingEntry:
    product_id: str
    score: float


class RankingService:
    def __init__(self, redis: Redis):
        self.redis = redis

    @store_operation
    def add_score(
        self,
        board: Leaderboard,
        member: str,
        delta: float,
        pipe: Optional[Pipeline] = None,
    ) -> None:
        """
        리더보드 점수를 원자적으로 증가시킵니다.

        Args:
            board: 리더보드
            member: 상품 ID
            delta: 증가량
            pipe: 주어지면 해당 파이프라인(트랜잭션)에 명령을 추가만 합니다
        """
        target = pipe if pipe is not None else self.redis
        target.zincrby(board.value, delta, member)

    @store_operation
    def top_n(self, board: Leaderboard, n: int) -> list[RankingEntry]:
        """점수 내림차순 상위 n개 항목"""
        if n <= 0:
            return []
        rows = self.redis.zrevrange(board.value, 0, n - 1, withscores=True)
        return [RankingEntry(product_id=member, score=score) for member, score in rows]

    @store_operation
    def get_score(self, board: Leaderboard, member: str) -> float:
        score = self.redis.zscore(board.value, member)
        return float(score) if score is not None else 0.0

    def add_sales_score(self, product_id: str, quantity: float, pipe=None) -> None:
        self.add_score(Leaderboard.DAILY_SALES, product_id, quantity, pipe)

    def add_weekly_sales_score(self, product_id: str, amount: float, pipe=None) -> None:
        self.add_score(Leaderboard.WEEKLY_SALES, product_id, amount, pipe)

    def add_monthly_sales_score(self, product_id: str, amount: float, pipe=None) -> None:
        self.add_score(Leaderboard.MONTHLY_SALES, product_id, amount, pipe)

    def add_purchase_score(self, product_id: str, amount: float, pipe=None) -> None:
        self.add_score(Leaderboard.HOT_PRODUCTS, product_id, amount, pipe)

    def get_daily_sales_ranking(self, n: int = 10) -> list[RankingEntry]:
        return self.top_n(Leaderboard.DAILY_SALES, n)

    def get_weekly_sales_ranking(self, n: int = 10) -> list[RankingEntry]:
        return self.top_n(Leaderboard.WEEKLY_SALES, n)

    def get_monthly_sales_ranking(self, n: int = 10) -> list[RankingEntry]:
        return self.top_n(Leaderboard.MONTHLY_SALES, n)

    def get_hot_products(self, n: int = 10) -> list[RankingEntry]:
        return self.top_n(Leaderboard.HOT_PRODUCTS, n)
