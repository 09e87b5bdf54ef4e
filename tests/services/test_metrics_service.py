"""Tests for MetricsService and RankingService."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from redis import Redis
from redis.exceptions import RedisError

from app.core.exceptions import PersistenceException
from app.models import Order, OrderItem, OrderStatus
from app.services.metrics_service import MetricsService
from app.services.ranking_service import Leaderboard, RankingService


def _order(order_id="O1", amount="100.00"):
    return Order(
        order_id=order_id,
        user_id="U1",
        total_amount=Decimal(amount),
        discount_amount=Decimal("0"),
        actual_amount=Decimal(amount),
        status=OrderStatus.PENDING_DELIVERY,
        items=[
            OrderItem(
                product_id="P100",
                price=Decimal(amount),
                quantity=2,
                amount=Decimal(amount),
            )
        ],
    )


class TestMetricsRecord:
    def test_record_updates_dashboard_and_rankings(
        self, metrics_service: MetricsService, redis_client: Redis, ranking_service: RankingService
    ):
        """Test: 결제 집계 시 대시보드, 오늘 카운터, 랭킹 점수가 증가함"""
        assert metrics_service.record(_order()) is True

        dashboard_key = f"dashboard:{date.today():%Y%m%d}"
        assert redis_client.hget(dashboard_key, "order_count") == "1"
        assert float(redis_client.hget(dashboard_key, "total_amount")) == 100.0
        assert redis_client.get("stat:orders:today") == "1"
        assert float(redis_client.get("stat:sales:today")) == 100.0
        assert redis_client.ttl(dashboard_key) > 0
        assert ranking_service.get_score(Leaderboard.DAILY_SALES, "P100") == 2.0
        assert ranking_service.get_score(Leaderboard.HOT_PRODUCTS, "P100") == 100.0

    def test_record_is_idempotent(self, metrics_service: MetricsService):
        """Test: 같은 주문을 여러 번 집계해도 한 번만 반영됨"""
        order = _order()

        assert metrics_service.record(order) is True
        assert metrics_service.record(order) is False
        assert metrics_service.record(order, amount=Decimal("100.00")) is False

        dashboard = metrics_service.get_dashboard()
        assert dashboard.order_count == 1
        assert dashboard.total_amount == 100.0
        assert dashboard.avg_price == 100.0

    def test_record_failure_releases_marker(
        self, metrics_service: MetricsService, redis_client: Redis
    ):
        """Test: 파이프라인 실패 시 마커를 해제하여 재시도 가능"""
        failing_pipe = MagicMock()
        failing_pipe.execute.side_effect = RedisError("connection lost")

        with patch.object(redis_client, "pipeline", return_value=failing_pipe):
            with pytest.raises(PersistenceException):
                metrics_service.record(_order())

        assert metrics_service.is_counted("O1") is False
        assert metrics_service.record(_order()) is True

    def test_record_completion_once(
        self, metrics_service: MetricsService, ranking_service: RankingService
    ):
        order = _order(amount="30.00")

        assert metrics_service.record_completion(order) is True
        assert metrics_service.record_completion(order) is False

        assert ranking_service.get_score(Leaderboard.WEEKLY_SALES, "P100") == 30.0
        assert ranking_service.get_score(Leaderboard.MONTHLY_SALES, "P100") == 30.0

    def test_clear_markers(self, metrics_service: MetricsService):
        metrics_service.record(_order())
        metrics_service.record_completion(_order())

        metrics_service.clear_markers("O1")

        assert metrics_service.is_counted("O1") is False

    def test_dashboard_empty(self, metrics_service: MetricsService):
        dashboard = metrics_service.get_dashboard(date(2020, 1, 1))

        assert dashboard.order_count == 0
        assert dashboard.total_amount == 0.0
        assert dashboard.avg_price == 0.0

    def test_dashboard_falls_back_to_today_counters(
        self, metrics_service: MetricsService, redis_client: Redis
    ):
        redis_client.set("stat:orders:today", 2)
        redis_client.set("stat:sales:today", "50.5")

        dashboard = metrics_service.get_dashboard()

        assert dashboard.order_count == 2
        assert dashboard.total_amount == 50.5


class TestRankingService:
    def test_top_n_orders_by_score(self, ranking_service: RankingService):
        ranking_service.add_score(Leaderboard.DAILY_SALES, "P1", 3)
        ranking_service.add_score(Leaderboard.DAILY_SALES, "P2", 5)
        ranking_service.add_score(Leaderboard.DAILY_SALES, "P3", 1)
        ranking_service.add_score(Leaderboard.DAILY_SALES, "P1", 4)

        top = ranking_service.top_n(Leaderboard.DAILY_SALES, 2)

        assert [(entry.product_id, entry.score) for entry in top] == [
            ("P1", 7.0),
            ("P2", 5.0),
        ]

    def test_top_n_empty_and_non_positive(self, ranking_service: RankingService):
        assert ranking_service.top_n(Leaderboard.HOT_PRODUCTS, 5) == []
        assert ranking_service.top_n(Leaderboard.HOT_PRODUCTS, 0) == []

    def test_convenience_methods_use_separate_boards(
        self, ranking_service: RankingService, redis_client: Redis
    ):
        ranking_service.add_sales_score("P1", 1)
        ranking_service.add_weekly_sales_score("P1", 2)
        ranking_service.add_monthly_sales_score("P1", 3)
        ranking_service.add_purchase_score("P1", 4)

        assert redis_client.zscore("rank:daily:sale", "P1") == 1.0
        assert redis_client.zscore("rank:weekly:sale", "P1") == 2.0
        assert redis_client.zscore("rank:monthly:sale", "P1") == 3.0
        assert redis_client.zscore("hot:products", "P1") == 4.0
        assert ranking_service.get_hot_products()[0].product_id == "P1"
        assert ranking_service.get_score(Leaderboard.DAILY_SALES, "NOPE") == 0.0
