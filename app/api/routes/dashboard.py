"""
실시간 대시보드 API 엔드포인트
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_metrics_service
from app.schemas.dashboard import DashboardResponse
from app.services.metrics_service import MetricsService

router = APIRouter()


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    day: Optional[date] = None,
    metrics: MetricsService = Depends(get_metrics_service),
):
    """
    일자별 매출 집계를 조회합니다 (기본값: 오늘).

    Example:
        GET /api/dashboard?day=2025-01-22

        Response (200):
        ```json
        {
            "date": "2025-01-22",
            "total_amount": 15300.0,
            "order_count": 12,
            "avg_price": 1275.0
        }
        ```
    """
    return metrics.get_dashboard(day)
