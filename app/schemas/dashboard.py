"""
대시보드 및 랭킹 응답 스키마
"""

from datetime import date
from pydantic import BaseModel, Field


class DashboardResponse(BaseModel):
    """
    일자별 실시간 매출 집계

    Example:
        {
            "date": "2025-01-22",
            "total_amount": 15300.0,
            "order_count": 12,
            "avg_price": 1275.0
        }
    """

    date: date
    total_amount: float = Field(..., description="결제 금액 합계")
    order_count: int = Field(..., description="결제된 주문 수")
    avg_price: float = Field(..., description="주문당 평균 금액")


class RankingEntryResponse(BaseModel):
    rank: int = Field(..., description="순위 (1부터 시작)")
    product_id: str
    score: float
