"""
판매 랭킹 API 엔드포인트
"""

from enum import Enum

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_ranking_service
from app.schemas.dashboard import RankingEntryResponse
from app.services.ranking_service import Leaderboard, RankingService

router = APIRouter()


class BoardName(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    HOT = "hot"


BOARDS = {
    BoardName.DAILY: Leaderboard.DAILY_SALES,
    BoardName.WEEKLY: Leaderboard.WEEKLY_SALES,
    BoardName.MONTHLY: Leaderboard.MONTHLY_SALES,
    BoardName.HOT: Leaderboard.HOT_PRODUCTS,
}


@router.get("/{board}", response_model=list[RankingEntryResponse])
def get_ranking(
    board: BoardName,
    n: int = Query(10, ge=1, le=100, description="조회할 상위 항목 수"),
    ranking: RankingService = Depends(get_ranking_service),
):
    """
    리더보드 상위 n개 상품을 점수 내림차순으로 조회합니다.

    Example:
        GET /api/ranking/daily?n=3

        Response (200):
        ```json
        [
            {"rank": 1, "product_id": "P100", "score": 12.0},
            {"rank": 2, "product_id": "P200", "score": 7.0}
        ]
        ```
    """
    entries = ranking.top_n(BOARDS[board], n)
    return [
        RankingEntryResponse(rank=index, product_id=entry.product_id, score=entry.score)
        for index, entry in enumerate(entries, start=1)
    ]
