"""
재고 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field


class StockSetRequest(BaseModel):
    """
    재고 설정 요청 스키마 (기존 재고를 덮어씀)

    Example:
        {"quantity": 100}
    """

    quantity: int = Field(..., ge=0, description="설정할 재고 수량", examples=[100])


class QuantityRequest(BaseModel):
    """재고 증가/차감 요청 스키마"""

    quantity: int = Field(..., gt=0, description="변경 수량 (양수)", examples=[1])


class StockResponse(BaseModel):
    """
    재고 조회 응답 스키마

    Example:
        {
            "product_id": "P100",
            "stock": 8
        }
    """

    product_id: str
    stock: int = Field(..., description="Redis 실시간 재고")


class FlashStockResponse(BaseModel):
    sale_id: str
    product_id: str
    stock: int


class DeductResponse(BaseModel):
    """
    재고 차감 결과

    Example:
        {
            "product_id": "P100",
            "success": true,
            "remaining_stock": 7
        }
    """

    product_id: str
    success: bool
    remaining_stock: int | None = Field(None, description="차감 후 재고 (락 차감 시)")


class StockInfoResponse(BaseModel):
    product_id: str
    current_stock: int
    exists: bool
    timestamp: int = Field(..., description="조회 시각 (epoch ms)")
