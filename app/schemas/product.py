"""
상품 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict

from app.models.product import ProductStatus


class ProductCreateRequest(BaseModel):
    """
    상품 생성 요청 스키마

    Example:
        {
            "id": "P100",
            "name": "MacBook Pro",
            "price": "2500000.00",
            "stock": 10
        }
    """

    id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="상품 ID",
        examples=["P100"],
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="상품명",
        examples=["MacBook Pro"],
    )
    price: Decimal = Field(
        ...,
        gt=0,
        description="상품 가격 (양수)",
        examples=["2500000.00"],
    )
    stock: int = Field(
        ...,
        ge=0,
        description="초기 재고 수량 (0 이상)",
        examples=[10],
    )
    description: str | None = Field(None, description="상품 설명")
    image: str | None = Field(None, description="대표 이미지 URL")


class ProductResponse(BaseModel):
    """
    상품 정보 응답 스키마

    Example:
        {
            "id": "P100",
            "name": "MacBook Pro",
            "price": "2500000.00",
            "status": 1,
            "stock": 10,
            "sale_count": 0,
            "redis_stock": 8,
            "created_at": "2025-01-22T10:30:00Z",
            "updated_at": "2025-01-22T10:30:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="상품 ID")
    name: str = Field(..., description="상품명")
    description: str | None = None
    price: Decimal = Field(..., description="상품 가격")
    status: int = Field(..., description="판매 상태 (1: 판매 중, 0: 판매 중지)")
    image: str | None = None
    stock: int = Field(..., description="등록 시점 재고 수량")
    sale_count: int = Field(..., description="누적 판매 수량")
    redis_stock: int | None = Field(None, description="Redis에서 조회한 실시간 재고 (선택)")
    created_at: datetime
    updated_at: datetime


class ProductStatusRequest(BaseModel):
    status: ProductStatus = Field(..., description="판매 상태 (1: 판매 중, 0: 판매 중지)")
