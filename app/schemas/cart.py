"""
장바구니 관련 Pydantic 스키마

Redis 저장 형식과 API 요청/응답 모델을 정의합니다.
"""

from decimal import Decimal
from pydantic import BaseModel, Field


class CartItemData(BaseModel):
    """
    Redis 장바구니 해시(cart:{user_id})에 JSON으로 저장되는 항목

    quantity는 이 항목을 위해 재고 원장에서 이미 차감된 수량과 같습니다.

    Example:
        {
            "product_id": "P100",
            "quantity": 2,
            "add_time": 1737541800,
            "selected": true
        }
    """

    product_id: str
    quantity: int
    add_time: int
    selected: bool = True


class CartLine(BaseModel):
    """
    상품 정보가 결합된 장바구니 항목 응답 스키마

    Example:
        {
            "user_id": "U1",
            "product_id": "P100",
            "quantity": 2,
            "selected": true,
            "product_name": "MacBook Pro",
            "price": "2500000.00",
            "image": null
        }
    """

    user_id: str = Field(..., description="사용자 ID")
    product_id: str = Field(..., description="상품 ID")
    quantity: int = Field(..., description="선점된 수량")
    selected: bool = Field(..., description="결제 대상 선택 여부")
    product_name: str = Field(..., description="상품명")
    price: Decimal = Field(..., description="현재 판매 가격")
    image: str | None = Field(None, description="상품 이미지")


class CartAddRequest(BaseModel):
    """
    장바구니 담기 요청 스키마

    Example:
        {
            "user_id": "U1",
            "product_id": "P100",
            "quantity": 2
        }
    """

    user_id: str = Field(..., min_length=1, description="사용자 ID", examples=["U1"])
    product_id: str = Field(..., min_length=1, description="상품 ID", examples=["P100"])
    quantity: int = Field(..., description="담을 수량 (양수)", examples=[2])
    selected: bool = Field(default=True, description="결제 대상 선택 여부")


class CartQuantityUpdateRequest(BaseModel):
    """장바구니 수량 변경 요청 스키마 (0 이하이면 삭제)"""

    quantity: int = Field(..., description="변경할 수량", examples=[3])


class CartSelectRequest(BaseModel):
    """장바구니 항목 선택 상태 변경 요청 스키마"""

    selected: bool = Field(..., description="결제 대상 선택 여부")


class CartCountResponse(BaseModel):
    user_id: str
    count: int = Field(..., description="장바구니에 담긴 총 수량")
