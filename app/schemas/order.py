"""
주문 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict

from app.models.order import OrderStatus


class OrderItemData(BaseModel):
    """
    주문 상품 스키마 (주문 생성 요청 및 장바구니 결제 결과)

    amount가 없으면 price * quantity로 계산됩니다.

    Example:
        {
            "product_id": "P100",
            "product_name": "MacBook Pro",
            "price": "2500000.00",
            "quantity": 2,
            "amount": "5000000.00"
        }
    """

    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(..., description="상품 ID")
    product_name: str | None = Field(None, description="주문 시점 상품명")
    price: Decimal = Field(..., ge=0, description="주문 시점 단가")
    quantity: int = Field(..., gt=0, description="수량")
    amount: Decimal | None = Field(None, description="소계")
    image: str | None = Field(None, description="상품 이미지")


class OrderCreateRequest(BaseModel):
    """
    주문 생성 요청 스키마

    Example:
        {
            "user_id": "U1",
            "items": [{"product_id": "P100", "price": "100.00", "quantity": 1}],
            "discount_amount": "0"
        }
    """

    order_id: str | None = Field(None, description="주문 ID (없으면 자동 생성)")
    user_id: str = Field(..., min_length=1, description="사용자 ID")
    items: list[OrderItemData] = Field(default_factory=list, description="주문 상품")
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, description="할인 금액")
    receiver: str | None = None
    phone: str | None = None
    address: str | None = None
    remark: str | None = None


class PayRequest(BaseModel):
    pay_method: str = Field(..., description="결제 수단", examples=["alipay"])


class DeliverRequest(BaseModel):
    express_company: str = Field(..., description="택배사")
    express_no: str = Field(..., description="운송장 번호")


class StatusUpdateRequest(BaseModel):
    status: OrderStatus = Field(..., description="변경할 주문 상태 코드 (1-5)")


class OrderResponse(BaseModel):
    """
    주문 정보 응답 스키마

    status는 Redis 상태 캐시가 있으면 캐시 값이 반영됩니다.
    """

    model_config = ConfigDict(from_attributes=True)

    order_id: str
    user_id: str
    status: int
    total_amount: Decimal
    discount_amount: Decimal
    actual_amount: Decimal
    pay_method: str | None = None
    create_time: datetime
    pay_time: datetime | None = None
    deliver_time: datetime | None = None
    complete_time: datetime | None = None
    receiver: str | None = None
    phone: str | None = None
    address: str | None = None
    express_company: str | None = None
    express_no: str | None = None
    remark: str | None = None
    items: list[OrderItemData] = Field(default_factory=list)


class OrderStatusResponse(BaseModel):
    order_id: str
    status: int


class OrderStatsResponse(BaseModel):
    """상태별 주문 수"""

    pending_payment_count: int
    pending_delivery_count: int
    shipped_count: int
    completed_count: int
