"""
Order 모델

주문과 주문 상품, 주문 상태 머신을 정의합니다.
"""

from datetime import datetime
from enum import IntEnum

from sqlalchemy import Column, Integer, Numeric, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.database import Base


class OrderStatus(IntEnum):
    """
    주문 상태 (상태 코드는 Redis 상태 캐시에 그대로 저장됨)

    PENDING_PAYMENT → PENDING_DELIVERY → SHIPPED → COMPLETED
    CANCELLED는 PENDING_PAYMENT에서만 전이 가능
    """

    PENDING_PAYMENT = 1
    PENDING_DELIVERY = 2
    SHIPPED = 3
    COMPLETED = 4
    CANCELLED = 5


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_PAYMENT: frozenset(
        {OrderStatus.PENDING_DELIVERY, OrderStatus.CANCELLED}
    ),
    OrderStatus.PENDING_DELIVERY: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: int, target: OrderStatus) -> bool:
    """현재 상태에서 target 상태로 전이할 수 있는지 확인합니다."""
    try:
        current_status = OrderStatus(current)
    except ValueError:
        return False
    return target in ALLOWED_TRANSITIONS[current_status]


class Order(Base):
    """
    주문 모델

    Attributes:
        order_id: 주문 ID (Primary Key, 예: "ORD20250122103000A1B2")
        user_id: 주문한 사용자 ID
        total_amount: 주문 총액 (= 주문 상품 금액 합계)
        discount_amount: 할인 금액
        actual_amount: 실결제 금액 (= total_amount - discount_amount)
        status: 주문 상태 코드 (OrderStatus)
        pay_method: 결제 수단
        create_time / pay_time / deliver_time / complete_time: 단계별 처리 일시
        receiver / phone / address: 배송 정보
        express_company / express_no: 택배사 및 운송장 번호
        remark: 주문 메모
        items: 주문 상품 목록
    """

    __tablename__ = "orders"

    order_id = Column(String(64), primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    actual_amount = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(
        Integer, nullable=False, default=OrderStatus.PENDING_PAYMENT, index=True
    )
    pay_method = Column(String(32), nullable=True)
    create_time = Column(DateTime, default=datetime.now, nullable=False)
    pay_time = Column(DateTime, nullable=True)
    deliver_time = Column(DateTime, nullable=True)
    complete_time = Column(DateTime, nullable=True)
    receiver = Column(String(100), nullable=True)
    phone = Column(String(32), nullable=True)
    address = Column(String(500), nullable=True)
    express_company = Column(String(100), nullable=True)
    express_no = Column(String(100), nullable=True)
    remark = Column(String(500), nullable=True)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:
        """Order 객체의 문자열 표현"""
        return (
            f"<Order(order_id='{self.order_id}', user_id='{self.user_id}', "
            f"status={self.status})>"
        )


class OrderItem(Base):
    """
    주문 상품 모델 (주문 시점의 상품명/가격 스냅샷)

    Attributes:
        id: 주문 상품 고유 ID (Primary Key)
        order_id: 주문 ID (Foreign Key to orders.order_id)
        product_id: 상품 ID
        product_name: 주문 시점 상품명
        price: 주문 시점 단가
        quantity: 수량
        amount: 소계 (price * quantity)
        image: 상품 이미지
    """

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(64), ForeignKey("orders.order_id"), nullable=False, index=True
    )
    product_id = Column(String(64), nullable=False, index=True)
    product_name = Column(String(200), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    image = Column(String(500), nullable=True)

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<OrderItem(order_id='{self.order_id}', product_id='{self.product_id}', "
            f"quantity={self.quantity})>"
        )
