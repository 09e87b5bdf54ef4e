"""
Product 모델
"""

from datetime import datetime
from enum import IntEnum

from sqlalchemy import Column, BigInteger, Integer, Numeric, String, Text, DateTime
from app.db.database import Base


class ProductStatus(IntEnum):
    """상품 판매 상태"""

    OFF_SHELF = 0
    ON_SHELF = 1


class Product(Base):
    """
    상품 모델

    Attributes:
        id: 상품 고유 ID (Primary Key, 예: "P100")
        name: 상품명 (Not Null)
        description: 상품 설명 (Nullable)
        price: 판매 가격 (Not Null)
        status: 판매 상태 (1: 판매 중, 0: 판매 중지)
        image: 대표 이미지 URL (Nullable)
        stock: 등록 시점의 재고 수량 - 실시간 재고는 Redis가 기준
        sale_count: 누적 판매 수량 (주문 완료 시 증가)
        created_at: 생성 일시 (자동 설정)
        updated_at: 수정 일시 (자동 업데이트)
    """

    __tablename__ = "products"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    status = Column(Integer, nullable=False, default=ProductStatus.ON_SHELF)
    image = Column(String(500), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    sale_count = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        """Product 객체의 문자열 표현"""
        return f"<Product(id='{self.id}', name='{self.name}', price={self.price})>"

    def __str__(self) -> str:
        return f"Product: {self.name}"
