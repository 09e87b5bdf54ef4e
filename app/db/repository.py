"""
영구 저장소 리포지토리

엔티티 타입별로 매개변수화된 공통 리포지토리와 주문/상품 전용 리포지토리를 제공합니다.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.db.database import Base
from app.models import Order, Product

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """기본 CRUD 리포지토리"""

    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: str) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def exists(self, entity_id: str) -> bool:
        return self.get(entity_id) is not None

    def save(self, entity: ModelT) -> ModelT:
        """
        엔티티를 저장(insert 또는 update)하고 커밋합니다.

        커밋 실패 시 세션을 롤백한 뒤 예외를 다시 발생시킵니다.
        """
        try:
            self.db.add(entity)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        try:
            self.db.delete(entity)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class ProductRepository(Repository[Product]):
    model = Product

    def increment_counter(self, product_id: str, field: str, delta: int) -> None:
        """
        상품의 정수 카운터 컬럼을 원자적으로 증가시킵니다 (예: sale_count).

        Args:
            product_id: 상품 ID
            field: 증가시킬 컬럼명
            delta: 증가량
        """
        column = getattr(Product, field)
        try:
            self.db.execute(
                update(Product)
                .where(Product.id == product_id)
                .values({field: column + delta})
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class OrderRepository(Repository[Order]):
    model = Order

    def update_status(self, order_id: str, status: int) -> bool:
        """주문 상태 컬럼만 갱신합니다. 갱신된 행이 있으면 True."""
        try:
            result = self.db.execute(
                update(Order).where(Order.order_id == order_id).values(status=status)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        # 세션에 로드된 Order 인스턴스가 새 상태를 읽도록 만료 처리
        self.db.expire_all()
        return result.rowcount > 0

    def update_logistics(
        self, order_id: str, express_company: str, express_no: str
    ) -> bool:
        try:
            result = self.db.execute(
                update(Order)
                .where(Order.order_id == order_id)
                .values(express_company=express_company, express_no=express_no)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return result.rowcount > 0

    def find_by_user(self, user_id: str, limit: int = 20) -> list[Order]:
        return list(
            self.db.scalars(
                select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.create_time.desc())
                .limit(limit)
            )
        )

    def count_by_status(self, status: int) -> int:
        return self.db.scalar(
            select(func.count()).select_from(Order).where(Order.status == status)
        )
