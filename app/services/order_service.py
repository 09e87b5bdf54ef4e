"""
주문 수명주기 서비스

주문 상태 머신:
    PENDING_PAYMENT → PENDING_DELIVERY → SHIPPED → COMPLETED
    PENDING_PAYMENT → CANCELLED

주문 생성은 재고를 다시 차감하지 않습니다. 장바구니에 담을 때 이미 선점된
재고가 결제 시 장바구니 항목 소진으로 확정됩니다.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import structlog
from redis import Redis
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import store_operation
from app.core.keys import RedisKeys
from app.core.results import ErrorKind, ServiceResult
from app.db.repository import OrderRepository
from app.models import Order, OrderItem, OrderStatus
from app.models.order import can_transition
from app.schemas.order import OrderItemData, OrderStatsResponse
from app.services.cache import get_or_load, put_and_invalidate
from app.services.cart_service import CartService
from app.services.inventory_service import InventoryService
from app.services.metrics_service import MetricsService
from app.services.product_service import ProductService

logger = structlog.get_logger(__name__)

DEFAULT_REMARK = "cart checkout"

# 주문 삭제 시 재고를 원장에 반환하는 상태 (결제 이후 상태)
RESTOCK_ON_DELETE = frozenset(
    {OrderStatus.PENDING_DELIVERY, OrderStatus.SHIPPED, OrderStatus.COMPLETED}
)


def generate_order_id() -> str:
    """주문 ID 생성 (예: ORD20250122103000A1B2)"""
    return f"ORD{datetime.now():%Y%m%d%H%M%S}{uuid.uuid4().hex[:4].upper()}"


class OrderService:
    def __init__(
        self,
        db: Session,
        redis: Redis,
        settings: Settings,
        cart: CartService,
        metrics: MetricsService,
        products: ProductService,
        inventory: InventoryService,
    ):
        self.redis = redis
        self.settings = settings
        self.cart = cart
        self.metrics = metrics
        self.products = products
        self.inventory = inventory
        self.orders = OrderRepository(db)

    @store_operation
    def create_order(
        self,
        user_id: str,
        items: list[OrderItemData],
        discount_amount: Decimal = Decimal("0"),
        order_id: Optional[str] = None,
        receiver: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> ServiceResult[Order]:
        """
        결제 대기 상태의 주문을 생성합니다.

        재고 원장에는 접근하지 않습니다.

        Args:
            user_id: 사용자 ID
            items: 주문 상품 목록 (amount가 없으면 price * quantity)
            discount_amount: 할인 금액
            order_id: 주문 ID (없으면 생성)
            receiver / phone / address: 배송 정보
            remark: 주문 메모 (기본값: "cart checkout")

        Returns:
            생성된 주문,
            상품이 없거나 할인 금액이 총액을 넘거나 주문 ID가 이미 있으면 VALIDATION
        """
        if not items:
            return ServiceResult.failure(ErrorKind.VALIDATION, "Order has no items")
        if order_id is not None and self.orders.exists(order_id):
            return ServiceResult.failure(
                ErrorKind.VALIDATION, f"Order '{order_id}' already exists"
            )

        order_items = [
            OrderItem(
                product_id=item.product_id,
                product_name=item.product_name,
                price=item.price,
                quantity=item.quantity,
                amount=item.amount if item.amount is not None else item.price * item.quantity,
                image=item.image,
            )
            for item in items
        ]
        total_amount = sum((item.amount for item in order_items), Decimal("0"))
        if discount_amount > total_amount:
            return ServiceResult.failure(
                ErrorKind.VALIDATION, "Discount amount exceeds order total"
            )

        order = self.orders.save(
            Order(
                order_id=order_id or generate_order_id(),
                user_id=user_id,
                total_amount=total_amount,
                discount_amount=discount_amount,
                actual_amount=total_amount - discount_amount,
                status=OrderStatus.PENDING_PAYMENT,
                create_time=datetime.now(),
                receiver=receiver,
                phone=phone,
                address=address,
                remark=remark or DEFAULT_REMARK,
                items=order_items,
            )
        )
        self._cache_status(order)

        logger.info(
            "Order created",
            order_id=order.order_id,
            user_id=user_id,
            total_amount=str(total_amount),
        )
        return ServiceResult.success(order)

    @store_operation
    def get_order(self, order_id: str) -> Optional[Order]:
        return self.orders.get(order_id)

    @store_operation
    def get_order_status(self, order_id: str) -> Optional[int]:
        """주문 상태 코드 (상태 캐시 우선, 없으면 영구 저장소에서 읽어 캐시)"""

        def load() -> Optional[int]:
            order = self.orders.get(order_id)
            return int(order.status) if order is not None else None

        status = get_or_load(
            self.redis,
            RedisKeys.order_status(order_id),
            load,
            self.settings.order_status_ttl_seconds,
        )
        return int(status) if status is not None else None

    @store_operation
    def get_user_orders(self, user_id: str, limit: int = 20) -> list[Order]:
        return self.orders.find_by_user(user_id, limit)

    @store_operation
    def pay_order(self, order_id: str, pay_method: str) -> ServiceResult[Order]:
        """
        주문을 결제 완료(배송 대기) 상태로 전이합니다.

        플로우:
        1. PENDING_PAYMENT → PENDING_DELIVERY 저장 및 상태 캐시 갱신
        2. 대시보드/랭킹 집계 (주문당 한 번)
        3. 결제된 수량만큼 장바구니 항목 소진 (재고 반환 없음)
        """

        def apply(order: Order) -> None:
            order.pay_method = pay_method
            order.pay_time = datetime.now()

        result = self._transition(order_id, OrderStatus.PENDING_DELIVERY, apply)
        if not result.ok:
            return result

        order = result.value
        self.metrics.record(order)
        paid: dict[str, int] = {}
        for item in order.items:
            paid[item.product_id] = paid.get(item.product_id, 0) + item.quantity
        self.cart.consume_lines(order.user_id, paid)

        logger.info("Order paid", order_id=order_id, pay_method=pay_method)
        return result

    @store_operation
    def deliver_order(
        self, order_id: str, express_company: str, express_no: str
    ) -> ServiceResult[Order]:
        def apply(order: Order) -> None:
            order.express_company = express_company
            order.express_no = express_no
            order.deliver_time = datetime.now()

        result = self._transition(order_id, OrderStatus.SHIPPED, apply)
        if result.ok:
            logger.info("Order shipped", order_id=order_id, express_no=express_no)
        return result

    @store_operation
    def complete_order(self, order_id: str) -> ServiceResult[Order]:
        """
        배송된 주문을 완료 처리합니다.

        상품 누적 판매량과 완료 랭킹은 완료 마커를 선점한 경우에만 반영됩니다.
        """

        def apply(order: Order) -> None:
            order.complete_time = datetime.now()

        result = self._transition(order_id, OrderStatus.COMPLETED, apply)
        if result.ok:
            self._record_completion(result.value)
            logger.info("Order completed", order_id=order_id)
        return result

    @store_operation
    def cancel_order(self, order_id: str) -> ServiceResult[Order]:
        """결제 대기 주문만 취소할 수 있습니다. 재고는 반환하지 않습니다."""
        result = self._transition(order_id, OrderStatus.CANCELLED)
        if result.ok:
            logger.info("Order cancelled", order_id=order_id)
        return result

    @store_operation
    def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> ServiceResult[Order]:
        """
        관리자용 상태 변경 (상태 머신 검사 없음)

        COMPLETED로 변경하면 총액 기준으로 집계와 완료 랭킹을 반영합니다.
        결제 집계 여부와 관계없이 완료 집계를 시도하며, 두 집계 모두
        주문별 마커로 한 번만 반영됩니다.
        """
        if not self.orders.update_status(order_id, status):
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Order '{order_id}' not found"
            )

        order = self.orders.get(order_id)
        self._cache_status(order)

        if status == OrderStatus.COMPLETED:
            self.metrics.record(order, amount=order.total_amount)
            self._record_completion(order)

        logger.info("Order status updated", order_id=order_id, status=int(status))
        return ServiceResult.success(order)

    @store_operation
    def update_logistics(
        self, order_id: str, express_company: str, express_no: str
    ) -> ServiceResult[Order]:
        if not self.orders.update_logistics(order_id, express_company, express_no):
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Order '{order_id}' not found"
            )
        return ServiceResult.success(self.orders.get(order_id))

    @store_operation
    def delete_order(self, order_id: str) -> ServiceResult[None]:
        """
        주문을 삭제합니다.

        결제 이후 상태의 주문은 주문 수량을 재고 원장에 반환합니다.
        상태 캐시와 집계 마커도 함께 삭제됩니다.
        """
        order = self.orders.get(order_id)
        if order is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Order '{order_id}' not found"
            )

        restock = [(item.product_id, item.quantity) for item in order.items]
        should_restock = order.status in RESTOCK_ON_DELETE

        self.orders.delete(order)
        put_and_invalidate(self.redis, invalidate=[RedisKeys.order_status(order_id)])
        self.metrics.clear_markers(order_id)

        if should_restock:
            for product_id, quantity in restock:
                self.inventory.release_stock(product_id, quantity)

        logger.info("Order deleted", order_id=order_id, restocked=should_restock)
        return ServiceResult.success()

    @store_operation
    def get_order_stats(self) -> OrderStatsResponse:
        return OrderStatsResponse(
            pending_payment_count=self.orders.count_by_status(OrderStatus.PENDING_PAYMENT),
            pending_delivery_count=self.orders.count_by_status(OrderStatus.PENDING_DELIVERY),
            shipped_count=self.orders.count_by_status(OrderStatus.SHIPPED),
            completed_count=self.orders.count_by_status(OrderStatus.COMPLETED),
        )

    # ------------------------------------------------------------------
    # 내부 구현
    # ------------------------------------------------------------------

    def _transition(
        self,
        order_id: str,
        target: OrderStatus,
        apply: Optional[Callable[[Order], None]] = None,
    ) -> ServiceResult[Order]:
        order = self.orders.get(order_id)
        if order is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Order '{order_id}' not found"
            )

        if not can_transition(order.status, target):
            logger.warning(
                "Rejected order transition",
                order_id=order_id,
                status=int(order.status),
                target=int(target),
            )
            return ServiceResult.failure(
                ErrorKind.INVALID_STATE_TRANSITION,
                f"Cannot change order '{order_id}' from status {order.status} to {int(target)}",
            )

        order.status = target
        if apply is not None:
            apply(order)
        order = self.orders.save(order)
        self._cache_status(order)
        return ServiceResult.success(order)

    def _record_completion(self, order: Order) -> None:
        if not self.metrics.record_completion(order):
            return
        for item in order.items:
            self.products.increment_sale_count(item.product_id, item.quantity)

    def _cache_status(self, order: Order) -> None:
        put_and_invalidate(
            self.redis,
            key=RedisKeys.order_status(order.order_id),
            value=str(int(order.status)),
            ttl_seconds=self.settings.order_status_ttl_seconds,
        )
