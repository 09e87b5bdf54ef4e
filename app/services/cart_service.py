"""
장바구니 예약 서비스

장바구니에 담긴 수량은 재고 원장에서 이미 차감된 수량입니다.
장바구니 수량 변경은 항상 같은 크기의 재고 변경과 짝을 이룹니다.
"""

import time
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import ValidationError
from redis import Redis
from redis.exceptions import RedisError

from app.core.config import Settings
from app.core.exceptions import PersistenceException, store_operation
from app.core.keys import RedisKeys
from app.core.results import ErrorKind, ServiceResult
from app.models import ProductStatus
from app.schemas.cart import CartItemData, CartLine
from app.schemas.order import OrderItemData
from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService

logger = structlog.get_logger(__name__)


class CartService:
    """사용자별 장바구니(cart:{user_id} 해시)와 재고 선점을 함께 관리합니다."""

    def __init__(
        self,
        redis: Redis,
        settings: Settings,
        inventory: InventoryService,
        products: ProductService,
    ):
        self.redis = redis
        self.settings = settings
        self.inventory = inventory
        self.products = products

    def add_to_cart(
        self, user_id: str, product_id: str, quantity: int, selected: bool = True
    ) -> ServiceResult[CartItemData]:
        """
        상품을 장바구니에 담고 담은 수량만큼 재고를 선점합니다.

        이미 담긴 상품이면 수량을 합산하며, 새로 요청한 수량만 차감합니다.

        Args:
            user_id: 사용자 ID
            product_id: 상품 ID
            quantity: 추가할 수량 (양수)
            selected: 결제 대상 선택 여부

        Returns:
            저장된 장바구니 항목,
            실패 시 VALIDATION (수량 오류, 판매 불가 상품) 또는 INSUFFICIENT_STOCK

        Raises:
            PersistenceException: 재고 차감 후 장바구니 저장 실패 (차감 수량은 반환됨)
        """
        if quantity <= 0:
            return ServiceResult.failure(
                ErrorKind.VALIDATION, "Quantity must be greater than 0"
            )
        if not self.products.is_sellable(product_id):
            return ServiceResult.failure(
                ErrorKind.VALIDATION, f"Product '{product_id}' is not available"
            )

        existing = self._read_line(user_id, product_id)

        if not self.inventory.deduct_stock(product_id, quantity):
            return ServiceResult.failure(
                ErrorKind.INSUFFICIENT_STOCK,
                f"Insufficient stock for product '{product_id}'",
            )

        if existing is not None:
            item = existing.model_copy(
                update={"quantity": existing.quantity + quantity, "selected": selected}
            )
        else:
            item = CartItemData(
                product_id=product_id,
                quantity=quantity,
                add_time=int(time.time()),
                selected=selected,
            )

        self._write_line_or_compensate(user_id, item, restock=quantity)

        logger.info(
            "Added to cart", user_id=user_id, product_id=product_id, quantity=quantity
        )
        return ServiceResult.success(item)

    def get_cart(self, user_id: str) -> list[CartLine]:
        """
        장바구니를 조회하면서 현재 상품/재고 상태와 맞춥니다.

        - 해석할 수 없는 항목, 삭제되었거나 판매 중지된 상품: 항목 삭제 (재고 반환 없음)
        - 재고가 0: 항목 삭제 (재고 반환 없음)
        - 재고가 담긴 수량보다 적음: 재고 수량으로 줄이고 줄어든 만큼 재고 반환

        Returns:
            상품 정보가 결합된 장바구니 항목 목록
        """
        lines: list[CartLine] = []
        for product_id, raw in self._read_all(user_id).items():
            item = self._parse(user_id, product_id, raw)
            if item is None:
                self._delete_line(user_id, product_id)
                continue

            snapshot = self.products.snapshot(product_id)
            if snapshot is None or snapshot["status"] != ProductStatus.ON_SHELF:
                logger.info(
                    "Evicting unavailable product from cart",
                    user_id=user_id,
                    product_id=product_id,
                )
                self._delete_line(user_id, product_id)
                continue

            stock = self.inventory.get_stock(product_id)
            if stock <= 0:
                logger.info(
                    "Evicting sold-out product from cart",
                    user_id=user_id,
                    product_id=product_id,
                )
                self._delete_line(user_id, product_id)
                continue

            if stock < item.quantity:
                trimmed = item.quantity - stock
                item = item.model_copy(update={"quantity": stock})
                self._write_line(user_id, item)
                self.inventory.release_stock(product_id, trimmed)
                logger.info(
                    "Clamped cart line to stock",
                    user_id=user_id,
                    product_id=product_id,
                    quantity=stock,
                )

            lines.append(
                CartLine(
                    user_id=user_id,
                    product_id=product_id,
                    quantity=item.quantity,
                    selected=item.selected,
                    product_name=snapshot["name"],
                    price=Decimal(snapshot["price"]),
                    image=snapshot.get("image"),
                )
            )

        return lines

    def update_quantity(
        self, user_id: str, product_id: str, quantity: int
    ) -> ServiceResult[Optional[CartItemData]]:
        """
        장바구니 항목의 수량을 변경하고 차이만큼 재고를 조정합니다.

        quantity가 0 이하이면 항목을 삭제합니다 (remove_from_cart와 동일).

        Returns:
            변경된 항목 (삭제된 경우 None),
            실패 시 NOT_FOUND 또는 INSUFFICIENT_STOCK
        """
        if quantity <= 0:
            return self.remove_from_cart(user_id, product_id)

        existing = self._read_line(user_id, product_id)
        if existing is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Product '{product_id}' is not in the cart"
            )

        delta = quantity - existing.quantity
        if delta > 0:
            if not self.inventory.deduct_stock(product_id, delta):
                return ServiceResult.failure(
                    ErrorKind.INSUFFICIENT_STOCK,
                    f"Insufficient stock for product '{product_id}'",
                )
        elif delta < 0:
            self.inventory.increase_stock(product_id, -delta)

        item = existing.model_copy(update={"quantity": quantity})
        self._write_line_or_compensate(user_id, item, restock=delta)

        logger.info(
            "Updated cart quantity",
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
        )
        return ServiceResult.success(item)

    def remove_from_cart(self, user_id: str, product_id: str) -> ServiceResult[None]:
        """장바구니 항목을 삭제하고 선점 수량 전체를 재고에 반환합니다."""
        existing = self._read_line(user_id, product_id)
        if existing is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Product '{product_id}' is not in the cart"
            )

        self._delete_line(user_id, product_id)
        self.inventory.release_stock(product_id, existing.quantity)

        logger.info(
            "Removed from cart",
            user_id=user_id,
            product_id=product_id,
            quantity=existing.quantity,
        )
        return ServiceResult.success()

    def clear_cart(self, user_id: str) -> int:
        """
        장바구니를 비우고 모든 선점 수량을 재고에 반환합니다.

        Returns:
            반환된 항목 수
        """
        lines = self.get_cart(user_id)
        for line in lines:
            self.inventory.release_stock(line.product_id, line.quantity)
        self._delete_cart(user_id)

        logger.info("Cleared cart", user_id=user_id, lines=len(lines))
        return len(lines)

    def checkout(self, user_id: str) -> list[OrderItemData]:
        """
        선택된 장바구니 항목을 주문 상품 목록으로 변환합니다.

        재고와 장바구니는 변경하지 않습니다. 선점된 재고는 결제 완료 시
        consume_lines로 소진됩니다.
        """
        items = []
        for line in self.get_cart(user_id):
            if not line.selected:
                continue
            items.append(
                OrderItemData(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    price=line.price,
                    quantity=line.quantity,
                    amount=line.price * line.quantity,
                    image=line.image,
                )
            )
        return items

    def consume_lines(self, user_id: str, quantities: dict[str, int]) -> int:
        """
        결제된 수량만큼 장바구니 항목을 소진합니다. 재고는 반환하지 않습니다.

        결제 이후 같은 상품을 더 담았다면 남은 수량은 선점 상태로 유지되고,
        수량이 0 이하가 된 항목만 삭제됩니다.

        Args:
            user_id: 사용자 ID
            quantities: 상품 ID별 결제 수량

        Returns:
            삭제된 항목 수
        """
        removed = 0
        for product_id, paid in quantities.items():
            item = self._read_line(user_id, product_id)
            if item is None:
                continue

            remaining = item.quantity - paid
            if remaining > 0:
                self._write_line(user_id, item.model_copy(update={"quantity": remaining}))
            else:
                removed += self._delete_line(user_id, product_id)

            logger.info(
                "Consumed cart line",
                user_id=user_id,
                product_id=product_id,
                paid=paid,
                remaining=max(remaining, 0),
            )
        return removed

    def update_selected(
        self, user_id: str, product_id: str, selected: bool
    ) -> ServiceResult[CartItemData]:
        existing = self._read_line(user_id, product_id)
        if existing is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Product '{product_id}' is not in the cart"
            )
        item = existing.model_copy(update={"selected": selected})
        self._write_line(user_id, item)
        return ServiceResult.success(item)

    def get_cart_item_count(self, user_id: str) -> int:
        """장바구니에 담긴 총 수량"""
        total = 0
        for product_id, raw in self._read_all(user_id).items():
            item = self._parse(user_id, product_id, raw)
            if item is not None:
                total += item.quantity
        return total

    @store_operation
    def exists_in_cart(self, user_id: str, product_id: str) -> bool:
        return bool(self.redis.hexists(RedisKeys.cart(user_id), product_id))

    def get_product_quantity(self, user_id: str, product_id: str) -> int:
        item = self._read_line(user_id, product_id)
        return item.quantity if item is not None else 0

    # ------------------------------------------------------------------
    # 내부 구현
    # ------------------------------------------------------------------

    def _parse(self, user_id: str, product_id: str, raw: str) -> Optional[CartItemData]:
        try:
            return CartItemData.model_validate_json(raw)
        except ValidationError:
            logger.warning(
                "Unparseable cart line", user_id=user_id, product_id=product_id
            )
            return None

    @store_operation
    def _read_all(self, user_id: str) -> dict[str, str]:
        return self.redis.hgetall(RedisKeys.cart(user_id))

    @store_operation
    def _read_line(self, user_id: str, product_id: str) -> Optional[CartItemData]:
        raw = self.redis.hget(RedisKeys.cart(user_id), product_id)
        if raw is None:
            return None
        return self._parse(user_id, product_id, raw)

    @store_operation
    def _write_line(self, user_id: str, item: CartItemData) -> None:
        cart_key = RedisKeys.cart(user_id)
        pipe = self.redis.pipeline(transaction=True)
        pipe.hset(cart_key, item.product_id, item.model_dump_json())
        pipe.expire(cart_key, self.settings.cart_ttl_seconds)
        pipe.execute()

    def _write_line_or_compensate(
        self, user_id: str, item: CartItemData, restock: int
    ) -> None:
        """
        장바구니 항목을 저장합니다. 저장에 실패하면 직전 재고 변경을 되돌립니다.

        Args:
            restock: 직전에 차감한 수량 (음수면 직전에 반환한 수량)
        """
        try:
            self._write_line(user_id, item)
        except PersistenceException:
            logger.error(
                "Cart write failed, reverting stock",
                user_id=user_id,
                product_id=item.product_id,
                delta=restock,
            )
            if restock > 0:
                self.inventory.increase_stock(item.product_id, restock)
            elif restock < 0:
                self.inventory.decrease_stock(item.product_id, -restock)
            raise

    @store_operation
    def _delete_line(self, user_id: str, *product_ids: str) -> int:
        return self.redis.hdel(RedisKeys.cart(user_id), *product_ids)

    @store_operation
    def _delete_cart(self, user_id: str) -> None:
        self.redis.delete(RedisKeys.cart(user_id))
