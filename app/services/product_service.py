"""상품 카탈로그 서비스."""

from decimal import Decimal
from typing import Optional

import structlog
from redis import Redis
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import store_operation
from app.core.keys import RedisKeys
from app.core.results import ErrorKind, ServiceResult
from app.db.repository import ProductRepository
from app.models import Product, ProductStatus
from app.services.cache import get_or_load, put_and_invalidate
from app.services.inventory_service import InventoryService

logger = structlog.get_logger(__name__)


class ProductService:
    """상품 존재/판매 가능 여부 확인, 스냅샷 조회 및 상품 등록 서비스."""

    def __init__(
        self,
        db: Session,
        redis: Redis,
        settings: Settings,
        inventory: InventoryService,
    ):
        self.redis = redis
        self.settings = settings
        self.inventory = inventory
        self.products = ProductRepository(db)

    @store_operation
    def create_product(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        stock: int,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> ServiceResult[Product]:
        """
        상품을 영구 저장소에 등록하고 Redis 재고 카운터를 생성합니다.

        Args:
            product_id: 상품 ID
            name: 상품명
            price: 판매 가격
            stock: 초기 재고 수량
            description: 상품 설명 (선택)
            image: 대표 이미지 URL (선택)

        Returns:
            생성된 Product, 이미 존재하는 ID면 VALIDATION 실패
        """
        if self.products.exists(product_id):
            return ServiceResult.failure(
                ErrorKind.VALIDATION, f"Product '{product_id}' already exists"
            )

        product = self.products.save(
            Product(
                id=product_id,
                name=name,
                description=description,
                price=price,
                stock=stock,
                image=image,
                status=ProductStatus.ON_SHELF,
            )
        )
        self.inventory.set_stock(product_id, stock)

        logger.info("Product created", product_id=product_id, stock=stock)
        return ServiceResult.success(product)

    @store_operation
    def get_product(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def exists(self, product_id: str) -> bool:
        return self.snapshot(product_id) is not None

    def is_sellable(self, product_id: str) -> bool:
        snapshot = self.snapshot(product_id)
        return snapshot is not None and snapshot["status"] == ProductStatus.ON_SHELF

    @store_operation
    def snapshot(self, product_id: str) -> Optional[dict]:
        """
        장바구니/주문에 필요한 상품 정보를 캐시 우선으로 조회합니다.

        Returns:
            {"id", "name", "price", "status", "image"} 또는 상품이 없으면 None
        """

        def load() -> Optional[dict]:
            product = self.products.get(product_id)
            if product is None:
                return None
            return {
                "id": product.id,
                "name": product.name,
                "price": str(product.price),
                "status": product.status,
                "image": product.image,
            }

        return get_or_load(
            self.redis,
            RedisKeys.product_cache(product_id),
            load,
            self.settings.product_cache_ttl_seconds,
        )

    @store_operation
    def update_status(self, product_id: str, status: ProductStatus) -> ServiceResult[Product]:
        """상품 판매 상태를 변경하고 상품 캐시를 무효화합니다."""
        product = self.products.get(product_id)
        if product is None:
            return ServiceResult.failure(
                ErrorKind.NOT_FOUND, f"Product '{product_id}' not found"
            )

        product.status = status
        self.products.save(product)
        put_and_invalidate(self.redis, invalidate=[RedisKeys.product_cache(product_id)])

        logger.info("Product status updated", product_id=product_id, status=int(status))
        return ServiceResult.success(product)

    @store_operation
    def increment_sale_count(self, product_id: str, quantity: int) -> None:
        self.products.increment_counter(product_id, "sale_count", quantity)
