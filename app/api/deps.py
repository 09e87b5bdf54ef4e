"""
FastAPI 의존성 주입 함수들

요청마다 데이터베이스 세션과 Redis 클라이언트를 받아 서비스 객체를 조립합니다.
서비스 간 의존 관계는 이 모듈에서만 결정됩니다.
"""

from fastapi import Depends
from redis import Redis
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.db.database import get_db
from app.db.redis_client import get_redis_client
from app.services.cart_service import CartService
from app.services.inventory_service import InventoryService
from app.services.metrics_service import MetricsService
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.ranking_service import RankingService


def get_inventory_service(
    redis: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> InventoryService:
    return InventoryService(redis, settings)


def get_product_service(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
    inventory: InventoryService = Depends(get_inventory_service),
) -> ProductService:
    return ProductService(db, redis, settings, inventory)


def get_cart_service(
    redis: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
    inventory: InventoryService = Depends(get_inventory_service),
    products: ProductService = Depends(get_product_service),
) -> CartService:
    return CartService(redis, settings, inventory, products)


def get_ranking_service(redis: Redis = Depends(get_redis_client)) -> RankingService:
    return RankingService(redis)


def get_metrics_service(
    redis: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
    ranking: RankingService = Depends(get_ranking_service),
) -> MetricsService:
    return MetricsService(redis, settings, ranking)


def get_order_service(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
    cart: CartService = Depends(get_cart_service),
    metrics: MetricsService = Depends(get_metrics_service),
    products: ProductService = Depends(get_product_service),
    inventory: InventoryService = Depends(get_inventory_service),
) -> OrderService:
    """
    주문 서비스 의존성

    Example:
        @router.post("/{order_id}/pay")
        def pay(order_id: str, orders: OrderService = Depends(get_order_service)):
            ...
    """
    return OrderService(db, redis, settings, cart, metrics, products, inventory)
