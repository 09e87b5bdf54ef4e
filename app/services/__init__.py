"""비즈니스 로직 서비스."""

from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService
from app.services.cart_service import CartService
from app.services.ranking_service import Leaderboard, RankingEntry, RankingService
from app.services.metrics_service import MetricsService
from app.services.order_service import OrderService

__all__ = [
    "InventoryService",
    "ProductService",
    "CartService",
    "Leaderboard",
    "RankingEntry",
    "RankingService",
    "MetricsService",
    "OrderService",
]
