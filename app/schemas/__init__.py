"""
Pydantic 스키마 모듈
"""

from app.schemas.cart import (
    CartItemData,
    CartLine,
    CartAddRequest,
    CartQuantityUpdateRequest,
    CartSelectRequest,
    CartCountResponse,
)
from app.schemas.dashboard import DashboardResponse, RankingEntryResponse
from app.schemas.order import (
    OrderItemData,
    OrderCreateRequest,
    PayRequest,
    DeliverRequest,
    StatusUpdateRequest,
    OrderResponse,
    OrderStatusResponse,
    OrderStatsResponse,
)
from app.schemas.product import (
    ProductCreateRequest,
    ProductResponse,
    ProductStatusRequest,
)
from app.schemas.stock import (
    StockSetRequest,
    QuantityRequest,
    StockResponse,
    FlashStockResponse,
    DeductResponse,
    StockInfoResponse,
)

__all__ = [
    "CartItemData",
    "CartLine",
    "CartAddRequest",
    "CartQuantityUpdateRequest",
    "CartSelectRequest",
    "CartCountResponse",
    "DashboardResponse",
    "RankingEntryResponse",
    "OrderItemData",
    "OrderCreateRequest",
    "PayRequest",
    "DeliverRequest",
    "StatusUpdateRequest",
    "OrderResponse",
    "OrderStatusResponse",
    "OrderStatsResponse",
    "ProductCreateRequest",
    "ProductResponse",
    "ProductStatusRequest",
    "StockSetRequest",
    "QuantityRequest",
    "StockResponse",
    "FlashStockResponse",
    "DeductResponse",
    "StockInfoResponse",
]
