"""
SQLAlchemy 데이터베이스 모델

모든 데이터베이스 모델을 이 모듈에서 import하여 export합니다.
"""

from app.models.product import Product, ProductStatus
from app.models.order import Order, OrderItem, OrderStatus

__all__ = ["Product", "ProductStatus", "Order", "OrderItem", "OrderStatus"]
