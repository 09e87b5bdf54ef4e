"""Tests for ProductService."""

import json
from decimal import Decimal

from redis import Redis

from app.core.results import ErrorKind
from app.models import Product, ProductStatus
from app.services.product_service import ProductService


class TestProductService:
    """Test cases for ProductService."""

    def test_create_product_success(
        self, product_service: ProductService, redis_client: Redis, test_db
    ):
        """Test: 상품 생성 시 DB 저장 및 Redis 재고 초기화"""
        result = product_service.create_product(
            product_id="P100", name="MacBook Pro", price=Decimal("2500000.00"), stock=10
        )

        assert result.ok
        product = result.value
        assert product.id == "P100"
        assert product.status == ProductStatus.ON_SHELF
        assert test_db.get(Product, "P100") is not None
        assert redis_client.get("stock:P100") == "10"

    def test_create_product_duplicate(self, product_service: ProductService, make_product):
        make_product("P100")

        result = product_service.create_product(
            product_id="P100", name="Again", price=Decimal("1.00"), stock=1
        )

        assert result.error == ErrorKind.VALIDATION

    def test_snapshot_is_cached(
        self, product_service: ProductService, make_product, redis_client: Redis
    ):
        """Test: 스냅샷 조회 시 product:cache 키에 캐시됨"""
        make_product("P100", price=Decimal("99.50"), name="Keyboard")

        snapshot = product_service.snapshot("P100")

        assert snapshot["name"] == "Keyboard"
        assert Decimal(snapshot["price"]) == Decimal("99.50")
        cached = json.loads(redis_client.get("product:cache:P100"))
        assert cached["id"] == "P100"
        assert redis_client.ttl("product:cache:P100") > 0

    def test_snapshot_missing_product_not_cached(
        self, product_service: ProductService, redis_client: Redis
    ):
        assert product_service.snapshot("NOPE") is None
        assert product_service.exists("NOPE") is False
        assert redis_client.get("product:cache:NOPE") is None

    def test_update_status_invalidates_cache(
        self, product_service: ProductService, make_product, redis_client: Redis
    ):
        """Test: 판매 중지 시 캐시가 무효화되어 즉시 판매 불가로 조회됨"""
        make_product("P100")
        assert product_service.is_sellable("P100") is True

        result = product_service.update_status("P100", ProductStatus.OFF_SHELF)

        assert result.ok
        assert redis_client.get("product:cache:P100") is None
        assert product_service.is_sellable("P100") is False
        assert product_service.exists("P100") is True

    def test_update_status_not_found(self, product_service: ProductService):
        result = product_service.update_status("NOPE", ProductStatus.OFF_SHELF)

        assert result.error == ErrorKind.NOT_FOUND

    def test_increment_sale_count(
        self, product_service: ProductService, make_product, test_db
    ):
        make_product("P100")

        product_service.increment_sale_count("P100", 3)
        product_service.increment_sale_count("P100", 2)

        test_db.expire_all()
        assert product_service.get_product("P100").sale_count == 5
