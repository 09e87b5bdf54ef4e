"""
pytest 픽스처 정의
"""

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.db.database import Base, get_db
from app.db.redis_client import get_redis_client
from app.main import app
from app.services.cart_service import CartService
from app.services.inventory_service import InventoryService
from app.services.metrics_service import MetricsService
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.ranking_service import RankingService


@pytest.fixture(scope="session")
def settings():
    """테스트용 설정 객체 픽스처"""
    return Settings(
        redis_host="localhost",
        redis_port=6379,
        redis_db=1,  # 테스트용 DB 프로덕션과 분리
        redis_password="",
        database_url="sqlite://",
        lock_timeout_seconds=10,
        lock_retry_attempts=3,
        lock_retry_delay_ms=10,
    )


@pytest.fixture(scope="function")
def redis_client():
    """
    테스트용 Redis 클라이언트 픽스처

    Lua 스크립트를 지원하는 fakeredis를 테스트 함수마다 새 서버로 생성합니다.
    """
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)

    yield client

    client.flushdb()
    client.close()


@pytest.fixture(scope="function")
def test_db() -> Session:
    """
    테스트용 in-memory SQLite 데이터베이스 세션 픽스처

    각 테스트 함수마다 새로운 데이터베이스를 생성하고,
    테스트 종료 후 모든 테이블을 삭제합니다.
    """
    # In-memory SQLite 데이터베이스 엔진 생성 (스레드 간 같은 연결 공유)
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # 모든 테이블 생성
    Base.metadata.create_all(bind=engine)

    # 테스트용 세션 생성
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def inventory(redis_client, settings) -> InventoryService:
    return InventoryService(redis_client, settings)


@pytest.fixture
def product_service(test_db, redis_client, settings, inventory) -> ProductService:
    return ProductService(test_db, redis_client, settings, inventory)


@pytest.fixture
def cart_service(redis_client, settings, inventory, product_service) -> CartService:
    return CartService(redis_client, settings, inventory, product_service)


@pytest.fixture
def ranking_service(redis_client) -> RankingService:
    return RankingService(redis_client)


@pytest.fixture
def metrics_service(redis_client, settings, ranking_service) -> MetricsService:
    return MetricsService(redis_client, settings, ranking_service)


@pytest.fixture
def order_service(
    test_db,
    redis_client,
    settings,
    cart_service,
    metrics_service,
    product_service,
    inventory,
) -> OrderService:
    return OrderService(
        test_db,
        redis_client,
        settings,
        cart_service,
        metrics_service,
        product_service,
        inventory,
    )


@pytest.fixture
def make_product(product_service):
    """상품을 등록하고 Redis 재고를 초기화하는 헬퍼 픽스처"""

    def _make(product_id="P100", stock=10, price=Decimal("100.00"), name=None):
        result = product_service.create_product(
            product_id=product_id,
            name=name or f"Product {product_id}",
            price=price,
            stock=stock,
        )
        assert result.ok
        return result.value

    return _make


@pytest.fixture(scope="function")
def test_client(test_db, redis_client, settings):
    """각 테스트마다 테스트 데이터베이스, Redis, 설정을 제공하는 픽스처"""

    def override_get_db():
        yield test_db

    def override_get_redis_client():
        yield redis_client

    def override_get_settings():
        return settings

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis_client
    app.dependency_overrides[get_settings] = override_get_settings

    # lifespan(init_db)을 실행하지 않도록 컨텍스트 매니저 없이 생성
    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
