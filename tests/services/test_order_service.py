"""Tests for OrderService."""

from decimal import Decimal

from redis import Redis

from app.core.results import ErrorKind
from app.models import Order, OrderStatus
from app.schemas.order import OrderItemData
from app.services.order_service import OrderService, generate_order_id


def _items(product_id="P100", price="100.00", quantity=1):
    return [OrderItemData(product_id=product_id, price=Decimal(price), quantity=quantity)]


class TestCreateOrder:
    def test_create_order(self, order_service: OrderService, redis_client: Redis, inventory):
        """Test: 주문 생성 시 금액 계산, 상태 캐시 기록, 재고 미변경"""
        inventory.set_stock("P100", 10)

        result = order_service.create_order(
            "U1",
            _items(price="50.00", quantity=3),
            discount_amount=Decimal("10.00"),
        )

        assert result.ok
        order = result.value
        assert order.order_id.startswith("ORD")
        assert order.status == OrderStatus.PENDING_PAYMENT
        assert order.total_amount == Decimal("150.00")
        assert order.actual_amount == Decimal("140.00")
        assert order.remark == "cart checkout"
        assert len(order.items) == 1
        assert redis_client.get(f"order:status:{order.order_id}") == "1"
        assert inventory.get_stock("P100") == 10

    def test_create_order_without_items(self, order_service: OrderService):
        assert order_service.create_order("U1", []).error == ErrorKind.VALIDATION

    def test_discount_exceeding_total(self, order_service: OrderService):
        result = order_service.create_order(
            "U1", _items(price="10.00"), discount_amount=Decimal("20.00")
        )

        assert result.error == ErrorKind.VALIDATION

    def test_duplicate_order_id(self, order_service: OrderService):
        """Test: 이미 있는 주문 ID로 생성하면 저장소 오류가 아닌 VALIDATION"""
        assert order_service.create_order("U1", _items(), order_id="O1").ok

        result = order_service.create_order("U2", _items(price="5.00"), order_id="O1")

        assert result.error == ErrorKind.VALIDATION
        assert order_service.get_order("O1").user_id == "U1"

    def test_generate_order_id_format(self):
        order_id = generate_order_id()

        assert order_id.startswith("ORD")
        assert len(order_id) == 3 + 14 + 4
        assert order_id[17:] == order_id[17:].upper()


class TestOrderStateMachine:
    def test_full_lifecycle(self, order_service: OrderService, redis_client: Redis):
        order_id = order_service.create_order("U1", _items()).value.order_id

        assert order_service.pay_order(order_id, "alipay").ok
        assert order_service.get_order_status(order_id) == OrderStatus.PENDING_DELIVERY

        delivered = order_service.deliver_order(order_id, "SF", "SF123")
        assert delivered.ok
        assert delivered.value.express_no == "SF123"

        completed = order_service.complete_order(order_id)
        assert completed.ok
        assert completed.value.complete_time is not None
        assert redis_client.get(f"order:status:{order_id}") == str(int(OrderStatus.COMPLETED))

    def test_deliver_requires_payment(self, order_service: OrderService):
        order_id = order_service.create_order("U1", _items()).value.order_id

        result = order_service.deliver_order(order_id, "SF", "SF123")

        assert result.error == ErrorKind.INVALID_STATE_TRANSITION
        assert order_service.get_order(order_id).status == OrderStatus.PENDING_PAYMENT

    def test_pay_twice_rejected(self, order_service: OrderService):
        order_id = order_service.create_order("U1", _items()).value.order_id
        order_service.pay_order(order_id, "alipay")

        assert order_service.pay_order(order_id, "alipay").error == (
            ErrorKind.INVALID_STATE_TRANSITION
        )

    def test_cancel_only_pending_payment(self, order_service: OrderService):
        """Test: 결제 이후 상태에서는 취소 불가, 주문 상태 변경 없음"""
        paid_id = order_service.create_order("U1", _items()).value.order_id
        order_service.pay_order(paid_id, "alipay")

        result = order_service.cancel_order(paid_id)

        assert result.error == ErrorKind.INVALID_STATE_TRANSITION
        assert order_service.get_order(paid_id).status == OrderStatus.PENDING_DELIVERY

        pending_id = order_service.create_order("U1", _items()).value.order_id
        assert order_service.cancel_order(pending_id).ok
        assert order_service.get_order_status(pending_id) == OrderStatus.CANCELLED

    def test_cancel_does_not_return_stock(
        self, order_service: OrderService, cart_service, inventory, make_product
    ):
        make_product("P100", stock=10)
        cart_service.add_to_cart("U1", "P100", 2)
        order_id = order_service.create_order("U1", cart_service.checkout("U1")).value.order_id

        order_service.cancel_order(order_id)

        assert inventory.get_stock("P100") == 8

    def test_missing_order(self, order_service: OrderService):
        assert order_service.pay_order("NOPE", "alipay").error == ErrorKind.NOT_FOUND
        assert order_service.cancel_order("NOPE").error == ErrorKind.NOT_FOUND
        assert order_service.update_order_status("NOPE", OrderStatus.SHIPPED).error == (
            ErrorKind.NOT_FOUND
        )
        assert order_service.get_order_status("NOPE") is None


class TestPayOrder:
    def test_pay_consumes_cart_lines_without_restock(
        self, order_service: OrderService, cart_service, inventory, make_product
    ):
        """Test: 결제 시 결제된 상품의 장바구니 항목만 소진되고 재고는 반환되지 않음"""
        make_product("P100", stock=10)
        make_product("P200", stock=10)
        cart_service.add_to_cart("U1", "P100", 2)
        cart_service.add_to_cart("U1", "P200", 1)
        cart_service.update_selected("U1", "P200", False)

        order_id = order_service.create_order("U1", cart_service.checkout("U1")).value.order_id
        order_service.pay_order(order_id, "wechat")

        assert cart_service.exists_in_cart("U1", "P100") is False
        assert cart_service.exists_in_cart("U1", "P200") is True
        assert inventory.get_stock("P100") == 8

    def test_pay_after_adding_more_keeps_extra_reservation(
        self, order_service: OrderService, cart_service, inventory, make_product
    ):
        """Test: 주문 생성 후 추가로 담은 수량은 결제 후에도 장바구니에 선점 상태로 남음"""
        make_product("P100", stock=10)
        cart_service.add_to_cart("U1", "P100", 3)
        order = order_service.create_order("U1", cart_service.checkout("U1")).value
        cart_service.add_to_cart("U1", "P100", 2)

        assert order_service.pay_order(order.order_id, "alipay").ok

        reserved = cart_service.get_product_quantity("U1", "P100")
        ordered = sum(item.quantity for item in order.items)
        assert reserved == 2
        assert inventory.get_stock("P100") + reserved + ordered == 10

    def test_pay_records_dashboard_once(
        self, order_service: OrderService, metrics_service
    ):
        """Test: 결제는 실결제 금액으로 집계되고 관리자 완료 처리 시 중복 집계되지 않음"""
        order_id = order_service.create_order(
            "U1", _items(price="120.00"), discount_amount=Decimal("20.00")
        ).value.order_id

        order_service.pay_order(order_id, "alipay")
        dashboard = metrics_service.get_dashboard()
        assert dashboard.order_count == 1
        assert dashboard.total_amount == 100.0

        assert order_service.update_order_status(order_id, OrderStatus.COMPLETED).ok
        dashboard = metrics_service.get_dashboard()
        assert dashboard.order_count == 1
        assert dashboard.total_amount == 100.0


class TestCompletion:
    def test_complete_increments_sale_count_once(
        self, order_service: OrderService, product_service, make_product, ranking_service, test_db
    ):
        make_product("P100", stock=10)
        order_id = order_service.create_order(
            "U1", _items(price="20.00", quantity=3)
        ).value.order_id
        order_service.pay_order(order_id, "alipay")
        order_service.deliver_order(order_id, "SF", "1")
        order_service.complete_order(order_id)

        # 관리자 재완료 처리는 완료 마커로 무시됨
        order_service.update_order_status(order_id, OrderStatus.COMPLETED)

        test_db.expire_all()
        assert product_service.get_product("P100").sale_count == 3
        assert ranking_service.get_weekly_sales_ranking()[0].score == 60.0

    def test_admin_complete_after_pay_records_completion_once(
        self, order_service: OrderService, product_service, make_product, test_db
    ):
        """Test: 결제 집계 후 관리자 완료 처리도 완료 집계는 한 번 반영됨"""
        make_product("P100", stock=10)
        order_id = order_service.create_order(
            "U1", _items(price="20.00", quantity=2)
        ).value.order_id
        order_service.pay_order(order_id, "alipay")

        order_service.update_order_status(order_id, OrderStatus.COMPLETED)
        order_service.update_order_status(order_id, OrderStatus.COMPLETED)

        test_db.expire_all()
        assert product_service.get_product("P100").sale_count == 2

    def test_admin_complete_unpaid_order_counts_total(
        self, order_service: OrderService, metrics_service
    ):
        """Test: 결제 없이 관리자 완료 처리 시 총액으로 한 번 집계"""
        order_id = order_service.create_order(
            "U1", _items(price="80.00"), discount_amount=Decimal("30.00")
        ).value.order_id

        order_service.update_order_status(order_id, OrderStatus.COMPLETED)

        dashboard = metrics_service.get_dashboard()
        assert dashboard.order_count == 1
        assert dashboard.total_amount == 80.0


class TestOrderQueries:
    def test_get_order_status_falls_back_to_store(
        self, order_service: OrderService, redis_client: Redis
    ):
        order_id = order_service.create_order("U1", _items()).value.order_id
        redis_client.delete(f"order:status:{order_id}")

        assert order_service.get_order_status(order_id) == OrderStatus.PENDING_PAYMENT
        assert redis_client.get(f"order:status:{order_id}") is not None

    def test_get_user_orders_and_stats(self, order_service: OrderService):
        first = order_service.create_order("U1", _items()).value.order_id
        order_service.create_order("U1", _items())
        order_service.create_order("U2", _items())
        order_service.pay_order(first, "alipay")

        assert len(order_service.get_user_orders("U1")) == 2

        stats = order_service.get_order_stats()
        assert stats.pending_payment_count == 2
        assert stats.pending_delivery_count == 1
        assert stats.shipped_count == 0

    def test_update_logistics(self, order_service: OrderService):
        order_id = order_service.create_order("U1", _items()).value.order_id

        result = order_service.update_logistics(order_id, "DHL", "D-1")

        assert result.ok
        assert result.value.express_company == "DHL"
        assert order_service.update_logistics("NOPE", "DHL", "D-1").error == (
            ErrorKind.NOT_FOUND
        )


class TestDeleteOrder:
    def test_delete_paid_order_returns_stock(
        self, order_service: OrderService, inventory, redis_client: Redis, test_db
    ):
        inventory.set_stock("P100", 5)
        order_id = order_service.create_order("U1", _items(quantity=2)).value.order_id
        order_service.pay_order(order_id, "alipay")

        assert order_service.delete_order(order_id).ok

        assert test_db.get(Order, order_id) is None
        assert inventory.get_stock("P100") == 7
        assert redis_client.exists(
            f"order:status:{order_id}", f"order:stats:{order_id}"
        ) == 0

    def test_delete_pending_order_keeps_stock(self, order_service: OrderService, inventory):
        inventory.set_stock("P100", 5)
        order_id = order_service.create_order("U1", _items(quantity=2)).value.order_id

        order_service.delete_order(order_id)

        assert inventory.get_stock("P100") == 5

    def test_delete_missing(self, order_service: OrderService):
        assert order_service.delete_order("NOPE").error == ErrorKind.NOT_FOUND
