"""
주문 API 엔드포인트

주문 생성, 조회 및 상태 전이(결제, 배송, 완료, 취소) 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_order_service
from app.api.errors import raise_for_result
from app.models import Order
from app.schemas.order import (
    DeliverRequest,
    OrderCreateRequest,
    OrderResponse,
    OrderStatsResponse,
    OrderStatusResponse,
    PayRequest,
    StatusUpdateRequest,
)
from app.services.order_service import OrderService

router = APIRouter()


def to_order_response(order: Order, cached_status: Optional[int] = None) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    if cached_status is not None:
        response.status = cached_status
    return response


def _not_found(order_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Order '{order_id}' not found",
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request: OrderCreateRequest,
    orders: OrderService = Depends(get_order_service),
):
    """
    결제 대기 주문을 생성합니다 (재고는 차감하지 않음).

    Example:
        Request:
        ```json
        {
            "user_id": "U1",
            "items": [{"product_id": "P100", "price": "100.00", "quantity": 2}],
            "discount_amount": "10.00"
        }
        ```

        Response (201): total_amount = 200.00, actual_amount = 190.00, status = 1
    """
    result = orders.create_order(
        user_id=request.user_id,
        items=request.items,
        discount_amount=request.discount_amount,
        order_id=request.order_id,
        receiver=request.receiver,
        phone=request.phone,
        address=request.address,
        remark=request.remark,
    )
    raise_for_result(result)
    return to_order_response(result.value)


@router.get("/stats", response_model=OrderStatsResponse)
def get_order_stats(orders: OrderService = Depends(get_order_service)):
    """상태별 주문 수를 조회합니다."""
    return orders.get_order_stats()


@router.get("/user/{user_id}", response_model=list[OrderResponse])
def get_user_orders(
    user_id: str,
    limit: int = Query(20, ge=1, le=100),
    orders: OrderService = Depends(get_order_service),
):
    return [to_order_response(order) for order in orders.get_user_orders(user_id, limit)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    """주문 상세를 조회합니다. 상태는 Redis 상태 캐시 값을 우선합니다."""
    order = orders.get_order(order_id)
    if order is None:
        raise _not_found(order_id)
    return to_order_response(order, orders.get_order_status(order_id))


@router.get("/{order_id}/status", response_model=OrderStatusResponse)
def get_order_status(order_id: str, orders: OrderService = Depends(get_order_service)):
    order_status = orders.get_order_status(order_id)
    if order_status is None:
        raise _not_found(order_id)
    return OrderStatusResponse(order_id=order_id, status=order_status)


@router.post("/{order_id}/pay", response_model=OrderResponse)
def pay_order(
    order_id: str,
    request: PayRequest,
    orders: OrderService = Depends(get_order_service),
):
    """
    주문을 결제 처리합니다.

    결제 완료 시 대시보드/랭킹에 한 번만 집계되고, 결제된 상품의 장바구니
    항목이 소진됩니다.

    Response (409): 결제 대기 상태가 아닌 주문
    """
    result = orders.pay_order(order_id, request.pay_method)
    raise_for_result(result)
    return to_order_response(result.value)


@router.post("/{order_id}/deliver", response_model=OrderResponse)
def deliver_order(
    order_id: str,
    request: DeliverRequest,
    orders: OrderService = Depends(get_order_service),
):
    result = orders.deliver_order(order_id, request.express_company, request.express_no)
    raise_for_result(result)
    return to_order_response(result.value)


@router.post("/{order_id}/complete", response_model=OrderResponse)
def complete_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    result = orders.complete_order(order_id)
    raise_for_result(result)
    return to_order_response(result.value)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    """결제 대기 주문을 취소합니다. 그 외 상태는 409."""
    result = orders.cancel_order(order_id)
    raise_for_result(result)
    return to_order_response(result.value)


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request: StatusUpdateRequest,
    orders: OrderService = Depends(get_order_service),
):
    """관리자용 상태 변경 (상태 머신 검사 없음)"""
    result = orders.update_order_status(order_id, request.status)
    raise_for_result(result)
    return to_order_response(result.value)


@router.put("/{order_id}/logistics", response_model=OrderResponse)
def update_logistics(
    order_id: str,
    request: DeliverRequest,
    orders: OrderService = Depends(get_order_service),
):
    result = orders.update_logistics(
        order_id, request.express_company, request.express_no
    )
    raise_for_result(result)
    return to_order_response(result.value)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    raise_for_result(orders.delete_order(order_id))
