"""
장바구니 API 엔드포인트

장바구니에 담는 순간 재고가 선점되며, 수량 변경/삭제 시 재고가 함께 조정됩니다.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_cart_service, get_order_service
from app.api.errors import raise_for_result
from app.api.routes.orders import to_order_response
from app.schemas.cart import (
    CartAddRequest,
    CartCountResponse,
    CartItemData,
    CartLine,
    CartQuantityUpdateRequest,
    CartSelectRequest,
)
from app.schemas.order import OrderResponse
from app.services.cart_service import CartService
from app.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=CartItemData, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    request: CartAddRequest,
    cart: CartService = Depends(get_cart_service),
):
    """
    상품을 장바구니에 담고 재고를 선점합니다.

    Example:
        Request:
        ```json
        {
            "user_id": "U1",
            "product_id": "P100",
            "quantity": 2
        }
        ```

        Response (201): 저장된 장바구니 항목

        Response (400): 수량 오류 또는 판매 불가 상품

        Response (409): 재고 부족
    """
    result = cart.add_to_cart(
        request.user_id, request.product_id, request.quantity, request.selected
    )
    raise_for_result(result)
    return result.value


@router.get("/{user_id}", response_model=list[CartLine])
def get_cart(user_id: str, cart: CartService = Depends(get_cart_service)):
    """장바구니를 조회합니다. 판매 불가 상품은 제거되고 수량은 재고에 맞춰집니다."""
    return cart.get_cart(user_id)


@router.get("/{user_id}/count", response_model=CartCountResponse)
def get_cart_item_count(user_id: str, cart: CartService = Depends(get_cart_service)):
    return CartCountResponse(user_id=user_id, count=cart.get_cart_item_count(user_id))


@router.put("/{user_id}/items/{product_id}")
def update_quantity(
    user_id: str,
    product_id: str,
    request: CartQuantityUpdateRequest,
    cart: CartService = Depends(get_cart_service),
):
    """
    장바구니 항목 수량을 변경합니다. 0 이하이면 항목을 삭제합니다.

    Response (404): 장바구니에 없는 상품

    Response (409): 재고 부족
    """
    result = cart.update_quantity(user_id, product_id, request.quantity)
    raise_for_result(result)
    return {"user_id": user_id, "product_id": product_id, "item": result.value}


@router.patch("/{user_id}/items/{product_id}/selected", response_model=CartItemData)
def update_selected(
    user_id: str,
    product_id: str,
    request: CartSelectRequest,
    cart: CartService = Depends(get_cart_service),
):
    result = cart.update_selected(user_id, product_id, request.selected)
    raise_for_result(result)
    return result.value


@router.delete("/{user_id}/items/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_cart(
    user_id: str,
    product_id: str,
    cart: CartService = Depends(get_cart_service),
):
    """장바구니 항목을 삭제하고 선점한 재고를 반환합니다."""
    raise_for_result(cart.remove_from_cart(user_id, product_id))


@router.delete("/{user_id}")
def clear_cart(user_id: str, cart: CartService = Depends(get_cart_service)):
    return {"user_id": user_id, "cleared": cart.clear_cart(user_id)}


@router.post(
    "/{user_id}/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    user_id: str,
    cart: CartService = Depends(get_cart_service),
    orders: OrderService = Depends(get_order_service),
):
    """
    선택된 장바구니 항목으로 결제 대기 주문을 생성합니다.

    재고는 이미 장바구니에서 선점되어 있으므로 다시 차감하지 않습니다.

    Raises:
        HTTPException: 선택된 항목이 없으면 400
    """
    items = cart.checkout(user_id)
    if not items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No selected items in cart",
        )

    result = orders.create_order(user_id, items)
    raise_for_result(result)
    return to_order_response(result.value)
