"""
재고 원장 API 엔드포인트

일반 재고와 타임세일 재고의 조회, 설정, 증감, 락 차감 기능을 제공합니다.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_inventory_service
from app.api.errors import raise_for_result
from app.schemas.stock import (
    DeductResponse,
    FlashStockResponse,
    QuantityRequest,
    StockInfoResponse,
    StockResponse,
    StockSetRequest,
)
from app.services.inventory_service import InventoryService

router = APIRouter()


def _insufficient(product_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Insufficient stock for product '{product_id}'",
    )


@router.get("/{product_id}", response_model=StockResponse)
def get_stock(
    product_id: str,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """
    Redis 실시간 재고를 조회합니다. 재고 키가 없으면 0입니다.

    Example:
        Response (200):
        ```json
        {
            "product_id": "P100",
            "stock": 8
        }
        ```
    """
    return StockResponse(product_id=product_id, stock=inventory.get_stock(product_id))


@router.get("/{product_id}/info", response_model=StockInfoResponse)
def get_stock_info(
    product_id: str,
    inventory: InventoryService = Depends(get_inventory_service),
):
    return inventory.get_stock_info(product_id)


@router.put("/{product_id}", response_model=StockResponse)
def set_stock(
    product_id: str,
    request: StockSetRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """재고를 지정한 수량으로 덮어씁니다."""
    inventory.set_stock(product_id, request.quantity)
    return StockResponse(product_id=product_id, stock=request.quantity)


@router.post("/{product_id}/increase", response_model=StockResponse)
def increase_stock(
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    new_stock = inventory.increase_stock(product_id, request.quantity)
    return StockResponse(product_id=product_id, stock=new_stock)


@router.post("/{product_id}/deduct", response_model=DeductResponse)
def deduct_stock(
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """
    재고를 차감합니다. 재고가 부족하면 409를 반환하며 재고는 변경되지 않습니다.
    """
    remaining = inventory.decrease_stock(product_id, request.quantity)
    if remaining is None:
        raise _insufficient(product_id)
    return DeductResponse(product_id=product_id, success=True, remaining_stock=remaining)


@router.post("/{product_id}/lock", response_model=DeductResponse)
def lock_stock(
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """
    상품 락을 획득한 상태에서 재고를 차감합니다.

    Response (409): 재고 부족 또는 락 획득 실패
    """
    result = inventory.lock_stock(product_id, request.quantity)
    raise_for_result(result)
    return DeductResponse(
        product_id=product_id, success=True, remaining_stock=result.value
    )


@router.get("/flash/{sale_id}/{product_id}", response_model=FlashStockResponse)
def get_flash_stock(
    sale_id: str,
    product_id: str,
    inventory: InventoryService = Depends(get_inventory_service),
):
    return FlashStockResponse(
        sale_id=sale_id,
        product_id=product_id,
        stock=inventory.get_flash_stock(sale_id, product_id),
    )


@router.put("/flash/{sale_id}/{product_id}", response_model=FlashStockResponse)
def set_flash_stock(
    sale_id: str,
    product_id: str,
    request: StockSetRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    inventory.set_flash_stock(sale_id, product_id, request.quantity)
    return FlashStockResponse(
        sale_id=sale_id, product_id=product_id, stock=request.quantity
    )


@router.post("/flash/{sale_id}/{product_id}/deduct", response_model=DeductResponse)
def deduct_flash_stock(
    sale_id: str,
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """타임세일 재고를 락 없이 원자적으로 차감합니다."""
    remaining = inventory.decrease_flash_stock(sale_id, product_id, request.quantity)
    if remaining is None:
        raise _insufficient(product_id)
    return DeductResponse(product_id=product_id, success=True, remaining_stock=remaining)


@router.post("/flash/{sale_id}/{product_id}/increase", response_model=FlashStockResponse)
def increase_flash_stock(
    sale_id: str,
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    new_stock = inventory.increase_flash_stock(sale_id, product_id, request.quantity)
    return FlashStockResponse(sale_id=sale_id, product_id=product_id, stock=new_stock)


@router.post("/flash/{sale_id}/{product_id}/lock", response_model=DeductResponse)
def lock_flash_stock(
    sale_id: str,
    product_id: str,
    request: QuantityRequest,
    inventory: InventoryService = Depends(get_inventory_service),
):
    """
    타임세일 상품 락을 획득한 상태에서 재고를 차감합니다.

    Response (409): 재고 부족 또는 락 획득 실패
    """
    result = inventory.lock_flash_stock(sale_id, product_id, request.quantity)
    raise_for_result(result)
    return DeductResponse(
        product_id=product_id, success=True, remaining_stock=result.value
    )
