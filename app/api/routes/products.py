"""
상품 관리 API 엔드포인트

상품 등록, 조회, 판매 상태 변경 기능을 제공합니다.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_inventory_service, get_product_service
from app.api.errors import raise_for_result
from app.schemas.product import (
    ProductCreateRequest,
    ProductResponse,
    ProductStatusRequest,
)
from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService

router = APIRouter()


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreateRequest,
    products: ProductService = Depends(get_product_service),
):
    """
    새 상품을 등록하고 Redis 재고를 초기화합니다.

    Args:
        product_data: 상품 생성 정보 (id, name, price, stock)

    Returns:
        ProductResponse: 생성된 상품 정보

    Example:
        Request:
        ```json
        {
            "id": "P100",
            "name": "MacBook Pro",
            "price": "2500000.00",
            "stock": 10
        }
        ```

        Response (201): 생성된 상품 (redis_stock = 10)

        Response (400): 이미 존재하는 상품 ID
    """
    result = products.create_product(
        product_id=product_data.id,
        name=product_data.name,
        price=product_data.price,
        stock=product_data.stock,
        description=product_data.description,
        image=product_data.image,
    )
    raise_for_result(result)

    response = ProductResponse.model_validate(result.value)
    response.redis_stock = product_data.stock
    return response


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    products: ProductService = Depends(get_product_service),
    inventory: InventoryService = Depends(get_inventory_service),
):
    """
    상품 정보와 Redis 실시간 재고를 조회합니다.

    Raises:
        HTTPException: 상품이 없으면 404
    """
    product = products.get_product(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product '{product_id}' not found",
        )

    response = ProductResponse.model_validate(product)
    response.redis_stock = inventory.get_stock(product_id)
    return response


@router.patch("/{product_id}/status", response_model=ProductResponse)
def update_product_status(
    product_id: str,
    request: ProductStatusRequest,
    products: ProductService = Depends(get_product_service),
):
    """상품 판매 상태를 변경합니다 (0: 판매 중지, 1: 판매 중)."""
    result = products.update_status(product_id, request.status)
    raise_for_result(result)
    return result.value
