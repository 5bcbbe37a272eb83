from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from catalog.api.errors import NOT_FOUND
from catalog.auth import require_role
from catalog.deps import get_product_service
from catalog.products.models import MessageResponse, ProductCreate, ProductPage, ProductUpdate, SessionUser
from catalog.services.product_service import InvalidParameterError, ProductService, validate_payload

router = APIRouter(prefix="/products", tags=["Products"])

admin_only = require_role("admin")


def _body_schema(model) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


async def read_json(request: Request):
    """Parse the JSON body inside the handler, after the role check has run."""
    try:
        return await request.json()
    except ValueError as e:
        raise InvalidParameterError(
            "invalid product payload",
            [{"field": "body", "message": "JSON decode error"}],
        ) from e


@router.get("", response_model=ProductPage)
async def list_products(
    limit: Optional[str] = None,
    page: Optional[str] = None,
    sort: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
):
    """
    Paginated product list. `sort` orders by price (asc/desc).
    """
    return await service.list_products(limit=limit, page=page, sort=sort)


@router.get("/{pid}")
async def get_product(
    pid: str,
    service: ProductService = Depends(get_product_service),
):
    product = await service.get_product(pid)
    if product is None:
        return {"error": NOT_FOUND}
    return product


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    openapi_extra=_body_schema(ProductCreate),
)
async def create_product(
    request: Request,
    user: SessionUser = Depends(admin_only),
    service: ProductService = Depends(get_product_service),
):
    product = validate_payload(ProductCreate, await read_json(request))
    created = await service.create_product(product)
    return MessageResponse(message="Producto agregado exitosamente", product=created)


@router.put("/{pid}", response_model=MessageResponse, openapi_extra=_body_schema(ProductUpdate))
async def update_product(
    pid: str,
    request: Request,
    user: SessionUser = Depends(admin_only),
    service: ProductService = Depends(get_product_service),
):
    patch = validate_payload(ProductUpdate, await read_json(request))
    updated = await service.update_product(pid, patch)
    return MessageResponse(message="Producto actualizado exitosamente", product=updated)


@router.delete("/{pid}", response_model=MessageResponse, response_model_exclude_none=True)
async def delete_product(
    pid: str,
    user: SessionUser = Depends(admin_only),
    service: ProductService = Depends(get_product_service),
):
    # deleting a missing id is not an error
    await service.delete_product(pid)
    return MessageResponse(message="Producto eliminado exitosamente")
