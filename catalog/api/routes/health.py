from fastapi import APIRouter, Depends, Response, status

from catalog.deps import get_product_service
from catalog.services.product_service import ProductService

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    """
    200 when the product store answers a ping, 503 otherwise.
    """
    ok = await service.store.ping()
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "ok" if ok else "degraded", "db_connected": ok}
