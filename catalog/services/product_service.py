import logging
import math
from typing import Any, List, Optional, Type, TypeVar, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ValidationError

from catalog.products.models import PageRequest, ProductCreate, ProductPage, ProductUpdate
from catalog.products.store import ProductStore

logger = logging.getLogger(__name__)

RawParam = Union[str, int, None]
M = TypeVar("M", bound=BaseModel)


class InvalidParameterError(ValueError):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


def error_details(e: ValidationError, root: str) -> List[dict]:
    """Flatten pydantic errors; model-level errors are reported under `root`."""
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or root, "message": err["msg"]}
        for err in e.errors(include_url=False)
    ]


def validate_payload(model: Type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidParameterError("invalid product payload", error_details(e, "body")) from e


def parse_page_request(
    limit: RawParam,
    page: RawParam,
    sort: Optional[str],
    default_limit: int = 10,
    max_limit: int = 100,
) -> PageRequest:
    """
    Build a PageRequest from raw query values.
    Missing values take the defaults; anything else must be a positive integer.
    """
    raw = {
        "limit": default_limit if limit in (None, "") else limit,
        "page": 1 if page in (None, "") else page,
        "sort": sort or None,
    }
    try:
        req = PageRequest.model_validate(raw)
    except ValidationError as e:
        raise InvalidParameterError("invalid pagination parameters", error_details(e, "page")) from e

    if req.limit > max_limit:
        raise InvalidParameterError(
            "invalid pagination parameters",
            [{"field": "limit", "message": f"Input should be less than or equal to {max_limit}"}],
        )
    return req


def page_link(link_base: str, req: PageRequest, page: int) -> str:
    params: dict[str, Any] = {"limit": req.limit, "page": page}
    if req.sort is not None:
        params["sort"] = req.sort.value
    return f"{link_base}?{urlencode(params)}"


def build_page(items: List[dict], total_count: int, req: PageRequest, link_base: str) -> ProductPage:
    total_pages = math.ceil(total_count / req.limit)
    has_prev = req.page > 1
    has_next = req.page < total_pages

    return ProductPage(
        payload=items,
        totalDocs=total_count,
        limit=req.limit,
        totalPages=total_pages,
        page=req.page,
        hasPrevPage=has_prev,
        hasNextPage=has_next,
        prevPage=req.page - 1 if has_prev else None,
        nextPage=req.page + 1 if has_next else None,
        prevLink=page_link(link_base, req, req.page - 1) if has_prev else None,
        nextLink=page_link(link_base, req, req.page + 1) if has_next else None,
    )


class ProductService:
    """
    Mediates between the routes and the product store.
    Holds no state of its own besides the store and the link base used for
    pagination links.
    """

    def __init__(self, store: ProductStore, link_base: str = "/api/products", default_limit: int = 10, max_limit: int = 100):
        self.store = store
        self.link_base = link_base
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def list_products(self, limit: RawParam = None, page: RawParam = None, sort: Optional[str] = None) -> ProductPage:
        req = parse_page_request(limit, page, sort, self.default_limit, self.max_limit)
        items = await self.store.get_products(limit=req.limit, page=req.page, sort=req.sort)
        total_count = await self.store.get_product_count()
        return build_page(items, total_count, req, self.link_base)

    async def get_product(self, product_id: str) -> Optional[dict]:
        return await self.store.get_product_by_id(product_id)

    async def create_product(self, product: ProductCreate) -> dict:
        created = await self.store.add_product(product.model_dump())
        logger.info("Created product %s (%s)", created.get("id"), created.get("title"))
        return created

    async def update_product(self, product_id: str, patch: ProductUpdate) -> dict:
        updated = await self.store.update_product(product_id, patch.changes())
        logger.info("Updated product %s", product_id)
        return updated

    async def delete_product(self, product_id: str) -> bool:
        deleted = await self.store.delete_product(product_id)
        if deleted:
            logger.info("Deleted product %s", product_id)
        else:
            logger.info("Delete requested for missing product %s", product_id)
        return deleted
