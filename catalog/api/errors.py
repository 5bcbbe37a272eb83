import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.auth import ForbiddenError
from catalog.products.models import ErrorResponse
from catalog.products.store import ProductNotFoundError, StoreError
from catalog.services.product_service import InvalidParameterError

logger = logging.getLogger(__name__)

NOT_FOUND = "Producto no encontrado"
FORBIDDEN = "Acceso no autorizado"
INVALID_PARAMS = "Parámetros inválidos"
INTERNAL_ERROR = "Error interno del servidor"


def error_response(status_code: int, error: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(body, status_code=status_code)


async def invalid_parameter_handler(request: Request, exc: InvalidParameterError):
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_PARAMS, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_PARAMS, details)


async def forbidden_handler(request: Request, exc: ForbiddenError):
    return error_response(status.HTTP_403_FORBIDDEN, FORBIDDEN)


async def not_found_handler(request: Request, exc: ProductNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)


async def store_error_handler(request: Request, exc: StoreError):
    logger.error(
        "Store error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s: %r",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidParameterError, invalid_parameter_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    # handlers are looked up along the MRO, so this one wins over StoreError
    app.add_exception_handler(ProductNotFoundError, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
