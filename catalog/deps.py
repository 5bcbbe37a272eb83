from fastapi import Request

from catalog.services.product_service import ProductService


def get_product_service(request: Request) -> ProductService:
    """
    Dependency: service stored in app.state by the app factory.
    """
    return request.app.state.product_service
