import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from catalog.api.errors import register_exception_handlers
from catalog.api.router import api_router
from catalog.api.routes import health
from catalog.auth import IdentityProvider, session_identity
from catalog.config import get_settings
from catalog.database.mongo import create_client, products_collection
from catalog.products.store import MongoProductStore, ProductStore
from catalog.services.product_service import ProductService


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    store_factory: Optional[Callable[[], ProductStore]] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    settings = get_settings()
    _configure_logging(settings.LOG_LEVEL)
    prefix = settings.API_PREFIX.rstrip("/")

    def build_service(store: ProductStore) -> ProductService:
        return ProductService(
            store,
            link_base=f"{prefix}/products",
            default_limit=settings.DEFAULT_PAGE_LIMIT,
            max_limit=settings.MAX_PAGE_LIMIT,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.identity_provider = identity_provider or session_identity

        if store_factory is not None:
            app.state.product_service = build_service(store_factory())
            yield
            return

        client = create_client(settings)
        store = MongoProductStore(products_collection(client, settings))
        app.state.product_service = build_service(store)
        logging.getLogger(__name__).info(
            "Using Mongo collection %s.%s", settings.MONGO_DB, settings.PRODUCTS_COLLECTION
        )

        yield

        client.close()

    app = FastAPI(title="Product Catalog", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET.get_secret_value(),
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(api_router, prefix=prefix)

    @app.get("/")
    def root():
        return {"status": "running", "message": "Product Catalog"}

    return app


app = create_app()
