from __future__ import annotations

from typing import Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from catalog.main import create_app
from catalog.products.models import SessionUser, SortOrder
from catalog.products.store import ProductNotFoundError, StoreError


class InMemoryProductStore:
    """Dict-backed stand-in for MongoProductStore."""

    def __init__(self, products: Optional[list[dict]] = None, ok: bool = True):
        self.docs: dict[str, dict] = {}
        self.ok = ok
        self.mutations = 0
        for p in products or []:
            pid = str(ObjectId())
            self.docs[pid] = {**p, "id": pid}

    async def ping(self) -> bool:
        return self.ok

    async def get_products(self, limit: int, page: int, sort: Optional[SortOrder] = None) -> list[dict]:
        docs = list(self.docs.values())
        if sort is not None:
            docs.sort(key=lambda d: d["price"], reverse=sort == SortOrder.desc)
        start = (page - 1) * limit
        return [dict(d) for d in docs[start:start + limit]]

    async def get_product_count(self) -> int:
        return len(self.docs)

    async def get_product_by_id(self, product_id: str) -> Optional[dict]:
        doc = self.docs.get(product_id)
        return dict(doc) if doc else None

    async def add_product(self, data: dict) -> dict:
        self.mutations += 1
        pid = str(ObjectId())
        self.docs[pid] = {**data, "id": pid}
        return dict(self.docs[pid])

    async def update_product(self, product_id: str, data: dict) -> dict:
        if product_id not in self.docs:
            raise ProductNotFoundError(product_id)
        self.mutations += 1
        self.docs[product_id].update(data)
        return dict(self.docs[product_id])

    async def delete_product(self, product_id: str) -> bool:
        self.mutations += 1
        return self.docs.pop(product_id, None) is not None


class BrokenStore(InMemoryProductStore):
    async def get_products(self, limit, page, sort=None):
        raise StoreError("get_products failed: connection refused to mongo:27017")

    async def get_product_by_id(self, product_id):
        raise StoreError("get_product_by_id failed")

    async def add_product(self, data):
        raise StoreError("add_product failed")


class CrashingStore(InMemoryProductStore):
    async def get_products(self, limit, page, sort=None):
        raise RuntimeError("unexpected cursor state")

    async def update_product(self, product_id, data):
        raise RuntimeError("unexpected cursor state")


def header_identity(request) -> Optional[SessionUser]:
    role = request.headers.get("X-Role")
    if role is None:
        return None
    return SessionUser(email=f"{role}@example.com", role=role)


def make_product(**overrides) -> dict:
    p = {
        "title": "Mate",
        "description": "Calabaza",
        "code": "M-1",
        "price": 100.0,
        "status": True,
        "stock": 5,
        "category": "bazar",
        "thumbnails": [],
    }
    p.update(overrides)
    return p


@pytest.fixture
def store() -> InMemoryProductStore:
    return InMemoryProductStore([make_product(title=f"P{i}", code=f"C{i}", price=float(i)) for i in range(25)])


@pytest.fixture
def client(store):
    app = create_app(store_factory=lambda: store, identity_provider=header_identity)
    with TestClient(app) as c:
        yield c


ADMIN = {"X-Role": "admin"}
USER = {"X-Role": "user"}
