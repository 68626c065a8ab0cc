# conftest.py
import asyncio
import os
import random
import string

os.environ.setdefault("APP_SECRET", "test-secret")
os.environ.setdefault("DB_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import salon.models  # noqa: F401
from salon.db import Base, make_engine
from salon.deps import get_store
from salon.store.base import DocumentStore
from salon.store.sql import SqlDocumentStore
from salon.util.security import create_token


class FlakyStore(DocumentStore):
    """Wraps a real store and lets a test slow down or break history fetches."""

    def __init__(self, inner: DocumentStore):
        super().__init__()
        self.inner = inner
        self.fetches = 0
        self.delay = 0.0
        self.fail_next = False

    async def get(self, collection, doc_id):
        return await self.inner.get(collection, doc_id)

    async def query(self, collection, order_key="timestamp", limit=None, descending=True):
        return await self.inner.query(collection, order_key, limit, descending)

    async def fetch_page(self, collection, order_key, cursor, limit):
        self.fetches += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_next:
            self.fail_next = False
            raise ConnectionError("network unreachable")
        return await self.inner.fetch_page(collection, order_key, cursor, limit)

    async def _create(self, collection, fields):
        return await self.inner.create(collection, fields)

    async def _update(self, collection, doc_id, fields):
        await self.inner.update(collection, doc_id, fields)

    async def _delete(self, collection, doc_id):
        await self.inner.delete(collection, doc_id)


@pytest.fixture
def store():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield SqlDocumentStore(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False), "test")
    engine.dispose()


@pytest.fixture
def flaky(store):
    return FlakyStore(store)


@pytest.fixture
def client(store):
    from salon.main import app
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_token('u-staff', role='staff')}"}


@pytest.fixture
def owner_headers():
    return {"Authorization": f"Bearer {create_token('u-owner', role='owner')}"}


@pytest.fixture
def rng_suffix():
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
