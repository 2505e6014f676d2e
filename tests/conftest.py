import os

# Configure an isolated in-memory database before the app modules build their engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

from storefront.domain.catalog import CatalogProduct
from storefront.domain.models import Base
from storefront.domain.seed_data import PRODUCTS
from storefront.infrastructure.cache import get_catalog_cache
from storefront.infrastructure.db import SessionLocal, engine
from storefront.main import app
from storefront.seed import seed_catalog


@pytest.fixture
def catalog():
    """The nine-bike seed catalog as query-engine snapshots."""
    return [CatalogProduct.from_mapping(p) for p in PRODUCTS]


@pytest.fixture
def db():
    Base.metadata.create_all(engine)
    get_catalog_cache().invalidate()
    session = SessionLocal()
    seed_catalog(session)
    yield session
    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def customer(client):
    resp = client.post("/api/customers", json={"email": "rider@example.com", "name": "Road Rider"})
    assert resp.status_code == 200
    return resp.json()["id"]


@pytest.fixture
def auth_headers(client):
    client.post("/api/auth/register", json={"email": "admin@example.com", "password": "s3cret-pass"})
    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "s3cret-pass"})
    return {"Authorization": f"Bearer {resp.json()['token']}"}
