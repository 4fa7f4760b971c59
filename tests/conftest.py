"""Shared fixtures: a fresh reference store per test and clients wired to it."""

from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from mock_store.database import cart_db, order_db, product_db, user_db
from mock_store.main import app
from mock_store.models import Product as StoreProduct
from storefront import Storefront
from storefront.core.config import Settings

STORE_URL = "http://store.test"

TEST_CATALOG = [
    StoreProduct(
        id=1,
        name="Blue Mouse",
        description="Wireless optical mouse",
        price=Decimal("10.00"),
        category="Peripherals",
        stock=10,
    ),
    StoreProduct(
        id=2,
        name="Red Mouse",
        description="Wired gaming mouse",
        price=Decimal("5.00"),
        category="Peripherals",
        stock=10,
    ),
    StoreProduct(
        id=3,
        name="Webcam",
        description="1080p camera with red privacy shutter",
        price=Decimal("49.99"),
        category="Video",
        stock=2,
    ),
]


@pytest.fixture(autouse=True)
def reset_store():
    product_db.reset(TEST_CATALOG)
    cart_db.reset()
    order_db.reset()
    user_db.reset()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(store_base_url=STORE_URL, session_file=str(tmp_path / "session.json"))


@pytest.fixture
async def shop(settings):
    storefront = Storefront(settings=settings, transport=httpx.ASGITransport(app=app))
    yield storefront
    await storefront.close()


@pytest.fixture
async def shopper(shop):
    """A storefront with a freshly registered shopper signed in"""
    await shop.register("ada@example.com", "secret1", "Ada", "Lovelace")
    return shop


@pytest.fixture
def api():
    """Direct access to the reference store's HTTP API"""
    return TestClient(app)
