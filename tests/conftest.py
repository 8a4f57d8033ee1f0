import pytest

from services.shopify_config import ShopifyConfig


@pytest.fixture
def config():
    return ShopifyConfig(shop_name="test-shop", access_token="shpat_abcdef123456")


@pytest.fixture
def shopify_env(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP_NAME", "test-shop")
    monkeypatch.setenv("SHOPIFY_PASSWORD", "shpat_abcdef123456")
    monkeypatch.delenv("SHOPIFY_API_VERSION", raising=False)
    monkeypatch.delenv("SHOPIFY_REST_API_VERSION", raising=False)


@pytest.fixture
def no_dotenv(monkeypatch):
    monkeypatch.setattr("scripts.fulfill_order.load_dotenv", lambda *a, **k: False)
    monkeypatch.setattr("scripts.check_connection.load_dotenv", lambda *a, **k: False)
