import dataclasses

import pytest

from services.errors import ConfigError
from services.shopify_config import ShopifyConfig


def test_from_env_reads_credentials_and_default_versions():
    config = ShopifyConfig.from_env({"SHOPIFY_SHOP_NAME": "acme", "SHOPIFY_PASSWORD": "shpat_1234"})

    assert config.shop_name == "acme"
    assert config.access_token == "shpat_1234"
    assert config.graphql_endpoint == "https://acme.myshopify.com/admin/api/2024-10/graphql.json"
    assert config.rest_endpoint == "https://acme.myshopify.com/admin/api/2023-10"


def test_from_env_honours_version_overrides():
    config = ShopifyConfig.from_env(
        {
            "SHOPIFY_SHOP_NAME": "acme",
            "SHOPIFY_PASSWORD": "tok",
            "SHOPIFY_API_VERSION": "2025-01",
            "SHOPIFY_REST_API_VERSION": "2024-04",
        }
    )

    assert config.graphql_endpoint.endswith("/admin/api/2025-01/graphql.json")
    assert config.rest_endpoint.endswith("/admin/api/2024-04")


@pytest.mark.parametrize(
    "environ, missing",
    [
        ({}, "SHOPIFY_SHOP_NAME, SHOPIFY_PASSWORD"),
        ({"SHOPIFY_SHOP_NAME": "acme"}, "SHOPIFY_PASSWORD"),
        ({"SHOPIFY_PASSWORD": "tok", "SHOPIFY_SHOP_NAME": ""}, "SHOPIFY_SHOP_NAME"),
    ],
)
def test_from_env_missing_credentials_is_config_error(environ, missing):
    with pytest.raises(ConfigError) as exc_info:
        ShopifyConfig.from_env(environ)

    assert missing in str(exc_info.value)


def test_from_env_defaults_to_process_environment(shopify_env):
    config = ShopifyConfig.from_env()

    assert config.shop_domain == "test-shop.myshopify.com"


@pytest.mark.parametrize(
    "shop_name",
    [
        "acme",
        "acme.myshopify.com",
        "https://acme.myshopify.com/",
        "http://acme.myshopify.com",
    ],
)
def test_shop_domain_accepts_subdomain_domain_or_url(shop_name):
    config = ShopifyConfig(shop_name=shop_name, access_token="tok")

    assert config.shop_domain == "acme.myshopify.com"


def test_config_is_immutable(config):
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.access_token = "other"


def test_token_is_masked(config):
    assert config.masked_token() == "shpa...3456"
    assert "shpat_abcdef123456" not in repr(config)
    assert ShopifyConfig(shop_name="acme", access_token="short").masked_token() == "*****"
