"""Async Shopify OAuth2 client.

Usage example:
    from async_shopify import ShopifyAPI
    api = ShopifyAPI("my-shop")
    redirect_to = api.build_auth_url()
    ...
    token = await api.exchange_temporary_token(dict(request.query_params))
"""

from async_shopify.client import ShopifyAPI, ShopifyResponse, build_base_url
from async_shopify.core.config import ShopifyConfig, load_config
from async_shopify.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ProtocolError,
    ShopifyError,
    TransportError,
    TransportTimeoutError,
)
from async_shopify.core.logging_config import setup_logging

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ProtocolError",
    "ShopifyAPI",
    "ShopifyConfig",
    "ShopifyError",
    "ShopifyResponse",
    "TransportError",
    "TransportTimeoutError",
    "build_base_url",
    "load_config",
    "setup_logging",
]
