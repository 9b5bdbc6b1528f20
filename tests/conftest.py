"""Pytest configuration and fixtures for the async_shopify test suite.

Provides:
- Shopify credentials injected through the environment
- A ready-made ShopifyConfig
- Mocked httpx.AsyncClient for call assertions
- httpx.MockTransport stubs that record every request
"""

import hashlib
import hmac
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from async_shopify.core.config import ShopifyConfig

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOPIFY_TEST_API_KEY = "test-shopify-api-key"
SHOPIFY_TEST_API_SECRET = "test-shopify-api-secret"
SHOPIFY_TEST_REDIRECT_URL = "https://app.example.com/shopify/callback"
SHOPIFY_TEST_SCOPE = "read_products,write_orders"

# Known-good callback signed with the secret "hush"
SIGNED_CALLBACK_SECRET = "hush"
SIGNED_CALLBACK_PARAMS = {
    "shop": "some-shop.myshopify.com",
    "code": "a94a110d86d2452eb3e2af4cfb8a3828",
    "timestamp": "1337178173",
    "signature": "6e39a2ea9e497af6cb806720da1f1bf3",
    "hmac": "62c96e47cdef32a33c6fa78d761e049b3578b8fc115188a9ffcd774937ab7c78",
    "state": "abc123",
}


@pytest.fixture(autouse=True)
def set_shopify_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Shopify credentials are present in the environment for all tests.

    This is autouse=True so every ShopifyAPI built without an explicit config
    sees the same credentials.
    """
    monkeypatch.setenv("SHOPIFY_API_KEY", SHOPIFY_TEST_API_KEY)
    monkeypatch.setenv("SHOPIFY_API_SECRET", SHOPIFY_TEST_API_SECRET)
    monkeypatch.setenv("SHOPIFY_API_REDIRECT_URL", SHOPIFY_TEST_REDIRECT_URL)
    monkeypatch.setenv("SHOPIFY_API_SCOPE", SHOPIFY_TEST_SCOPE)
    monkeypatch.delenv("SHOPIFY_API_VERBOSE", raising=False)


@pytest.fixture
def signed_config() -> ShopifyConfig:
    """Config whose secret matches SIGNED_CALLBACK_PARAMS."""
    return ShopifyConfig(
        api_key=SHOPIFY_TEST_API_KEY,
        api_secret=SIGNED_CALLBACK_SECRET,
        redirect_url=SHOPIFY_TEST_REDIRECT_URL,
        scope=SHOPIFY_TEST_SCOPE,
    )


@pytest.fixture
def shopify_oauth_hmac() -> Callable[[dict[str, str]], str]:
    """Generate a valid Shopify OAuth callback HMAC for query params.

    Usage:
        params = {"code": "abc", "shop": "store.myshopify.com", "state": "nonce123"}
        params["hmac"] = shopify_oauth_hmac(params)
    """

    def _compute(params: dict[str, str]) -> str:
        pairs = sorted(f"{k}={v}" for k, v in params.items() if k not in ("hmac", "signature"))
        return hmac.new(
            SHOPIFY_TEST_API_SECRET.encode(),
            "&".join(pairs).encode(),
            hashlib.sha256,
        ).hexdigest()

    return _compute


@pytest.fixture
def mock_shopify_http() -> Generator[MagicMock, None, None]:
    """Patch httpx.AsyncClient in client.py with an AsyncMock.

    The default response is an empty JSON object with no headers.
    """
    with patch("async_shopify.client.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client

        mock_response = MagicMock()
        mock_response.json.return_value = {}
        mock_response.headers = {}
        mock_response.raise_for_status = MagicMock()
        mock_client.request.return_value = mock_response

        yield mock_client


@pytest.fixture
def stub_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Build an httpx.MockTransport that replies with a fixed response.

    Usage:
        transport, calls = stub_transport(200, json={"ok": True})
        api = ShopifyAPI("shop", transport=transport)
    """

    def _build(
        status_code: int = 200, **response_kwargs: Any
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status_code, **response_kwargs)

        return httpx.MockTransport(handler), calls

    return _build
