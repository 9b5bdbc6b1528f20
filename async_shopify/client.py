"""Async Shopify client context: shop identity, auth URL and REST requests."""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from async_shopify import oauth
from async_shopify.core.config import ShopifyConfig, load_config
from async_shopify.core.exceptions import ProtocolError, TransportError, TransportTimeoutError
from async_shopify.core.logging_config import shop_var

logger = logging.getLogger(__name__)

SHOPIFY_DOMAIN_SUFFIX = ".myshopify.com"
USER_AGENT = "async-shopify-python-api"
DEFAULT_TIMEOUT = 30.0


def build_base_url(shop: str) -> str:
    """Normalize a shop name or domain to ``https://<name>.myshopify.com``.

    Appends the platform suffix and prepends the scheme when missing, so
    ``"myshop"``, ``"myshop.myshopify.com"`` and
    ``"https://myshop.myshopify.com"`` all give the same result.
    """
    url = shop
    if not shop.endswith(SHOPIFY_DOMAIN_SUFFIX):
        url = f"{url}{SHOPIFY_DOMAIN_SUFFIX}"
    if not shop.startswith("https://"):
        url = f"https://{url}"
    return url


@dataclass(frozen=True)
class ShopifyResponse:
    """Decoded JSON body of a response together with its headers."""

    headers: httpx.Headers
    data: Any


class ShopifyAPI:
    """Per-shop client context for the Shopify OAuth flow and Admin REST API.

    Holds the normalized shop URL, the app credentials, an optional access
    token and a nonce generated once per instance (sent as OAuth ``state``).
    Instances share no mutable state, so one per incoming request is fine.
    """

    normalize = staticmethod(build_base_url)

    def __init__(
        self,
        shop: str,
        access_token: str | None = None,
        *,
        config: ShopifyConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.access_token = access_token
        self.shop_url = build_base_url(shop)
        self.nonce = self.generate_nonce()
        self.transport = transport
        self.timeout = timeout

    @staticmethod
    def generate_nonce() -> str:
        return str(uuid.uuid4())

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.access_token:
            headers["X-Shopify-Access-Token"] = self.access_token
        return headers

    def log(self, msg: str, *args: Any) -> None:
        """Emit a diagnostic record unless verbose logging is turned off."""
        if self.config.verbose:
            logger.info(msg, *args)

    def build_auth_url(self) -> str:
        """Build the URL to redirect the merchant to for app authorization.

        Values are interpolated verbatim; callers must pre-encode any value
        containing reserved characters.
        """
        return (
            f"{self.shop_url}/admin/oauth/authorize"
            f"?client_id={self.config.api_key}"
            f"&scope={self.config.scope}"
            f"&redirect_uri={self.config.redirect_url}"
            f"&state={self.nonce}"
        )

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        data: Any = None,
        *,
        timeout: float | None = None,
    ) -> ShopifyResponse:
        """Send a JSON request to the shop and return headers plus decoded body.

        Args:
            endpoint: Path on the shop domain, e.g. ``/admin/products.json``.
            method: HTTP method.
            data: JSON-serializable request body, omitted when empty.
            timeout: Deadline in seconds, defaults to the client timeout.

        Raises:
            TransportTimeoutError: If the deadline expires.
            TransportError: On network errors or non-2xx responses.
            ProtocolError: If a 2xx response body is not JSON.
        """
        url = f"{self.shop_url}{endpoint}"
        ctx_token = shop_var.set(self.shop_url)
        try:
            self.log("%s %s", method, endpoint)
            async with httpx.AsyncClient(
                base_url=self.shop_url,
                headers=self.headers,
                transport=self.transport,
                timeout=self.timeout if timeout is None else timeout,
            ) as client:
                response = await client.request(method, endpoint, json=data or None)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(f"{method} {url} timed out", url=url) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise TransportError(
                f"{method} {url} failed with status {status_code}",
                url=url,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc
        finally:
            shop_var.reset(ctx_token)

        return ShopifyResponse(headers=response.headers, data=self._decode_body(response, url))

    @staticmethod
    def _decode_body(response: httpx.Response, url: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError(f"Response from {url} is not valid JSON") from exc

    def is_valid_signature(self, params: Mapping[str, Any]) -> bool:
        """Check the HMAC of OAuth callback params against the app secret."""
        return oauth.verify_hmac(params, self.config.api_secret)

    async def exchange_temporary_token(
        self, params: Mapping[str, Any], *, timeout: float | None = None
    ) -> str:
        """Verify callback params and trade their code for an access token."""
        return await oauth.exchange_code_for_token(self, params, timeout=timeout)
