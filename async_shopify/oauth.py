"""Shopify OAuth helpers for HMAC verification and token exchange."""

import hashlib
import hmac
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from async_shopify.core.exceptions import AuthenticationError, ProtocolError

if TYPE_CHECKING:
    from async_shopify.client import ShopifyAPI

TOKEN_EXCHANGE_PATH = "/admin/oauth/access_token"

# Never part of the signed message
EXCLUDED_PARAMS = frozenset({"hmac", "signature"})


def build_signature_message(params: Mapping[str, Any]) -> str:
    """Build the canonical message Shopify signs for an OAuth callback.

    Every parameter except ``hmac`` and ``signature`` is rendered as
    ``key=value`` exactly as received (no URL-encoding, no reformatting of
    numeric-looking values). The rendered pairs are sorted by plain string
    ordering and joined with ``&``.

    Args:
        params: Query parameters from the callback URL.

    Returns:
        The message to feed into HMAC-SHA256.
    """
    pairs = [f"{key}={value}" for key, value in params.items() if key not in EXCLUDED_PARAMS]
    return "&".join(sorted(pairs))


def verify_hmac(params: Mapping[str, Any], secret: str) -> bool:
    """Verify Shopify OAuth callback HMAC signature.

    Args:
        params: All query parameters from the callback URL.
        secret: The Shopify API secret.

    Returns:
        True if the lowercase hex HMAC-SHA256 of the canonical message equals
        the ``hmac`` parameter. False when it differs or is absent.
    """
    received_hmac = params.get("hmac")
    if not isinstance(received_hmac, str):
        return False

    computed = hmac.new(
        secret.encode("utf-8"),
        build_signature_message(params).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    # Bytes so that non-ASCII input compares unequal instead of raising
    return hmac.compare_digest(computed.encode("utf-8"), received_hmac.encode("utf-8"))


async def exchange_code_for_token(
    api: "ShopifyAPI",
    params: Mapping[str, Any],
    *,
    timeout: float | None = None,
) -> str:
    """Exchange the OAuth authorization code for a permanent access token.

    The signature is checked before anything goes over the wire. The returned
    token is not stored on ``api``; persisting it is up to the caller.

    Args:
        api: Client context for the shop that started the OAuth flow.
        params: Query parameters from the callback URL.
        timeout: Deadline in seconds for the token request.

    Returns:
        The access token string.

    Raises:
        AuthenticationError: If the HMAC signature does not verify.
        ProtocolError: If the callback has no code or the response has no token.
        TransportError: If the token request fails.
    """
    if not verify_hmac(params, api.config.api_secret):
        api.log("Rejected OAuth callback for %s: invalid HMAC", api.shop_url)
        raise AuthenticationError()

    code = params.get("code")
    if not code:
        raise ProtocolError("OAuth callback is missing the 'code' parameter")

    response = await api.request(
        TOKEN_EXCHANGE_PATH,
        "POST",
        {
            "client_id": api.config.api_key,
            "client_secret": api.config.api_secret,
            "code": str(code),
        },
        timeout=timeout,
    )

    data = response.data
    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not isinstance(access_token, str) or not access_token:
        raise ProtocolError("Token exchange response has no access_token")

    api.log("Exchanged authorization code for %s", api.shop_url)
    return access_token
