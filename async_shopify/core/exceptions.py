"""Error taxonomy for the Shopify OAuth client."""


class ShopifyError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ShopifyError):
    """Credentials are missing or unparseable (raised at construction time)."""

    def __init__(
        self, missing: list[str] | None = None, *, invalid: list[str] | None = None
    ) -> None:
        self.missing = missing or []
        self.invalid = invalid or []
        parts: list[str] = []
        if self.missing:
            parts.append(f"Missing shopify config value for: {_quote(self.missing)}")
        if self.invalid:
            parts.append(f"Invalid shopify config value for: {_quote(self.invalid)}")
        super().__init__("; ".join(parts))


def _quote(keys: list[str]) -> str:
    return ", ".join(f'"{key}"' for key in keys)


class AuthenticationError(ShopifyError):
    """OAuth callback parameters failed HMAC verification."""

    def __init__(self, message: str = "Signature is not authentic") -> None:
        super().__init__(message)


class TransportError(ShopifyError):
    """The HTTP call failed (network error or non-2xx status)."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class TransportTimeoutError(TransportError):
    """The HTTP call did not complete before its deadline."""


class ProtocolError(ShopifyError):
    """The HTTP call succeeded but the response (or callback) has the wrong shape."""
