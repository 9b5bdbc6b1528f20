"""Structured JSON logging configuration."""

import contextvars
import logging

from pythonjsonlogger.json import JsonFormatter

PACKAGE_LOGGER = "async_shopify"

shop_var: contextvars.ContextVar[str] = contextvars.ContextVar("shop", default="")


class ShopFilter(logging.Filter):
    """Inject the shop domain of the current call into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.shop = shop_var.get("")  # type: ignore[attr-defined]
        return True


def setup_logging(*, debug: bool = False, package_only: bool = False) -> logging.Logger:
    """Attach a JSON handler tagging every record with the current shop.

    Args:
        debug: Log at DEBUG instead of INFO.
        package_only: Configure only the ``async_shopify`` logger and stop its
            records from reaching the root logger, leaving the host
            application's own logging untouched.

    Returns:
        The logger that was configured.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(shop)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    )
    handler.addFilter(ShopFilter())

    target = logging.getLogger(PACKAGE_LOGGER if package_only else None)
    target.handlers.clear()
    target.addHandler(handler)
    target.setLevel(logging.DEBUG if debug else logging.INFO)
    if package_only:
        target.propagate = False
    return target
