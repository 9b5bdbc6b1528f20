"""Credential loading using Pydantic settings."""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from async_shopify.core.exceptions import ConfigurationError

REQUIRED_KEYS = ("api_key", "api_secret", "redirect_url", "scope")
ENV_PREFIX = "SHOPIFY_API_"


def _error_fields(exc: ValidationError, prefix: str = "") -> list[str]:
    """Names of the fields a ValidationError complains about, in order, once each."""
    fields: list[str] = []
    for error in exc.errors():
        name = prefix + ".".join(str(part) for part in error["loc"])
        if name not in fields:
            fields.append(name)
    return fields


class ShopifyEnvSettings(BaseSettings):
    """Raw values read from ``SHOPIFY_API_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    key: str | None = None
    secret: str | None = None
    redirect_url: str | None = None
    scope: str | None = None
    verbose: bool = True


class ShopifyConfig(BaseModel):
    """App credentials for one Shopify app. Never mutated after construction.

    Construction fails with ConfigurationError when a credential is missing or
    blank, when a value has the wrong type, or when an unknown field is given.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str
    api_secret: str
    redirect_url: str
    scope: str
    verbose: bool = True

    @model_validator(mode="wrap")
    @classmethod
    def _validate_credentials(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if isinstance(data, dict):
            missing = [
                key
                for key in REQUIRED_KEYS
                if data.get(key) is None or not str(data[key]).strip()
            ]
            if missing:
                raise ConfigurationError(missing)
        try:
            return handler(data)
        except ValidationError as exc:
            raise ConfigurationError(invalid=_error_fields(exc)) from exc


def load_config(**overrides: str | bool | None) -> ShopifyConfig:
    """Build a ShopifyConfig from the environment plus explicit overrides.

    Args:
        **overrides: Values for any ShopifyConfig field. They take precedence
            over the environment; ``None`` means "use the environment".

    Raises:
        ConfigurationError: If any required credential is missing or blank,
            an environment value cannot be parsed, or an override is unknown.
    """
    try:
        env = ShopifyEnvSettings()
    except ValidationError as exc:
        raise ConfigurationError(invalid=_error_fields(exc, ENV_PREFIX.lower())) from exc

    values: dict[str, str | bool | None] = {
        "api_key": env.key,
        "api_secret": env.secret,
        "redirect_url": env.redirect_url,
        "scope": env.scope,
        "verbose": env.verbose,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    return ShopifyConfig(**values)  # type: ignore[arg-type]
