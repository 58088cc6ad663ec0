"""Immutable client configuration.

TolgeeConfig is assembled once, through the ``create`` factory or from
environment settings, and shared read-only by everything one client owns.

Usage:
    from tolgee_client.i18n.config import TolgeeConfig

    config = TolgeeConfig.create(
        api_key="tgpak_...",
        project_id="42",
        locale="en",
        cdn_url="https://cdn.tolg.ee/abc123",
        formatter="sprintf",
    )

    # Or from TOLGEE_* environment variables
    config = TolgeeConfig.from_settings()
"""

import asyncio
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tolgee_client.configuration import DEFAULT_API_URL, DEFAULT_CDN_URL, Settings
from tolgee_client.configuration import settings as default_settings
from tolgee_client.i18n.models import Formatter, Locale


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


class NetworkConfig(BaseModel):
    """Network collaborators.

    Attributes:
        client: Shared httpx.AsyncClient. When None, the API layer creates and
            owns its own client.
        context: Event loop that owns network work. Callers on other threads
            submit coroutines to it (see TolgeeClient.submit).
        timeout_seconds: Transport timeout for a client created by the API layer.
        follow_redirects: Redirect policy for a client created by the API layer.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: Optional[httpx.AsyncClient] = None
    context: Optional[asyncio.AbstractEventLoop] = None
    timeout_seconds: float = 30.0
    follow_redirects: bool = True


class ContentDeliveryConfig(BaseModel):
    """Content delivery settings.

    Attributes:
        url: CDN URL serving ``<tag>.json`` exports; None uses the REST API.
        formatter: Message formatter choice for every bundle of the client.
    """

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    formatter: Formatter = Formatter.ICU

    @field_validator("url", mode="before")
    @classmethod
    def _normalize_url(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return _with_trailing_slash(value) if value else None

    @field_validator("formatter", mode="before")
    @classmethod
    def _parse_formatter(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Formatter):
            return Formatter.from_string(value)
        return value

    @classmethod
    def from_id(
        cls,
        content_id: str,
        base_url: str = DEFAULT_CDN_URL,
        formatter: Formatter = Formatter.ICU,
    ) -> "ContentDeliveryConfig":
        """Compose the CDN URL from a base URL and a content delivery id."""
        return cls(url=_with_trailing_slash(base_url) + content_id.strip("/"), formatter=formatter)


class TolgeeConfig(BaseModel):
    """Client configuration.

    Attributes:
        api_key: Project API key or personal access token.
        api_url: REST API base URL, always ending with '/'.
        project_id: Project id, None for project-scoped API keys.
        locale: Initial locale, None for the system locale.
        network: Network collaborators.
        content_delivery: CDN and formatter settings.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    project_id: Optional[str] = None
    locale: Optional[Locale] = None
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    content_delivery: ContentDeliveryConfig = Field(default_factory=ContentDeliveryConfig)

    @field_validator("api_key", "project_id", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("api_url", mode="before")
    @classmethod
    def _default_api_url(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return _with_trailing_slash(value) if value else DEFAULT_API_URL

    @field_validator("locale", mode="before")
    @classmethod
    def _parse_locale(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str):
            return Locale.from_string(value)
        return value

    @property
    def formatter(self) -> Formatter:
        return self.content_delivery.formatter

    @classmethod
    def create(
        cls,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        project_id: Optional[str] = None,
        locale: Optional[Any] = None,
        client: Optional[httpx.AsyncClient] = None,
        context: Optional[asyncio.AbstractEventLoop] = None,
        timeout_seconds: float = 30.0,
        cdn_url: Optional[str] = None,
        formatter: Any = Formatter.ICU,
    ) -> "TolgeeConfig":
        """Named-parameter factory for a complete configuration.

        Blank strings mean "not set": a blank ``api_url`` becomes the default
        URL and a blank ``project_id`` becomes None.
        """
        return cls(
            api_key=api_key,
            api_url=api_url,
            project_id=project_id,
            locale=locale,
            network=NetworkConfig(
                client=client,
                context=context,
                timeout_seconds=timeout_seconds,
            ),
            content_delivery=ContentDeliveryConfig(url=cdn_url, formatter=formatter),
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        **overrides: Any,
    ) -> "TolgeeConfig":
        """Build a configuration from TOLGEE_* environment settings.

        Args:
            settings: Settings aggregator, defaults to the module singleton.
            **overrides: Keyword arguments forwarded to ``create`` that take
                precedence over the environment.
        """
        tolgee = (settings or default_settings).tolgee
        values = {
            "api_key": tolgee.api_key,
            "api_url": tolgee.api_url,
            "project_id": tolgee.project_id,
            "locale": tolgee.locale,
            "timeout_seconds": tolgee.http_timeout_seconds,
            "cdn_url": tolgee.cdn_url,
            "formatter": tolgee.formatter,
        }
        values.update(overrides)
        return cls.create(**values)
