"""Tolgee backend settings."""

from typing import Optional

from pydantic import Field

from tolgee_client.configuration.base import ClientSettings

DEFAULT_API_URL = "https://app.tolgee.io/v2/"
DEFAULT_CDN_URL = "https://cdn.tolg.ee/"


class TolgeeSettings(ClientSettings):
    """Connection and content-delivery settings for the Tolgee backend.

    Environment Variables:
        TOLGEE_API_KEY: Project API key or personal access token
        TOLGEE_API_URL: REST API base URL (default: https://app.tolgee.io/v2/)
        TOLGEE_PROJECT_ID: Project id, optional for project-scoped API keys
        TOLGEE_LOCALE: Initial locale tag (default: system locale)
        TOLGEE_CDN_URL: Content delivery URL serving ``<tag>.json`` files
        TOLGEE_FORMATTER: Message formatter, 'icu' or 'sprintf' (default: icu)
        TOLGEE_HTTP_TIMEOUT_SECONDS: Transport timeout (default: 30s)
        TOLGEE_CLI_FALLBACK_ENABLED: Use the REST export when the CLI fails

    Example:
        ```python
        from tolgee_client.configuration import settings

        api_key = settings.tolgee.api_key
        ```
    """

    api_key: Optional[str] = Field(
        default=None,
        alias="TOLGEE_API_KEY",
        description="Project API key or personal access token",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        alias="TOLGEE_API_URL",
        description="Tolgee REST API base URL",
    )
    project_id: Optional[str] = Field(
        default=None,
        alias="TOLGEE_PROJECT_ID",
        description="Tolgee project id",
    )
    locale: Optional[str] = Field(
        default=None,
        alias="TOLGEE_LOCALE",
        description="Initial locale tag",
    )
    cdn_url: Optional[str] = Field(
        default=None,
        alias="TOLGEE_CDN_URL",
        description="Content delivery URL for exported translations",
    )
    formatter: str = Field(
        default="icu",
        alias="TOLGEE_FORMATTER",
        description="Message formatter: 'icu' or 'sprintf'",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        alias="TOLGEE_HTTP_TIMEOUT_SECONDS",
        description="HTTP transport timeout (seconds)",
    )
    cli_fallback_enabled: bool = Field(
        default=True,
        alias="TOLGEE_CLI_FALLBACK_ENABLED",
        description="Fall back to the REST export when the Tolgee CLI fails",
    )
