"""Tolgee client configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from tolgee_client.configuration.tolgee import TolgeeSettings


class Settings(BaseSettings):
    """Tolgee client configuration settings - main aggregator.

    Environment Variables:
        ENVIRONMENT: Deployment environment name (default: development)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        ```python
        from tolgee_client.configuration import settings

        if settings.is_production:
            ...
        api_url = settings.tolgee.api_url
        ```
    """

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    tolgee: TolgeeSettings

    @property
    def is_production(self) -> bool:
        """Check if the client is running in production.

        Returns:
            True if ENVIRONMENT is 'production', False otherwise.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        if "tolgee" not in kwargs:
            kwargs["tolgee"] = TolgeeSettings()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
