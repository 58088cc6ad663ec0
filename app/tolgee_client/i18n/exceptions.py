"""Custom exceptions for the Tolgee client.

Network and configuration failures are raised by the cache reload rounds
and absorbed at the public TolgeeClient boundary.
"""

from typing import Optional


class TolgeeError(Exception):
    """Base exception for all Tolgee client errors.

    Example:
        try:
            await cache.load(locale)
        except TolgeeError as e:
            logger.warning("translation_reload_failed", error=str(e))
    """

    pass


class TolgeeApiError(TolgeeError):
    """Raised when a request to the Tolgee backend fails.

    Covers transport errors (no ``status_code``) and non-success responses.

    Attributes:
        status_code: HTTP status code, None for transport failures.
        url: Requested URL, if known.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_transient(self) -> bool:
        """True for transport failures, throttling and server errors."""
        return (
            self.status_code is None
            or self.status_code == 429
            or self.status_code >= 500
        )


class TolgeeConfigurationError(TolgeeError):
    """Raised when a required configuration value is missing or invalid.

    Example:
        api = TolgeeApi(TolgeeConfig.create(api_key=None))
        await api.fetch_languages()  # raises: No API key configured
    """

    pass


class MessageFormatError(TolgeeError, ValueError):
    """Raised when a template is malformed or references a missing argument.

    Never escapes a MessageFormatter: render() converts it to None.
    """

    pass
