"""Tolgee localization client for Python applications."""

from tolgee_client.i18n import (
    Indexed,
    Locale,
    NO_PARAMS,
    TolgeeClient,
    TolgeeConfig,
    get_instance,
    init,
    instance_or_init,
)

__version__ = "0.1.0"

__all__ = [
    "Indexed",
    "Locale",
    "NO_PARAMS",
    "TolgeeClient",
    "TolgeeConfig",
    "get_instance",
    "init",
    "instance_or_init",
]
