"""Tolgee localization client.

Fetches a project's languages and translations from the Tolgee platform,
caches them and renders messages for the current locale.

Main components:
- models: Locale, ProjectLanguage, TranslationKey, MessageParams
- formatting: ICU and sprintf message formatters
- bundle: TranslationBundle, per-locale key lookup and rendering
- cache: single-flight LanguageCache and TranslationCache
- state: LocaleState, the current locale with change broadcast
- client: TolgeeClient, the orchestrator
- api: TolgeeApi, the REST and content delivery data source
- factory: process-wide client instance
- fallback: ResourceStrings, cache-first lookups over bundled strings
"""

from tolgee_client.i18n.api import TolgeeApi
from tolgee_client.i18n.bundle import LocaleProvider, TranslationBundle
from tolgee_client.i18n.cache import CacheState, LanguageCache, TranslationCache
from tolgee_client.i18n.client import TolgeeClient, TranslationSource
from tolgee_client.i18n.config import ContentDeliveryConfig, NetworkConfig, TolgeeConfig
from tolgee_client.i18n.exceptions import (
    MessageFormatError,
    TolgeeApiError,
    TolgeeConfigurationError,
    TolgeeError,
)
from tolgee_client.i18n.factory import (
    create_client,
    get_instance,
    init,
    instance_or_init,
    reset_instance,
)
from tolgee_client.i18n.fallback import PlatformLookup, ResourceStrings
from tolgee_client.i18n.formatting import (
    IcuMessageFormatter,
    MessageFormatter,
    SprintfMessageFormatter,
    formatter_for,
)
from tolgee_client.i18n.models import (
    NO_PARAMS,
    Formatter,
    Indexed,
    Locale,
    MessageParams,
    NoParams,
    ProjectLanguage,
    TranslationKey,
    TranslationText,
    params_of,
)
from tolgee_client.i18n.state import LocaleState

__all__ = [
    "CacheState",
    "ContentDeliveryConfig",
    "Formatter",
    "IcuMessageFormatter",
    "Indexed",
    "LanguageCache",
    "Locale",
    "LocaleProvider",
    "LocaleState",
    "MessageFormatError",
    "MessageFormatter",
    "MessageParams",
    "NO_PARAMS",
    "NetworkConfig",
    "NoParams",
    "PlatformLookup",
    "ProjectLanguage",
    "ResourceStrings",
    "SprintfMessageFormatter",
    "TolgeeApi",
    "TolgeeApiError",
    "TolgeeClient",
    "TolgeeConfig",
    "TolgeeConfigurationError",
    "TolgeeError",
    "TranslationBundle",
    "TranslationCache",
    "TranslationKey",
    "TranslationSource",
    "TranslationText",
    "create_client",
    "formatter_for",
    "get_instance",
    "init",
    "instance_or_init",
    "params_of",
    "reset_instance",
]
