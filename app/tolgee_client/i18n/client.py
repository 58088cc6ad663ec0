"""Tolgee client: translation cache and resolution.

TolgeeClient composes the language cache, the translation cache, the
current-locale state and the configured message formatter. Every public
entry point degrades to cache-or-None: network and configuration failures
are logged and absorbed here, never raised to the UI.

Usage:
    from tolgee_client import TolgeeClient, TolgeeConfig

    async with TolgeeClient(TolgeeConfig.from_settings()) as client:
        await client.preload()
        client.instant("greeting", "World")  # cache only

        client.set_locale("fr")
        async for text in client.translation("greeting", "World"):
            render(text)
"""

import asyncio
import concurrent.futures
from contextlib import aclosing
from typing import (
    Any,
    AsyncIterator,
    Collection,
    Coroutine,
    Iterable,
    Optional,
    Protocol,
    TypeVar,
)

from tolgee_client.i18n.api import TolgeeApi
from tolgee_client.i18n.bundle import TranslationBundle
from tolgee_client.i18n.cache import CacheState, LanguageCache, TranslationCache
from tolgee_client.i18n.config import TolgeeConfig
from tolgee_client.i18n.exceptions import TolgeeConfigurationError
from tolgee_client.i18n.flow import map_latest
from tolgee_client.i18n.formatting import formatter_for
from tolgee_client.i18n.models import (
    Locale,
    MessageParams,
    ProjectLanguage,
    TranslationKey,
    params_of,
)
from tolgee_client.i18n.state import LocaleInput, LocaleState, to_locale
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")


class TranslationSource(Protocol):
    """Remote source of languages and translations (TolgeeApi in production)."""

    async def fetch_languages(self) -> Iterable[ProjectLanguage]: ...

    async def fetch_translations(
        self, locale: Optional[Locale] = None
    ) -> Iterable[TranslationKey]: ...


def _params(args: tuple) -> MessageParams:
    if len(args) == 1 and isinstance(args[0], MessageParams):
        return args[0]
    return params_of(*args)


class TolgeeClient:
    """Localization client for one Tolgee project.

    Attributes:
        config: Immutable configuration shared by everything the client owns.
    """

    def __init__(
        self,
        config: TolgeeConfig,
        source: Optional[TranslationSource] = None,
    ):
        """Initialize the client.

        Args:
            config: Client configuration.
            source: Source of remote data. Defaults to a TolgeeApi built from
                ``config``, owned and closed by this client.
        """
        self.config = config
        self._owns_source = source is None
        self._source: TranslationSource = source or TolgeeApi(config)
        self._languages = LanguageCache(self._source.fetch_languages)
        self._translations = TranslationCache(
            self._source.fetch_translations,
            formatter_for(config.formatter),
        )
        self._locale = LocaleState(config.locale)
        self._log = logger.bind(project_id=config.project_id)
        self._log.info(
            "initialized_tolgee_client",
            locale=self._locale.value.tag,
            formatter=config.formatter.value,
            content_delivery=bool(config.content_delivery.url),
        )

    async def __aenter__(self) -> "TolgeeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client if this client created it."""
        if self._owns_source and isinstance(self._source, TolgeeApi):
            await self._source.aclose()

    @property
    def locale(self) -> Locale:
        """Current locale."""
        return self._locale.value

    @property
    def locale_state(self) -> LocaleState:
        return self._locale

    @property
    def state(self) -> CacheState:
        """Translation readiness: EMPTY, LOADING or READY."""
        return self._translations.state

    def set_locale(self, locale: LocaleInput) -> Locale:
        """Change the current locale.

        Does not fetch anything; the next translation() evaluation or
        get_translation() call reloads when the cached bundle does not serve
        the new locale.

        Args:
            locale: Locale, tag string or ProjectLanguage.

        Returns:
            The normalized locale now current.
        """
        return self._locale.set_locale(locale)

    async def languages(self) -> Collection[ProjectLanguage]:
        """Project languages, from the cache or the network.

        Never raises: on failure whatever is cached (possibly nothing) is
        returned.
        """
        try:
            return await self._languages.load()
        except Exception as e:
            self._log.warning("languages_load_failed", error=str(e))
            return self._languages.current

    def current_translation(self, locale: Optional[Locale] = None) -> Optional[TranslationBundle]:
        """Cached bundle serving ``locale`` (the current locale when None)."""
        return self._translations.current(locale or self.locale)

    async def _bundle_for(self, locale: Locale) -> Optional[TranslationBundle]:
        bundle = self._translations.current(locale)
        if bundle is not None:
            return bundle
        try:
            return await self._translations.load(locale)
        except Exception as e:
            self._log.warning(
                "translation_reload_failed",
                locale=locale.tag,
                error=str(e),
            )
        # a concurrent round may have filled the slot meanwhile
        return self._translations.current(locale)

    async def _resolve(
        self, key: str, params: MessageParams, locale: Locale
    ) -> Optional[str]:
        bundle = await self._bundle_for(locale)
        if bundle is None:
            return None
        return bundle.localized(key, params, locale)

    async def translation(self, key: str, *args: Any) -> AsyncIterator[str]:
        """Stream the translation of ``key`` for the current locale.

        Re-evaluated on every locale change. Only the latest locale counts: a
        resolution still running when the locale changes again is cancelled
        and never emitted. Updates that cannot be rendered emit nothing.

        Args:
            key: Key name.
            *args: Positional values, or a single MessageParams.

        Yields:
            Rendered translations.
        """
        params = _params(args)

        async def resolve(locale: Locale) -> Optional[str]:
            return await self._resolve(key, params, locale)

        def is_current(locale: Locale) -> bool:
            return locale == self._locale.value

        updates = map_latest(self._locale.subscribe(), resolve, is_current)
        async with aclosing(updates) as stream:
            async for text in stream:
                yield text

    async def get_translation(
        self, key: str, *args: Any, locale: Optional[LocaleInput] = None
    ) -> Optional[str]:
        """Resolve ``key`` once, fetching the bundle if needed.

        Args:
            key: Key name.
            *args: Positional values, or a single MessageParams.
            locale: Locale to resolve for, the current locale when None. Does
                not change the current locale.

        Returns:
            Rendered translation, or None if unavailable.
        """
        target = self._locale.value if locale is None else to_locale(locale)
        return await self._resolve(key, _params(args), target)

    def instant(self, key: str, *args: Any) -> Optional[str]:
        """Translate from the cache only; never touches the network.

        Useful after preload() or an earlier translation()/languages() call.

        Args:
            key: Key name.
            *args: Positional values, or a single MessageParams.

        Returns:
            Rendered translation, or None if nothing serving the current
            locale is cached.
        """
        locale = self._locale.value
        bundle = self._translations.current(locale)
        if bundle is None:
            return None
        return bundle.localized(key, _params(args), locale)

    async def preload(self) -> None:
        """Warm both caches; failures are logged and ignored independently."""
        results = await asyncio.gather(
            self._languages.load(),
            self._translations.load(self._locale.value),
            return_exceptions=True,
        )
        for name, result in zip(("languages", "translations"), results):
            if isinstance(result, BaseException):
                self._log.warning("preload_failed", cache=name, error=str(result))
        self._log.debug("preload_finished", state=self.state.value)

    def submit(self, coro: Coroutine[Any, Any, T]) -> "concurrent.futures.Future[T]":
        """Run a coroutine on the configured network event loop from any thread.

        Example:
            client.submit(client.preload()).result(timeout=10)

        Raises:
            TolgeeConfigurationError: If no network context loop is configured.
        """
        loop = self.config.network.context
        if loop is None:
            coro.close()
            raise TolgeeConfigurationError("No network context event loop configured")
        return asyncio.run_coroutine_threadsafe(coro, loop)
