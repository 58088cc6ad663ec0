"""Single-flight read-through caches for languages and translations.

Each cache owns one slot and one asyncio.Lock. Checking the slot, starting a
reload round and writing the result happen under the lock; concurrent callers
that miss the slot join the round already in flight instead of issuing their
own fetch. The two caches have independent locks, so a languages reload and a
translations reload can run at the same time.

Usage:
    languages = LanguageCache(api.fetch_languages)
    translations = TranslationCache(api.fetch_translations, formatter)

    await languages.load()
    bundle = await translations.load(Locale.from_string("en"))
"""

import asyncio
from enum import Enum
from typing import (
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    Generic,
    Hashable,
    Iterable,
    Optional,
    TypeVar,
)

from tolgee_client.i18n.bundle import TranslationBundle
from tolgee_client.i18n.formatting import IcuMessageFormatter, MessageFormatter
from tolgee_client.i18n.models import Locale, ProjectLanguage, TranslationKey
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

T = TypeVar("T")

LanguagesFetcher = Callable[[], Awaitable[Iterable[ProjectLanguage]]]
TranslationsFetcher = Callable[[Optional[Locale]], Awaitable[Iterable[TranslationKey]]]


class CacheState(str, Enum):
    """Readiness of a cache slot.

    EMPTY -> LOADING -> READY on the first successful load; a failed round
    returns to the previous state, there is no error state.
    """

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


def _consume_exception(task: "asyncio.Future") -> None:
    # rounds whose waiters were all cancelled still finish; mark their
    # exception as retrieved
    if not task.cancelled():
        task.exception()


class SingleFlightCache(Generic[T]):
    """Single-slot cache whose reloads are shared between concurrent callers.

    A reload round is identified by a round key. The round runs as its own
    task, shielded from the cancellation of any single waiter; its result
    (or exception) is delivered to every caller that joined it. A failed
    round leaves the slot untouched. A round that completes after a newer
    round has already been stored does not overwrite the slot.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = asyncio.Lock()
        self._value: Optional[T] = None
        self._rounds: Dict[Hashable, "asyncio.Future[T]"] = {}
        self._started_generation = 0
        self._stored_generation = 0
        self._log = logger.bind(cache=name)

    @property
    def state(self) -> CacheState:
        if self._rounds:
            return CacheState.LOADING
        if self._value is not None:
            return CacheState.READY
        return CacheState.EMPTY

    async def _load(
        self,
        round_key: Hashable,
        satisfied: Callable[[Optional[T]], bool],
        fetch: Callable[[], Awaitable[T]],
        own_round_key: Optional[Hashable] = None,
    ) -> T:
        joined = False
        async with self._lock:
            if satisfied(self._value):
                return self._value
            task = self._rounds.get(round_key)
            if task is None:
                self._started_generation += 1
                task = asyncio.ensure_future(
                    self._run_round(round_key, self._started_generation, fetch)
                )
                task.add_done_callback(_consume_exception)
                self._rounds[round_key] = task
                self._log.debug("reload_started", round_key=round_key)
            else:
                joined = True
                self._log.debug("reload_joined", round_key=round_key)
        value = await asyncio.shield(task)
        if joined and own_round_key is not None and not satisfied(value):
            # the joined round was started for a request this caller does not
            # share; run one under a key of its own
            self._log.debug("reload_joined_unsatisfied", round_key=round_key)
            return await self._load(own_round_key, satisfied, fetch)
        return value

    async def _run_round(
        self,
        round_key: Hashable,
        generation: int,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            value = await fetch()
        except BaseException as e:
            # no await between the failure and the cleanup
            self._rounds.pop(round_key, None)
            self._log.warning("reload_failed", round_key=round_key, error=str(e))
            raise

        async with self._lock:
            self._rounds.pop(round_key, None)
            if generation > self._stored_generation:
                self._value = value
                self._stored_generation = generation
                self._log.debug("reload_stored", round_key=round_key)
            else:
                self._log.debug("reload_superseded", round_key=round_key)
        return value


class LanguageCache(SingleFlightCache[FrozenSet[ProjectLanguage]]):
    """Write-once cache of the project's languages.

    Once a non-empty set is cached it is served without network access for
    the lifetime of the cache; forcing a refresh means building a new client.
    """

    def __init__(self, fetch: LanguagesFetcher):
        super().__init__("languages")
        self._fetch = fetch

    @property
    def current(self) -> FrozenSet[ProjectLanguage]:
        """Cached languages, empty until a load succeeds."""
        return self._value or frozenset()

    async def load(self) -> FrozenSet[ProjectLanguage]:
        """Return the cached languages, fetching them on first use.

        Raises:
            Exception: Whatever the fetch raised, to every caller of the round.
        """
        return await self._load("languages", bool, self._fetch_languages)

    async def _fetch_languages(self) -> FrozenSet[ProjectLanguage]:
        return frozenset(await self._fetch())


class TranslationCache(SingleFlightCache[TranslationBundle]):
    """Cache of the bundle for the active locale.

    Holds at most one bundle. Loading a locale the cached bundle does not
    serve fetches a bundle scoped to the locale and replaces the slot,
    discarding the previous locale's data.

    Concurrent loads for locales of one language share a round. A caller
    whose locale is not served by the shared result (en-GB joining an en-US
    round) then runs a round of its own, keyed by its full tag.
    """

    def __init__(
        self,
        fetch: TranslationsFetcher,
        formatter: Optional[MessageFormatter] = None,
    ):
        super().__init__("translations")
        self._fetch = fetch
        self.formatter = formatter or IcuMessageFormatter()

    def current(self, locale: Optional[Locale] = None) -> Optional[TranslationBundle]:
        """Cached bundle if it serves ``locale`` (any bundle when None)."""
        bundle = self._value
        if bundle is None:
            return None
        if locale is None or bundle.serves(locale):
            return bundle
        return None

    async def load(self, locale: Optional[Locale] = None) -> TranslationBundle:
        """Return a bundle serving ``locale``, fetching it when needed.

        Args:
            locale: Locale to serve, or None to accept whatever is cached.

        Raises:
            Exception: Whatever the fetch raised, to every caller of the round.
        """

        def satisfied(bundle: Optional[TranslationBundle]) -> bool:
            return bundle is not None and (locale is None or bundle.serves(locale))

        async def fetch() -> TranslationBundle:
            return TranslationBundle(await self._fetch(locale), self.formatter)

        if locale is None:
            return await self._load(None, satisfied, fetch)
        return await self._load(locale.language, satisfied, fetch, own_round_key=locale.tag)
