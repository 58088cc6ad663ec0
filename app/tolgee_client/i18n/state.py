"""Current-locale holder with latest-value broadcast."""

import asyncio
from typing import AsyncIterator, List, Optional, Union

import babel

from tolgee_client.i18n.models import Locale, ProjectLanguage
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

LocaleInput = Union[Locale, str, ProjectLanguage]

FALLBACK_LOCALE = Locale("en")


def system_locale() -> Locale:
    """Locale from the process environment (LANGUAGE, LC_ALL, LC_MESSAGES, LANG)."""
    tag = babel.default_locale("LC_MESSAGES")
    if not tag:
        return FALLBACK_LOCALE
    try:
        return Locale.from_string(tag)
    except ValueError:
        return FALLBACK_LOCALE


def to_locale(value: LocaleInput) -> Locale:
    """Normalize a Locale, a tag string or a ProjectLanguage into a Locale.

    Raises:
        ValueError: If a tag string is malformed.
        TypeError: If the value is none of the accepted forms.
    """
    if isinstance(value, Locale):
        return value
    if isinstance(value, ProjectLanguage):
        return value.locale
    if isinstance(value, str):
        return Locale.from_string(value)
    raise TypeError(f"Cannot build a locale from {value!r}")


class LocaleState:
    """Hot latest-value holder for the current locale.

    Every subscriber first receives the current value, then each later
    distinct value. A subscriber that falls behind only sees the latest value;
    intermediate ones are not buffered. Setting an equal locale publishes
    nothing.

    Must be used from the thread running the event loop of its subscribers.
    """

    def __init__(self, initial: Optional[LocaleInput] = None):
        self._value = to_locale(initial) if initial is not None else system_locale()
        self._version = 0
        self._waiters: List[asyncio.Event] = []

    @property
    def value(self) -> Locale:
        return self._value

    def set_locale(self, value: LocaleInput) -> Locale:
        """Publish a new current locale.

        Args:
            value: Locale, tag string (e.g., "fr", "en-US") or ProjectLanguage.

        Returns:
            The normalized locale now current.
        """
        locale = to_locale(value)
        if locale != self._value:
            logger.info("locale_changed", previous=self._value.tag, locale=locale.tag)
            self._value = locale
            self._version += 1
            for waiter in self._waiters:
                waiter.set()
        return locale

    async def subscribe(self) -> AsyncIterator[Locale]:
        """Yield the current locale and every later change (conflated)."""
        waiter = asyncio.Event()
        self._waiters.append(waiter)
        try:
            seen = self._version
            yield self._value
            while True:
                await waiter.wait()
                waiter.clear()
                if self._version != seen:
                    seen = self._version
                    yield self._value
        finally:
            self._waiters.remove(waiter)

    def __repr__(self) -> str:
        return f"LocaleState({self._value.tag!r})"
