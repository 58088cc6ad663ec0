"""In-memory translation bundle.

A TranslationBundle indexes a fixed collection of TranslationKey values by
locale and renders keys through a MessageFormatter.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from tolgee_client.i18n.formatting import IcuMessageFormatter, MessageFormatter
from tolgee_client.i18n.models import NO_PARAMS, Locale, MessageParams, TranslationKey


@dataclass(frozen=True)
class MappedTranslation:
    """One entry of a provider: a key's text in the provider's locale."""

    name: str
    description: Optional[str]
    text: Optional[str]


class LocaleProvider:
    """Ordered per-locale view over a bundle's keys.

    Attributes:
        locale: Locale this provider serves.
        entries: Entries in the order their keys appeared in the source.
    """

    def __init__(self, locale: Locale, entries: List[MappedTranslation]):
        self.locale = locale
        self.entries: Tuple[MappedTranslation, ...] = tuple(entries)
        self._index: Dict[str, int] = {}
        for position, entry in enumerate(self.entries):
            # first occurrence of a key name wins within a provider
            self._index.setdefault(entry.name, position)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> Optional[str]:
        return self.entries[index].text

    def index_of_key(self, key: str) -> Optional[int]:
        return self._index.get(key)

    def text(self, key: str) -> Optional[str]:
        index = self.index_of_key(key)
        return None if index is None else self.entries[index].text


class TranslationBundle:
    """Immutable index over translation keys.

    Providers are derived at construction, one per locale tag present in the
    keys, registered in the order the locales were first encountered while
    scanning the keys. A bundle is never mutated: data for another locale
    needs a new bundle.

    Attributes:
        keys: Source keys in their original order.
        formatter: MessageFormatter used by localized().
    """

    def __init__(
        self,
        keys: Iterable[TranslationKey],
        formatter: Optional[MessageFormatter] = None,
    ):
        self.keys: Tuple[TranslationKey, ...] = tuple(keys)
        self.formatter = formatter or IcuMessageFormatter()

        grouped: Dict[str, List[MappedTranslation]] = {}
        for key in self.keys:
            for tag, translation in key.translations.items():
                grouped.setdefault(tag, []).append(
                    MappedTranslation(
                        name=key.key_name,
                        description=key.key_description,
                        text=translation.text,
                    )
                )

        self._providers: Tuple[LocaleProvider, ...] = tuple(
            LocaleProvider(Locale.from_string(tag), entries)
            for tag, entries in grouped.items()
        )

    @property
    def providers(self) -> Tuple[LocaleProvider, ...]:
        return self._providers

    @property
    def locales(self) -> List[Locale]:
        """Locales with at least one provider, in registration order."""
        return [provider.locale for provider in self._providers]

    def __len__(self) -> int:
        return len(self.keys)

    def has_locale(self, locale: Locale) -> bool:
        """Check whether some key has a translation entry for exactly this tag.

        Args:
            locale: Locale to check.

        Returns:
            True if a provider for the tag exists, False otherwise.
        """
        return any(p.locale == locale for p in self._providers)

    def serves(self, locale: Locale) -> bool:
        """Check whether lookups for a locale can be answered.

        A provider for the exact tag or for the locale's bare language
        (``en`` for ``en-US``) serves the locale.
        """
        return bool(self._providers_for(locale))

    def _providers_for(self, locale: Optional[Locale]) -> List[LocaleProvider]:
        if locale is None:
            return list(self._providers)
        exact = [p for p in self._providers if p.locale == locale]
        if exact:
            return exact
        bare = locale.language_tag
        return [p for p in self._providers if p.locale == bare]

    def template(self, key: str, locale: Optional[Locale] = None) -> Optional[str]:
        """Raw template for a key, without formatting.

        Providers are searched in registration order; the first one holding a
        text for the key wins. With a locale, only providers serving that
        locale are searched.
        """
        for provider in self._providers_for(locale):
            text = provider.text(key)
            if text is not None:
                return text
        return None

    def localized(
        self,
        key: str,
        params: MessageParams = NO_PARAMS,
        locale: Optional[Locale] = None,
    ) -> Optional[str]:
        """Render a key.

        The template is formatted with the requested ``locale``, not the
        provider's own one.

        Args:
            key: Key name.
            params: NoParams or Indexed values.
            locale: Requested locale, or None to search every provider.

        Returns:
            Rendered text, or None if the key is missing or fails to render.
        """
        template = self.template(key, locale)
        if template is None:
            return None
        render_locale = locale
        if render_locale is None and self._providers:
            render_locale = self._providers[0].locale
        return self.formatter.render(template, params, render_locale)

    def __repr__(self) -> str:
        tags = ", ".join(locale.tag for locale in self.locales)
        return f"TranslationBundle(keys={len(self.keys)}, locales=[{tags}])"
