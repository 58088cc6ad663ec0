"""Translation models for the Tolgee client.

Defines the value types exchanged between the network layer, the caches and
the formatters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Locale:
    """Structured locale identifier.

    Uses IETF BCP 47 language tag format (e.g., en, en-US, zh-Hant-TW).
    Equality and hashing go through the normalized parts, so ``en_us`` and
    ``en-US`` are the same locale.

    Attributes:
        language: Lowercase language subtag (e.g., "en").
        script: Optional title-case script subtag (e.g., "Hant").
        region: Optional uppercase region subtag (e.g., "US").
    """

    language: str
    script: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "language", self.language.lower())
        if self.script:
            object.__setattr__(self, "script", self.script.title())
        if self.region:
            object.__setattr__(self, "region", self.region.upper())

    @classmethod
    def from_string(cls, locale_str: str) -> "Locale":
        """Parse a locale tag.

        Args:
            locale_str: Locale tag (e.g., "en", "en-US", "en_us").

        Returns:
            Normalized Locale.

        Raises:
            ValueError: If locale string is blank or malformed.
        """
        parts = [part for part in locale_str.strip().replace("_", "-").split("-")]
        if not parts or not parts[0] or not parts[0].isalpha():
            raise ValueError(f"Invalid locale tag: {locale_str!r}")
        if any(not part for part in parts):
            raise ValueError(f"Invalid locale tag: {locale_str!r}")

        script = None
        region = None
        for part in parts[1:]:
            if len(part) == 4 and part.isalpha() and script is None and region is None:
                script = part
            elif (len(part) == 2 and part.isalpha()) or (
                len(part) == 3 and part.isdigit()
            ):
                if region is None:
                    region = part
            # variants and extensions are ignored
        return cls(language=parts[0], script=script, region=region)

    @property
    def tag(self) -> str:
        """Normalized BCP 47 tag (e.g., "en-US")."""
        return "-".join(part for part in (self.language, self.script, self.region) if part)

    @property
    def language_tag(self) -> "Locale":
        """Locale holding only the language subtag."""
        return Locale(language=self.language)

    def matches(self, other: "Locale") -> bool:
        """Check whether ``other`` can serve this locale (same tag or language)."""
        return self == other or self.language == other.language

    def __str__(self) -> str:
        return self.tag


class ProjectLanguage(BaseModel):
    """A language configured in the Tolgee project.

    Parsed from the REST API payload (``originalName``, ``flagEmoji``, ``base``).
    Immutable and hashable so a set of languages can be cached as a frozenset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    tag: str
    original_name: Optional[str] = Field(default=None, alias="originalName")
    flag_emoji: Optional[str] = Field(default=None, alias="flagEmoji")
    is_base: bool = Field(default=False, alias="base")

    @property
    def locale(self) -> Locale:
        return Locale.from_string(self.tag)


class TranslationText(BaseModel):
    """One locale variant of a key. ``text`` is None for untranslated entries."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    text: Optional[str] = None


class TranslationKey(BaseModel):
    """A translation key with its per-locale variants.

    Attributes:
        key_name: Full key name (e.g., "greeting" or "menu.settings.title").
        key_description: Optional description entered in Tolgee.
        translations: Mapping of locale tag to TranslationText, in source order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    key_name: str = Field(alias="keyName")
    key_description: Optional[str] = Field(default=None, alias="keyDescription")
    translations: Dict[str, TranslationText] = Field(default_factory=dict)

    @classmethod
    def from_texts(
        cls,
        key_name: str,
        texts: Dict[str, Optional[str]],
        key_description: Optional[str] = None,
    ) -> "TranslationKey":
        """Build a key from a plain ``{tag: text}`` mapping."""
        return cls(
            key_name=key_name,
            key_description=key_description,
            translations={
                tag: TranslationText(text=text) for tag, text in texts.items()
            },
        )


class MessageParams:
    """Parameters for rendering a template.

    Closed set of variants: ``NoParams`` and ``Indexed``. Passed through to the
    formatter, never stored.
    """

    __slots__ = ()

    @property
    def args(self) -> Tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class NoParams(MessageParams):
    """No substitution."""

    def __repr__(self) -> str:
        return "NO_PARAMS"


@dataclass(frozen=True, init=False)
class Indexed(MessageParams):
    """Positional values for printf-style or positional ICU arguments."""

    values: Tuple[Any, ...] = field(default=())

    def __init__(self, *values: Any):
        object.__setattr__(self, "values", tuple(values))

    @property
    def args(self) -> Tuple[Any, ...]:
        return self.values


NO_PARAMS = NoParams()


def params_of(*args: Any) -> MessageParams:
    """Wrap call-site arguments into MessageParams."""
    return Indexed(*args) if args else NO_PARAMS


class Formatter(str, Enum):
    """Message formatting strategy, fixed per client configuration."""

    ICU = "icu"
    SPRINTF = "sprintf"

    @classmethod
    def from_string(cls, value: str) -> "Formatter":
        """Convert string to Formatter enum.

        Raises:
            ValueError: If the formatter name is not supported.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ValueError(f"Unsupported formatter: {value}") from e
