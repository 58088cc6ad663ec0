"""Options for pulling and pushing translation files."""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tolgee_client.configuration import DEFAULT_API_URL, Settings
from tolgee_client.configuration import settings as default_settings


class Format(str, Enum):
    """Localization file formats understood by the Tolgee CLI."""

    JSON_ICU = "JSON_ICU"
    JSON_JAVA = "JSON_JAVA"
    JSON_TOLGEE = "JSON_TOLGEE"
    PO_ICU = "PO_ICU"
    PO_PHP = "PO_PHP"
    PO_C = "PO_C"
    APPLE_STRINGS = "APPLE_STRINGS"
    APPLE_XLIFF = "APPLE_XLIFF"
    ANDROID_XML = "ANDROID_XML"
    COMPOSE_XML = "COMPOSE_XML"
    FLUTTER_ARB = "FLUTTER_ARB"
    PROPERTIES_ICU = "PROPERTIES_ICU"
    PROPERTIES_JAVA = "PROPERTIES_JAVA"
    YAML_ICU = "YAML_ICU"
    YAML_RUBY = "YAML_RUBY"
    XLIFF_ICU = "XLIFF_ICU"

    @property
    def export_params(self) -> Tuple[str, Optional[str]]:
        """REST export ``(format, messageFormat)`` equivalent of this format."""
        return _EXPORT_FORMATS[self]


_EXPORT_FORMATS = {
    Format.JSON_ICU: ("JSON", "ICU"),
    Format.JSON_JAVA: ("JSON", "JAVA_STRING_FORMAT"),
    Format.JSON_TOLGEE: ("JSON_TOLGEE", None),
    Format.PO_ICU: ("PO", "ICU"),
    Format.PO_PHP: ("PO", "PHP_SPRINTF"),
    Format.PO_C: ("PO", "C_SPRINTF"),
    Format.APPLE_STRINGS: ("APPLE_STRINGS_STRINGSDICT", None),
    Format.APPLE_XLIFF: ("APPLE_XLIFF", None),
    Format.ANDROID_XML: ("ANDROID_XML", None),
    Format.COMPOSE_XML: ("COMPOSE_XML", None),
    Format.FLUTTER_ARB: ("FLUTTER_ARB", None),
    Format.PROPERTIES_ICU: ("PROPERTIES", "ICU"),
    Format.PROPERTIES_JAVA: ("PROPERTIES", "JAVA_STRING_FORMAT"),
    Format.YAML_ICU: ("YAML", "ICU"),
    Format.YAML_RUBY: ("YAML_RUBY", None),
    Format.XLIFF_ICU: ("XLIFF", "ICU"),
}


class State(str, Enum):
    """Translation states a pull can be restricted to."""

    UNTRANSLATED = "UNTRANSLATED"
    TRANSLATED = "TRANSLATED"
    REVIEWED = "REVIEWED"


class PushMode(str, Enum):
    """How a push resolves conflicts with translations already on the server."""

    OVERRIDE = "OVERRIDE"
    KEEP = "KEEP"
    NO_FORCE = "NO_FORCE"


def _clean(values: Optional[List[str]]) -> List[str]:
    return [v.strip() for v in values or [] if v and v.strip()]


class ToolingOptions(BaseModel):
    """Connection options shared by pull and push."""

    model_config = ConfigDict(frozen=True)

    api_url: Optional[str] = None
    api_key: Optional[str] = None
    project_id: Optional[str] = None
    format: Optional[Format] = None
    config: Optional[Path] = None
    languages: List[str] = Field(default_factory=list)
    namespaces: List[str] = Field(default_factory=list)

    @field_validator("api_url", "api_key", "project_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("languages", "namespaces", mode="before")
    @classmethod
    def _drop_blank(cls, value):
        return _clean(value)

    @property
    def resolved_api_url(self) -> str:
        url = self.api_url or DEFAULT_API_URL
        return url if url.endswith("/") else f"{url}/"


class PullOptions(ToolingOptions):
    """Options for pulling translation files into ``path``.

    Attributes:
        path: Directory the files are written to.
        states: Only pull translations in these states.
        tags: Only pull keys carrying one of these tags.
        exclude_tags: Skip keys carrying one of these tags.
        fallback_enabled: Download the export over REST when the CLI fails.
    """

    path: Path
    format: Optional[Format] = Format.JSON_ICU
    states: List[State] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    exclude_tags: List[str] = Field(default_factory=list)
    fallback_enabled: bool = True

    @field_validator("tags", "exclude_tags", mode="before")
    @classmethod
    def _drop_blank_tags(cls, value):
        return _clean(value)

    @classmethod
    def from_settings(
        cls, path: Path, settings: Optional[Settings] = None, **overrides
    ) -> "PullOptions":
        """Options from TOLGEE_* settings, with keyword overrides."""
        tolgee = (settings or default_settings).tolgee
        values = {
            "path": path,
            "api_url": tolgee.api_url,
            "api_key": tolgee.api_key,
            "project_id": tolgee.project_id,
            "fallback_enabled": tolgee.cli_fallback_enabled,
        }
        values.update(overrides)
        return cls(**values)


class PushOptions(ToolingOptions):
    """Options for pushing local translation files to the server."""

    force_mode: PushMode = PushMode.NO_FORCE
