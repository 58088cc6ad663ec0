"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    FakeTranslationSource,
    make_bundle,
    make_config,
    make_keys,
    make_language,
    make_languages,
    make_translation_key,
)

__all__ = [
    "FakeTranslationSource",
    "make_bundle",
    "make_config",
    "make_keys",
    "make_language",
    "make_languages",
    "make_translation_key",
]
