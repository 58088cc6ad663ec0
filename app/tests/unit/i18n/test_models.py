"""Tests for tolgee_client.i18n.models module."""

import pytest

from tests.factories.i18n import make_language, make_translation_key
from tolgee_client.i18n.models import (
    NO_PARAMS,
    Formatter,
    Indexed,
    Locale,
    NoParams,
    ProjectLanguage,
    TranslationKey,
    params_of,
)

pytestmark = pytest.mark.unit


class TestLocale:
    """Tests for Locale parsing and normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("en", "en"),
            ("EN", "en"),
            ("en-us", "en-US"),
            ("en_US", "en-US"),
            ("zh-hant-tw", "zh-Hant-TW"),
            ("es-419", "es-419"),
            (" fr ", "fr"),
        ],
    )
    def test_from_string_normalizes_tag(self, raw, expected):
        """from_string() normalizes case and separators."""
        assert Locale.from_string(raw).tag == expected

    @pytest.mark.parametrize("raw", ["", "   ", "-US", "en--US", "1a"])
    def test_from_string_rejects_malformed(self, raw):
        """from_string() raises ValueError on blank or malformed tags."""
        with pytest.raises(ValueError):
            Locale.from_string(raw)

    def test_equality_uses_normalized_parts(self):
        """Locales built from different spellings are equal and hash alike."""
        assert Locale.from_string("en_us") == Locale("EN", region="us")
        assert len({Locale.from_string("en-US"), Locale.from_string("en_us")}) == 1

    def test_language_tag_drops_region(self):
        """language_tag holds only the language subtag."""
        assert Locale.from_string("pt-BR").language_tag == Locale("pt")

    def test_matches_same_language(self):
        """matches() accepts the same language with another region."""
        assert Locale.from_string("en-US").matches(Locale("en"))
        assert not Locale("en").matches(Locale("fr"))

    def test_str_is_tag(self):
        assert str(Locale.from_string("de_at")) == "de-AT"


class TestProjectLanguage:
    """Tests for ProjectLanguage payload parsing."""

    def test_parses_api_field_names(self):
        """API aliases map onto snake_case fields."""
        language = ProjectLanguage.model_validate(
            {
                "id": 1,
                "name": "German",
                "tag": "de-DE",
                "originalName": "Deutsch",
                "flagEmoji": "🇩🇪",
                "base": True,
            }
        )
        assert language.original_name == "Deutsch"
        assert language.flag_emoji == "🇩🇪"
        assert language.is_base is True
        assert language.locale == Locale("de", region="DE")

    def test_is_hashable(self):
        """Languages can be collected into a frozenset."""
        languages = frozenset({make_language("en"), make_language("en")})
        assert len(languages) == 1


class TestTranslationKey:
    """Tests for TranslationKey construction."""

    def test_from_texts_preserves_order(self):
        """from_texts() keeps the source order of locale tags."""
        key = make_translation_key("title", {"fr": "Titre", "en": "Title"})
        assert list(key.translations) == ["fr", "en"]
        assert key.translations["en"].text == "Title"

    def test_untranslated_text_is_none(self):
        key = make_translation_key("title", {"en": None})
        assert key.translations["en"].text is None

    def test_accepts_api_aliases(self):
        key = TranslationKey.model_validate(
            {"keyName": "menu.title", "keyDescription": "Menu header"}
        )
        assert key.key_name == "menu.title"
        assert key.key_description == "Menu header"
        assert key.translations == {}


class TestMessageParams:
    """Tests for MessageParams variants."""

    def test_params_of_without_args_is_no_params(self):
        assert params_of() is NO_PARAMS
        assert isinstance(NO_PARAMS, NoParams)

    def test_params_of_wraps_values(self):
        assert params_of("a", 1) == Indexed("a", 1)
        assert Indexed("a", 1).args == ("a", 1)

    def test_no_params_has_no_args(self):
        assert NO_PARAMS.args == ()


class TestFormatter:
    """Tests for Formatter selection."""

    @pytest.mark.parametrize("raw", ["icu", "ICU", " Icu "])
    def test_from_string_icu(self, raw):
        assert Formatter.from_string(raw) is Formatter.ICU

    def test_from_string_sprintf(self):
        assert Formatter.from_string("sprintf") is Formatter.SPRINTF

    def test_from_string_unknown_raises(self):
        with pytest.raises(ValueError):
            Formatter.from_string("gettext")
