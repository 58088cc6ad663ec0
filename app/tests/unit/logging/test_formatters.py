"""Unit tests for tolgee_client.logging.formatters module.

Tests cover:
- mask_sensitive_data processor
- truncate_large_values processor
- SENSITIVE_PATTERNS constant
"""

import pytest

from tolgee_client.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    def test_masks_api_key(self):
        """The Tolgee API key never reaches the output."""
        processor = mask_sensitive_data()
        result = processor(None, "info", {"event": "request", "api_key": "tgpak_secret"})

        assert result["api_key"] == "***REDACTED***"
        assert result["event"] == "request"

    @pytest.mark.parametrize("key", ["X-API-Key", "Authorization", "access_token", "APIKEY"])
    def test_matches_case_insensitively(self, key):
        processor = mask_sensitive_data()
        assert processor(None, "info", {key: "value"})[key] == "***REDACTED***"

    def test_none_values_are_kept(self):
        processor = mask_sensitive_data()
        assert processor(None, "info", {"api_key": None})["api_key"] is None

    def test_custom_mask_and_patterns(self):
        processor = mask_sensitive_data(mask_value="[hidden]", additional_patterns=frozenset({"project_id"}))
        result = processor(None, "info", {"project_id": "42", "locale": "en"})

        assert result["project_id"] == "[hidden]"
        assert result["locale"] == "en"

    def test_does_not_mutate_input(self):
        event_dict = {"api_key": "tgpak_secret"}
        mask_sensitive_data()(None, "info", event_dict)
        assert event_dict["api_key"] == "tgpak_secret"


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    def test_truncates_long_strings(self):
        processor = truncate_large_values(max_length=10)
        result = processor(None, "info", {"body": "x" * 25})

        assert result["body"] == "x" * 10 + "...[truncated, 25 chars total]"

    def test_keeps_short_strings_and_other_types(self):
        processor = truncate_large_values(max_length=10)
        result = processor(None, "info", {"body": "short", "count": 12345678901})

        assert result == {"body": "short", "count": 12345678901}


@pytest.mark.unit
def test_sensitive_patterns_cover_tolgee_header():
    assert "x-api-key" in SENSITIVE_PATTERNS
    assert "api_key" in SENSITIVE_PATTERNS
