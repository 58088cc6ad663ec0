"""Unit tests for tooling results and error classification.

Tests cover:
- OperationResult constructors
- HTTP status classification (auth, transient, permanent)
- Transport failures without a status code
- Export format mapping
"""

import pytest

from tolgee_client.i18n.exceptions import TolgeeApiError
from tolgee_client.tooling.models import Format
from tolgee_client.tooling.result import (
    OperationResult,
    OperationStatus,
    classify_api_error,
)

pytestmark = pytest.mark.unit


class TestOperationResult:
    """Tests for OperationResult constructors."""

    def test_success(self):
        result = OperationResult.success(data={"files": 2})
        assert result.is_success
        assert result.data == {"files": 2}
        assert result.error_code is None

    def test_permanent_error(self):
        result = OperationResult.permanent_error("boom", error_code="X")
        assert not result.is_success
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "X"


class TestClassifyApiError:
    """Tests for classify_api_error() function."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, status):
        result = classify_api_error(TolgeeApiError("denied", status_code=status))

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.error_code == f"HTTP_{status}"
        assert "API key" in result.message

    @pytest.mark.parametrize("status", [429, 500, 502])
    def test_transient_errors(self, status):
        result = classify_api_error(TolgeeApiError("retry", status_code=status))
        assert result.status == OperationStatus.TRANSIENT_ERROR

    def test_transport_failure_is_transient(self):
        """No status code means the request never got a response."""
        result = classify_api_error(TolgeeApiError("connection reset"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"

    def test_client_errors_are_permanent(self):
        result = classify_api_error(TolgeeApiError("missing", status_code=404))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "HTTP_404"


class TestExportFormats:
    """Every CLI format has a REST export counterpart."""

    @pytest.mark.parametrize("fmt", list(Format))
    def test_all_formats_mapped(self, fmt):
        export_format, _ = fmt.export_params
        assert export_format

    def test_message_format_split(self):
        assert Format.PO_PHP.export_params == ("PO", "PHP_SPRINTF")
        assert Format.YAML_RUBY.export_params == ("YAML_RUBY", None)
