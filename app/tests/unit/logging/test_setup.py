"""Unit tests for tolgee_client.logging.setup module.

Tests cover:
- configure_logging function
- get_module_logger function
- Test logging suppression in test environment
"""

import logging

import pytest
import structlog

from tolgee_client.logging.setup import (
    _is_test_environment,
    configure_logging,
    get_module_logger,
)


@pytest.mark.unit
class TestIsTestEnvironment:
    """Test suite for _is_test_environment helper."""

    def test_detects_pytest_in_sys_modules(self):
        """Returns True when pytest is in sys.modules."""
        assert _is_test_environment() is True


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging function."""

    def test_returns_bound_logger(self, mock_settings):
        result = configure_logging(settings=mock_settings)

        assert hasattr(result, "info")
        assert hasattr(result, "warning")
        assert hasattr(result, "bind")

    def test_accepts_overrides(self, mock_settings):
        """log_level and is_production are accepted in every combination."""
        assert configure_logging(settings=mock_settings, log_level="DEBUG") is not None
        assert configure_logging(settings=mock_settings, is_production=True) is not None

    def test_suppresses_in_test_env(self, mock_settings):
        """In test environment, root logger level is set high to suppress output."""
        configure_logging(settings=mock_settings)
        assert logging.getLogger().level > logging.CRITICAL


@pytest.mark.unit
class TestGetModuleLogger:
    """Test suite for get_module_logger function."""

    def test_binds_calling_module(self):
        logger = get_module_logger()
        context = structlog.get_context(logger)

        assert context["module_path"] == __name__
        assert context["component"] == __name__.split(".")[-1]

    def test_library_modules_bind_their_name(self):
        from tolgee_client.i18n import cache

        context = structlog.get_context(cache.logger)
        assert context["module_path"] == "tolgee_client.i18n.cache"
        assert context["component"] == "cache"
