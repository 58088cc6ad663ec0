"""Shared fixtures for the Tolgee client test suite."""

import pytest

from tests.factories.i18n import FakeTranslationSource, make_config
from tolgee_client.i18n import TolgeeClient, reset_instance


@pytest.fixture
def source():
    """In-memory translation source with the en/fr sample keys."""
    return FakeTranslationSource()


@pytest.fixture
def config():
    """ICU configuration with English as the initial locale."""
    return make_config()


@pytest.fixture
def client(config, source):
    """TolgeeClient backed by the in-memory source."""
    return TolgeeClient(config, source=source)


@pytest.fixture(autouse=True)
def reset_global_client():
    """Reset the process-wide client after each test."""
    yield
    reset_instance()
