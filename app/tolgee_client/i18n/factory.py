"""Factory functions and the optional process-wide client.

Prefer constructing one TolgeeClient at startup and passing it where it is
needed. The global slot exists for call sites that cannot receive it
(platform resource helpers, UI glue); it is set at most once unless forced.

Usage:
    from tolgee_client.i18n.factory import init, get_instance

    client = init(TolgeeConfig.from_settings())
    ...
    get_instance().instant("greeting")
"""

import threading
from typing import Optional

from tolgee_client.i18n.client import TolgeeClient, TranslationSource
from tolgee_client.i18n.config import TolgeeConfig
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

# Process-wide client instance
_instance: Optional[TolgeeClient] = None
_instance_lock = threading.Lock()


def create_client(
    config: Optional[TolgeeConfig] = None,
    source: Optional[TranslationSource] = None,
) -> TolgeeClient:
    """Create a TolgeeClient without touching the global slot.

    Args:
        config: Client configuration (default: from TOLGEE_* settings).
        source: Optional remote data source, mainly for tests.

    Returns:
        TolgeeClient: Configured client instance
    """
    return TolgeeClient(config or TolgeeConfig.from_settings(), source=source)


def _compare_and_set(expected: Optional[TolgeeClient], client: TolgeeClient) -> bool:
    global _instance

    with _instance_lock:
        if _instance is not expected:
            return False
        _instance = client
        return True


def init(
    config: Optional[TolgeeConfig] = None,
    force: bool = False,
    source: Optional[TranslationSource] = None,
) -> TolgeeClient:
    """Create a client and publish it as the global instance.

    The client is only published if no instance exists yet, or if
    ``force`` is set. Either way the newly created client is returned.

    Args:
        config: Client configuration (default: from TOLGEE_* settings).
        force: Replace an existing global instance.
        source: Optional remote data source, mainly for tests.

    Returns:
        The created client.
    """
    global _instance

    client = create_client(config, source)
    if force:
        with _instance_lock:
            _instance = client
        logger.info("global_client_replaced")
    elif _compare_and_set(None, client):
        logger.info("global_client_initialized")
    else:
        logger.info("global_client_already_initialized")
    return client


def get_instance() -> Optional[TolgeeClient]:
    """Return the global client, or None if init() was never called."""
    return _instance


def instance_or_init(config: Optional[TolgeeConfig] = None) -> TolgeeClient:
    """Return the global client, creating and publishing it if missing.

    Racing callers all get the instance that won the publication.
    """
    existing = _instance
    if existing is not None:
        return existing
    client = create_client(config)
    if _compare_and_set(None, client):
        logger.info("global_client_initialized")
        return client
    return _instance


def reset_instance() -> None:
    """Clear the global client (for testing only)."""
    global _instance

    with _instance_lock:
        _instance = None
    logger.debug("reset_global_client")
