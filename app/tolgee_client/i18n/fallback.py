"""Cache-first lookups with a fallback to platform-bundled strings.

Host applications usually ship compiled-in strings (gettext catalogs,
resource files). ResourceStrings asks the client's cache first and falls
back to the host lookup, so a UI never renders an empty label while
translations are still loading.

Usage:
    strings = ResourceStrings(
        client,
        resolve_key=lambda res_id: res_id,
        platform_lookup=gettext_lookup,
    )
    strings.string("greeting", "World")
"""

from typing import Any, Callable, List, Optional, Sequence

from tolgee_client.i18n.client import TolgeeClient
from tolgee_client.i18n.models import params_of
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

ARRAY_SEPARATOR = ";;;"


class PlatformLookup:
    """Host application's bundled strings.

    Subclass and override the methods your platform supports. The default
    implementation knows no strings at all.
    """

    def string(self, res_id: Any, *args: Any) -> str:
        raise KeyError(res_id)

    def plural(self, res_id: Any, quantity: int, *args: Any) -> str:
        raise KeyError(res_id)

    def string_array(self, res_id: Any) -> List[str]:
        raise KeyError(res_id)


class ResourceStrings:
    """Cache-only translations backed by the host's bundled strings.

    Args:
        client: Client whose cache is consulted (never the network).
        resolve_key: Maps a host resource id to a Tolgee key name. None means
            the id has no Tolgee counterpart. Defaults to ``str``.
        platform_lookup: Host fallback for ids without a cached translation.
    """

    def __init__(
        self,
        client: TolgeeClient,
        resolve_key: Optional[Callable[[Any], Optional[str]]] = None,
        platform_lookup: Optional[PlatformLookup] = None,
    ):
        self.client = client
        self.platform = platform_lookup or PlatformLookup()
        self.resolve_key = resolve_key or str

    def _instant(self, res_id: Any, args: Sequence[Any]) -> Optional[str]:
        key = self.resolve_key(res_id)
        if key is None:
            return None
        return self.client.instant(key, params_of(*args))

    def string(self, res_id: Any, *args: Any) -> str:
        """Translated string, or the host string when nothing is cached."""
        text = self._instant(res_id, args)
        if text is not None:
            return text
        logger.debug("platform_string_fallback", res_id=str(res_id))
        return self.platform.string(res_id, *args)

    def plural(self, res_id: Any, quantity: int, *args: Any) -> str:
        """Quantity string.

        The quantity is the first format argument, so an ICU template
        selects its plural branch with ``{0, plural, ...}`` or with the
        first-named argument. Extra ``args`` follow it.
        """
        text = self._instant(res_id, (quantity, *args))
        if text is not None:
            return text
        logger.debug("platform_plural_fallback", res_id=str(res_id))
        return self.platform.plural(res_id, quantity, *args)

    def string_array(self, res_id: Any) -> List[str]:
        """String array; cached arrays are stored joined by ``;;;``."""
        text = self._instant(res_id, ())
        if text is not None:
            return text.split(ARRAY_SEPARATOR)
        logger.debug("platform_array_fallback", res_id=str(res_id))
        return self.platform.string_array(res_id)
