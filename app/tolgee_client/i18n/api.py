"""Tolgee REST API and content delivery client.

Fetches the two pieces of remote state the caches need:

- project languages: ``GET projects/{id}/languages`` (paged)
- translations: ``GET projects/{id}/export`` or ``<cdn>/<tag>.json``

Usage:
    from tolgee_client.i18n.api import TolgeeApi

    async with TolgeeApi(config) as api:
        languages = await api.fetch_languages()
        keys = await api.fetch_translations(Locale.from_string("en"))
"""

import io
import json
import zipfile
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import httpx

from tolgee_client.i18n.config import TolgeeConfig
from tolgee_client.i18n.exceptions import TolgeeApiError, TolgeeConfigurationError
from tolgee_client.i18n.models import Locale, ProjectLanguage, TranslationKey, TranslationText
from tolgee_client.logging import get_module_logger

logger = get_module_logger()

API_KEY_HEADER = "X-API-Key"
LANGUAGES_PAGE_SIZE = 100
EXPORT_FORMAT = "JSON"
KEY_DELIMITER = "."


def parse_export_document(tag: str, document: Any) -> Dict[str, Optional[str]]:
    """Flatten one exported JSON document into ``{key_name: text}``.

    Nested objects are joined with '.', so both flat exports and exports with a
    structure delimiter give the same key names.
    """
    flat: Dict[str, Optional[str]] = {}

    def visit(prefix: str, node: Any) -> None:
        if isinstance(node, Mapping):
            for name, child in node.items():
                visit(f"{prefix}{KEY_DELIMITER}{name}" if prefix else str(name), child)
        elif node is None or isinstance(node, str):
            flat[prefix] = node
        else:
            flat[prefix] = str(node)

    if not isinstance(document, Mapping):
        raise TolgeeApiError(f"Unexpected export document for {tag}: expected an object")
    visit("", document)
    return flat


def keys_from_documents(documents: Mapping[str, Any]) -> List[TranslationKey]:
    """Merge per-locale export documents into TranslationKey values.

    Key order follows the first document a key appears in; locale order in
    each key follows the order of ``documents``.
    """
    merged: Dict[str, Dict[str, TranslationText]] = {}
    for tag, document in documents.items():
        for name, text in parse_export_document(tag, document).items():
            merged.setdefault(name, {})[tag] = TranslationText(text=text)
    return [
        TranslationKey(key_name=name, translations=translations)
        for name, translations in merged.items()
    ]


def documents_from_archive(content: bytes) -> Dict[str, Any]:
    """Read an export zip into ``{tag: document}``.

    Members are ``<tag>.json``, optionally below a namespace directory;
    documents of the same tag are merged.
    """
    documents: Dict[str, Dict[str, Any]] = {}
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            for member in archive.infolist():
                path = PurePosixPath(member.filename)
                if member.is_dir() or path.suffix.lower() != ".json":
                    continue
                document = json.loads(archive.read(member).decode("utf-8"))
                documents.setdefault(path.stem, {}).update(document)
    except (zipfile.BadZipFile, ValueError) as e:
        raise TolgeeApiError(f"Invalid export archive: {e}") from e
    return documents


class TolgeeApi:
    """Async client for the Tolgee backend.

    Uses ``config.network.client`` when provided; otherwise creates and owns
    an httpx.AsyncClient, closed by ``aclose()``.

    Attributes:
        config: Client configuration.
    """

    def __init__(self, config: TolgeeConfig):
        self.config = config
        self._owns_client = config.network.client is None
        self._client = config.network.client or httpx.AsyncClient(
            timeout=config.network.timeout_seconds,
            follow_redirects=config.network.follow_redirects,
        )
        self._logger = logger.bind(api_url=config.api_url, project_id=config.project_id)

    async def __aenter__(self) -> "TolgeeApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _project_path(self, endpoint: str) -> str:
        if self.config.project_id:
            return f"projects/{self.config.project_id}/{endpoint}"
        return f"projects/{endpoint}"

    def _headers(self) -> Dict[str, str]:
        if not self.config.api_key:
            raise TolgeeConfigurationError("No API key configured")
        return {API_KEY_HEADER: self.config.api_key, "Accept": "application/json"}

    async def _get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        log = self._logger.bind(url=url)
        log.debug("tolgee_request", params=params)
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            log.warning("tolgee_request_failed", error=str(e))
            raise TolgeeApiError(f"Request to {url} failed: {e}", url=url) from e

        if response.is_error:
            log.warning("tolgee_request_rejected", status_code=response.status_code)
            raise TolgeeApiError(
                f"Request to {url} returned {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TolgeeApiError(
                f"Invalid JSON from {response.request.url}",
                status_code=response.status_code,
            ) from e

    async def fetch_languages(self) -> Set[ProjectLanguage]:
        """Fetch every project language, following pagination.

        Returns:
            All languages across all pages.

        Raises:
            TolgeeApiError: On transport errors, error responses or bad payloads.
            TolgeeConfigurationError: If no API key is configured.
        """
        url = self.config.api_url + self._project_path("languages")
        headers = self._headers()
        languages: Set[ProjectLanguage] = set()
        page = 0

        while True:
            response = await self._get(
                url,
                params={"page": page, "size": LANGUAGES_PAGE_SIZE},
                headers=headers,
            )
            payload = self._json(response)
            embedded = (payload or {}).get("_embedded") or {}
            try:
                languages.update(
                    ProjectLanguage.model_validate(item)
                    for item in embedded.get("languages", [])
                )
            except ValueError as e:
                raise TolgeeApiError(f"Invalid language payload: {e}") from e

            total_pages = ((payload or {}).get("page") or {}).get("totalPages", 1)
            page += 1
            if page >= total_pages:
                break

        self._logger.info("languages_fetched", count=len(languages), pages=page)
        return languages

    async def fetch_translations(self, locale: Optional[Locale] = None) -> List[TranslationKey]:
        """Fetch translations, scoped to the locale's language when given.

        Uses the content delivery URL when configured, the REST export
        otherwise.

        Args:
            locale: Locale whose language subtag filters the export, or None
                for every project language.

        Returns:
            Keys with their per-locale texts.

        Raises:
            TolgeeApiError: On transport errors, error responses or bad payloads.
            TolgeeConfigurationError: If no API key is configured for the REST
                export, or no locale is given for a CDN fetch.
        """
        if self.config.content_delivery.url:
            documents = await self._fetch_from_cdn(locale)
        else:
            documents = await self._fetch_export(locale)

        keys = keys_from_documents(documents)
        self._logger.info(
            "translations_fetched",
            locale=locale.tag if locale else None,
            locales=list(documents),
            key_count=len(keys),
        )
        return keys

    async def _fetch_export(self, locale: Optional[Locale]) -> Dict[str, Any]:
        url = self.config.api_url + self._project_path("export")
        params: Dict[str, Any] = {
            "format": EXPORT_FORMAT,
            "structureDelimiter": "",
        }
        tags = list(dict.fromkeys((locale.tag, locale.language))) if locale else []
        if len(tags) == 1:
            params["languages"] = tags[0]
            params["zip"] = "false"
        else:
            # all languages, or a regional tag plus its bare language
            if tags:
                params["languages"] = tags
            params["zip"] = "true"

        response = await self._get(url, params=params, headers=self._headers())
        if len(tags) != 1 or _is_zip(response):
            return documents_from_archive(response.content)
        return {tags[0]: self._json(response)}

    async def _fetch_from_cdn(self, locale: Optional[Locale]) -> Dict[str, Any]:
        if locale is None:
            raise TolgeeConfigurationError("Content delivery requires a locale")
        base_url = self.config.content_delivery.url
        documents: Dict[str, Any] = {}
        for tag in _cdn_candidates(locale):
            try:
                response = await self._get(f"{base_url}{tag}.json")
            except TolgeeApiError as e:
                if e.status_code in (403, 404):
                    continue
                raise
            documents[tag] = self._json(response)
            return documents
        raise TolgeeApiError(
            f"No content delivery file for {locale.tag}",
            status_code=404,
            url=base_url,
        )


def _cdn_candidates(locale: Locale) -> Iterable[str]:
    if locale.tag != locale.language:
        yield locale.tag
    yield locale.language


def _is_zip(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "zip" in content_type or response.content[:4] == b"PK\x03\x04"
