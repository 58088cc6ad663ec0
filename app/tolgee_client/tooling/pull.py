"""Pull and push translation files.

pull_translations() tries the Tolgee CLI first. When the CLI is missing,
outdated or fails, and the fallback is enabled, it downloads the project
export as a zip over the REST API and extracts it into the target path.
"""

import io
import zipfile
from typing import Any, Dict, Optional

import httpx

from tolgee_client.i18n.api import API_KEY_HEADER
from tolgee_client.i18n.exceptions import TolgeeApiError
from tolgee_client.logging import get_module_logger
from tolgee_client.tooling.cli import TolgeeCli
from tolgee_client.tooling.models import PullOptions, PushOptions
from tolgee_client.tooling.result import OperationResult, OperationStatus, classify_api_error

logger = get_module_logger()


def _export_params(options: PullOptions) -> Dict[str, Any]:
    params: Dict[str, Any] = {"zip": "true"}
    if options.format is not None:
        export_format, message_format = options.format.export_params
        params["format"] = export_format
        if message_format:
            params["messageFormat"] = message_format
    if options.languages:
        params["languages"] = options.languages
    if options.states:
        params["filterState"] = [s.value for s in options.states]
    if options.namespaces:
        params["filterNamespace"] = options.namespaces
    if options.tags:
        params["filterTagIn"] = options.tags
    if options.exclude_tags:
        params["filterTagNotIn"] = options.exclude_tags
    return params


def download_export(
    options: PullOptions, http_client: Optional[httpx.Client] = None
) -> bytes:
    """Download the project export zip.

    Raises:
        TolgeeApiError: On transport errors or error responses.
    """
    url = f"{options.resolved_api_url}projects/{options.project_id}/export"
    client = http_client or httpx.Client(follow_redirects=True, timeout=60.0)
    try:
        response = client.get(
            url,
            params=_export_params(options),
            headers={API_KEY_HEADER: options.api_key or ""},
        )
    except httpx.HTTPError as e:
        raise TolgeeApiError(f"Request to {url} failed: {e}", url=url) from e
    finally:
        if http_client is None:
            client.close()

    if response.is_error:
        raise TolgeeApiError(
            f"Request to {url} returned {response.status_code}",
            status_code=response.status_code,
            url=url,
        )
    return response.content


def extract_archive(content: bytes, options: PullOptions) -> int:
    """Extract an export zip into ``options.path``; returns the file count.

    Raises:
        zipfile.BadZipFile: If the content is not a zip archive.
    """
    options.path.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        members = [m for m in archive.infolist() if not m.is_dir()]
        archive.extractall(options.path)
    return len(members)


def pull_translations(
    options: PullOptions,
    cli: Optional[TolgeeCli] = None,
    http_client: Optional[httpx.Client] = None,
) -> OperationResult:
    """Pull translation files into ``options.path``.

    Args:
        options: What to pull and where to.
        cli: CLI wrapper (default: ``tolgee`` on PATH).
        http_client: Client for the REST fallback, mainly for tests.

    Returns:
        OperationResult whose data holds the path and the source used
        ("cli" or "rest").
    """
    log = logger.bind(project_id=options.project_id, path=str(options.path))
    if not options.project_id:
        log.error("pull_missing_project_id")
        return OperationResult.permanent_error(
            "No project id provided.", error_code="MISSING_PROJECT_ID"
        )

    if (cli or TolgeeCli()).pull(options):
        log.info("translations_pulled", source="cli")
        return OperationResult.success(
            data={"path": options.path, "source": "cli"}, message="Pulled with CLI"
        )

    if not options.fallback_enabled:
        log.warning("pull_cli_failed_without_fallback")
        return OperationResult.permanent_error(
            "Tolgee CLI failed and the REST fallback is disabled.",
            error_code="CLI_FAILED",
        )

    log.warning("pull_falling_back_to_rest")
    if not options.api_key:
        log.error("pull_missing_api_key")
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            "No API Key provided.",
            error_code="MISSING_API_KEY",
        )

    try:
        content = download_export(options, http_client)
    except TolgeeApiError as e:
        log.warning("translation_zip_download_failed", error=str(e))
        return classify_api_error(e)

    try:
        count = extract_archive(content, options)
    except (zipfile.BadZipFile, OSError) as e:
        log.warning("translation_zip_unreadable", error=str(e))
        return OperationResult.permanent_error(
            f"Could not read translation zip file: {e}", error_code="BAD_ARCHIVE"
        )

    log.info("translations_pulled", source="rest", files=count)
    return OperationResult.success(
        data={"path": options.path, "source": "rest", "files": count},
        message="Pulled with REST export",
    )


def push_translations(
    options: PushOptions, cli: Optional[TolgeeCli] = None
) -> OperationResult:
    """Push local translation files with the CLI (no REST fallback)."""
    if (cli or TolgeeCli()).push(options):
        logger.info("translations_pushed", project_id=options.project_id)
        return OperationResult.success(data={"source": "cli"}, message="Pushed with CLI")
    logger.warning("push_failed", project_id=options.project_id)
    return OperationResult.permanent_error("Tolgee CLI push failed.", error_code="CLI_FAILED")
