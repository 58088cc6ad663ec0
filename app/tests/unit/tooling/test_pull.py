"""Unit tests for tolgee_client.tooling.pull module."""

import io
import zipfile

import httpx
import pytest

from tolgee_client.configuration import Settings, TolgeeSettings
from tolgee_client.tooling.models import Format, PullOptions, PushOptions, State
from tolgee_client.tooling.pull import pull_translations, push_translations
from tolgee_client.tooling.result import OperationStatus

pytestmark = pytest.mark.unit


def _export_zip():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("en.json", '{"title": "Settings"}')
        archive.writestr("fr.json", '{"title": "Paramètres"}')
    return buffer.getvalue()


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def export_response():
    return {"status": 200, "content": _export_zip()}


@pytest.fixture
def http_client(requests_seen, export_response):
    """Sync HTTP client answering the export endpoint."""

    def handler(request):
        requests_seen.append(request)
        return httpx.Response(
            export_response["status"], content=export_response["content"]
        )

    client = httpx.Client(transport=httpx.MockTransport(handler))
    yield client
    client.close()


@pytest.fixture
def options(tmp_path):
    return PullOptions(
        path=tmp_path / "i18n",
        api_key="tgpak_test",
        project_id="42",
        languages=["en", "fr"],
        states=[State.REVIEWED],
        tags=["release"],
    )


class TestPullWithCli:
    """The CLI is tried first."""

    def test_cli_success_skips_rest(self, options, working_cli, http_client, requests_seen):
        result = pull_translations(options, cli=working_cli, http_client=http_client)

        assert result.is_success
        assert result.data["source"] == "cli"
        working_cli.pull.assert_called_once_with(options)
        assert requests_seen == []

    def test_missing_project_id(self, tmp_path, working_cli):
        result = pull_translations(
            PullOptions(path=tmp_path, api_key="k"), cli=working_cli
        )

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "MISSING_PROJECT_ID"
        working_cli.pull.assert_not_called()

    def test_fallback_disabled(self, options, failing_cli, http_client, requests_seen):
        disabled = options.model_copy(update={"fallback_enabled": False})
        result = pull_translations(disabled, cli=failing_cli, http_client=http_client)

        assert result.error_code == "CLI_FAILED"
        assert requests_seen == []


class TestRestFallback:
    """The export zip is downloaded when the CLI fails."""

    def test_downloads_and_extracts(self, options, failing_cli, http_client, requests_seen):
        result = pull_translations(options, cli=failing_cli, http_client=http_client)

        assert result.is_success
        assert result.data == {"path": options.path, "source": "rest", "files": 2}
        assert (options.path / "fr.json").read_text(encoding="utf-8") == '{"title": "Paramètres"}'

        (request,) = requests_seen
        assert str(request.url).startswith("https://app.tolgee.io/v2/projects/42/export?")
        assert request.headers["X-API-Key"] == "tgpak_test"
        assert request.url.params["format"] == "JSON"
        assert request.url.params["messageFormat"] == "ICU"
        assert request.url.params["zip"] == "true"
        assert request.url.params.get_list("languages") == ["en", "fr"]
        assert request.url.params.get_list("filterState") == ["REVIEWED"]
        assert request.url.params.get_list("filterTagIn") == ["release"]

    def test_format_without_message_format(self, options, failing_cli, http_client, requests_seen):
        android = options.model_copy(update={"format": Format.ANDROID_XML})
        pull_translations(android, cli=failing_cli, http_client=http_client)

        params = requests_seen[0].url.params
        assert params["format"] == "ANDROID_XML"
        assert "messageFormat" not in params

    def test_missing_api_key(self, options, failing_cli, http_client, requests_seen):
        keyless = options.model_copy(update={"api_key": None})
        result = pull_translations(keyless, cli=failing_cli, http_client=http_client)

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.message == "No API Key provided."
        assert requests_seen == []

    @pytest.mark.parametrize(
        "status,expected",
        [
            (401, OperationStatus.UNAUTHORIZED),
            (404, OperationStatus.PERMANENT_ERROR),
            (503, OperationStatus.TRANSIENT_ERROR),
        ],
    )
    def test_http_errors_classified(
        self, options, failing_cli, http_client, export_response, status, expected
    ):
        export_response["status"] = status
        result = pull_translations(options, cli=failing_cli, http_client=http_client)

        assert result.status == expected
        assert result.error_code == f"HTTP_{status}"

    def test_bad_archive(self, options, failing_cli, http_client, export_response):
        export_response["content"] = b"not a zip"
        result = pull_translations(options, cli=failing_cli, http_client=http_client)

        assert result.error_code == "BAD_ARCHIVE"


class TestPush:
    """Push is CLI only."""

    def test_success(self, working_cli):
        assert push_translations(PushOptions(project_id="42"), cli=working_cli).is_success

    def test_failure(self, failing_cli):
        result = push_translations(PushOptions(project_id="42"), cli=failing_cli)
        assert result.status == OperationStatus.PERMANENT_ERROR


class TestPullOptions:
    """Tests for option defaults and settings."""

    def test_defaults(self, tmp_path):
        options = PullOptions(path=tmp_path)
        assert options.format is Format.JSON_ICU
        assert options.fallback_enabled is True
        assert options.resolved_api_url == "https://app.tolgee.io/v2/"

    def test_blank_values_dropped(self, tmp_path):
        options = PullOptions(path=tmp_path, api_key=" ", tags=["", "a"])
        assert options.api_key is None
        assert options.tags == ["a"]

    def test_from_settings(self, tmp_path):
        settings = Settings(
            tolgee=TolgeeSettings(
                api_key="tgpak_env",
                project_id="7",
                api_url="https://tolgee.example.com/v2",
                cli_fallback_enabled=False,
            )
        )
        options = PullOptions.from_settings(tmp_path, settings, languages=["de"])

        assert options.project_id == "7"
        assert options.api_key == "tgpak_env"
        assert options.resolved_api_url == "https://tolgee.example.com/v2/"
        assert options.fallback_enabled is False
        assert options.languages == ["de"]
