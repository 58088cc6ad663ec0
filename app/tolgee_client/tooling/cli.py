"""Wrapper around the Tolgee command line tool.

The CLI is an external collaborator: it must be on PATH and at least
version 2.0.0. A missing or outdated CLI makes every command report failure
instead of raising, so callers can fall back to the REST API.

Usage:
    cli = TolgeeCli()
    if not cli.pull(options):
        ...
"""

import subprocess
from functools import cached_property
from typing import Callable, List, Optional, Sequence

from packaging.version import InvalidVersion, Version

from tolgee_client.logging import get_module_logger
from tolgee_client.tooling.models import PullOptions, PushOptions, ToolingOptions

logger = get_module_logger()

EXECUTABLE = "tolgee"
SUPPORTED_MIN_VERSION = Version("2.0.0")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def _multi(flag: str, values: Sequence[str]) -> List[str]:
    return [flag, *values] if values else []


class TolgeeCli:
    """Runs ``tolgee`` subcommands.

    Args:
        executable: Command name or path of the CLI.
        timeout_seconds: Limit for a single command.
        runner: ``subprocess.run`` compatible callable, replaceable in tests.
    """

    def __init__(
        self,
        executable: str = EXECUTABLE,
        timeout_seconds: float = 300.0,
        runner: Runner = subprocess.run,
    ):
        self.executable = executable
        self.timeout_seconds = timeout_seconds
        self._run = runner

    def _execute(self, args: List[str]) -> Optional["subprocess.CompletedProcess[str]"]:
        try:
            return self._run(
                [self.executable, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("tolgee_cli_unavailable", command=args[:1], error=str(e))
            return None

    def version(self) -> Optional[Version]:
        """Installed CLI version, or None if it is missing or unparseable."""
        completed = self._execute(["--version"])
        if completed is None or completed.returncode != 0:
            return None
        output = (completed.stdout or "").strip()
        if not output:
            return None
        try:
            return Version(output.split()[-1].lstrip("v"))
        except InvalidVersion:
            logger.warning("tolgee_cli_version_unparseable", output=output)
            return None

    @cached_property
    def installed(self) -> bool:
        """True if a supported CLI version is on PATH (checked once)."""
        version = self.version()
        supported = version is not None and version >= SUPPORTED_MIN_VERSION
        logger.debug(
            "tolgee_cli_detected",
            version=str(version) if version else None,
            supported=supported,
        )
        return supported

    @staticmethod
    def _connection_args(options: ToolingOptions) -> List[str]:
        args: List[str] = []
        if options.api_url:
            args += ["--api-url", options.api_url]
        if options.api_key:
            args += ["--api-key", options.api_key]
        if options.project_id:
            args += ["--project-id", options.project_id]
        if options.format is not None:
            args += ["--format", options.format.value]
        return args

    @classmethod
    def pull_args(cls, options: PullOptions) -> List[str]:
        """Argument list for ``tolgee pull``."""
        args = ["pull", *cls._connection_args(options), "--path", str(options.path)]
        args += _multi("--languages", options.languages)
        args += _multi("--states", [s.value for s in options.states])
        args += _multi("--namespaces", options.namespaces)
        args += _multi("--tags", options.tags)
        args += _multi("--exclude-tags", options.exclude_tags)
        if options.config is not None:
            args += ["--config", str(options.config.resolve())]
        return args

    @classmethod
    def push_args(cls, options: PushOptions) -> List[str]:
        """Argument list for ``tolgee push``."""
        args = ["push", *cls._connection_args(options)]
        args += ["--force-mode", options.force_mode.value]
        args += _multi("--languages", options.languages)
        args += _multi("--namespaces", options.namespaces)
        if options.config is not None:
            args += ["--config", str(options.config.resolve())]
        return args

    def _command(self, args: List[str]) -> bool:
        if not self.installed:
            return False
        completed = self._execute(args)
        if completed is None:
            return False
        for line in (completed.stdout or "").splitlines():
            logger.info("tolgee_cli_output", command=args[0], line=line)
        for line in (completed.stderr or "").splitlines():
            logger.warning("tolgee_cli_error_output", command=args[0], line=line)
        if completed.returncode != 0:
            logger.warning(
                "tolgee_cli_failed", command=args[0], returncode=completed.returncode
            )
            return False
        return True

    def pull(self, options: PullOptions) -> bool:
        """Run ``tolgee pull``; True on exit code 0."""
        return self._command(self.pull_args(options))

    def push(self, options: PushOptions) -> bool:
        """Run ``tolgee push``; True on exit code 0."""
        return self._command(self.push_args(options))
