"""Fixtures for tolgee_client.tooling tests."""

import subprocess
from unittest.mock import Mock

import pytest

from tolgee_client.tooling.cli import TolgeeCli


class FakeRunner:
    """subprocess.run stand-in answering ``--version`` and subcommands."""

    def __init__(self, version="2.4.0", returncode=0, stdout="", stderr=""):
        self.version = version
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if args[1:] == ["--version"]:
            if self.version is None:
                raise FileNotFoundError(args[0])
            return subprocess.CompletedProcess(args, 0, stdout=f"{self.version}\n", stderr="")
        return subprocess.CompletedProcess(
            args, self.returncode, stdout=self.stdout, stderr=self.stderr
        )


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def failing_cli():
    """CLI whose commands all fail."""
    cli = Mock(spec=TolgeeCli)
    cli.pull.return_value = False
    cli.push.return_value = False
    return cli


@pytest.fixture
def working_cli():
    """CLI whose commands all succeed."""
    cli = Mock(spec=TolgeeCli)
    cli.pull.return_value = True
    cli.push.return_value = True
    return cli
