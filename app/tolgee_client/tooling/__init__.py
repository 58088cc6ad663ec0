"""Translation file tooling: Tolgee CLI wrapper and REST pull fallback."""

from tolgee_client.tooling.cli import SUPPORTED_MIN_VERSION, TolgeeCli
from tolgee_client.tooling.models import (
    Format,
    PullOptions,
    PushMode,
    PushOptions,
    State,
)
from tolgee_client.tooling.pull import pull_translations, push_translations
from tolgee_client.tooling.result import OperationResult, OperationStatus

__all__ = [
    "Format",
    "OperationResult",
    "OperationStatus",
    "PullOptions",
    "PushMode",
    "PushOptions",
    "State",
    "SUPPORTED_MIN_VERSION",
    "TolgeeCli",
    "pull_translations",
    "push_translations",
]
