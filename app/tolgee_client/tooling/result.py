"""Tooling result type.

Pull and push operations report their outcome instead of raising, so a
build step can decide whether a failure is fatal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from tolgee_client.i18n.exceptions import TolgeeApiError


class OperationStatus(Enum):
    """Outcome of a tooling operation.

    Attributes:
        SUCCESS: Operation completed
        TRANSIENT_ERROR: Retryable failure (network, timeout, rate limit, 5xx)
        PERMANENT_ERROR: Failure that a retry will not fix
        UNAUTHORIZED: The API key was missing or rejected
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"


@dataclass
class OperationResult:
    """Uniform result of a pull or push.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs
        data: Optional[Any] -- payload, e.g. the target path and the source used
        error_code: Optional[str] -- machine error code
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(status=status, message=message, error_code=error_code, data=data)

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)


def classify_api_error(exc: TolgeeApiError) -> OperationResult:
    """Map a TolgeeApiError to an OperationResult.

    Status Code Mapping:
    - None (transport failure), 429, 5xx: TRANSIENT_ERROR
    - 401, 403: UNAUTHORIZED
    - Other: PERMANENT_ERROR
    """
    if exc.status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"Tolgee rejected the API key: {exc}",
            error_code=f"HTTP_{exc.status_code}",
        )
    if exc.is_transient:
        code = f"HTTP_{exc.status_code}" if exc.status_code else "CONNECTION_ERROR"
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR, str(exc), error_code=code
        )
    return OperationResult.permanent_error(str(exc), error_code=f"HTTP_{exc.status_code}")
