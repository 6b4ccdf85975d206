"""Error taxonomy shared by the backend client and the orchestration services."""

from typing import Any, Optional

from rfp_orchestrator.models.enums import ErrorKind


class OrchestratorError(Exception):
    """Base class for all orchestrator failures."""

    kind: ErrorKind = ErrorKind.APPLICATION

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(OrchestratorError):
    """Caller passed an invalid argument or called in an invalid state. Never retried."""

    kind = ErrorKind.VALIDATION


class TransportError(OrchestratorError):
    """No response was received (network failure or timeout). Safe to retry."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str = "Network error. Please check your connection."):
        super().__init__(message, status_code=0)


class ApplicationError(OrchestratorError):
    """The backend responded with a failure status or payload."""

    kind = ErrorKind.APPLICATION

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None
    ):
        super().__init__(message, status_code=status_code)
        self.payload = payload


class UnauthorizedError(ApplicationError):
    """The backend rejected the held credential (HTTP 401)."""

    def __init__(self, message: str = "Unauthorized access", payload: Any = None):
        super().__init__(message, status_code=401, payload=payload)
