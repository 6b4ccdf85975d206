"""Core module - Configuration, errors, credentials and the request cache."""

from rfp_orchestrator.core.config import get_settings, Settings
from rfp_orchestrator.core.cache import RequestCache, make_key
from rfp_orchestrator.core.credentials import CredentialStore
from rfp_orchestrator.core.errors import (
    OrchestratorError,
    ValidationError,
    TransportError,
    ApplicationError,
    UnauthorizedError,
)

__all__ = [
    "get_settings",
    "Settings",
    "RequestCache",
    "make_key",
    "CredentialStore",
    "OrchestratorError",
    "ValidationError",
    "TransportError",
    "ApplicationError",
    "UnauthorizedError",
]
