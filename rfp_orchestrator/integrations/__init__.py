"""Integrations module - External service connectors."""

from rfp_orchestrator.integrations.backend import BackendClient

__all__ = [
    "BackendClient",
]
