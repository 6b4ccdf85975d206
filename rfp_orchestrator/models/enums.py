"""Enumeration types for the RFP orchestrator."""

from enum import Enum


class RfpStatus(str, Enum):
    """Persisted RFP status. Monotonic: sent never reverts to draft."""
    DRAFT = "draft"
    SENT = "sent"


class GenerationState(str, Enum):
    """Progress of turning a raw description into a structured RFP."""
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class SessionState(str, Enum):
    """Lifecycle of a single draft session."""
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"
    PERSISTING = "persisting"
    PERSISTED = "persisted"


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to callers."""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    APPLICATION = "application"


class ComparisonOutcome(str, Enum):
    """Result of a comparison fetch."""
    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"
