"""RFP Lifecycle Orchestrator - generation, review, dispatch and comparison of RFPs."""

__version__ = "1.0.0"
