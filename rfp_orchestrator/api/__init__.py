"""API module - FastAPI routers."""

from rfp_orchestrator.api.routes import router

__all__ = ["router"]
