"""
RFP Orchestrator - FastAPI Application Entry Point.

Stateful workflow around an external RFP backend:
- Natural-language description to structured RFP
- Review, edit and persist
- Vendor assignment and dispatch
- Proposal comparison

Run with:
    uvicorn rfp_orchestrator.main:app --reload --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rfp_orchestrator import __version__
from rfp_orchestrator.core.config import get_settings
from rfp_orchestrator.api.routes import router


# ===========================================
# Logging Configuration
# ===========================================

def setup_logging():
    """Configure application logging."""
    settings = get_settings()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


# ===========================================
# Application Lifespan
# ===========================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    logger.info("=" * 50)
    logger.info("RFP Orchestrator Starting Up")
    logger.info("=" * 50)
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Backend: {settings.BACKEND_API_URL}")
    logger.info(f"Backend timeout: {settings.BACKEND_TIMEOUT_SECONDS}s")

    if not settings.BACKEND_AUTH_TOKEN:
        logger.warning("No backend credential configured - calls will be anonymous")

    logger.info("Startup complete")

    yield

    logger.info("RFP Orchestrator shutting down...")


# ===========================================
# FastAPI Application
# ===========================================

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="RFP Orchestrator",
        description="""
        Orchestrates the RFP lifecycle against the RFP/vendor backend.

        ## Draft sessions

        - `POST /sessions` - open a session
        - `POST /sessions/{id}/generate` - description to structured RFP
        - `POST /sessions/{id}/persist` - save the reviewed RFP

        ## Persisted RFPs

        - `PUT /rfps/{id}/vendors` - assign vendors
        - `POST /rfps/{id}/send` - send to vendors
        - `GET /rfps/{id}/comparison` - compare proposals
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


app = create_app()


# ===========================================
# Root Endpoint
# ===========================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return JSONResponse({
        "service": "RFP Orchestrator",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "sessions": {
                "open": "POST /sessions",
                "generate": "POST /sessions/{session_id}/generate",
                "retry": "POST /sessions/{session_id}/retry",
                "persist": "POST /sessions/{session_id}/persist",
                "discard": "DELETE /sessions/{session_id}"
            },
            "rfps": {
                "list": "GET /rfps",
                "detail": "GET /rfps/{rfp_id}",
                "assign": "PUT /rfps/{rfp_id}/vendors",
                "send": "POST /rfps/{rfp_id}/send",
                "proposals": "GET /rfps/{rfp_id}/proposals",
                "comparison": "GET /rfps/{rfp_id}/comparison"
            },
            "vendors": "GET /vendors",
            "health": "GET /health",
            "docs": "GET /docs"
        }
    })


# ===========================================
# Error Handlers
# ===========================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if get_settings().DEBUG else "An error occurred"
        }
    )


# ===========================================
# Main Entry Point
# ===========================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "rfp_orchestrator.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
