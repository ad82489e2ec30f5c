"""
FastAPI application for Investisizer.

Provides REST API endpoints for:
- Portfolio, property and investment projections
- Amortization schedules
- State tax lookups and sale tax calculations
"""

import os
import logging
import traceback
from typing import Dict, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from investisizer import __version__
from investisizer.api.routes import projections, tax
from investisizer.utils.error_utils import InvestisizerError

logger = logging.getLogger("investisizer")

# Pick up CORS_ORIGINS from a local .env during development
load_dotenv()


# Create FastAPI application
app = FastAPI(
    title="Investisizer API",
    description="Portfolio Projection Engine - investments, leveraged real estate and sale taxes",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS configuration for the frontend
_default_origins = "http://localhost:3000,http://localhost:5173,http://localhost:8501"
_cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvestisizerError)
async def investisizer_exception_handler(request: Request, exc: InvestisizerError):
    """Engine failures on malformed records."""
    logger.warning(f"Engine error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Projection failed",
            "detail": exc.message,
            "type": (exc.details or {}).get("error_type"),
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, str]:
    """API health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "investisizer-api",
    }


# Include routers
app.include_router(projections.router, prefix="/api/projections", tags=["Projections"])
app.include_router(tax.router, prefix="/api/tax", tags=["Tax"])


# Root endpoint
@app.get("/")
async def root() -> Dict[str, Any]:
    """API root endpoint with service information."""
    return {
        "service": "Investisizer API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "investisizer.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
