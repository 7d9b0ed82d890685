"""FastAPI application for the Paddock roster economy."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paddock.api.routers import (
    assets_router,
    leagues_router,
    races_router,
    rosters_router,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    from paddock.api.services.economy_service import get_engine

    engine = get_engine()
    logger.info(f"Paddock API starting up ({len(engine.assets)} assets loaded)")
    yield
    logger.info("Paddock API shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Paddock API",
        description="Fantasy F1 roster economy API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(rosters_router, prefix="/api/v1")
    app.include_router(assets_router, prefix="/api/v1")
    app.include_router(races_router, prefix="/api/v1")
    app.include_router(leagues_router, prefix="/api/v1")

    return app


# Create app instance
app = create_app()


@app.get("/")
async def root() -> dict:
    """Root endpoint - API info."""
    return {
        "name": "Paddock API",
        "version": "0.1.0",
        "description": "Fantasy F1 roster economy",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    from paddock.api.services.economy_service import get_engine

    engine = get_engine()
    return {
        "status": "healthy",
        "rules": engine.config.version,
        "completed_races": engine.completed_races,
        "rosters": len(engine.rosters),
    }


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    uvicorn.run(
        "paddock.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_api(reload=True)
