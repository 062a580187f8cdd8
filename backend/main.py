"""
Artifact Diff Backend - FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import artifacts, cache
from services.artifact_diff import get_artifact_service
from services.config_manager import ConfigManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Starting Artifact Diff Backend...")
    config_manager = ConfigManager.get_instance()
    logger.info("ConfigManager initialized (%s)", config_manager.config_dir)

    service = get_artifact_service()
    stats = service.cache.update_stats("")
    logger.info("Content cache ready with %d entries", stats.total_entries)

    yield
    logger.info("Shutting down Artifact Diff Backend...")


app = FastAPI(
    title="Artifact Diff Backend",
    description="Diffs of workflow artifacts since they were last viewed",
    version="1.0.0",
    lifespan=lifespan,
)

# Dashboard frontend is served from a different local port
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(artifacts.router, prefix="/api/artifacts", tags=["artifacts"])
app.include_router(cache.router, prefix="/api/cache", tags=["cache"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "artifact-diff-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "127.0.0.1"), port=server.get("port", 8000))
