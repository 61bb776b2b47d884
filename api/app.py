"""
FastAPI application factory.

This module creates and configures the FastAPI application with all
routes, middleware, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import ingest_router, recommendation_admin_router, recommendation_router
from .services.recommendation import recommendation_service

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup and shutdown tasks.

    Connects the recommendation service to Weaviate on startup and closes
    the connection on shutdown.
    """
    try:
        logger.info("Starting up application...")
        await recommendation_service.initialize()
        logger.info("Application startup complete")

        yield

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    finally:
        logger.info("Shutting down application...")
        recommendation_service.close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Candidate Recommendation Service",
        description="Ranks candidates for job postings by fusing vector "
        "similarity, skill matching and experience",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_model=dict)
    async def root():
        return {
            "name": "Candidate Recommendation Service",
            "description": (
                "Ranks candidates for job postings using semantic search "
                "and skill matching"
            ),
            "endpoints": {
                "POST /ingest": "Load jobs and candidates data",
                "GET /recommendations/job/{job_id}": "Recommend candidates for a job",
                "POST /admin/recommendations/sync-candidate/{candidate_id}": (
                    "Sync one candidate to the index"
                ),
                "POST /admin/recommendations/sync-all-candidates": (
                    "Sync all candidates to the index"
                ),
                "DELETE /admin/recommendations/candidate/{candidate_id}": (
                    "Remove a candidate from the index"
                ),
                "POST /admin/recommendations/recreate-index": (
                    "Drop and recreate the candidate collection"
                ),
                "GET /admin/recommendations/schema": "Show the collection config",
            },
        }

    app.include_router(ingest_router)
    app.include_router(recommendation_router)
    app.include_router(recommendation_admin_router)

    return app
