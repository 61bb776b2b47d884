"""
Data ingestion endpoints.

This module provides endpoints for loading job postings and candidate
profiles into the source store, optionally pushing the candidates to the
vector index.
"""

import json
import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from api.models import CandidateProfile, IngestRequest, IngestResponse, JobPosting
from api.services.recommendation import recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingest", tags=["Data Ingestion"])


@router.post("/", response_model=IngestResponse)
async def ingest_data(
    request: IngestRequest,
    sync: bool = Query(False, description="Also sync candidates to the index"),
):
    """
    Load jobs and candidates into the source store.

    Args:
        request: IngestRequest containing jobs and candidates data
        sync: Whether to push the loaded candidates to Weaviate

    Returns:
        IngestResponse with ingestion statistics

    Raises:
        HTTPException: If ingestion fails
    """
    try:
        logger.info(
            f"Ingesting {len(request.jobs)} jobs and "
            f"{len(request.candidates)} candidates (sync={sync})"
        )

        stats = await recommendation_service.ingest_data(
            request.jobs, request.candidates, sync=sync
        )

        return IngestResponse(**stats)

    except Exception as e:
        logger.error(f"Ingestion failed: {e}")
        raise HTTPException(status_code=500, detail=f"Data ingestion failed: {str(e)}")


@router.post("/from-json", response_model=IngestResponse)
async def ingest_from_files(
    jobs_file: str = Query("data/jobs.json", description="Path to jobs JSON file"),
    candidates_file: str = Query(
        "data/candidates.json", description="Path to candidates JSON file"
    ),
    sync: bool = Query(False, description="Also sync candidates to the index"),
):
    """
    Load data from JSON files (utility endpoint for testing).

    Args:
        jobs_file: Path to jobs JSON file
        candidates_file: Path to candidates JSON file
        sync: Whether to push the loaded candidates to Weaviate

    Returns:
        IngestResponse with ingestion statistics

    Raises:
        HTTPException: If file loading or ingestion fails
    """
    logger.info(f"Loading data from files: {jobs_file}, {candidates_file}")

    jobs_data = []
    try:
        with open(jobs_file, "r", encoding="utf-8") as f:
            jobs_data = [JobPosting(**job) for job in json.load(f)]
    except FileNotFoundError:
        logger.warning(f"Jobs file {jobs_file} not found, using empty list")
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise HTTPException(
            status_code=400, detail=f"Error loading jobs file: {str(e)}"
        )

    candidates_data = []
    try:
        with open(candidates_file, "r", encoding="utf-8") as f:
            candidates_data = [
                CandidateProfile(**candidate) for candidate in json.load(f)
            ]
    except FileNotFoundError:
        logger.warning(f"Candidates file {candidates_file} not found, using empty list")
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise HTTPException(
            status_code=400, detail=f"Error loading candidates file: {str(e)}"
        )

    request = IngestRequest(jobs=jobs_data, candidates=candidates_data)
    return await ingest_data(request, sync=sync)
