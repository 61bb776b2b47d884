"""
Recommendation and index administration endpoints.

This module provides the endpoint ranking candidates for a job posting and
the administrative endpoints that keep the Weaviate candidate index in sync.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query
from pydantic import ValidationError

from api.exceptions import NotFoundError, SchemaError, SyncError
from api.models import (
    AdminMessage,
    RecommendationResponse,
    SyncAllResponse,
    SyncResponse,
)
from api.services.recommendation import recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


@router.get("/job/{job_id}", response_model=RecommendationResponse)
async def get_recommended_candidates(
    job_id: str = Path(..., description="Job posting ID"),
    max_candidates: Optional[int] = Query(
        None, ge=1, le=100, description="Maximum number of candidates to return"
    ),
    min_match_score: Optional[float] = Query(
        None, ge=0.0, le=1.0, description="Minimum match score (0.0 - 1.0)"
    ),
):
    """
    Rank candidates whose skills and profile match a job posting.

    Args:
        job_id: ID of the job posting
        max_candidates: Maximum number of candidates to return
        min_match_score: Minimum combined score to keep a candidate

    Returns:
        RecommendationResponse with ranked candidates

    Raises:
        HTTPException: If the job is unknown, the deadline passes or ranking fails
    """
    try:
        logger.info(
            f"Getting recommended candidates for job {job_id} "
            f"(max_candidates: {max_candidates}, min_score: {min_match_score})"
        )

        response = await recommendation_service.get_recommendations(
            job_id, max_candidates, min_match_score
        )

        logger.info(f"Found {response.total_found} candidates for job {job_id}")
        return response

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        logger.error(f"Invalid recommendation result for job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Recommendation failed")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        logger.error(f"Recommendation for job {job_id} timed out")
        raise HTTPException(status_code=504, detail="Recommendation timed out")
    except Exception as e:
        logger.error(f"Recommendation failed for job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Recommendation failed: {str(e)}")


admin_router = APIRouter(
    prefix="/admin/recommendations", tags=["Recommendation Administration"]
)


@admin_router.post("/sync-candidate/{candidate_id}", response_model=SyncResponse)
async def sync_candidate(candidate_id: str = Path(..., description="Candidate ID")):
    """
    Sync a single candidate's profile to the Weaviate index.

    Raises:
        HTTPException: If the candidate is unknown or the index write fails
    """
    try:
        logger.info(f"Admin syncing candidate {candidate_id} to Weaviate")
        await recommendation_service.sync_candidate(candidate_id)
        return SyncResponse(
            candidate_id=candidate_id,
            message="Candidate synced successfully to recommendation system",
        )

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except SyncError as e:
        logger.error(f"Failed to sync candidate {candidate_id}: {e}")
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to sync candidate {candidate_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Candidate sync failed: {str(e)}")


@admin_router.post("/sync-all-candidates", response_model=SyncAllResponse)
async def sync_all_candidates():
    """
    Sync every candidate profile to the Weaviate index.

    Raises:
        HTTPException: If the batch could not run
    """
    try:
        logger.info("Admin syncing all candidates to Weaviate")
        success_count, fail_count = await recommendation_service.sync_all_candidates()
        return SyncAllResponse(
            success_count=success_count,
            fail_count=fail_count,
            message=f"Sync completed: {success_count} succeeded, {fail_count} failed",
        )

    except Exception as e:
        logger.error(f"Batch sync failed: {e}")
        raise HTTPException(status_code=500, detail=f"Batch sync failed: {str(e)}")


@admin_router.delete("/candidate/{candidate_id}", response_model=SyncResponse)
async def delete_candidate(candidate_id: str = Path(..., description="Candidate ID")):
    """
    Remove a candidate's profile from the Weaviate index.

    Raises:
        HTTPException: If the index rejects the deletion
    """
    try:
        logger.info(f"Admin deleting candidate {candidate_id} from Weaviate")
        deleted = await recommendation_service.delete_candidate(candidate_id)
        message = (
            "Candidate deleted from recommendation system"
            if deleted
            else "Candidate was not in the recommendation system"
        )
        return SyncResponse(candidate_id=candidate_id, message=message)

    except SyncError as e:
        logger.error(f"Failed to delete candidate {candidate_id}: {e}")
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to delete candidate {candidate_id}: {e}")
        raise HTTPException(
            status_code=500, detail=f"Candidate deletion failed: {str(e)}"
        )


@admin_router.post("/recreate-index", response_model=AdminMessage)
async def recreate_index():
    """
    Drop and recreate the candidate collection.

    Destructive: all candidates must be re-synced afterwards.

    Raises:
        HTTPException: If the collection could not be recreated
    """
    try:
        logger.info("Admin recreating the Weaviate candidate collection")
        await recommendation_service.recreate_index()
        return AdminMessage(
            message="Index recreated successfully. Please re-sync candidates."
        )

    except SchemaError as e:
        logger.error(f"Index recreation failed: {e}")
        raise HTTPException(status_code=500, detail=e.message)
    except Exception as e:
        logger.error(f"Index recreation failed: {e}")
        raise HTTPException(
            status_code=500, detail=f"Index recreation failed: {str(e)}"
        )


@admin_router.get("/schema", response_model=AdminMessage)
async def describe_index():
    """Return the configuration of the candidate collection."""
    try:
        config = await recommendation_service.describe_index()
        message = "Collection present" if config else "Collection missing"
        return AdminMessage(message=message, details=config)

    except Exception as e:
        logger.error(f"Reading index schema failed: {e}")
        raise HTTPException(status_code=500, detail=f"Schema lookup failed: {str(e)}")
