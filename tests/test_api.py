"""
Tests for the FastAPI endpoints.

These tests verify the endpoints without a Weaviate instance: the lifespan
is not entered and the recommendation service is patched where needed.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from api.exceptions import NotFoundError, SchemaError, SyncError
from api.models import MatchResult, RecommendationResponse
from main import app

client = TestClient(app)


def _response(**overrides):
    data = {
        "job_id": "job-1",
        "job_title": "Backend Developer",
        "total_found": 1,
        "recommendations": [
            MatchResult(
                candidate_id="cand-1",
                candidate_name="Ada Lovelace",
                email="ada@example.com",
                match_score=0.82,
                matched_skills=["Java", "SQL"],
                missing_skills=[],
                total_experience=6,
                summary="Backend engineer",
            )
        ],
        "processing_time_ms": 12.5,
        "scoring_strategy": "weighted_fusion",
    }
    data.update(overrides)
    return RecommendationResponse(**data)


def test_root_endpoint():
    """Test the root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert "name" in data
    assert "endpoints" in data
    assert "Candidate Recommendation Service" in data["name"]


def test_ingest_endpoint_validation():
    """Test the ingest endpoint with invalid data."""
    # Unknown top-level fields are rejected
    response = client.post("/ingest/", json={"invalid": "data"})
    assert response.status_code == 422

    # Job without required fields
    response = client.post("/ingest/", json={"jobs": [{"invalid": "job"}]})
    assert response.status_code == 422


def test_ingest_valid_data_without_sync():
    """Loading data without sync only touches the source store."""
    payload = {
        "jobs": [
            {
                "id": "api-job-1",
                "title": "Data Engineer",
                "description": "Build pipelines",
                "skills": ["Python", "SQL"],
                "min_experience": 2,
            }
        ],
        "candidates": [
            {
                "id": "api-cand-1",
                "name": "Grace Hopper",
                "email": "grace@example.com",
                "skills": ["Python"],
                "summary": "Data person",
                "work_experience": [
                    {"start_date": "2018-01-01", "end_date": "2021-06-30"}
                ],
            }
        ],
    }

    response = client.post("/ingest/", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["jobs_loaded"] == 1
    assert data["candidates_loaded"] == 1
    assert data["candidates_synced"] == 0
    assert data["jobs_total"] >= 1


def test_recommendations_parameter_validation():
    """Test recommendation endpoint parameter validation."""
    response = client.get("/recommendations/job/job-1?max_candidates=0")
    assert response.status_code == 422

    response = client.get("/recommendations/job/job-1?min_match_score=1.5")
    assert response.status_code == 422


def test_recommendations_before_initialization():
    """Without a Weaviate connection the endpoint fails cleanly."""
    response = client.get("/recommendations/job/job-1")
    assert response.status_code == 500


def test_recommendations_success():
    """Test the recommendation endpoint returns the ranked candidates."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.get_recommendations = AsyncMock(return_value=_response())

        response = client.get(
            "/recommendations/job/job-1?max_candidates=5&min_match_score=0.6"
        )

    assert response.status_code == 200
    data = response.json()
    assert data["total_found"] == 1
    assert data["recommendations"][0]["candidate_id"] == "cand-1"
    service.get_recommendations.assert_awaited_once_with("job-1", 5, 0.6)


def test_recommendations_unknown_job():
    """Test an unknown job maps to 404."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.get_recommendations = AsyncMock(
            side_effect=NotFoundError("Job posting", "missing")
        )
        response = client.get("/recommendations/job/missing")

    assert response.status_code == 404


def test_recommendations_timeout():
    """Test a missed deadline maps to 504."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.get_recommendations = AsyncMock(side_effect=asyncio.TimeoutError())
        response = client.get("/recommendations/job/job-1")

    assert response.status_code == 504


def test_recommendations_invalid_result_is_server_error():
    """Test a malformed internal result maps to 500, not 400."""
    with pytest.raises(ValidationError) as excinfo:
        MatchResult(candidate_id="cand-1", match_score=1.5)

    with patch("api.routes.recommendations.recommendation_service") as service:
        service.get_recommendations = AsyncMock(side_effect=excinfo.value)
        response = client.get("/recommendations/job/job-1")

    assert response.status_code == 500


def test_sync_candidate_errors():
    """Test sync errors map to 404 and 502."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.sync_candidate = AsyncMock(
            side_effect=NotFoundError("Candidate", "nobody")
        )
        response = client.post("/admin/recommendations/sync-candidate/nobody")
        assert response.status_code == 404

        service.sync_candidate = AsyncMock(side_effect=SyncError("insert rejected"))
        response = client.post("/admin/recommendations/sync-candidate/cand-1")
        assert response.status_code == 502


def test_sync_all_candidates_reports_counts():
    """Test batch sync reports successes and failures."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.sync_all_candidates = AsyncMock(return_value=(4, 1))
        response = client.post("/admin/recommendations/sync-all-candidates")

    assert response.status_code == 200
    data = response.json()
    assert data["success_count"] == 4
    assert data["fail_count"] == 1


def test_delete_candidate():
    """Test deleting a candidate that is not indexed still succeeds."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.delete_candidate = AsyncMock(return_value=False)
        response = client.delete("/admin/recommendations/candidate/cand-9")

    assert response.status_code == 200
    assert "not in" in response.json()["message"]


def test_recreate_index_failure_is_surfaced():
    """Test a failed recreation is reported as a hard failure."""
    with patch("api.routes.recommendations.recommendation_service") as service:
        service.recreate_index = AsyncMock(side_effect=SchemaError("create failed"))
        response = client.post("/admin/recommendations/recreate-index")

    assert response.status_code == 500
    assert response.json()["detail"] == "create failed"


if __name__ == "__main__":
    pytest.main([__file__])
