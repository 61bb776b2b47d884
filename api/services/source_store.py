"""
Source-of-truth access for jobs and candidate facts.

The recommendation engine reads jobs and candidates through the
``CandidateSource`` protocol. ``InMemorySourceStore`` is the implementation
used by the service, filled through the ingest endpoints or JSON files.
"""

import json
import logging
import threading
from typing import Dict, Iterable, List, Protocol, Tuple

from api.exceptions import NotFoundError
from api.models import CandidateProfile, JobPosting
from matching.extraction import resolve_required_skills

logger = logging.getLogger(__name__)


class CandidateSource(Protocol):
    """Read interface onto the system of record."""

    def get_job(self, job_id: str) -> JobPosting: ...

    def get_job_required_skills(self, job_id: str) -> List[str]: ...

    def get_job_min_experience(self, job_id: str) -> int: ...

    def get_candidate_facts(self, candidate_id: str) -> CandidateProfile: ...

    def list_all_candidate_ids(self) -> List[str]: ...


class InMemorySourceStore:
    """Thread-safe in-memory store of jobs and candidate profiles."""

    def __init__(self):
        self._jobs: Dict[str, JobPosting] = {}
        self._candidates: Dict[str, CandidateProfile] = {}
        self._lock = threading.Lock()

    def upsert_jobs(self, jobs: Iterable[JobPosting]) -> int:
        count = 0
        with self._lock:
            for job in jobs:
                self._jobs[job.id] = job
                count += 1
        return count

    def upsert_candidates(self, candidates: Iterable[CandidateProfile]) -> int:
        count = 0
        with self._lock:
            for candidate in candidates:
                self._candidates[candidate.id] = candidate
                count += 1
        return count

    def counts(self) -> Tuple[int, int]:
        with self._lock:
            return len(self._jobs), len(self._candidates)

    def get_job(self, job_id: str) -> JobPosting:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError("Job posting", job_id)
        return job

    def get_job_required_skills(self, job_id: str) -> List[str]:
        job = self.get_job(job_id)
        return resolve_required_skills(job.skills, job.description)

    def get_job_min_experience(self, job_id: str) -> int:
        return self.get_job(job_id).min_experience

    def get_candidate_facts(self, candidate_id: str) -> CandidateProfile:
        with self._lock:
            candidate = self._candidates.get(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)
        return candidate

    def list_all_candidate_ids(self) -> List[str]:
        with self._lock:
            return list(self._candidates)

    def load_json(self, jobs_file: str, candidates_file: str) -> Tuple[int, int]:
        """
        Load jobs and candidates from JSON files.

        Missing files are skipped with a warning.

        Args:
            jobs_file: Path to a JSON list of job postings
            candidates_file: Path to a JSON list of candidate profiles

        Returns:
            Tuple (jobs_loaded, candidates_loaded)
        """
        jobs: List[JobPosting] = []
        candidates: List[CandidateProfile] = []

        try:
            with open(jobs_file, "r", encoding="utf-8") as f:
                jobs = [JobPosting(**job) for job in json.load(f)]
        except FileNotFoundError:
            logger.warning(f"Jobs file {jobs_file} not found, using empty list")

        try:
            with open(candidates_file, "r", encoding="utf-8") as f:
                candidates = [CandidateProfile(**c) for c in json.load(f)]
        except FileNotFoundError:
            logger.warning(
                f"Candidates file {candidates_file} not found, using empty list"
            )

        return self.upsert_jobs(jobs), self.upsert_candidates(candidates)
