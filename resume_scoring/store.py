"""
In-process storage for resumes and job matches.

Used for local development and tests; FirebaseService in firebase_service.py
implements the same methods against Firestore.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .exceptions import DuplicateJobMatchError
from .schemas import ResumeRecord, JobMatchRecord

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def job_match_id(resume_id: str, job_description_hash: str) -> str:
    """Deterministic document ID: the idempotency key itself."""
    return f"{resume_id}_{job_description_hash}"


def new_resume_record(user_id: str, extracted_text: str, filename: str = None) -> ResumeRecord:
    now = utc_now()
    return ResumeRecord(
        id=uuid.uuid4().hex,
        user_id=user_id,
        filename=filename or "resume.txt",
        extracted_text=extracted_text,
        text_length=len(extracted_text),
        status="uploaded",
        created_at=now,
        updated_at=now,
    )


def paginate(records: List, page: int, limit: int) -> Tuple[List, int]:
    """Newest first, 1-based pages."""
    ordered = sorted(records, key=lambda r: r.created_at, reverse=True)
    start = (max(page, 1) - 1) * limit
    return ordered[start:start + limit], len(ordered)


class InMemoryStore:
    """Thread-safe dictionary store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._resumes: Dict[str, ResumeRecord] = {}
        self._matches: Dict[str, JobMatchRecord] = {}

    def create_resume(self, user_id: str, extracted_text: str, filename: str = None) -> ResumeRecord:
        record = new_resume_record(user_id, extracted_text, filename)
        with self._lock:
            self._resumes[record.id] = record
        logger.info(f"Stored resume {record.id} for user {user_id}")
        return record

    def get_resume(self, resume_id: str) -> Optional[ResumeRecord]:
        with self._lock:
            return self._resumes.get(resume_id)

    def save_resume(self, record: ResumeRecord) -> ResumeRecord:
        record = record.model_copy(update={"updated_at": utc_now()})
        with self._lock:
            self._resumes[record.id] = record
        return record

    def list_resumes(self, user_id: str, page: int = 1, limit: int = 10) -> Tuple[List[ResumeRecord], int]:
        with self._lock:
            records = [r for r in self._resumes.values() if r.user_id == user_id]
        return paginate(records, page, limit)

    def delete_resume(self, resume_id: str) -> bool:
        with self._lock:
            removed = self._resumes.pop(resume_id, None)
            for match_id in [k for k, m in self._matches.items() if m.resume_id == resume_id]:
                del self._matches[match_id]
        return removed is not None

    def get_job_match(self, resume_id: str, job_description_hash: str) -> Optional[JobMatchRecord]:
        with self._lock:
            return self._matches.get(job_match_id(resume_id, job_description_hash))

    def create_job_match(self, record: JobMatchRecord) -> JobMatchRecord:
        """Insert a job match; raises DuplicateJobMatchError if the key exists."""
        with self._lock:
            if record.id in self._matches:
                raise DuplicateJobMatchError(record.id)
            self._matches[record.id] = record
        logger.info(f"Stored job match {record.id}")
        return record

    def list_job_matches(self, resume_id: str, page: int = 1, limit: int = 10) -> Tuple[List[JobMatchRecord], int]:
        with self._lock:
            records = [m for m in self._matches.values() if m.resume_id == resume_id]
        return paginate(records, page, limit)
