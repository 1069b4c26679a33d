"""
Resume lifecycle and job matching services.

Both services take their store and optional LLM agent as constructor
arguments; nothing here creates a network client.
"""

import logging
import time
from typing import List, Tuple

from .exceptions import (
    AnalysisFailedError, AnalysisInProgressError, DuplicateJobMatchError,
    ResumeNotAnalyzedError, ResumeNotFoundError
)
from .matcher import analyze_resume_text, match_job_description, engine_for
from .normalizer import ensure_sufficient_content, validate_job_description, job_description_hash
from .schemas import AnalysisMetadata, JobMatchRecord, ResumeRecord
from .store import job_match_id, utc_now

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ResumeService:
    """Submit, analyse, list and delete resumes."""

    def __init__(self, store, agent=None, model_name: str = None, mode: str = None):
        self.store = store
        self.agent = agent
        self.mode = mode
        self.model_name = model_name if agent is not None and model_name else "heuristic"

    def get_resume(self, resume_id: str, user_id: str = None) -> ResumeRecord:
        record = self.store.get_resume(resume_id)
        if record is None or (user_id is not None and record.user_id != user_id):
            raise ResumeNotFoundError(f"Resume {resume_id} not found or access denied")
        return record

    def submit(self, user_id: str, raw_text: str, filename: str = None) -> ResumeRecord:
        text = ensure_sufficient_content(raw_text)
        return self.store.create_resume(user_id, text, filename)

    def analyze(self, resume_id: str, user_id: str = None) -> Tuple[ResumeRecord, bool]:
        """
        Analyse a stored resume once.

        Returns:
            (record, analysed_now) - analysed_now is False when a stored
            analysis was returned

        Raises:
            ResumeNotFoundError, AnalysisInProgressError, AnalysisFailedError
        """
        record = self.get_resume(resume_id, user_id)

        if record.status == "processing":
            raise AnalysisInProgressError("Resume analysis is already in progress")
        if record.status == "analyzed" and record.analysis is not None:
            logger.info(f"Resume {resume_id} already analyzed")
            return record, False

        record = self.store.save_resume(
            record.model_copy(update={"status": "processing", "error_message": None})
        )

        started = time.perf_counter()
        try:
            analysis = analyze_resume_text(record.extracted_text, self.agent, self.mode)
        except Exception as e:
            logger.error(f"Analysis of resume {resume_id} failed: {e}", exc_info=True)
            self.store.save_resume(
                record.model_copy(update={"status": "error", "error_message": str(e)})
            )
            raise AnalysisFailedError(f"Failed to analyze resume: {e}") from e

        metadata = AnalysisMetadata(
            processing_time_ms=_elapsed_ms(started),
            ai_model=self.model_name,
            engine=engine_for(self.agent),
        )
        record = self.store.save_resume(record.model_copy(update={
            "status": "analyzed",
            "analysis": analysis,
            "analysis_metadata": metadata,
            "error_message": None,
        }))
        return record, True

    def list_resumes(self, user_id: str, page: int = 1, limit: int = 10) -> Tuple[List[ResumeRecord], int]:
        return self.store.list_resumes(user_id, page, limit)

    def delete(self, resume_id: str, user_id: str = None) -> None:
        self.get_resume(resume_id, user_id)
        self.store.delete_resume(resume_id)
        logger.info(f"Deleted resume {resume_id}")


class JobMatchService:
    """Idempotent job matching keyed by (resume_id, job description hash)."""

    def __init__(self, store, agent=None, model_name: str = None, mode: str = None):
        self.store = store
        self.agent = agent
        self.mode = mode
        self.model_name = model_name if agent is not None and model_name else "heuristic"

    def match(
        self,
        resume_id: str,
        job_description: str,
        user_id: str = None,
        job_title: str = None,
        company: str = None
    ) -> Tuple[JobMatchRecord, bool]:
        """
        Match an analysed resume against a job description.

        Returns:
            (record, created) - created is False when the stored match for
            the same description was returned

        Raises:
            InsufficientContentError, ResumeNotFoundError, ResumeNotAnalyzedError,
            AnalysisFailedError
        """
        job_description = validate_job_description(job_description)

        resume = self.store.get_resume(resume_id)
        if resume is None or (user_id is not None and resume.user_id != user_id):
            raise ResumeNotFoundError(f"Resume {resume_id} not found or access denied")
        if resume.status != "analyzed" or resume.analysis is None:
            raise ResumeNotAnalyzedError("Please analyze your resume first before job matching")

        key = job_description_hash(job_description)
        existing = self.store.get_job_match(resume_id, key)
        if existing is not None:
            logger.info(f"Job match {existing.id} already exists")
            return existing, False

        started = time.perf_counter()
        try:
            analysis = match_job_description(
                resume.analysis, resume.extracted_text, job_description, self.agent, self.mode
            )
        except Exception as e:
            logger.error(f"Job matching for resume {resume_id} failed: {e}", exc_info=True)
            raise AnalysisFailedError(f"Failed to match job description: {e}") from e

        record = JobMatchRecord(
            id=job_match_id(resume_id, key),
            user_id=resume.user_id,
            resume_id=resume_id,
            job_title=job_title or "Untitled Position",
            company=company or "",
            job_description=job_description,
            job_description_hash=key,
            match_score=analysis.match_score,
            analysis=analysis,
            metadata=AnalysisMetadata(
                processing_time_ms=_elapsed_ms(started),
                ai_model=self.model_name,
                engine=engine_for(self.agent),
            ),
            created_at=utc_now(),
        )

        try:
            return self.store.create_job_match(record), True
        except DuplicateJobMatchError:
            # lost the race: another request stored this key first
            winner = self.store.get_job_match(resume_id, key)
            logger.info(f"Concurrent job match detected, returning {record.id}")
            return (winner or record), False

    def list_matches(self, resume_id: str, user_id: str = None, page: int = 1, limit: int = 10) -> Tuple[List[JobMatchRecord], int]:
        resume = self.store.get_resume(resume_id)
        if resume is None or (user_id is not None and resume.user_id != user_id):
            raise ResumeNotFoundError(f"Resume {resume_id} not found or access denied")
        return self.store.list_job_matches(resume_id, page, limit)
