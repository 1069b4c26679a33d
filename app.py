from __future__ import annotations

import asyncio
import logging
import math
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from models import (
    AnalyzeResumeRequest,
    AnalyzeResumeResponse,
    JobMatchListResponse,
    JobMatchRequest,
    JobMatchResponse,
    JobMatchSummary,
    Pagination,
    ResumeListResponse,
    ResumeResponse,
    ResumeSummary,
    Settings,
    SubmitResumeRequest,
)
from resume_scoring.exceptions import (
    AnalysisFailedError,
    AnalysisInProgressError,
    InsufficientContentError,
    ResumeNotAnalyzedError,
    ResumeNotFoundError,
    ResumeScoringError,
)
from resume_scoring.service import JobMatchService, ResumeService
from resume_scoring.store import InMemoryStore

# Load environment from project root .env if present
load_dotenv()
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        model_name=os.getenv("OPENAI_MODEL", "gpt-4o"),
        analysis_engine=os.getenv("ANALYSIS_ENGINE", "auto"),
        skill_match_mode=os.getenv("SKILL_MATCH_MODE", "token"),
        storage_backend=os.getenv("STORAGE_BACKEND", "memory"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def build_store(settings: Settings):
    if settings.storage_backend == "firestore":
        from firebase_service import get_firebase_service
        return get_firebase_service()
    logger.warning("Using in-memory storage; data is lost on restart")
    return InMemoryStore()


def build_agents(settings: Settings):
    """(resume_agent, match_agent), both None on the heuristic path."""
    if not settings.llm_enabled():
        logger.info("LLM disabled, using heuristic analysis")
        return None, None
    from agents import build_resume_analyzer, build_job_matcher
    logger.info(f"LLM analysis enabled with model {settings.model_name}")
    return (
        build_resume_analyzer(settings.model_name, settings.openai_api_key),
        build_job_matcher(settings.model_name, settings.openai_api_key),
    )


ERROR_STATUS = [
    (InsufficientContentError, 400, "Invalid content"),
    (ResumeNotFoundError, 404, "Resume not found"),
    (ResumeNotAnalyzedError, 404, "Resume not found or not analyzed"),
    (AnalysisInProgressError, 409, "Already processing"),
    (AnalysisFailedError, 500, "Analysis failed"),
]


def http_error(exc: ResumeScoringError) -> HTTPException:
    for error_type, status_code, label in ERROR_STATUS:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail={"error": label, "message": str(exc)})
    return HTTPException(status_code=500, detail={"error": "Internal error", "message": str(exc)})


def pagination(page: int, limit: int, count: int, total_items: int) -> Pagination:
    return Pagination(
        current=page,
        total=math.ceil(total_items / limit) if total_items else 0,
        count=count,
        total_items=total_items,
    )


def create_app(
    settings: Optional[Settings] = None,
    store=None,
    resume_agent=None,
    match_agent=None,
) -> FastAPI:
    """
    Build the API. Store and agents are created from settings unless passed in.
    """
    settings = settings or load_settings()
    if store is None:
        store = build_store(settings)
    if resume_agent is None and match_agent is None:
        resume_agent, match_agent = build_agents(settings)

    model_name = settings.model_name
    resume_service = ResumeService(store, resume_agent, model_name, settings.skill_match_mode)
    match_service = JobMatchService(store, match_agent, model_name, settings.skill_match_mode)

    app = FastAPI(title="Resume Scoring API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.resume_service = resume_service
    app.state.match_service = match_service

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "service": "resume-scoring",
            "engine": "llm" if resume_agent is not None else "heuristic",
        }

    @app.post("/api/resumes", response_model=ResumeResponse, status_code=201)
    async def submit_resume(request: SubmitResumeRequest):
        try:
            record = await asyncio.to_thread(
                resume_service.submit, request.user_id, request.text, request.filename
            )
        except ResumeScoringError as e:
            raise http_error(e)
        return ResumeResponse.from_record(record)

    @app.post("/api/resumes/{resume_id}/analyze", response_model=AnalyzeResumeResponse)
    async def analyze_resume(resume_id: str, request: Optional[AnalyzeResumeRequest] = None):
        user_id = request.user_id if request else None
        try:
            record, analysed_now = await asyncio.to_thread(resume_service.analyze, resume_id, user_id)
        except ResumeScoringError as e:
            raise http_error(e)
        message = "Resume analyzed successfully" if analysed_now else "Resume already analyzed"
        return AnalyzeResumeResponse(message=message, resume=ResumeResponse.from_record(record))

    @app.get("/api/resumes/{resume_id}/analysis", response_model=ResumeResponse)
    async def get_resume_analysis(resume_id: str, user_id: Optional[str] = None):
        try:
            record = await asyncio.to_thread(resume_service.get_resume, resume_id, user_id)
        except ResumeScoringError as e:
            raise http_error(e)
        return ResumeResponse.from_record(record)

    @app.get("/api/resumes", response_model=ResumeListResponse)
    async def list_resumes(
        user_id: str,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        records, total = await asyncio.to_thread(resume_service.list_resumes, user_id, page, limit)
        summaries = [
            ResumeSummary(
                id=record.id,
                filename=record.filename,
                status=record.status,
                overall_score=record.analysis.overall_score if record.analysis else None,
                ats_score=record.analysis.ats_score if record.analysis else None,
                uploaded_at=record.created_at,
            )
            for record in records
        ]
        return ResumeListResponse(resumes=summaries, pagination=pagination(page, limit, len(summaries), total))

    @app.delete("/api/resumes/{resume_id}")
    async def delete_resume(resume_id: str, user_id: Optional[str] = None):
        try:
            await asyncio.to_thread(resume_service.delete, resume_id, user_id)
        except ResumeScoringError as e:
            raise http_error(e)
        return {"message": "Resume deleted successfully"}

    @app.post("/api/resumes/{resume_id}/matches", response_model=JobMatchResponse)
    async def match_job(resume_id: str, request: JobMatchRequest, response: Response):
        try:
            record, created = await asyncio.to_thread(
                match_service.match,
                resume_id,
                request.job_description,
                request.user_id,
                request.job_title,
                request.company,
            )
        except ResumeScoringError as e:
            raise http_error(e)
        response.status_code = 201 if created else 200
        message = "Job match completed successfully" if created else "Job match already exists"
        return JobMatchResponse(message=message, match=record)

    @app.get("/api/resumes/{resume_id}/matches", response_model=JobMatchListResponse)
    async def list_job_matches(
        resume_id: str,
        user_id: Optional[str] = None,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        try:
            records, total = await asyncio.to_thread(match_service.list_matches, resume_id, user_id, page, limit)
        except ResumeScoringError as e:
            raise http_error(e)
        summaries = [
            JobMatchSummary(
                id=record.id,
                job_title=record.job_title,
                company=record.company,
                match_score=record.match_score,
                strengths=record.analysis.strengths,
                weaknesses=record.analysis.weaknesses,
                matched_at=record.created_at,
            )
            for record in records
        ]
        return JobMatchListResponse(matches=summaries, pagination=pagination(page, limit, len(summaries), total))

    return app


_settings = load_settings()
logging.basicConfig(
    level=_settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = create_app(_settings)
