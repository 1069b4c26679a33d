from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from resume_scoring.config import OPENAI_KEY_PREFIX, OPENAI_KEY_MIN_LENGTH
from resume_scoring.schemas import (
    AnalysisMetadata,
    JobMatchRecord,
    ResumeAnalysis,
    ResumeRecord,
    ResumeStatus,
)


class Settings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    openai_api_key: Optional[str] = None
    model_name: str = "gpt-4o"
    analysis_engine: Literal["auto", "llm", "heuristic"] = "auto"
    skill_match_mode: Literal["token", "legacy"] = "token"
    storage_backend: Literal["memory", "firestore"] = "memory"
    log_level: str = "INFO"

    def llm_enabled(self) -> bool:
        """Whether analyses go through the LLM path."""
        if self.analysis_engine == "heuristic":
            return False
        if self.analysis_engine == "llm":
            return True
        key = self.openai_api_key or ""
        return key.startswith(OPENAI_KEY_PREFIX) and len(key) >= OPENAI_KEY_MIN_LENGTH


class SubmitResumeRequest(BaseModel):
    user_id: str = Field(..., description="Owner of the resume")
    text: str = Field(..., description="Text already extracted from the PDF/DOCX file")
    filename: Optional[str] = Field(default=None, description="Original file name")


class AnalyzeResumeRequest(BaseModel):
    user_id: Optional[str] = Field(default=None, description="Owner check, skipped when omitted")


class ResumeResponse(BaseModel):
    id: str
    user_id: str
    filename: str
    status: ResumeStatus
    text_length: int
    analysis: Optional[ResumeAnalysis] = None
    analysis_metadata: Optional[AnalysisMetadata] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ResumeRecord) -> "ResumeResponse":
        return cls(**record.model_dump(exclude={"extracted_text"}))


class AnalyzeResumeResponse(BaseModel):
    message: str
    resume: ResumeResponse


class Pagination(BaseModel):
    current: int
    total: int = Field(description="Number of pages")
    count: int = Field(description="Items on this page")
    total_items: int


class ResumeSummary(BaseModel):
    id: str
    filename: str
    status: ResumeStatus
    overall_score: Optional[int] = None
    ats_score: Optional[int] = None
    uploaded_at: datetime


class ResumeListResponse(BaseModel):
    resumes: List[ResumeSummary]
    pagination: Pagination


class JobMatchRequest(BaseModel):
    job_description: str = Field(..., description="Full job description text (min 50 characters)")
    user_id: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None


class JobMatchResponse(BaseModel):
    message: str
    match: JobMatchRecord


class JobMatchSummary(BaseModel):
    id: str
    job_title: str
    company: str
    match_score: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    matched_at: datetime


class JobMatchListResponse(BaseModel):
    matches: List[JobMatchSummary]
    pagination: Pagination


class ErrorResponse(BaseModel):
    error: str
    message: str
