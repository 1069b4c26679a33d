from __future__ import annotations

from datetime import datetime
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SkillCategory = Literal["Frontend", "Backend", "Database", "DevOps", "AI/ML", "Mobile", "Design", "Other"]
Proficiency = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
ExperienceLevel = Literal["Entry", "Mid", "Senior", "Lead", "Executive"]
Importance = Literal["Low", "Medium", "High"]
ResumeStatus = Literal["uploaded", "processing", "analyzed", "error"]
Engine = Literal["llm", "heuristic"]


class ValueModel(BaseModel):
    """Immutable value: replaced wholesale, never edited field by field."""
    model_config = ConfigDict(frozen=True)


class TechnicalSkill(ValueModel):
    name: str
    category: SkillCategory = "Other"
    proficiency: Proficiency = "Beginner"
    years_of_experience: float = Field(default=0, ge=0)


class Experience(ValueModel):
    total_years: float = Field(default=0, ge=0)
    level: ExperienceLevel = "Entry"
    roles: Tuple[str, ...] = Field(default_factory=tuple)
    companies: Tuple[str, ...] = Field(default_factory=tuple)


class Education(ValueModel):
    degree: str
    institution: str
    year: Optional[str] = None
    field: Optional[str] = None


class ResumeAnalysis(ValueModel):
    technical_skills: Tuple[TechnicalSkill, ...] = Field(default_factory=tuple)
    soft_skills: Tuple[str, ...] = Field(default_factory=tuple)
    experience: Experience = Field(default_factory=Experience)
    education: Tuple[Education, ...] = Field(default_factory=tuple)
    job_roles: Tuple[str, ...] = Field(default_factory=tuple)
    overall_score: int = Field(default=0, ge=0, le=100)
    ats_score: int = Field(default=0, ge=0, le=100)
    suggestions: Tuple[str, ...] = Field(default_factory=tuple)
    strengths: Tuple[str, ...] = Field(default_factory=tuple)
    weaknesses: Tuple[str, ...] = Field(default_factory=tuple)
    keyword_density: Dict[str, int] = Field(default_factory=dict)


class MissingSkill(ValueModel):
    skill: str
    category: Optional[str] = None
    importance: Importance = "Medium"


class MatchedSkill(ValueModel):
    skill: str
    category: Optional[str] = None
    proficiency: Proficiency = "Intermediate"


class ExperienceMatch(ValueModel):
    required: float = Field(default=0, ge=0)
    candidate: float = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0, le=100)


class JobMatchAnalysis(ValueModel):
    match_score: int = Field(default=0, ge=0, le=100)
    strengths: Tuple[str, ...] = Field(default_factory=tuple)
    weaknesses: Tuple[str, ...] = Field(default_factory=tuple)
    missing_skills: Tuple[MissingSkill, ...] = Field(default_factory=tuple)
    matched_skills: Tuple[MatchedSkill, ...] = Field(default_factory=tuple)
    recommendations: Tuple[str, ...] = Field(default_factory=tuple)
    experience_match: ExperienceMatch = Field(default_factory=ExperienceMatch)


class AnalysisMetadata(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    processing_time_ms: int = 0
    ai_model: str = "heuristic"
    engine: Engine = "heuristic"


class ResumeRecord(BaseModel):
    """Stored resume with its lifecycle status."""
    id: str
    user_id: str
    filename: str = "resume.txt"
    extracted_text: str
    text_length: int = 0
    status: ResumeStatus = "uploaded"
    analysis: Optional[ResumeAnalysis] = None
    analysis_metadata: Optional[AnalysisMetadata] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class JobMatchRecord(BaseModel):
    """Stored job match, unique per (resume_id, job_description_hash)."""
    id: str
    user_id: str
    resume_id: str
    job_title: str = "Untitled Position"
    company: str = ""
    job_description: str
    job_description_hash: str
    match_score: int = Field(ge=0, le=100)
    analysis: JobMatchAnalysis
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)
    created_at: datetime
