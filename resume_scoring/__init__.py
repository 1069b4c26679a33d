"""
Resume Scoring and Job Matching Engine

Turns extracted resume text into a structured, scored analysis and compares
analysed resumes with job descriptions. Two interchangeable paths:
1. LLM analysis (PhiData + OpenAI), sanitized on the way out
2. Deterministic keyword/rule heuristics

Usage:
    from resume_scoring import analyze_resume_text, match_job_description

    analysis = analyze_resume_text(resume_text)
    print(f"Overall: {analysis.overall_score}, ATS: {analysis.ats_score}")
"""

from .matcher import analyze_resume_text, match_job_description, match_multiple_jobs
from .schemas import ResumeAnalysis, JobMatchAnalysis

__all__ = [
    "analyze_resume_text",
    "match_job_description",
    "match_multiple_jobs",
    "ResumeAnalysis",
    "JobMatchAnalysis",
]
__version__ = "1.0.0"
