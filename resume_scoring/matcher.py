"""
Main Pipeline Module

Orchestrates a complete analysis run:
1. Normalize and validate the text
2. Analyse through the LLM agent when one is supplied, otherwise heuristically
3. Return a sanitized ResumeAnalysis / JobMatchAnalysis

The path is chosen once per call; an LLM failure is never retried
heuristically within the same call.
"""

import logging
from typing import List, Optional

from .analysis import LLMOutput, build_heuristic_analysis
from .exceptions import ResumeScoringError
from .job_matcher import heuristic_job_match, sanitize_job_match
from .llm_extractor import analyze_with_llm, request_job_match
from .normalizer import ensure_sufficient_content, validate_job_description
from .schemas import ResumeAnalysis, JobMatchAnalysis

logger = logging.getLogger(__name__)


def analyze_resume_text(
    resume_text: str,
    agent=None,
    mode: str = None
) -> ResumeAnalysis:
    """
    Analyse resume text into a ResumeAnalysis.

    Args:
        resume_text: Extracted resume text (normalized here)
        agent: Optional LLM agent exposing run(prompt); heuristic path when None
        mode: Optional skill match mode override ("token" or "legacy")

    Returns:
        ResumeAnalysis with every invariant applied

    Raises:
        InsufficientContentError: if the text is too short
        LLMResponseMalformedError, LLMProviderError: on LLM path failures
    """
    engine = engine_for(agent)
    logger.info("=" * 80)
    logger.info(f"STARTING RESUME ANALYSIS ({engine})")
    logger.info("=" * 80)

    try:
        text = ensure_sufficient_content(resume_text)
        if agent is not None:
            analysis = analyze_with_llm(agent, text)
        else:
            analysis = build_heuristic_analysis(text, mode)
    except ResumeScoringError as e:
        logger.error(f"Resume analysis failed: {e}")
        raise

    logger.info(f"ANALYSIS COMPLETE - Overall: {analysis.overall_score}, ATS: {analysis.ats_score}")
    return analysis


def match_job_description(
    resume_analysis: ResumeAnalysis,
    resume_text: str,
    job_description: str,
    agent=None,
    mode: str = None
) -> JobMatchAnalysis:
    """
    Compare an analysed resume with a job description.

    Raises:
        InsufficientContentError: if the job description is too short
        LLMResponseMalformedError, LLMProviderError: on LLM path failures
    """
    engine = engine_for(agent)
    logger.info("=" * 80)
    logger.info(f"STARTING JOB MATCHING ({engine})")
    logger.info("=" * 80)

    try:
        job_description = validate_job_description(job_description)
        if agent is not None:
            raw = request_job_match(agent, resume_text, resume_analysis, job_description)
            result = sanitize_job_match(LLMOutput(raw))
        else:
            result = heuristic_job_match(resume_analysis, resume_text, job_description, mode)
    except ResumeScoringError as e:
        logger.error(f"Job matching failed: {e}")
        raise

    logger.info(f"MATCHING COMPLETE - Score: {result.match_score}%")
    return result


def match_multiple_jobs(
    resume_analysis: ResumeAnalysis,
    resume_text: str,
    job_descriptions: List[str],
    agent=None
) -> List[dict]:
    """
    Match one resume against several job descriptions.

    Failed matches are reported with their error instead of aborting the batch.

    Returns:
        List of {"job_index", "match_score", "analysis" | "error"}, highest score first
    """
    logger.info(f"Matching resume against {len(job_descriptions)} jobs")

    results = []
    for i, job_description in enumerate(job_descriptions):
        try:
            analysis = match_job_description(resume_analysis, resume_text, job_description, agent)
            results.append({
                "job_index": i,
                "match_score": analysis.match_score,
                "analysis": analysis,
            })
        except ResumeScoringError as e:
            logger.error(f"Failed to match job {i + 1}: {e}")
            results.append({"job_index": i, "match_score": 0, "error": str(e)})

    results.sort(key=lambda x: x["match_score"], reverse=True)
    return results


def engine_for(agent: Optional[object]) -> str:
    return "llm" if agent is not None else "heuristic"
