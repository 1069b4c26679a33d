"""
Structured Analysis Assembler

Both the LLM path and the heuristic path hand their raw output to
sanitize_analysis(), which applies one set of coercion, clamping and
defaulting rules. Consumers never need to know which path ran.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .config import (
    SKILL_CATEGORY_VALUES, PROFICIENCY_VALUES, EXPERIENCE_LEVELS,
    DEFAULT_SOFT_SKILLS, DEFAULT_EDUCATION, DEFAULT_JOB_ROLES,
    DEFAULT_SUGGESTIONS, DEFAULT_STRENGTHS, DEFAULT_WEAKNESSES,
    SUGGESTION_THRESHOLD, WEAKNESS_THRESHOLD, STRONG_SKILL_COUNT
)
from .schemas import ResumeAnalysis
from .scoring_engine import clamp_score, overall_score, ats_score
from .skill_matcher import (
    find_technical_skills, build_technical_skills, extract_soft_skills,
    extract_experience, extract_education, extract_job_roles, keyword_density
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMOutput:
    """JSON object parsed from an LLM response."""
    raw: Dict[str, Any]
    kind: str = "llm"


@dataclass(frozen=True)
class HeuristicOutput:
    """Fields computed by the keyword/rule engine."""
    computed: Dict[str, Any]
    kind: str = "heuristic"


AnalysisSource = Union[LLMOutput, HeuristicOutput]


def source_data(source: AnalysisSource) -> Dict[str, Any]:
    data = source.raw if isinstance(source, LLMOutput) else source.computed
    return data if isinstance(data, dict) else {}


def pick(data: Dict[str, Any], *keys: str, default=None):
    """First present key among snake_case and camelCase spellings."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def string_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


def non_negative(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number or number < 0:
        return 0
    return int(number) if number.is_integer() else number


def choice(value, allowed: List[str], default: str) -> str:
    if isinstance(value, str):
        for option in allowed:
            if value.strip().lower() == option.lower():
                return option
    return default


def optional_string(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _sanitize_skills(value) -> List[Dict[str, Any]]:
    skills = []
    for item in value if isinstance(value, list) else []:
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, dict):
            continue
        name = optional_string(pick(item, "name", "skill"))
        if not name:
            continue
        skills.append({
            "name": name,
            "category": choice(item.get("category"), SKILL_CATEGORY_VALUES, "Other"),
            "proficiency": choice(item.get("proficiency"), PROFICIENCY_VALUES, "Intermediate"),
            "years_of_experience": non_negative(pick(item, "years_of_experience", "yearsOfExperience", default=0)),
        })
    return skills


def _sanitize_education(value) -> List[Dict[str, Any]]:
    education = []
    for item in value if isinstance(value, list) else []:
        if not isinstance(item, dict):
            continue
        degree = optional_string(item.get("degree"))
        if not degree:
            continue
        education.append({
            "degree": degree,
            "institution": optional_string(item.get("institution")) or DEFAULT_EDUCATION["institution"],
            "year": optional_string(item.get("year")),
            "field": optional_string(item.get("field")),
        })
    return education


def _sanitize_density(value) -> Dict[str, int]:
    if not isinstance(value, dict):
        return {}
    density = {}
    for keyword, count in value.items():
        count = non_negative(count)
        if count > 0:
            density[str(keyword)] = int(count)
    return density


def sanitize_analysis(source: AnalysisSource) -> ResumeAnalysis:
    """
    Validate, clamp and default raw analysis output into a ResumeAnalysis.

    Rules shared by both paths:
    - enum fields outside their vocabulary fall back to a default
    - numbers are made non-negative, scores clamped to [0, 100]
    - display lists are never empty: fixed fallbacks are substituted
    """
    data = source_data(source)
    experience = pick(data, "experience", default={})
    if not isinstance(experience, dict):
        experience = {}

    job_roles = string_list(pick(data, "job_roles", "jobRoles")) or list(DEFAULT_JOB_ROLES)

    analysis = ResumeAnalysis(
        technical_skills=_sanitize_skills(pick(data, "technical_skills", "technicalSkills")),
        soft_skills=string_list(pick(data, "soft_skills", "softSkills")) or DEFAULT_SOFT_SKILLS[:3],
        experience={
            "total_years": non_negative(pick(experience, "total_years", "totalYears", default=0)),
            "level": choice(experience.get("level"), EXPERIENCE_LEVELS, "Entry"),
            "roles": string_list(experience.get("roles")) or list(job_roles),
            "companies": string_list(experience.get("companies")),
        },
        education=_sanitize_education(data.get("education")) or [dict(DEFAULT_EDUCATION)],
        job_roles=job_roles,
        overall_score=clamp_score(pick(data, "overall_score", "overallScore", default=0)),
        ats_score=clamp_score(pick(data, "ats_score", "atsScore", default=0)),
        suggestions=string_list(data.get("suggestions")) or list(DEFAULT_SUGGESTIONS),
        strengths=string_list(data.get("strengths")) or list(DEFAULT_STRENGTHS),
        weaknesses=string_list(data.get("weaknesses")) or list(DEFAULT_WEAKNESSES),
        keyword_density=_sanitize_density(pick(data, "keyword_density", "keywordDensity")),
    )
    logger.debug(f"Sanitized {source.kind} analysis: overall={analysis.overall_score}, ats={analysis.ats_score}")
    return analysis


def generate_suggestions(resume_text: str, overall: int, ats: int) -> List[str]:
    text = resume_text.lower()
    suggestions = []
    if overall < SUGGESTION_THRESHOLD:
        suggestions.append("Add more specific technical skills and achievements")
    if ats < SUGGESTION_THRESHOLD:
        suggestions.append("Improve keyword optimization for ATS systems")
    if "project" not in text:
        suggestions.append("Include relevant project experience")
    if "%" not in text and "increase" not in text:
        suggestions.append("Add quantifiable achievements with metrics")
    return suggestions


def identify_strengths(resume_text: str, skills: List[str]) -> List[str]:
    text = resume_text.lower()
    strengths = []
    if len(skills) > STRONG_SKILL_COUNT:
        strengths.append("Strong technical skill set")
    if "lead" in text or "manage" in text:
        strengths.append("Leadership experience")
    if "project" in text:
        strengths.append("Project experience")
    return strengths


def identify_weaknesses(resume_text: str, overall: int, ats: int) -> List[str]:
    weaknesses = []
    if overall < WEAKNESS_THRESHOLD:
        weaknesses.append("Could benefit from more detailed experience descriptions")
    if ats < WEAKNESS_THRESHOLD:
        weaknesses.append("Needs better keyword optimization")
    if "@" not in resume_text:
        weaknesses.append("Missing contact information")
    return weaknesses


def build_heuristic_analysis(resume_text: str, mode: str = None) -> ResumeAnalysis:
    """Keyword/rule-based analysis of normalized resume text."""
    skills = find_technical_skills(resume_text, mode)
    overall = overall_score(resume_text, skills)
    ats = ats_score(resume_text)

    computed = {
        "technical_skills": build_technical_skills(resume_text, mode),
        "soft_skills": extract_soft_skills(resume_text),
        "experience": extract_experience(resume_text),
        "education": extract_education(resume_text, mode),
        "job_roles": extract_job_roles(resume_text),
        "overall_score": overall,
        "ats_score": ats,
        "suggestions": generate_suggestions(resume_text, overall, ats),
        "strengths": identify_strengths(resume_text, skills),
        "weaknesses": identify_weaknesses(resume_text, overall, ats),
        "keyword_density": keyword_density(resume_text),
    }
    logger.info(f"Heuristic analysis: {len(skills)} skills, overall={overall}, ats={ats}")
    return sanitize_analysis(HeuristicOutput(computed))
