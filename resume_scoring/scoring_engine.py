"""
Deterministic Scoring Engine

All scoring functions are deterministic - same inputs produce same outputs.
Each category is capped on its own; the caps sum to exactly 100.
"""

import logging
import math
import re
from typing import List, Dict

from .config import (
    OVERALL_RUBRIC, ATS_RUBRIC, ATS_KEYWORDS, ATS_MIN_LENGTH,
    EXPERIENCE_TERMS, EDUCATION_TERMS, DEGREE_TERMS, RESULT_TERMS, LEADERSHIP_TERMS
)

logger = logging.getLogger(__name__)

YEARS_MENTION_RE = re.compile(r"\d+\s*(year|yr)")
PHONE_RE = re.compile(r"\d{10}")
FOUR_DIGIT_RE = re.compile(r"\d{4}")


def clamp_score(value) -> int:
    """Round half up and clamp any numeric value into [0, 100]."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0
    if value != value:  # NaN
        return 0
    value = min(100.0, max(0.0, value))
    return int(math.floor(value + 0.5))


def _contains_any(text: str, terms) -> bool:
    return any(term in text for term in terms)


def overall_breakdown(resume_text: str, skills: List[str]) -> Dict[str, int]:
    """
    Per-category points for the overall quality score.

    Formula:
    - skills: min(30, 3 * found skills)
    - experience: +15 experience wording, +10 "<n> year(s)"
    - education: +15 institution wording, +5 degree name
    - contact: +5 email with .com, +5 ten-digit run
    - achievements: +10 results wording, +5 leadership wording
    """
    text = resume_text.lower()
    rubric = OVERALL_RUBRIC

    skills_points = min(rubric["skills"]["cap"], rubric["skills"]["per_skill"] * len(skills))

    experience_points = 0
    if _contains_any(text, EXPERIENCE_TERMS):
        experience_points += rubric["experience"]["mention"]
    if YEARS_MENTION_RE.search(text):
        experience_points += rubric["experience"]["years"]

    education_points = 0
    if _contains_any(text, EDUCATION_TERMS):
        education_points += rubric["education"]["institution"]
    if _contains_any(text, DEGREE_TERMS):
        education_points += rubric["education"]["degree"]

    contact_points = 0
    if "@" in text and ".com" in text:
        contact_points += rubric["contact"]["email"]
    if PHONE_RE.search(text):
        contact_points += rubric["contact"]["phone"]

    achievement_points = 0
    if _contains_any(text, RESULT_TERMS):
        achievement_points += rubric["achievements"]["results"]
    if _contains_any(text, LEADERSHIP_TERMS):
        achievement_points += rubric["achievements"]["leadership"]

    return {
        "skills": skills_points,
        "experience": min(rubric["experience"]["cap"], experience_points),
        "education": min(rubric["education"]["cap"], education_points),
        "contact": min(rubric["contact"]["cap"], contact_points),
        "achievements": min(rubric["achievements"]["cap"], achievement_points),
    }


def overall_score(resume_text: str, skills: List[str]) -> int:
    """Overall resume quality score (0-100)."""
    breakdown = overall_breakdown(resume_text, skills)
    score = clamp_score(sum(breakdown.values()))
    logger.debug(f"Overall breakdown: {breakdown}")
    logger.info(f"Overall score: {score}")
    return score


def ats_breakdown(resume_text: str) -> Dict[str, int]:
    """
    Per-category points for the ATS compatibility score.

    Formula:
    - keywords: min(40, 6 * section keywords present)
    - structure: +15 experience and education, +10 skills or technical, +5 over 500 chars
    - format: +15 no image/graphic, +10 four-digit year, +5 email or @
    """
    text = resume_text.lower()
    rubric = ATS_RUBRIC

    found_keywords = [keyword for keyword in ATS_KEYWORDS if keyword in text]
    keyword_points = min(rubric["keywords"]["cap"], rubric["keywords"]["per_keyword"] * len(found_keywords))

    structure_points = 0
    if "experience" in text and "education" in text:
        structure_points += rubric["structure"]["sections"]
    if "skills" in text or "technical" in text:
        structure_points += rubric["structure"]["skills"]
    if len(text) > ATS_MIN_LENGTH:
        structure_points += rubric["structure"]["length"]

    format_points = 0
    if "image" not in text and "graphic" not in text:
        format_points += rubric["format"]["no_graphics"]
    if FOUR_DIGIT_RE.search(text):
        format_points += rubric["format"]["dates"]
    if "email" in text or "@" in text:
        format_points += rubric["format"]["email"]

    return {
        "keywords": keyword_points,
        "structure": min(rubric["structure"]["cap"], structure_points),
        "format": min(rubric["format"]["cap"], format_points),
    }


def ats_score(resume_text: str) -> int:
    """ATS compatibility score (0-100)."""
    breakdown = ats_breakdown(resume_text)
    score = clamp_score(sum(breakdown.values()))
    logger.debug(f"ATS breakdown: {breakdown}")
    logger.info(f"ATS score: {score}")
    return score
