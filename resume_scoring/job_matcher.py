"""
Job-Match Comparator

Compares an existing ResumeAnalysis against a job description. The heuristic
comparator and the LLM path both end in sanitize_job_match(), which applies
the same clamping and defaulting contract as the resume assembler.
"""

import logging
from typing import Any, Dict, List

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from .analysis import (
    AnalysisSource, HeuristicOutput, source_data, pick, string_list,
    non_negative, choice, optional_string
)
from .config import (
    JOB_MATCH_WEIGHTS, EXPERIENCE_PENALTY, HIGH_IMPORTANCE_MENTIONS,
    MAX_RECOMMENDED_SKILLS, PROFICIENCY_VALUES, IMPORTANCE_VALUES,
    DEFAULT_MATCH_STRENGTHS, DEFAULT_MATCH_WEAKNESSES, DEFAULT_MATCH_RECOMMENDATIONS
)
from .normalizer import normalize_text
from .schemas import JobMatchAnalysis, ResumeAnalysis
from .scoring_engine import clamp_score
from .skill_matcher import (
    find_technical_skills, skill_display_name, skill_category, extract_years, count_term
)

logger = logging.getLogger(__name__)


def calculate_skills_score(required_skills: List[str], matched_skills: List[str]) -> float:
    """
    Skills coverage score (0-100).

    Formula: (matched / required) * 100, 100 when the description names no
    known skills.
    """
    if not required_skills:
        logger.debug("No recognizable skills in job description, score = 100")
        return 100.0
    score = (len(matched_skills) / len(required_skills)) * 100
    logger.info(f"Skills score: {len(matched_skills)}/{len(required_skills)} = {score:.2f}%")
    return score


def calculate_experience_score(required_years: float, candidate_years: float) -> float:
    """
    Experience match score (0-100).

    Formula:
    - If candidate >= required: min(100, (candidate / required) * 100)
    - If candidate < required: (candidate / required) * 100 * 0.7 (penalty)
    """
    if required_years == 0:
        return 100.0

    if candidate_years >= required_years:
        score = min(100.0, (candidate_years / required_years) * 100)
    else:
        score = (candidate_years / required_years) * 100 * EXPERIENCE_PENALTY

    logger.info(f"Experience score: {candidate_years} vs {required_years} years = {score:.2f}%")
    return score


def calculate_similarity_score(resume_text: str, job_description: str) -> float:
    """TF-IDF cosine similarity between resume and job description (0-100)."""
    try:
        vectorizer = TfidfVectorizer(stop_words="english")
        vectors = vectorizer.fit_transform([resume_text, job_description])
    except ValueError:
        # empty vocabulary after stop word removal
        logger.warning("No comparable terms between resume and job description")
        return 0.0
    similarity = cosine_similarity(vectors[0:1], vectors[1:2])[0][0]
    score = float(similarity) * 100
    logger.info(f"Similarity score: {score:.2f}%")
    return score


def _skill_key(name: str) -> str:
    """Vocabulary key for a skill name ("Node.js" -> "node")."""
    key = name.strip().lower()
    return key[:-3] if key.endswith(".js") else key


def _skill_importance(job_text: str, skill: str, mode: str = None) -> str:
    mentions = count_term(job_text, skill, mode)
    return "High" if mentions >= HIGH_IMPORTANCE_MENTIONS else "Medium"


def heuristic_job_match(
    resume_analysis: ResumeAnalysis,
    resume_text: str,
    job_description: str,
    mode: str = None
) -> JobMatchAnalysis:
    """Keyword/rule-based comparison of an analysed resume with a job description."""
    job_text = normalize_text(job_description)
    job_lower = job_text.lower()

    required = find_technical_skills(job_text, mode)
    candidate = {_skill_key(skill.name): skill for skill in resume_analysis.technical_skills}

    matched = [skill for skill in required if skill in candidate]
    missing = [skill for skill in required if skill not in candidate]

    required_years = extract_years(job_text)
    candidate_years = resume_analysis.experience.total_years

    skills_score = calculate_skills_score(required, matched)
    experience_score = calculate_experience_score(required_years, candidate_years)
    similarity_score = calculate_similarity_score(resume_text, job_text)

    match_score = (
        JOB_MATCH_WEIGHTS["skills"] * skills_score +
        JOB_MATCH_WEIGHTS["experience"] * experience_score +
        JOB_MATCH_WEIGHTS["similarity"] * similarity_score
    )

    strengths = []
    if matched:
        strengths.append(f"Matches {len(matched)} of {len(required)} required technical skills")
    if required_years and candidate_years >= required_years:
        strengths.append(f"Meets the {required_years}+ years experience requirement")
    if similarity_score >= 30:
        strengths.append("Resume wording aligns closely with the job description")

    weaknesses = []
    if missing:
        weaknesses.append("Missing skills: " + ", ".join(skill_display_name(s) for s in missing))
    if required_years and candidate_years < required_years:
        weaknesses.append(
            f"Experience below requirement ({candidate_years} of {required_years} years)"
        )

    recommendations = [
        f"Gain or highlight experience with {skill_display_name(skill)}"
        for skill in missing[:MAX_RECOMMENDED_SKILLS]
    ]
    if similarity_score < 30:
        recommendations.append("Mirror key terms from the job description in your resume")

    computed = {
        "match_score": match_score,
        "strengths": strengths,
        "weaknesses": weaknesses,
        "missing_skills": [
            {
                "skill": skill_display_name(skill),
                "category": skill_category(skill),
                "importance": _skill_importance(job_lower, skill, mode),
            }
            for skill in missing
        ],
        "matched_skills": [
            {
                "skill": candidate[skill].name,
                "category": candidate[skill].category,
                "proficiency": candidate[skill].proficiency,
            }
            for skill in matched
        ],
        "recommendations": recommendations,
        "experience_match": {
            "required": required_years,
            "candidate": candidate_years,
            "score": experience_score,
        },
    }
    logger.info(f"Heuristic job match: {len(matched)}/{len(required)} skills, score={match_score:.2f}")
    return sanitize_job_match(HeuristicOutput(computed))


def _sanitize_skill_entries(value, extra_key: str, allowed: List[str], default: str) -> List[Dict[str, Any]]:
    entries = []
    for item in value if isinstance(value, list) else []:
        if isinstance(item, str):
            item = {"skill": item}
        if not isinstance(item, dict):
            continue
        skill = optional_string(pick(item, "skill", "name"))
        if not skill:
            continue
        entries.append({
            "skill": skill,
            "category": optional_string(item.get("category")),
            extra_key: choice(item.get(extra_key), allowed, default),
        })
    return entries


def sanitize_job_match(source: AnalysisSource) -> JobMatchAnalysis:
    """Validate, clamp and default raw job match output."""
    data = source_data(source)
    experience = pick(data, "experience_match", "experienceMatch", default={})
    if not isinstance(experience, dict):
        experience = {}

    return JobMatchAnalysis(
        match_score=clamp_score(pick(data, "match_score", "matchScore", default=0)),
        strengths=string_list(data.get("strengths")) or list(DEFAULT_MATCH_STRENGTHS),
        weaknesses=string_list(data.get("weaknesses")) or list(DEFAULT_MATCH_WEAKNESSES),
        missing_skills=_sanitize_skill_entries(
            pick(data, "missing_skills", "missingSkills"), "importance", IMPORTANCE_VALUES, "Medium"
        ),
        matched_skills=_sanitize_skill_entries(
            pick(data, "matched_skills", "matchedSkills"), "proficiency", PROFICIENCY_VALUES, "Intermediate"
        ),
        recommendations=string_list(data.get("recommendations")) or list(DEFAULT_MATCH_RECOMMENDATIONS),
        experience_match={
            "required": non_negative(experience.get("required", 0)),
            "candidate": non_negative(experience.get("candidate", 0)),
            "score": clamp_score(experience.get("score", 0)),
        },
    )
