"""
Keyword and skill matching against the fixed vocabularies.

Every check is a presence test on the normalized text. Technical skills and
short degree abbreviations honour the configured match mode; everything else
is plain substring containment.
"""

import logging
import re
from typing import List, Dict, Any, Optional

from .config import (
    TECHNICAL_SKILLS, SKILL_CATEGORIES, SKILL_MATCH_MODE, PROFICIENCY_QUALIFIERS,
    SOFT_SKILL_TRIGGERS, DEFAULT_SOFT_SKILLS, DEGREE_KEYWORDS, EDUCATION_FIELDS,
    DEFAULT_EDUCATION, JOB_ROLE_TITLES, DEFAULT_JOB_ROLES, COMPANY_SUFFIXES,
    MAX_COMPANIES, DENSITY_KEYWORDS
)

logger = logging.getLogger(__name__)

YEARS_RE = re.compile(r"(\d+)\s*(year|yr)", re.IGNORECASE)

COMPANY_RE = re.compile(
    r"\b((?:[A-Z][\w&]*\s+){1,3}(?:%s))\b" % "|".join(COMPANY_SUFFIXES)
)
INSTITUTION_RE = re.compile(
    r"\b((?:University|College)\s+of\s+(?:[A-Z][\w&]*\s?){1,3}"
    r"|(?:[A-Z][\w&]*\s+){1,4}(?:University|College|Institute(?:\s+of\s+Technology)?))"
)


def contains_term(text: str, term: str, mode: str = None) -> bool:
    """
    Presence test for a lowercase term in lowercase text.

    "legacy" mode is plain substring containment (so "java" matches inside
    "javascript"); "token" mode requires the term not to be glued to other
    letters or digits.
    """
    mode = mode or SKILL_MATCH_MODE
    if mode == "legacy":
        return term in text
    return re.search(_term_pattern(term), text) is not None


def count_term(text: str, term: str, mode: str = None) -> int:
    """Occurrences of a lowercase term, counted under the same rules as contains_term."""
    mode = mode or SKILL_MATCH_MODE
    if mode == "legacy":
        return text.count(term)
    return len(re.findall(_term_pattern(term), text))


def _term_pattern(term: str) -> str:
    return r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])"


def find_technical_skills(text: str, mode: str = None) -> List[str]:
    """Return the vocabulary skills present in the text, in vocabulary order."""
    lower_text = text.lower()
    found = [skill for skill in TECHNICAL_SKILLS if contains_term(lower_text, skill, mode)]
    logger.debug(f"Technical skills found ({mode or SKILL_MATCH_MODE}): {found}")
    return found


def skill_display_name(skill: str) -> str:
    return skill[:1].upper() + skill[1:]


def skill_category(skill: str) -> str:
    return SKILL_CATEGORIES.get(skill.lower(), "Other")


def skill_proficiency(text: str, skill: str, mode: str = None) -> str:
    """Infer proficiency from qualifier phrases directly preceding the skill."""
    lower_text = text.lower()
    skill = skill.lower()
    for qualifiers, proficiency in PROFICIENCY_QUALIFIERS:
        if any(contains_term(lower_text, f"{qualifier} {skill}", mode) for qualifier in qualifiers):
            return proficiency
    return "Beginner"


def extract_years(text: str) -> int:
    """First "<n> year(s)/yr" figure in the text, 0 when absent."""
    match = YEARS_RE.search(text)
    return int(match.group(1)) if match else 0


def experience_level(total_years: float) -> str:
    if total_years < 2:
        return "Entry"
    if total_years < 5:
        return "Mid"
    return "Senior"


def build_technical_skills(text: str, mode: str = None) -> List[Dict[str, Any]]:
    years = extract_years(text)
    return [
        {
            "name": skill_display_name(skill),
            "category": skill_category(skill),
            "proficiency": skill_proficiency(text, skill, mode),
            "years_of_experience": years,
        }
        for skill in find_technical_skills(text, mode)
    ]


def extract_soft_skills(text: str) -> List[str]:
    lower_text = text.lower()
    found = [
        name for name, triggers in SOFT_SKILL_TRIGGERS
        if any(trigger in lower_text for trigger in triggers)
    ]
    return found if found else DEFAULT_SOFT_SKILLS[:3]


def _find_institution(text: str) -> Optional[str]:
    match = INSTITUTION_RE.search(text)
    return match.group(1).strip() if match else None


def _find_field(lower_text: str) -> Optional[str]:
    for field in EDUCATION_FIELDS:
        if field in lower_text:
            return field.title()
    return None


def extract_education(text: str, mode: str = None) -> List[Dict[str, Any]]:
    lower_text = text.lower()
    institution = _find_institution(text) or DEFAULT_EDUCATION["institution"]
    field = _find_field(lower_text)

    education = []
    for degree, keywords, abbreviations in DEGREE_KEYWORDS:
        if any(keyword in lower_text for keyword in keywords) or any(
            contains_term(lower_text, abbreviation, mode) for abbreviation in abbreviations
        ):
            education.append({
                "degree": degree,
                "institution": institution,
                "year": None,
                "field": field,
            })

    return education if education else [dict(DEFAULT_EDUCATION)]


def extract_job_roles(text: str) -> List[str]:
    lower_text = text.lower()
    found = [role for role in JOB_ROLE_TITLES if role.lower() in lower_text]
    return found if found else list(DEFAULT_JOB_ROLES)


def extract_companies(text: str) -> List[str]:
    companies = []
    for match in COMPANY_RE.finditer(text):
        name = match.group(1).strip()
        if name not in companies:
            companies.append(name)
        if len(companies) >= MAX_COMPANIES:
            break
    return companies


def extract_experience(text: str) -> Dict[str, Any]:
    total_years = extract_years(text)
    return {
        "total_years": total_years,
        "level": experience_level(total_years),
        "roles": extract_job_roles(text),
        "companies": extract_companies(text),
    }


def keyword_density(text: str) -> Dict[str, int]:
    """Count whitespace tokens containing each density keyword; zero counts are dropped."""
    words = text.lower().split()
    density = {}
    for keyword in DENSITY_KEYWORDS:
        count = sum(1 for word in words if keyword in word)
        if count > 0:
            density[keyword] = count
    return density
