"""
Unit tests for normalization, keyword matching and the heuristic scorer.
"""

import unittest
import logging

from resume_scoring.exceptions import InsufficientContentError
from resume_scoring.normalizer import (
    normalize_text,
    ensure_sufficient_content,
    validate_job_description,
    job_description_hash,
)
from resume_scoring.scoring_engine import (
    clamp_score,
    overall_breakdown,
    overall_score,
    ats_breakdown,
    ats_score,
)
from resume_scoring.skill_matcher import (
    contains_term,
    count_term,
    find_technical_skills,
    build_technical_skills,
    skill_category,
    skill_proficiency,
    extract_years,
    experience_level,
    extract_soft_skills,
    extract_education,
    extract_job_roles,
    extract_companies,
    keyword_density,
)

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


# Scenario 1 ingredients: "5 years", react, node, bachelor degree, led team, @x.com
MINIMAL_RESUME = (
    "Jane Doe jane@x.com 5 years experience building react and node applications. "
    "Bachelor degree in Computer Science. Led team of four engineers."
)

# Same ingredients plus a phone number and a measurable result
GOLDEN_RESUME = (
    "Jane Doe | jane@x.com | 5551234567. 5 years experience building react and node applications. "
    "Improved API latency by 30%. Bachelor degree in Computer Science. Led team of four engineers."
)

NO_KEYWORD_TEXT = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor incididunt ut labore"
)

ALL_SKILLS_TEXT = (
    "Tools: javascript python java react node sql html css angular vue mongodb postgresql"
)


class TestNormalizer(unittest.TestCase):
    """Test text normalization and content validation."""

    def test_collapses_whitespace_and_strips_symbols(self):
        """Whitespace runs collapse, disallowed characters are removed."""
        self.assertEqual(normalize_text("Hello\n\n  World\t!"), "Hello World")

    def test_keeps_allowed_punctuation(self):
        """Common punctuation used in resumes survives."""
        text = "jane@x.com (C#) [SQL] {a=b} 50% + <tag> ? path/to\\file | 'q' \"dq\""
        self.assertEqual(normalize_text(text), text)

    def test_removes_non_ascii_symbols(self):
        """Bullets and other symbols outside the allow-list are dropped."""
        result = normalize_text("Skills • Python ✓ SQL")
        self.assertNotIn("•", result)
        self.assertNotIn("✓", result)
        self.assertTrue(result.startswith("Skills"))

    def test_empty_input(self):
        """None and empty strings normalize to an empty string."""
        self.assertEqual(normalize_text(None), "")
        self.assertEqual(normalize_text(""), "")
        self.assertEqual(normalize_text("   \n\t "), "")

    def test_insufficient_content(self):
        """49 characters are rejected, 50 accepted."""
        with self.assertRaises(InsufficientContentError):
            ensure_sufficient_content("a" * 49)
        self.assertEqual(len(ensure_sufficient_content("a" * 50)), 50)

    def test_insufficient_content_counts_normalized_length(self):
        """Characters stripped by normalization do not count."""
        with self.assertRaises(InsufficientContentError):
            ensure_sufficient_content("a" * 40 + "•" * 20)

    def test_job_description_boundary(self):
        """A 49 character description is rejected, 50 accepted."""
        with self.assertRaises(InsufficientContentError):
            validate_job_description("x" * 49)
        with self.assertRaises(InsufficientContentError):
            validate_job_description("   " + "x" * 49 + "   ")
        self.assertEqual(validate_job_description("x" * 50), "x" * 50)

    def test_job_description_hash_ignores_case_and_spacing(self):
        """Equivalent descriptions share an idempotency key."""
        a = job_description_hash("Senior Python Developer\n\nneeded now")
        b = job_description_hash("  senior python developer needed NOW ")
        c = job_description_hash("Junior Java Developer needed now")
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)
        self.assertEqual(len(a), 32)


class TestSkillMatcher(unittest.TestCase):
    """Test vocabulary matching."""

    def test_token_mode_avoids_java_in_javascript(self):
        """Word-boundary matching does not find java inside javascript."""
        skills = find_technical_skills("Senior JavaScript developer", mode="token")
        self.assertEqual(skills, ["javascript"])

    def test_legacy_mode_keeps_substring_behavior(self):
        """Legacy matching reproduces the substring false positive."""
        skills = find_technical_skills("Senior JavaScript developer", mode="legacy")
        self.assertEqual(skills, ["javascript", "java"])

    def test_token_mode_proficiency_ignores_longer_skill(self):
        """A qualifier on javascript does not carry over to java."""
        text = "Expert javascript developer. Some java coursework and experience."
        self.assertEqual(skill_proficiency(text, "java", mode="token"), "Beginner")
        self.assertEqual(skill_proficiency(text, "javascript", mode="token"), "Expert")
        self.assertEqual(skill_proficiency(text, "java", mode="legacy"), "Expert")

        skills = build_technical_skills(text, mode="token")
        self.assertEqual(
            [(s["name"], s["proficiency"]) for s in skills],
            [("Javascript", "Expert"), ("Java", "Beginner")],
        )

    def test_count_term(self):
        text = "we need javascript and typescript; javascript everywhere; java once"
        self.assertEqual(count_term(text, "java", mode="token"), 1)
        self.assertEqual(count_term(text, "java", mode="legacy"), 3)
        self.assertEqual(count_term(text, "javascript", mode="token"), 2)

    def test_token_mode_matches_dotted_names(self):
        """node matches in node.js, react in react.js."""
        skills = find_technical_skills("Built APIs in Node.js and UIs in React.js", mode="token")
        self.assertEqual(skills, ["react", "node"])

    def test_contains_term(self):
        self.assertTrue(contains_term("bs in physics", "bs", mode="token"))
        self.assertFalse(contains_term("jobs in physics", "bs", mode="token"))
        self.assertTrue(contains_term("jobs in physics", "bs", mode="legacy"))

    def test_skill_category(self):
        """Known skills map to their category, unknown to Other."""
        self.assertEqual(skill_category("React"), "Frontend")
        self.assertEqual(skill_category("node"), "Backend")
        self.assertEqual(skill_category("mongodb"), "Database")
        self.assertEqual(skill_category("cobol"), "Other")

    def test_skill_proficiency(self):
        """Qualifier phrases map to proficiency levels."""
        self.assertEqual(skill_proficiency("Expert Python engineer", "python"), "Expert")
        self.assertEqual(skill_proficiency("advanced python", "python"), "Expert")
        self.assertEqual(skill_proficiency("senior react developer", "react"), "Advanced")
        self.assertEqual(skill_proficiency("lead react developer", "react"), "Advanced")
        self.assertEqual(skill_proficiency("intermediate sql", "sql"), "Intermediate")
        self.assertEqual(skill_proficiency("python", "python"), "Beginner")

    def test_skill_proficiency_priority(self):
        """The first qualifier in priority order wins."""
        text = "lead python projects, intermediate python tutor, expert python reviewer"
        self.assertEqual(skill_proficiency(text, "python"), "Expert")

    def test_extract_years_is_deterministic(self):
        """Missing year figures default to 0 on every run."""
        self.assertEqual(extract_years("7 years of experience"), 7)
        self.assertEqual(extract_years("3yr contract"), 3)
        results = {extract_years("no figures here") for _ in range(10)}
        self.assertEqual(results, {0})

    def test_experience_level(self):
        self.assertEqual(experience_level(0), "Entry")
        self.assertEqual(experience_level(2), "Mid")
        self.assertEqual(experience_level(4), "Mid")
        self.assertEqual(experience_level(5), "Senior")

    def test_soft_skills_and_fallback(self):
        """Trigger phrases detected in order, fallback list otherwise."""
        self.assertEqual(
            extract_soft_skills("Collaborate with the team and solve problems"),
            ["Teamwork", "Problem Solving"],
        )
        self.assertEqual(
            extract_soft_skills("Nothing relevant"),
            ["Communication", "Leadership", "Problem Solving"],
        )

    def test_education_detection(self):
        """Degrees, institution and field are picked up."""
        education = extract_education("Master of Science, Stanford University, Computer Science")
        self.assertEqual(len(education), 1)
        self.assertEqual(education[0]["degree"], "Master's Degree")
        self.assertEqual(education[0]["institution"], "Stanford University")
        self.assertEqual(education[0]["field"], "Computer Science")

    def test_education_fallback(self):
        """No degree keywords yields the default entry."""
        education = extract_education("Self taught programmer", mode="token")
        self.assertEqual(education, [{
            "degree": "Bachelor's Degree",
            "institution": "University",
            "year": None,
            "field": "Computer Science",
        }])

    def test_job_roles(self):
        self.assertEqual(extract_job_roles("Software Engineer and Data Analyst"), ["Engineer", "Analyst"])
        self.assertEqual(extract_job_roles("Barista"), ["Software Developer"])

    def test_companies(self):
        """Capitalised names ending in a company suffix are extracted."""
        companies = extract_companies("Worked at Acme Corp and later Globex Technologies as engineer")
        self.assertEqual(companies, ["Acme Corp", "Globex Technologies"])
        self.assertEqual(extract_companies("freelance work only"), [])

    def test_keyword_density(self):
        """Only keywords with positive counts are reported."""
        density = keyword_density("Team player. Teams and projects. Project management experience")
        self.assertEqual(density, {"experience": 1, "project": 2, "team": 2, "management": 1})


class TestScoringComponents(unittest.TestCase):
    """Test the point rubrics."""

    def test_scenario_minimal_breakdown(self):
        """Hand-traced category points for the minimal scenario text."""
        skills = find_technical_skills(MINIMAL_RESUME)
        self.assertEqual(skills, ["react", "node"])
        breakdown = overall_breakdown(MINIMAL_RESUME, skills)
        self.assertEqual(breakdown, {
            "skills": 6,
            "experience": 25,
            "education": 20,
            "contact": 5,
            "achievements": 5,
        })
        self.assertEqual(overall_score(MINIMAL_RESUME, skills), 61)

    def test_scenario_golden_overall(self):
        """Golden value: 6 + 25 + 20 + 10 + 15 = 76."""
        skills = find_technical_skills(GOLDEN_RESUME)
        score = overall_score(GOLDEN_RESUME, skills)
        self.assertEqual(score, 76)
        self.assertGreaterEqual(score, 70)

    def test_scenario_golden_ats(self):
        """Golden ATS value: keywords 12, structure 0, format 30."""
        self.assertEqual(ats_breakdown(GOLDEN_RESUME), {"keywords": 12, "structure": 0, "format": 30})
        self.assertEqual(ats_score(GOLDEN_RESUME), 42)

    def test_no_keywords(self):
        """Text without any signal scores 0 overall; ATS only credits the missing graphics."""
        skills = find_technical_skills(NO_KEYWORD_TEXT)
        self.assertEqual(skills, [])
        self.assertEqual(overall_score(NO_KEYWORD_TEXT, skills), 0)
        self.assertEqual(ats_score(NO_KEYWORD_TEXT), 15)

    def test_skills_category_cap(self):
        """Twelve skills would be 36 points; the category stops at 30."""
        skills = find_technical_skills(ALL_SKILLS_TEXT)
        self.assertEqual(len(skills), 12)
        self.assertEqual(overall_breakdown(ALL_SKILLS_TEXT, skills)["skills"], 30)

    def test_every_category_respects_its_cap(self):
        """A text firing every rule hits each cap exactly and totals 100."""
        text = (
            ALL_SKILLS_TEXT + " experience worked developed 10 years degree university bachelor "
            "me@mail.com 5551234567 achieved improved 40% led managed team "
            "skills education work project management technical 2020 email " + "x" * 500
        )
        skills = find_technical_skills(text)
        self.assertEqual(overall_breakdown(text, skills), {
            "skills": 30, "experience": 25, "education": 20, "contact": 10, "achievements": 15,
        })
        self.assertEqual(ats_breakdown(text), {"keywords": 40, "structure": 30, "format": 30})
        self.assertEqual(overall_score(text, skills), 100)
        self.assertEqual(ats_score(text), 100)

    def test_graphics_mention_loses_format_points(self):
        text = "Portfolio with image gallery and graphic design work " * 2
        self.assertEqual(ats_breakdown(text)["format"], 0)

    def test_scores_bounded_for_pathological_input(self):
        """Scores stay within [0, 100] for empty, huge and repetitive input."""
        for text in ["", "a", "experience " * 10000, ALL_SKILLS_TEXT * 200]:
            skills = find_technical_skills(text)
            self.assertTrue(0 <= overall_score(text, skills) <= 100)
            self.assertTrue(0 <= ats_score(text) <= 100)
        self.assertEqual(overall_score("experience", ["python"] * 1000), 45)

    def test_clamp_score(self):
        self.assertEqual(clamp_score(150), 100)
        self.assertEqual(clamp_score(-20), 0)
        self.assertEqual(clamp_score(66.6), 67)
        self.assertEqual(clamp_score("80"), 80)
        self.assertEqual(clamp_score("n/a"), 0)
        self.assertEqual(clamp_score(None), 0)
        self.assertEqual(clamp_score(float("nan")), 0)
        self.assertEqual(clamp_score(float("inf")), 100)

    def test_clamp_score_rounds_half_up(self):
        """Halves always round up: 52.5 -> 53, 17.5 -> 18, 0.5 -> 1."""
        self.assertEqual(clamp_score(52.5), 53)
        self.assertEqual(clamp_score(17.5), 18)
        self.assertEqual(clamp_score(0.5), 1)
        self.assertEqual(clamp_score(99.5), 100)
        self.assertEqual(clamp_score(52.49), 52)


class TestDeterminism(unittest.TestCase):
    """Test that the heuristic scorer is deterministic."""

    def test_scores_repeat(self):
        """Identical input gives identical scores and skills."""
        runs = [
            (find_technical_skills(GOLDEN_RESUME), ats_score(GOLDEN_RESUME))
            for _ in range(5)
        ]
        self.assertEqual(len(set((tuple(s), a) for s, a in runs)), 1)


if __name__ == "__main__":
    unittest.main()
