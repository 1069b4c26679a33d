"""
Configuration for the resume scoring and job matching engine.
Vocabularies, point rubrics and weights live here.
"""

# Minimum normalized length for resume text and job descriptions
MIN_CONTENT_LENGTH = 50

# "token" = word-boundary matching, "legacy" = plain substring containment
SKILL_MATCH_MODE = "token"

# Technical skill vocabulary, in scan order
TECHNICAL_SKILLS = [
    "javascript", "python", "java", "react", "node", "sql",
    "html", "css", "angular", "vue", "mongodb", "postgresql",
]

# Skill -> category table (unknown skills map to "Other")
SKILL_CATEGORIES = {
    "javascript": "Frontend",
    "react": "Frontend",
    "vue": "Frontend",
    "angular": "Frontend",
    "html": "Frontend",
    "css": "Frontend",
    "node": "Backend",
    "python": "Backend",
    "java": "Backend",
    "sql": "Database",
    "mongodb": "Database",
    "postgresql": "Database",
}

SKILL_CATEGORY_VALUES = ["Frontend", "Backend", "Database", "DevOps", "AI/ML", "Mobile", "Design", "Other"]
PROFICIENCY_VALUES = ["Beginner", "Intermediate", "Advanced", "Expert"]
EXPERIENCE_LEVELS = ["Entry", "Mid", "Senior", "Lead", "Executive"]
IMPORTANCE_VALUES = ["Low", "Medium", "High"]

# Qualifier phrases in priority order: first match wins
PROFICIENCY_QUALIFIERS = [
    (("expert", "advanced"), "Expert"),
    (("senior", "lead"), "Advanced"),
    (("intermediate",), "Intermediate"),
]

# Soft skill -> trigger phrases, in output order
SOFT_SKILL_TRIGGERS = [
    ("Teamwork", ("team", "collaborate")),
    ("Leadership", ("lead", "manage")),
    ("Problem Solving", ("problem", "solve")),
    ("Communication", ("communicate", "present")),
]

DEFAULT_SOFT_SKILLS = [
    "Communication", "Leadership", "Problem Solving",
    "Teamwork", "Time Management", "Critical Thinking",
]

# Degree -> keywords. Short abbreviations follow SKILL_MATCH_MODE.
DEGREE_KEYWORDS = [
    ("Bachelor's Degree", ("bachelor",), ("bs", "ba")),
    ("Master's Degree", ("master",), ("ms", "ma")),
    ("PhD", ("phd", "doctorate"), ()),
]

EDUCATION_FIELDS = [
    "computer science", "software engineering", "information technology",
    "computer engineering", "data science", "electrical engineering",
    "mechanical engineering", "mathematics", "statistics", "physics",
    "business administration", "economics", "finance",
]

DEFAULT_EDUCATION = {
    "degree": "Bachelor's Degree",
    "institution": "University",
    "year": None,
    "field": "Computer Science",
}

JOB_ROLE_TITLES = ["Developer", "Engineer", "Analyst", "Manager", "Consultant", "Specialist"]
DEFAULT_JOB_ROLES = ["Software Developer"]

COMPANY_SUFFIXES = [
    "Inc", "LLC", "Ltd", "Corp", "Corporation", "Technologies",
    "Solutions", "Labs", "Systems", "Group", "Software",
]
MAX_COMPANIES = 5

DENSITY_KEYWORDS = ["experience", "skills", "project", "team", "development", "management"]

# Overall score rubric: category caps sum to exactly 100
OVERALL_RUBRIC = {
    "skills": {"per_skill": 3, "cap": 30},
    "experience": {"mention": 15, "years": 10, "cap": 25},
    "education": {"institution": 15, "degree": 5, "cap": 20},
    "contact": {"email": 5, "phone": 5, "cap": 10},
    "achievements": {"results": 10, "leadership": 5, "cap": 15},
}

EXPERIENCE_TERMS = ("experience", "worked", "developed")
EDUCATION_TERMS = ("degree", "university", "college")
DEGREE_TERMS = ("bachelor", "master", "phd")
RESULT_TERMS = ("achieved", "improved", "%")
LEADERSHIP_TERMS = ("led", "managed", "team")

# ATS score rubric: category caps sum to exactly 100
ATS_RUBRIC = {
    "keywords": {"per_keyword": 6, "cap": 40},
    "structure": {"sections": 15, "skills": 10, "length": 5, "cap": 30},
    "format": {"no_graphics": 15, "dates": 10, "email": 5, "cap": 30},
}

ATS_KEYWORDS = ["experience", "skills", "education", "work", "project", "team", "management"]
ATS_MIN_LENGTH = 500

# Thresholds for the rule-based feedback lists
SUGGESTION_THRESHOLD = 70
WEAKNESS_THRESHOLD = 60
STRONG_SKILL_COUNT = 5

DEFAULT_SUGGESTIONS = ["Great resume! Consider adding more specific examples of your achievements."]
DEFAULT_STRENGTHS = ["Technical background", "Relevant experience"]
DEFAULT_WEAKNESSES = ["Consider adding more quantifiable achievements"]

DEFAULT_MATCH_STRENGTHS = ["Relevant background for the role"]
DEFAULT_MATCH_WEAKNESSES = ["No significant gaps detected"]
DEFAULT_MATCH_RECOMMENDATIONS = ["Tailor your resume summary to the job description"]

# Job match component weights (must sum to 1.0)
JOB_MATCH_WEIGHTS = {
    "skills": 0.50,
    "experience": 0.30,
    "similarity": 0.20,
}

# Penalty multiplier when below required years
EXPERIENCE_PENALTY = 0.7

# Missing skill mentioned at least this often in the description is High importance
HIGH_IMPORTANCE_MENTIONS = 2
MAX_RECOMMENDED_SKILLS = 3

# LLM configuration
LLM_CONFIG = {
    "model": "gpt-4o",
    "analysis_temperature": 0.3,
    "match_temperature": 0.2,
    "max_tokens": 2000,
}

# Only keys shaped like real OpenAI keys enable the LLM path in "auto" mode
OPENAI_KEY_PREFIX = "sk-"
OPENAI_KEY_MIN_LENGTH = 21
