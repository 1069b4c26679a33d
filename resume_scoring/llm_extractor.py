"""
LLM Extraction Module

Sends resume text (and job descriptions) to an LLM agent and parses the JSON
object embedded in its reply. No retries and no heuristic fallback happen
here: a malformed reply is a hard failure for the call.
"""

import json
import re
import logging
from typing import Dict, Any

from .analysis import LLMOutput, sanitize_analysis
from .exceptions import LLMProviderError, LLMResponseMalformedError
from .schemas import ResumeAnalysis

logger = logging.getLogger(__name__)

FENCED_JSON_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)
GREEDY_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


ANALYSIS_PROMPT = """Analyze the following resume and provide a comprehensive analysis in JSON format.

Resume Text:
{resume_text}

Return ONLY a JSON object with exactly this structure:
{{
  "technical_skills": [
    {{
      "name": "skill name",
      "category": "Frontend|Backend|Database|DevOps|AI/ML|Mobile|Design|Other",
      "proficiency": "Beginner|Intermediate|Advanced|Expert",
      "years_of_experience": number
    }}
  ],
  "soft_skills": ["skill1", "skill2"],
  "experience": {{
    "total_years": number,
    "level": "Entry|Mid|Senior|Lead|Executive",
    "roles": ["role1", "role2"],
    "companies": ["company1", "company2"]
  }},
  "education": [
    {{"degree": "degree name", "institution": "institution name", "year": "year", "field": "field of study"}}
  ],
  "job_roles": ["role1", "role2"],
  "overall_score": number (0-100),
  "ats_score": number (0-100),
  "suggestions": ["suggestion1", "suggestion2"],
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "keyword_density": {{"keyword": count}}
}}

Focus on:
1. Extracting all technical and soft skills
2. Calculating years of experience accurately
3. Providing actionable improvement suggestions
4. ATS optimization recommendations
5. Overall resume quality assessment
"""


JOB_MATCH_PROMPT = """Compare this resume with the job description and provide a detailed match analysis.

Resume Analysis:
{resume_analysis}

Resume Text:
{resume_text}

Job Description:
{job_description}

Return ONLY a JSON object with exactly this structure:
{{
  "match_score": number (0-100),
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "missing_skills": [
    {{"skill": "skill name", "category": "category", "importance": "Low|Medium|High"}}
  ],
  "matched_skills": [
    {{"skill": "skill name", "category": "category", "proficiency": "Beginner|Intermediate|Advanced|Expert"}}
  ],
  "recommendations": ["recommendation1", "recommendation2"],
  "experience_match": {{"required": number, "candidate": number, "score": number (0-100)}}
}}

Focus on:
1. Precise skill matching
2. Experience level alignment
3. Identifying critical gaps
4. Actionable improvement recommendations
5. Realistic match percentage
"""


def extract_json_from_response(text: str) -> Dict[str, Any]:
    """
    Extract the JSON object embedded in an LLM response.

    Markdown fences are unwrapped first, then everything from the first "{"
    to the last "}" is parsed.

    Raises:
        LLMResponseMalformedError: if no object is found or it does not parse
    """
    if not text:
        raise LLMResponseMalformedError("Empty response from LLM")

    fenced = FENCED_JSON_RE.search(text)
    if fenced and "{" in fenced.group(1):
        text = fenced.group(1).strip()

    match = GREEDY_OBJECT_RE.search(text)
    if not match:
        raise LLMResponseMalformedError("Invalid JSON response from AI: no JSON object found")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise LLMResponseMalformedError(f"Invalid JSON response from AI: {e}") from e

    if not isinstance(data, dict):
        raise LLMResponseMalformedError("Invalid JSON response from AI: expected an object")
    return data


def response_text(response) -> str:
    """Pull the text out of an agent run response."""
    if hasattr(response, 'content'):
        return str(response.content)
    if hasattr(response, 'messages') and response.messages:
        last_msg = response.messages[-1]
        return str(last_msg.content if hasattr(last_msg, 'content') else last_msg)
    return str(response)


def run_agent(agent, prompt: str) -> Dict[str, Any]:
    """
    Run the agent once and return the parsed JSON object.

    Raises:
        LLMProviderError: if the provider call fails
        LLMResponseMalformedError: if the reply holds no JSON object
    """
    try:
        response = agent.run(prompt)
    except Exception as e:
        logger.error(f"LLM provider call failed: {e}")
        raise LLMProviderError(f"LLM provider call failed: {e}") from e

    text = response_text(response)
    logger.debug(f"Raw LLM response: {text[:500]}...")
    return extract_json_from_response(text)


def analyze_with_llm(agent, resume_text: str) -> ResumeAnalysis:
    """LLM-backed resume analysis, sanitized by the shared validator."""
    logger.info("Requesting resume analysis from LLM...")
    raw = run_agent(agent, ANALYSIS_PROMPT.format(resume_text=resume_text))
    return sanitize_analysis(LLMOutput(raw))


def request_job_match(
    agent,
    resume_text: str,
    resume_analysis: ResumeAnalysis,
    job_description: str
) -> Dict[str, Any]:
    """Raw LLM job match output; the caller sanitizes it."""
    logger.info("Requesting job match analysis from LLM...")
    prompt = JOB_MATCH_PROMPT.format(
        resume_analysis=json.dumps(resume_analysis.model_dump(mode="json"), indent=2),
        resume_text=resume_text,
        job_description=job_description,
    )
    return run_agent(agent, prompt)
