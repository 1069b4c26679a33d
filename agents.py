from __future__ import annotations

from typing import Dict, Any, Optional

from phi.agent import Agent
from phi.model.openai import OpenAIChat

from resume_scoring.config import LLM_CONFIG


def get_model_config(
    model_name: str,
    default_temperature: float = 0,
    api_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get model configuration with temperature support check.

    Some models (like o1, o1-mini, gpt-5-mini) don't support custom temperature.
    Only set temperature for models that support it.

    Args:
        model_name: Name of the model
        default_temperature: Desired temperature (only used if model supports it)
        api_key: Optional OpenAI key; the SDK reads OPENAI_API_KEY otherwise

    Returns:
        Dict with model configuration
    """
    config: Dict[str, Any] = {"id": model_name, "max_tokens": LLM_CONFIG["max_tokens"]}

    models_without_temperature = [
        "o1", "o1-mini", "o1-preview", "o1-2024",
        "gpt-5-mini", "gpt-5",
    ]

    model_lower = model_name.lower()
    supports_temperature = not any(no_temp in model_lower for no_temp in models_without_temperature)

    if supports_temperature:
        config["temperature"] = default_temperature

    # JSON mode support (only for certain models that support it)
    if "gpt-4" in model_lower or ("o1" in model_lower and "gpt-5" not in model_lower):
        config["response_format"] = {"type": "json_object"}

    if api_key:
        config["api_key"] = api_key

    return config


def build_resume_analyzer(model_name: str = None, api_key: str = None) -> Agent:
    """Agent that turns resume text into a structured analysis."""
    model_name = model_name or LLM_CONFIG["model"]
    model_config = get_model_config(model_name, LLM_CONFIG["analysis_temperature"], api_key)
    return Agent(
        name="Resume Analyzer",
        role="Expert resume analyzer and career counselor",
        model=OpenAIChat(**model_config),
        instructions=[
            "You are an expert resume analyzer and career counselor.",
            "Provide detailed, accurate analysis in the requested JSON format.",
            "Return ONLY the JSON object, no explanations or markdown.",
            "Use empty arrays for missing lists and 0 for unknown numbers.",
        ],
        show_tool_calls=False,
        markdown=False,
    )


def build_job_matcher(model_name: str = None, api_key: str = None) -> Agent:
    """Agent that compares an analysed resume with a job description."""
    model_name = model_name or LLM_CONFIG["model"]
    model_config = get_model_config(model_name, LLM_CONFIG["match_temperature"], api_key)
    return Agent(
        name="Job Matcher",
        role="Expert recruiter and job matching specialist",
        model=OpenAIChat(**model_config),
        instructions=[
            "You are an expert recruiter and job matching specialist.",
            "Provide accurate, detailed job-resume matching analysis.",
            "Do NOT invent skills the candidate doesn't have.",
            "Return ONLY the JSON object, no explanations or markdown.",
        ],
        show_tool_calls=False,
        markdown=False,
    )
