"""
Text normalization for extracted resume and job description text.
"""

import hashlib
import logging
import re

from .config import MIN_CONTENT_LENGTH
from .exceptions import InsufficientContentError

logger = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")
DISALLOWED_CHARS_RE = re.compile(r"[^\w\s\-.,;:()\[\]{}@#$%&*+=<>?/\\|'\"]", re.ASCII)


def normalize_text(raw_text: str) -> str:
    """
    Clean raw extracted text.

    Collapses whitespace runs to a single space, strips characters outside the
    allow-list (ASCII word characters and common punctuation) and trims.
    Returns an empty string for missing input, never raises.
    """
    if not raw_text:
        return ""
    text = WHITESPACE_RE.sub(" ", str(raw_text))
    text = DISALLOWED_CHARS_RE.sub("", text)
    return text.strip()


def ensure_sufficient_content(raw_text: str, minimum: int = MIN_CONTENT_LENGTH) -> str:
    """Normalize text and reject it when too little content remains."""
    text = normalize_text(raw_text)
    if len(text) < minimum:
        logger.warning(f"Insufficient content: {len(text)} characters after normalization")
        raise InsufficientContentError(
            f"Unable to extract sufficient text: {len(text)} characters, at least {minimum} required"
        )
    return text


def validate_job_description(job_description: str, minimum: int = MIN_CONTENT_LENGTH) -> str:
    """Reject job descriptions shorter than the minimum once stripped."""
    stripped = (job_description or "").strip()
    if len(stripped) < minimum:
        raise InsufficientContentError(
            f"Job description must be at least {minimum} characters long"
        )
    return stripped


def job_description_hash(job_description: str) -> str:
    """Content hash used as the job match idempotency key."""
    normalized = normalize_text(job_description).lower()
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()
