"""Error taxonomy for the resume scoring engine."""


class ResumeScoringError(Exception):
    """Base class for all engine errors."""


class InsufficientContentError(ResumeScoringError):
    """Text is too short to analyse or match against."""


class LLMResponseMalformedError(ResumeScoringError):
    """No JSON object could be extracted from the LLM response."""


class LLMProviderError(ResumeScoringError):
    """The LLM provider call itself failed."""


class ResumeNotFoundError(ResumeScoringError):
    pass


class ResumeNotAnalyzedError(ResumeScoringError):
    pass


class AnalysisInProgressError(ResumeScoringError):
    pass


class AnalysisFailedError(ResumeScoringError):
    pass


class DuplicateJobMatchError(ResumeScoringError):
    """A job match with the same idempotency key already exists."""

    def __init__(self, match_id: str):
        super().__init__(f"Job match {match_id} already exists")
        self.match_id = match_id
