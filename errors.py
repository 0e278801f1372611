# errors.py
from typing import Any, Optional


class CareerPilotError(Exception):
    """Base class for errors raised by the analysis and interview flows."""


class LLMResponseError(CareerPilotError):
    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class SkillAnalysisError(CareerPilotError):
    """
    The skill record could not be validated after normalization and fallback.
    Keeps every intermediate shape so the API can surface them in development.
    """

    def __init__(self, message: str, *, raw: Any = None, normalized: Any = None, final: Any = None):
        super().__init__(message)
        self.raw = raw
        self.normalized = normalized
        self.final = final

    def debug_payload(self) -> dict:
        return {"raw": self.raw, "normalized": self.normalized, "final": self.final}


class InterviewFlowError(CareerPilotError):
    pass


class ResumeParseError(CareerPilotError):
    pass


class DuplicateUserError(CareerPilotError):
    pass
