# schemas.py
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Status = Literal["Approved", "Needs Improvement", "Not a Match"]

# At least one lowercase, uppercase, digit and symbol; 8-30 characters.
PASSWORD_PATTERN = (
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?]).{8,30}$"
)


# ---------- Skill matching ----------


class AnalyzeSkillsInput(BaseModel):
    jobDescription: Optional[str] = None
    resume: Optional[str] = None


class AnalyzeSkillsOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    matchScore: int = Field(ge=0, le=100)
    scoreRationale: str
    matchingSkills: List[str]
    missingSkills: List[str]
    impliedSkills: str
    status: Status


# ---------- Interview ----------


class GenerateQuestionsInput(BaseModel):
    jobDescription: str = Field(min_length=1)


class GenerateQuestionsOutput(BaseModel):
    questions: List[str] = Field(min_length=5, max_length=5)

    @field_validator("questions")
    @classmethod
    def _non_empty(cls, value: List[str]) -> List[str]:
        if any(not q.strip() for q in value):
            raise ValueError("questions must be non-empty strings")
        return value


class EvaluateAnswerInput(BaseModel):
    jobDescription: str = Field(min_length=1)
    question: str = Field(min_length=1)
    userAnswer: str = ""


class EvaluateAnswerOutput(BaseModel):
    score: int = Field(ge=1, le=10)
    feedback: str = Field(min_length=1)


class InterviewResult(BaseModel):
    question: str
    userAnswer: str = ""
    score: float = Field(ge=0, le=10)
    feedback: str = ""


class InterviewResultView(InterviewResult):
    band: Literal["strong", "fair", "weak"]


class InterviewSummaryRequest(BaseModel):
    results: List[InterviewResult]


class InterviewSummary(BaseModel):
    overallScore: int = Field(ge=0, le=100)
    status: Status
    results: List[InterviewResultView]


# ---------- Persistence / accounts ----------


class JobIn(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)


class SaveAnalysisRequest(BaseModel):
    resumeFileName: Optional[str] = None
    jobDescription: Optional[str] = None
    matchScore: Optional[float] = None
    userEmail: Optional[str] = None


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3)
    email: EmailStr
    phoneNumber: str = Field(min_length=10)
    password: str

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        if not re.match(PASSWORD_PATTERN, value):
            raise ValueError("password must be 8-30 characters with upper, lower, digit and symbol")
        return value


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str


class HistoryQuery(BaseModel):
    userEmail: EmailStr

