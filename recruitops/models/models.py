from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from recruitops.helpers.constants import SCORE_CEILING


class SkillEntry(BaseModel):
    name: str
    years: int = 1


class WorkHistoryEntry(BaseModel):
    company: str = "Unknown"
    title: str
    years: int = 1


class ExtractedFields(BaseModel):
    """Everything the pattern rules pull out of one normalised résumé."""
    full_name: str
    title: str
    email: str = ""
    phone: str = ""
    location: str
    years_experience_total: int = 0
    linkedin_url: str = ""
    portfolio_url: str = ""
    technologies: List[SkillEntry] = Field(default_factory=list)
    tools: List[SkillEntry] = Field(default_factory=list)
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)


class SearchResult(BaseModel):
    title: str = ""
    url: str = ""
    description: str = ""


class Platform(BaseModel):
    name: str
    kind: str  # profile, portfolio, job_board
    site: str
    url_pattern: str
    canonical_url: Optional[str] = None  # format string taking {slug}


class JDAnalysis(BaseModel):
    role: str
    skills: List[str] = Field(default_factory=list)
    companies: List[str] = Field(default_factory=list)
    markets: List[str] = Field(default_factory=list)
    keyword_sets: List[List[str]] = Field(default_factory=list)


class CandidateDraft(BaseModel):
    """A candidate record as produced by any ingestion path, before storage."""
    full_name: str
    title: str = "Candidate"
    location: str = ""
    years_experience_total: int = 0
    email: str = ""
    phone: str = ""
    linkedin_url: str = ""
    portfolio_url: str = ""
    source_url: str = ""
    resume_url: str = ""
    resume_text: Optional[str] = None
    technologies: List[SkillEntry] = Field(default_factory=list)
    tools: List[SkillEntry] = Field(default_factory=list)
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)
    source: str
    match_score: int = 0
    match_reason: str = ""
    status: str = "New"

    @field_validator("match_score")
    @classmethod
    def clamp_score(cls, v: int) -> int:
        return max(0, min(SCORE_CEILING, int(v)))

    @field_validator("full_name", "source")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()
