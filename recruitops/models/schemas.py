from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from recruitops.models.models import SkillEntry, WorkHistoryEntry


# -------- Candidates (main pool and staging rows) --------
class CandidateModel(BaseModel):
    candidate_id: str
    identity_key: Optional[str] = None
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
    technologies: List[SkillEntry] = []
    tools: List[SkillEntry] = []
    work_history: List[WorkHistoryEntry] = []
    source: str
    match_score: int = 0
    match_reason: str = ""
    status: str = "New"
    pipeline_stage: Optional[str] = None
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


# -------- Activity log --------
class ActivityModel(BaseModel):
    action: str
    entity_type: str = "candidate"
    entity_id: Optional[str] = None
    entity_name: str
    details: Dict[str, Any] = {}
    source: str = "api"
    created_at: datetime = Field(default_factory=datetime.utcnow)
