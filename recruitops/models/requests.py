from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from recruitops.models.schemas import CandidateModel

# Request and response bodies of the API surface


class SourcingRequest(BaseModel):
    """Body of a sourcing run"""
    jd: str = ""
    limit: int = Field(10, ge=1, le=50)
    platforms: Optional[List[str]] = None  # defaults to every known platform
    clear_previous: bool = False


class SourcingResponse(BaseModel):
    success: bool = True
    sourced: int
    skipped: int = 0
    candidates: List[CandidateModel] = []
    used_mock: bool = False
    keyword_sets: List[List[str]] = []
    failed_platforms: List[str] = []


class KeywordsRequest(BaseModel):
    jd: str = ""


class UploadResponse(BaseModel):
    success: bool = True
    candidate: CandidateModel
    table: str  # unvetted, or candidates when staging failed
    duplicate: bool = False


class IngestResponse(BaseModel):
    success: bool = True
    count: int
    errors: List[Dict[str, Any]] = []


class EnrichRequest(BaseModel):
    resume_text: Optional[str] = None  # falls back to the stored text
    use_llm: Optional[bool] = None


class EnrichResponse(BaseModel):
    success: bool = True
    candidate_id: str
    data: Dict[str, List[Dict[str, Any]]]


class BackfillResponse(BaseModel):
    success: bool = True
    processed: int
    updated: int
    skipped: int


class StageMoveResponse(BaseModel):
    success: bool = True
    candidate_id: str
    previous_stage: str
    pipeline_stage: str
