from typing import List, Optional

from fastapi import APIRouter, Query, Request

from recruitops.models.schemas import CandidateModel
from recruitops.services.db import unvetted_coll
from recruitops.services.review_manager import ReviewManager
from recruitops.utils.exceptions import ExceptionContext
from recruitops.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=List[CandidateModel])
async def list_unvetted(request: Request, source: Optional[str] = Query(None, description="Provenance tag, e.g. LinkedIn")):
    """Staged candidates awaiting review, best match first"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    query = {"source": source} if source else {}

    with ExceptionContext("list_unvetted", logger, request_id=request_id):
        cursor = unvetted_coll.find(query, {"_id": 0, "resume_text": 0}).sort("match_score", -1)
        rows = await cursor.to_list(length=None)

    return [CandidateModel(**row) for row in rows]


@router.post("/{candidate_id}/approve", response_model=CandidateModel)
async def approve(candidate_id: str):
    row = await ReviewManager.approve(candidate_id)
    return CandidateModel(**row)


@router.post("/{candidate_id}/reject")
async def reject(candidate_id: str):
    result = await ReviewManager.reject(candidate_id)
    return {"success": True, **result}
