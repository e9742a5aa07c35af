from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Body, File, Query, Request, UploadFile

from recruitops.models.requests import (
    BackfillResponse, EnrichRequest, EnrichResponse, IngestResponse,
    StageMoveResponse, UploadResponse,
)
from recruitops.models.schemas import CandidateModel
from recruitops.services.db import candidates_coll
from recruitops.services.enrichment import backfill_enrichment, enrich_candidate
from recruitops.services.ingestion import ingest_records, ingest_upload
from recruitops.services.review_manager import ReviewManager
from recruitops.utils.exceptions import ExceptionContext, NotFoundError, ValidationError
from recruitops.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=List[CandidateModel])
async def list_candidates(request: Request, status: Optional[str] = Query(None, description="Filter by status, e.g. Vetted")):
    """Main candidate pool, newest first"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    query = {"status": status} if status else {}

    with ExceptionContext("list_candidates", logger, request_id=request_id):
        cursor = candidates_coll.find(query, {"_id": 0, "resume_text": 0}).sort("uploaded_at", -1)
        rows = await cursor.to_list(length=None)

    logger.info(f"Fetched {len(rows)} candidates", extra={"request_id": request_id, "status_filter": status})
    return [CandidateModel(**row) for row in rows]


@router.post("/upload", response_model=UploadResponse)
async def upload_resume(request: Request, file: Optional[UploadFile] = File(None)):
    """Parse an uploaded résumé and stage it for review"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    if file is None:
        raise ValidationError("No file provided", field="file")

    data = await file.read()
    logger.info(
        f"Received upload {file.filename} ({len(data)} bytes)",
        extra={"request_id": request_id, "upload_filename": file.filename}
    )

    with PerformanceMonitor("ingest_upload", logger):
        result = await ingest_upload(data, file.filename or "", file.content_type)
    return UploadResponse(**result)


@router.post("/ingest", response_model=IngestResponse)
async def ingest_candidates(payload: Union[List[Dict[str, Any]], Dict[str, Any], None] = Body(None)):
    """Upsert one candidate object or an array of them into the main pool"""
    if isinstance(payload, dict):
        records = [payload] if payload else []
    else:
        records = payload or []

    result = await ingest_records(records)
    return IngestResponse(**result)


@router.post("/backfill", response_model=BackfillResponse)
async def backfill(use_llm: Optional[bool] = Query(None)):
    """Enrich every uploaded candidate that still has its résumé text"""
    with PerformanceMonitor("backfill_enrichment", logger, threshold_ms=60000):
        result = await backfill_enrichment(use_llm=use_llm)
    return BackfillResponse(**result)


@router.post("/{candidate_id}/enrich", response_model=EnrichResponse)
async def enrich(candidate_id: str, payload: Optional[EnrichRequest] = None):
    """Re-extract skills, tools and work history for one candidate"""
    payload = payload or EnrichRequest()
    result = await enrich_candidate(candidate_id, payload.resume_text, use_llm=payload.use_llm)
    if result is None:
        raise NotFoundError(f"Candidate {candidate_id} not found", entity="candidates", entity_id=candidate_id)
    return EnrichResponse(**result)


@router.patch("/{candidate_id}/stage", response_model=StageMoveResponse)
async def move_stage(candidate_id: str, stage: str = Query(..., description="Target pipeline stage")):
    result = await ReviewManager.move_stage(candidate_id, stage)
    return StageMoveResponse(**result)
