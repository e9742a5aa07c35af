from fastapi import APIRouter, Request

from recruitops.helpers.constants import MIN_JD_LENGTH
from recruitops.models.models import JDAnalysis
from recruitops.models.requests import KeywordsRequest, SourcingRequest, SourcingResponse
from recruitops.models.schemas import CandidateModel
from recruitops.services.keywords import analyze_job_description
from recruitops.services.result_parser import PLATFORMS
from recruitops.services.sourcing import run_sourcing
from recruitops.utils.exceptions import ValidationError
from recruitops.utils.logging_config import get_logger, log_api_call, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


def _require_jd(jd: str) -> str:
    jd = (jd or "").strip()
    if len(jd) < MIN_JD_LENGTH:
        raise ValidationError(
            f"Job description must be at least {MIN_JD_LENGTH} characters",
            field="jd", value=jd[:50],
        )
    return jd


@router.post("", response_model=SourcingResponse)
@log_api_call("run_sourcing")
async def source_candidates(payload: SourcingRequest, request: Request):
    """Search every platform for the JD and stage what comes back"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    jd = _require_jd(payload.jd)

    unknown = [p for p in (payload.platforms or []) if p not in PLATFORMS]
    if unknown:
        raise ValidationError(
            f"Unknown platform(s): {', '.join(unknown)}", field="platforms", value=unknown
        )

    logger.info(
        f"Sourcing up to {payload.limit} candidates",
        extra={"request_id": request_id, "platforms": payload.platforms, "clear_previous": payload.clear_previous}
    )

    with PerformanceMonitor("sourcing_run", logger, threshold_ms=20000):
        state = await run_sourcing(
            jd,
            limit=payload.limit,
            platforms=payload.platforms,
            clear_previous=payload.clear_previous,
        )

    staged = state.get("staged", [])
    return SourcingResponse(
        sourced=len(staged),
        skipped=state.get("skipped", 0),
        candidates=[CandidateModel(**row) for row in staged],
        used_mock=state.get("used_mock", False),
        keyword_sets=state["analysis"].keyword_sets,
        failed_platforms=state.get("failed_platforms", []),
    )


@router.post("/keywords", response_model=JDAnalysis)
async def preview_keywords(payload: KeywordsRequest):
    """Dry run of the JD analysis: no search, nothing stored"""
    return analyze_job_description(_require_jd(payload.jd))
