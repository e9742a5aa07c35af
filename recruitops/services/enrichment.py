"""
Enrichment: re-run technology, tool and work-history extraction against
stored résumé text and update the record in place. Status and score are
never touched.
"""
import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from recruitops.helpers.constants import ACTIVITY_ACTIONS, MAX_SKILLS, MAX_WORK_HISTORY, SOURCE_PDF_UPLOAD
from recruitops.helpers.prompts import ENRICH_PROMPT
from recruitops.models.models import SkillEntry, WorkHistoryEntry
from recruitops.services.activity import log_activity
from recruitops.services.db import candidates_coll, unvetted_coll
from recruitops.services.extraction import detect_technologies, detect_tools, extract_work_history
from recruitops.utils.exceptions import DatabaseError, ModelError, ValidationError
from recruitops.utils.logging_config import get_logger
from recruitops.utils.utils import env_flag, ollama_generate, safe_json

logger = get_logger(__name__)

ENRICH_WITH_LLM = env_flag("ENRICH_WITH_LLM")
PROMPT_CHARS = 3000
ENRICHED_FIELDS = ("technologies", "tools", "work_history")


def _as_years(x: Any) -> int:
    try:
        return max(1, int(float(x)))
    except (TypeError, ValueError):
        return 1


def _skill_list(items: Any) -> List[SkillEntry]:
    out = []
    for item in items if isinstance(items, list) else []:
        if isinstance(item, dict) and str(item.get("name") or "").strip():
            out.append(SkillEntry(name=str(item["name"]).strip(), years=_as_years(item.get("years"))))
        elif isinstance(item, str) and item.strip():
            out.append(SkillEntry(name=item.strip()))
    return out[:MAX_SKILLS]


def _history_list(items: Any) -> List[WorkHistoryEntry]:
    out = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict) or not str(item.get("title") or "").strip():
            continue
        out.append(WorkHistoryEntry(
            company=str(item.get("company") or "Unknown").strip(),
            title=str(item["title"]).strip(),
            years=_as_years(item.get("years")),
        ))
    return out[:MAX_WORK_HISTORY]


def llm_enrichment(text: str) -> Optional[Dict[str, list]]:
    """Ask the local model; ``None`` when the call fails or finds nothing."""
    try:
        resp = ollama_generate(ENRICH_PROMPT.format(resume_text=text[:PROMPT_CHARS]))
    except ModelError as e:
        logger.warning(f"LLM enrichment failed, using pattern rules: {e.message}")
        return None
    data = safe_json(resp, fallback={})
    result = {
        "technologies": _skill_list(data.get("technologies")),
        "tools": _skill_list(data.get("tools")),
        "work_history": _history_list(data.get("work_history")),
    }
    if not any(result.values()):
        return None
    return result


def pattern_enrichment(text: str) -> Dict[str, list]:
    return {
        "technologies": detect_technologies(text, limit=MAX_SKILLS),
        "tools": detect_tools(text, limit=MAX_SKILLS),
        "work_history": extract_work_history(text),
    }


def enrichment_for(text: str, use_llm: Optional[bool] = None) -> Dict[str, List[Dict[str, Any]]]:
    use_llm = ENRICH_WITH_LLM if use_llm is None else use_llm
    result = (llm_enrichment(text) if use_llm else None) or pattern_enrichment(text)
    return {field: [entry.model_dump() for entry in result[field]] for field in ENRICHED_FIELDS}


def has_findings(data: Dict[str, list]) -> bool:
    return any(data.get(field) for field in ENRICHED_FIELDS)


async def _apply(coll, candidate_id: str, data: Dict[str, list]):
    try:
        await coll.update_one(
            {"candidate_id": candidate_id},
            {"$set": {**data, "enriched_at": datetime.utcnow()}},
        )
    except PyMongoError as e:
        raise DatabaseError(
            f"Failed to update candidate {candidate_id}: {e}",
            operation="enrich_candidate", collection=coll.name, cause=e,
        ) from e


async def enrich_candidate(candidate_id: str, resume_text: Optional[str] = None,
                           use_llm: Optional[bool] = None) -> Optional[Dict[str, Any]]:
    """Enrich one candidate from the main pool or the staging table.

    Returns ``None`` when no such candidate exists.
    """
    coll = candidates_coll
    doc = await coll.find_one({"candidate_id": candidate_id})
    if not doc:
        coll = unvetted_coll
        doc = await coll.find_one({"candidate_id": candidate_id})
    if not doc:
        return None

    text = resume_text or doc.get("resume_text")
    if not text:
        raise ValidationError("Missing resume_text", field="resume_text")

    data = await asyncio.to_thread(enrichment_for, text, use_llm)
    await _apply(coll, candidate_id, data)
    await log_activity(
        ACTIVITY_ACTIONS["edited"],
        doc.get("full_name", candidate_id),
        details={"enriched": {field: len(data[field]) for field in ENRICHED_FIELDS}},
        entity_id=candidate_id,
    )
    return {"candidate_id": candidate_id, "data": data}


async def backfill_enrichment(use_llm: Optional[bool] = None) -> Dict[str, int]:
    """Enrich every uploaded candidate that has stored résumé text.

    Rows where nothing is found are left alone.
    """
    processed = updated = 0
    query = {"source": SOURCE_PDF_UPLOAD, "resume_text": {"$nin": [None, ""]}}
    projection = {"candidate_id": 1, "resume_text": 1, "full_name": 1}

    for coll in (candidates_coll, unvetted_coll):
        docs = await coll.find(query, projection).to_list(length=None)
        for doc in docs:
            processed += 1
            data = await asyncio.to_thread(enrichment_for, doc["resume_text"], use_llm)
            if not has_findings(data):
                logger.debug(f"Nothing found for {doc.get('full_name')}; leaving as is")
                continue
            await _apply(coll, doc["candidate_id"], data)
            updated += 1

    logger.info(f"Backfill processed {processed} candidates, updated {updated}")
    return {"processed": processed, "updated": updated, "skipped": processed - updated}
