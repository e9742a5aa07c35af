"""
Ingestion entry points that do not go through search: single document
uploads into the staging table and batch JSON/CSV imports into the main
candidate pool.
"""
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from recruitops.helpers.constants import (
    ACTIVITY_ACTIONS, MAX_SKILLS, MAX_WORK_HISTORY, SOURCE_JSON_IMPORT, SOURCE_PDF_UPLOAD,
    STATUS_NEW, STATUS_UNVETTED, UPLOAD_MATCH_REASON, UPLOAD_SCORE,
)
from recruitops.helpers.parsing import extract_document_text
from recruitops.models.models import CandidateDraft, SkillEntry, WorkHistoryEntry
from recruitops.services.activity import log_activity
from recruitops.services.db import candidates_coll, unvetted_coll
from recruitops.services.dedup import DedupGate, candidate_row, identity_key
from recruitops.services.documents import store_document
from recruitops.services.extraction import extract_fields
from recruitops.utils.exceptions import DatabaseError, ValidationError
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt")


def placeholder_name(filename: str) -> str:
    stem = Path(filename or "").stem.replace("_", " ").replace("-", " ").strip()
    return stem or "Unknown Candidate"


def draft_from_document(text: str, filename: str, resume_url: str = "") -> CandidateDraft:
    fields = extract_fields(text, default_name=placeholder_name(filename))
    return CandidateDraft(
        **fields.model_dump(),
        resume_url=resume_url,
        resume_text=text or None,
        source=SOURCE_PDF_UPLOAD,
        match_score=UPLOAD_SCORE,
        match_reason=UPLOAD_MATCH_REASON,
        status=STATUS_NEW,
    )


async def ingest_upload(data: bytes, filename: str, content_type: Optional[str] = None) -> Dict[str, Any]:
    """Store, parse and stage one uploaded résumé.

    Returns ``{"candidate", "table", "duplicate"}``. When staging fails for
    any reason other than an existing identity key, the row goes into the
    main pool as ``Unvetted``; only when both writes fail is the request
    rejected.
    """
    if not data:
        raise ValidationError("No file provided", field="file")
    if Path(filename or "").suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported file type; expected one of {', '.join(ALLOWED_EXTENSIONS)}",
            field="file", value=filename,
        )

    file_id, resume_url = await store_document(data, filename, content_type or "application/pdf")
    text = extract_document_text(data, filename)
    if not text:
        logger.warning(f"No text extracted from {filename}; staging with placeholder fields")

    draft = draft_from_document(text, filename, resume_url)
    gate = DedupGate(unvetted_coll)

    try:
        row = await gate.stage(draft, resume_file_id=file_id)
    except DatabaseError as e:
        logger.warning(f"Staging upload {filename} failed, falling back to main pool: {e.message}")
        row = await _insert_unvetted_fallback(draft, file_id)
        table = "candidates"
    else:
        table = "unvetted"
        if row is None:
            existing = await unvetted_coll.find_one({"identity_key": identity_key(draft)}, {"_id": 0})
            logger.info(f"Upload {filename} matches an already staged candidate")
            return {"candidate": existing, "table": table, "duplicate": True}

    await log_activity(
        ACTIVITY_ACTIONS["staged"],
        row["full_name"],
        details={"source": SOURCE_PDF_UPLOAD, "filename": filename, "table": table},
        entity_id=row["candidate_id"],
    )
    return {"candidate": row, "table": table, "duplicate": False}


async def _insert_unvetted_fallback(draft: CandidateDraft, file_id: str) -> Dict[str, Any]:
    row = candidate_row(draft, status=STATUS_UNVETTED, resume_file_id=file_id)
    try:
        await candidates_coll.insert_one(row)
    except PyMongoError as e:
        raise DatabaseError(
            f"Upload failed: {e}", operation="insert_candidate", collection="candidates", cause=e
        ) from e
    row.pop("_id", None)
    return row


# -------- Batch import --------

def _skill_entries(value: Any) -> List[SkillEntry]:
    if not value:
        return []
    if isinstance(value, str):
        value = [v for v in (p.strip() for p in value.replace(";", ",").split(",")) if v]
    entries = []
    for item in value:
        if isinstance(item, dict):
            entries.append(SkillEntry(**item))
        elif str(item).strip():
            entries.append(SkillEntry(name=str(item).strip()))
    return entries


def candidate_from_record(record: Dict[str, Any], default_source: str = SOURCE_JSON_IMPORT) -> CandidateDraft:
    """Map a loosely-shaped import record onto a draft; raises pydantic's error on bad input."""
    def pick(*keys, default=None):
        for k in keys:
            v = record.get(k)
            if v not in (None, ""):
                return v
        return default

    return CandidateDraft(
        full_name=pick("full_name", "name", default=""),
        title=pick("title", "current_title", default="Candidate"),
        location=pick("location", default=""),
        years_experience_total=int(pick("years_experience_total", "years_experience", default=0) or 0),
        email=pick("email", default=""),
        phone=str(pick("phone", default="")),
        linkedin_url=pick("linkedin_url", "linkedin", default=""),
        portfolio_url=pick("portfolio_url", "portfolio", default=""),
        source_url=pick("source_url", "url", default=""),
        resume_url=pick("resume_url", default=""),
        resume_text=pick("resume_text"),
        technologies=_skill_entries(pick("technologies", "skills"))[:MAX_SKILLS],
        tools=_skill_entries(pick("tools"))[:MAX_SKILLS],
        work_history=[WorkHistoryEntry(**w) for w in (pick("work_history", default=[]) or [])[:MAX_WORK_HISTORY]],
        source=pick("source", default=default_source),
        match_score=int(pick("match_score", default=0) or 0),
        match_reason=pick("match_reason", default=""),
        status=pick("status", default=STATUS_NEW),
    )


async def upsert_candidate(candidate: CandidateDraft) -> str:
    """Insert into the main pool or update the row with the same identity key."""
    key = identity_key(candidate)
    now = datetime.utcnow()
    if not key:
        row = candidate_row(candidate)
        await candidates_coll.insert_one(row)
        return row["candidate_id"]

    fields = candidate.model_dump()
    fields.update({"identity_key": key, "updated_at": now})
    await candidates_coll.update_one(
        {"identity_key": key},
        {
            "$set": fields,
            "$setOnInsert": {"candidate_id": str(uuid.uuid4()), "uploaded_at": now},
        },
        upsert=True,
    )
    return key


async def ingest_records(records: List[Dict[str, Any]], default_source: str = SOURCE_JSON_IMPORT) -> Dict[str, Any]:
    """Upsert a batch. Invalid records are reported and skipped; a storage
    failure stops the batch and reports how many rows already landed."""
    if not records:
        raise ValidationError("No candidates provided", field="candidates")

    count = 0
    errors: List[Dict[str, Any]] = []
    for index, record in enumerate(records):
        try:
            candidate = candidate_from_record(record, default_source)
        except (PydanticValidationError, TypeError, ValueError) as e:
            logger.warning(f"Skipping import record {index}: {e}")
            errors.append({"index": index, "error": str(e)})
            continue
        try:
            await upsert_candidate(candidate)
        except PyMongoError as e:
            raise DatabaseError(
                f"Import failed after {count} candidates: {e}",
                operation="upsert_candidate",
                collection="candidates",
                details={"count": count},
                cause=e,
            ) from e
        count += 1

    logger.info(f"Imported {count} candidates ({len(errors)} rejected)")
    await log_activity(
        ACTIVITY_ACTIONS["staged"],
        f"{count} candidates",
        details={"source": default_source, "count": count, "rejected": len(errors)},
        entity_type="batch_import",
    )
    return {"count": count, "errors": errors}
