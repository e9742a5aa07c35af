"""
Identity keys and the look-then-insert gate in front of the staging table.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from pymongo.errors import DuplicateKeyError, PyMongoError

from recruitops.models.models import CandidateDraft
from recruitops.utils.exceptions import DatabaseError
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)


def identity_key(candidate: CandidateDraft) -> Optional[str]:
    """Profile URL, else portfolio URL, else email, else the raw source URL."""
    for value in (candidate.linkedin_url, candidate.portfolio_url, candidate.email, candidate.source_url):
        if value and value.strip():
            return value.strip()
    return None


def candidate_row(candidate: CandidateDraft, **extra: Any) -> Dict[str, Any]:
    row = candidate.model_dump()
    row.update({
        "candidate_id": str(uuid.uuid4()),
        "identity_key": identity_key(candidate),
        "uploaded_at": datetime.utcnow(),
    })
    row.update(extra)
    return row


class DedupGate:
    """Skips candidates whose identity key is already staged.

    ``seen`` is owned by the caller and scoped to one ingestion run, so
    concurrent runs never share state. The unique index on
    ``unvetted.identity_key`` catches the race two runs can still lose; a
    duplicate-key error is a skip, not a failure.
    """

    def __init__(self, collection, seen: Optional[Set[str]] = None):
        self.collection = collection
        self.seen: Set[str] = seen if seen is not None else set()
        self.inserted: List[Dict[str, Any]] = []
        self.skipped = 0

    def claim(self, key: Optional[str]) -> bool:
        """Reserve ``key`` for this run; ``False`` if it was already claimed."""
        if not key:
            return True
        if key in self.seen:
            return False
        self.seen.add(key)
        return True

    async def exists(self, key: str) -> bool:
        return await self.collection.find_one({"identity_key": key}, {"_id": 1}) is not None

    async def stage(self, candidate: CandidateDraft, **extra: Any) -> Optional[Dict[str, Any]]:
        """Insert ``candidate`` unless its key is already present; returns the row or ``None``."""
        row = candidate_row(candidate, **extra)
        key = row["identity_key"]
        try:
            if key and await self.exists(key):
                logger.debug(f"Skipping already staged candidate {key}")
                self.skipped += 1
                return None
            await self.collection.insert_one(row)
        except DuplicateKeyError:
            logger.info(f"Concurrent insert won the race for {key}; skipping")
            self.skipped += 1
            return None
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to stage candidate {candidate.full_name}: {e}",
                operation="stage_candidate",
                collection="unvetted",
                details={"inserted": len(self.inserted)},
                cause=e,
            ) from e
        row.pop("_id", None)
        self.inserted.append(row)
        return row

    async def stage_all(self, candidates: List[CandidateDraft]) -> List[Dict[str, Any]]:
        for candidate in candidates:
            await self.stage(candidate)
        return self.inserted
