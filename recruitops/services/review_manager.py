"""
Review and pipeline transitions: the human verbs approve/reject on staged
candidates and stage moves on the main pool.
"""
from datetime import datetime
from typing import Any, Dict

from recruitops.helpers.constants import (
    ACTIVITY_ACTIONS, PIPELINE_STAGES, STATUS_VETTED, TERMINAL_STAGES,
)
from recruitops.services.activity import log_activity
from recruitops.services.db import candidates_coll, unvetted_coll
from recruitops.utils.exceptions import BusinessLogicError, NotFoundError, ValidationError
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)


class ReviewManager:
    """Moves candidates between the staging table, the main pool and pipeline stages"""

    INITIAL_STAGE = PIPELINE_STAGES[0]

    @staticmethod
    async def _staged(candidate_id: str) -> Dict[str, Any]:
        staged = await unvetted_coll.find_one({"candidate_id": candidate_id})
        if not staged:
            raise NotFoundError(
                f"Staged candidate {candidate_id} not found", entity="unvetted", entity_id=candidate_id
            )
        return staged

    @staticmethod
    async def approve(candidate_id: str) -> Dict[str, Any]:
        """Copy a staged candidate into the main pool as Vetted, then drop the staged copy"""
        staged = await ReviewManager._staged(candidate_id)
        now = datetime.utcnow()

        row = {k: v for k, v in staged.items() if k != "_id"}
        row.update({
            "status": STATUS_VETTED,
            "pipeline_stage": ReviewManager.INITIAL_STAGE,
            "approved_at": now,
            "updated_at": now,
        })

        key = row.get("identity_key")
        if key:
            # an earlier import of the same person is updated, not duplicated
            await candidates_coll.update_one({"identity_key": key}, {"$set": row}, upsert=True)
        else:
            await candidates_coll.insert_one(row)
            row.pop("_id", None)

        await unvetted_coll.delete_one({"candidate_id": candidate_id})
        logger.info(f"Approved candidate {candidate_id} ({row.get('full_name')})")

        await log_activity(
            ACTIVITY_ACTIONS["approved"], row.get("full_name", candidate_id),
            details={"source": row.get("source")}, entity_id=candidate_id,
        )
        return row

    @staticmethod
    async def reject(candidate_id: str) -> Dict[str, Any]:
        staged = await ReviewManager._staged(candidate_id)
        await unvetted_coll.delete_one({"candidate_id": candidate_id})
        logger.info(f"Rejected staged candidate {candidate_id}")

        await log_activity(
            ACTIVITY_ACTIONS["rejected"], staged.get("full_name", candidate_id),
            details={"source": staged.get("source")}, entity_id=candidate_id,
        )
        return {"candidate_id": candidate_id, "deleted": True}

    @staticmethod
    async def move_stage(candidate_id: str, stage: str) -> Dict[str, Any]:
        """Move a main-pool candidate to ``stage``; Hired and Rejected are final"""
        if stage not in PIPELINE_STAGES:
            raise ValidationError(
                f"Unknown pipeline stage '{stage}'", field="stage", value=stage
            )

        candidate = await candidates_coll.find_one({"candidate_id": candidate_id})
        if not candidate:
            raise NotFoundError(
                f"Candidate {candidate_id} not found", entity="candidates", entity_id=candidate_id
            )

        current = candidate.get("pipeline_stage") or ReviewManager.INITIAL_STAGE
        if current in TERMINAL_STAGES and stage != current:
            raise BusinessLogicError(
                f"Candidate is already {current}; stage can no longer change",
                rule="terminal_stage",
                details={"current_stage": current, "requested_stage": stage},
            )

        await candidates_coll.update_one(
            {"candidate_id": candidate_id},
            {"$set": {"pipeline_stage": stage, "updated_at": datetime.utcnow()}},
        )
        logger.info(f"Candidate {candidate_id} moved {current} -> {stage}")

        await log_activity(
            ACTIVITY_ACTIONS["edited"], candidate.get("full_name", candidate_id),
            details={"from_stage": current, "to_stage": stage}, entity_id=candidate_id,
        )
        return {"candidate_id": candidate_id, "previous_stage": current, "pipeline_stage": stage}
