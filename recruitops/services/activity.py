from datetime import datetime
from typing import Any, Dict, Optional

from recruitops.services.db import activity_coll
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)


async def log_activity(
    action: str,
    entity_name: str,
    details: Optional[Dict[str, Any]] = None,
    entity_type: str = "candidate",
    entity_id: Optional[str] = None,
) -> None:
    """Append to the activity log. The audit trail is best-effort: a failed
    write is logged and the caller carries on."""
    try:
        await activity_coll.insert_one({
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "entity_name": entity_name,
            "details": details or {},
            "source": "api",
            "created_at": datetime.utcnow(),
        })
    except Exception as e:
        logger.warning(f"Activity log write failed for {action} on {entity_name}: {e}")
