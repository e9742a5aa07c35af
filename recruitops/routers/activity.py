from typing import List

from fastapi import APIRouter, Query

from recruitops.models.schemas import ActivityModel
from recruitops.services.db import activity_coll

router = APIRouter()


@router.get("", response_model=List[ActivityModel])
async def recent_activity(limit: int = Query(50, ge=1, le=500)):
    """Most recent activity-log entries"""
    cursor = activity_coll.find({}, {"_id": 0}).sort("created_at", -1).limit(limit)
    rows = await cursor.to_list(length=limit)
    return [ActivityModel(**row) for row in rows]
