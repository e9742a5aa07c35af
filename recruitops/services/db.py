import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING
import os
from dotenv import load_dotenv

from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "recruitops")
RESUME_BUCKET = os.getenv("RESUME_BUCKET", "resumes")

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# motor connects lazily, so building the client never blocks start-up
client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
db = client[DB_NAME]

candidates_coll = db["candidates"]
unvetted_coll = db["unvetted"]
activity_coll = db["activity_log"]

_resume_bucket = None


def get_resume_bucket():
    """GridFS bucket for uploaded résumés, created on first use inside the event loop."""
    global _resume_bucket
    if _resume_bucket is None:
        _resume_bucket = motor.motor_asyncio.AsyncIOMotorGridFSBucket(db, bucket_name=RESUME_BUCKET)
    return _resume_bucket


async def _ensure_index(coll, keys, **kwargs):
    name = kwargs.get("name") or "_".join(f"{k}_{d}" for k, d in keys)
    try:
        await coll.create_index(keys, **kwargs)
        logger.debug(f"Ensured index {coll.name}.{name}")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug(f"Index {coll.name}.{name} already exists")
        else:
            logger.warning(f"Could not create index {coll.name}.{name}: {e}")


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    # The staging identity key is the storage-level duplicate guard for
    # concurrent sourcing runs; rows without a key are not constrained.
    await _ensure_index(
        unvetted_coll, [("identity_key", ASCENDING)],
        name="identity_key_unique", unique=True,
        partialFilterExpression={"identity_key": {"$type": "string"}},
    )
    await _ensure_index(unvetted_coll, [("candidate_id", ASCENDING)], unique=True)
    await _ensure_index(unvetted_coll, [("source", ASCENDING)])
    await _ensure_index(unvetted_coll, [("match_score", DESCENDING)])

    await _ensure_index(candidates_coll, [("candidate_id", ASCENDING)], unique=True)
    await _ensure_index(candidates_coll, [("identity_key", ASCENDING)])
    await _ensure_index(candidates_coll, [("status", ASCENDING)])
    await _ensure_index(candidates_coll, [("source", ASCENDING)])

    await _ensure_index(activity_coll, [("created_at", DESCENDING)])

    logger.info("Database index initialization completed")
