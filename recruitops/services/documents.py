"""
Document collaborator: résumé binaries live in GridFS and are served back
through ``/api/documents/{file_id}``.
"""
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile

from recruitops.services.db import get_resume_bucket
from recruitops.utils.exceptions import DatabaseError
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)

DOCUMENT_ROUTE = "/api/documents"


def storage_name(filename: str) -> str:
    ext = Path(filename or "").suffix.lower() or ".pdf"
    return f"unvetted/{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}{ext}"


async def store_document(data: bytes, filename: str, content_type: str = "application/pdf") -> Tuple[str, str]:
    """Persist ``data`` and return ``(file_id, retrieval_url)``."""
    bucket = get_resume_bucket()
    try:
        file_id = await bucket.upload_from_stream(
            storage_name(filename),
            data,
            metadata={"original_filename": filename, "content_type": content_type or "application/pdf"},
        )
    except Exception as e:
        raise DatabaseError(
            f"Upload failed: {e}", operation="store_document", collection="resumes", cause=e
        ) from e
    logger.info(f"Stored document {filename} as {file_id}")
    return str(file_id), f"{DOCUMENT_ROUTE}/{file_id}"


async def read_document(file_id: str) -> Tuple[Optional[bytes], str, str]:
    """Return ``(data, filename, content_type)``; ``None`` data when missing."""
    try:
        oid = ObjectId(file_id)
    except (InvalidId, TypeError):
        return None, "", ""
    bucket = get_resume_bucket()
    try:
        stream = await bucket.open_download_stream(oid)
    except NoFile:
        return None, "", ""
    data = await stream.read()
    metadata = stream.metadata or {}
    return data, metadata.get("original_filename", stream.filename), metadata.get("content_type", "application/pdf")
