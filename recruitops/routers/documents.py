from fastapi import APIRouter
from fastapi.responses import Response

from recruitops.services.documents import read_document
from recruitops.utils.exceptions import NotFoundError

router = APIRouter()


@router.get("/{file_id}")
async def get_document(file_id: str):
    """Stream a stored résumé back to the browser"""
    data, filename, content_type = await read_document(file_id)
    if data is None:
        raise NotFoundError(f"Document {file_id} not found", entity="documents", entity_id=file_id)
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
