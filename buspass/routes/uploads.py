"""
Bus Pass Backend - Uploaded Photo Route
=========================================

What:  Serves stored rider photos under /uploads/<reference>.
How:   Reads the bytes through the PhotoStorage capability and serves them
       with the media type sniffed from the content, not the filename.
Who:   Referenced by the photoUrl field of every pass that has a photo.
"""

from fastapi import APIRouter, Response

from buspass.schemas.bus_pass import UPLOADS_URL_PREFIX
from buspass.schemas.common import ErrorResponse
from buspass.services.photo_storage import photo_storage, sniff_media_type

router = APIRouter(prefix=UPLOADS_URL_PREFIX, tags=["Uploads"])


@router.get(
    "/{reference}",
    summary="Serve an uploaded photo",
    responses={
        200: {"description": "Photo bytes"},
        404: {"description": "Photo not found", "model": ErrorResponse},
    },
)
async def serve_photo(reference: str) -> Response:
    content = await photo_storage.retrieve(reference)
    media_type = sniff_media_type(content)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=86400"},  # photos never change
    )
