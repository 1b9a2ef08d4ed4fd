"""
Attachment upload endpoint.
"""

import mimetypes
import secrets
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from app.api.deps import CurrentUser, StorageProvider
from app.core.logger import logger
from app.models.upload import UploadResult

router = APIRouter()

_SUFFIX_BYTES = 6


def _with_random_suffix(filename: str) -> str:
    """Keep the base name only and insert a random suffix before the extension."""
    name = PurePath(filename.replace("\\", "/")).name
    path = PurePath(name)
    return f"{path.stem}-{secrets.token_hex(_SUFFIX_BYTES)}{path.suffix}"


@router.post("", response_model=UploadResult)
async def upload_file(
    request: Request,
    user: CurrentUser,
    storage: StorageProvider,
    filename: Optional[str] = Query(None),
):
    """Store the raw request body and return its public URL."""
    data = await request.body()
    if not filename or not filename.strip() or not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing filename or file",
        )

    stored_name = _with_random_suffix(filename.strip())

    content_type = (
        request.headers.get("content-type")
        or mimetypes.guess_type(stored_name)[0]
        or "application/octet-stream"
    )
    pathname = await storage.upload(f"uploads/{stored_name}", data, content_type)
    logger.info(f"Uploaded {len(data)} bytes for {user.owner_id} to {pathname}")

    return UploadResult(
        url=storage.get_public_url(pathname),
        pathname=pathname,
        content_type=content_type,
    )
