import logging
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from fedistatus.core.database import get_db
from fedistatus.core.errors import CursorNotFound, RemoteResolutionFailure
from fedistatus.core.mastodon.handle import classify_handle, LocalHandle, RemoteHandle
from fedistatus.core.mastodon.timeline import get_local_statuses, get_remote_statuses

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "content-type, authorization",
}

class MastodonJSONResponse(ORJSONResponse):
    media_type = "application/json; charset=utf-8"

def empty_response(status_code: int) -> Response:
    return Response(content="", status_code=status_code, headers=CORS_HEADERS)

@router.get("/{id}/statuses")
async def get_account_statuses(
    id: str,
    request: Request,
    max_id: Optional[str] = None,
    pinned: Optional[str] = None,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """List an account's public statuses, local or remote"""
    domain = request.url.hostname
    # anything but "true" means not pinned
    only_pinned = pinned == "true"
    handle = classify_handle(id, domain)

    try:
        if isinstance(handle, LocalHandle):
            statuses = await get_local_statuses(db, domain, handle, max_id=max_id, limit=limit, pinned=only_pinned)
        elif isinstance(handle, RemoteHandle):
            statuses = await get_remote_statuses(db, domain, handle, pinned=only_pinned)
        else:
            logger.info("rejecting invalid account identifier %r", id)
            return empty_response(403)
    except (CursorNotFound, RemoteResolutionFailure) as e:
        logger.info("account statuses not found: %s", e)
        return empty_response(404)

    return MastodonJSONResponse(
        [status.model_dump() for status in statuses],
        headers=CORS_HEADERS,
    )
