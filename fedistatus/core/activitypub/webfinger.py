import logging
import re
from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, Optional

from fedistatus.core.config import settings
from fedistatus.core.database import get_db
from fedistatus.core.federation_client import FederationClient, ACTIVITY_JSON
from fedistatus.core.activitypub.actor import get_by_id
from fedistatus.core.activitypub.utils import actor_url

logger = logging.getLogger(__name__)

webfinger_router = APIRouter()

JRD_JSON = "application/jrd+json"

async def query_acct_link(domain: str, acct: str, client: Optional[FederationClient] = None) -> Optional[str]:
    """透過 WebFinger 取得帳號的 ActivityPub Actor 連結

    Returns ``None`` when the remote server does not know the account (404)
    or lists no ``self`` link of type ``application/activity+json``. Any
    other HTTP failure propagates.
    """
    client = client or FederationClient()
    response = await client.get(
        f"{settings.ACTIVITYPUB_PROTOCOL}://{domain}/.well-known/webfinger",
        accept=JRD_JSON,
        params={"resource": f"acct:{acct}"},
    )
    if response.status_code == 404:
        logger.info("WebFinger: %s not found on %s", acct, domain)
        return None
    response.raise_for_status()

    data = response.json()
    for link in data.get("links", []):
        if link.get("rel") == "self" and link.get("type") == ACTIVITY_JSON and link.get("href"):
            return link["href"]

    logger.info("WebFinger: no actor link for %s", acct)
    return None

async def handle_webfinger(resource: str, request_host: str, db: AsyncSession) -> Dict[str, Any]:
    """處理 WebFinger 請求"""
    # 格式: acct:username@domain
    match = re.match(r'^acct:([^@]+)@(.+)$', resource)
    if not match:
        raise HTTPException(status_code=400, detail="Invalid resource format")

    username, domain = match.groups()

    # 檢查域名是否匹配
    if domain.lower() != request_host.lower():
        raise HTTPException(status_code=404, detail="Domain not found")

    actor_id = actor_url(request_host, username)
    actor = await get_by_id(db, actor_id)
    if actor is None or not actor.is_local:
        raise HTTPException(status_code=404, detail="Actor not found")

    return {
        "subject": resource,
        "aliases": [actor_id],
        "links": [
            {
                "rel": "self",
                "type": ACTIVITY_JSON,
                "href": actor_id
            }
        ]
    }

@webfinger_router.get("/webfinger")
async def webfinger(resource: str, request: Request, db: AsyncSession = Depends(get_db)):
    data = await handle_webfinger(resource, request.url.hostname, db)
    return ORJSONResponse(data, media_type=JRD_JSON, headers={"Cache-Control": "public, max-age=300"})
