import logging
from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from fedistatus.core.database import get_db
from fedistatus.core.federation_client import FederationClient, ACTIVITY_JSON
from fedistatus.core.activitypub.utils import actor_url, create_actor_object, extract_domain_from_actor_id
from fedistatus.models.activitypub import Actor

logger = logging.getLogger(__name__)

actor_router = APIRouter()

ACTOR_TYPES = ("Person", "Service", "Group", "Application", "Organization")

async def get_by_id(db: AsyncSession, actor_id: str) -> Optional[Actor]:
    """Look up a stored actor by its URL"""
    return await db.get(Actor, actor_id)

async def get_and_cache(db: AsyncSession, link: str, client: Optional[FederationClient] = None) -> Actor:
    """Return the stored actor for ``link``, fetching and storing it first if needed"""
    actor = await get_by_id(db, link)
    if actor is not None:
        return actor

    client = client or FederationClient()
    document = await client.fetch_actor(link)
    actor_type = document.get("type")
    if actor_type not in ACTOR_TYPES:
        raise ValueError(f"{link} is not an actor: {actor_type}")
    if document.get("id") and document["id"] != link:
        logger.info("actor %s reports id %s", link, document["id"])

    actor = Actor(
        id=link,
        type=actor_type,
        preferred_username=document.get("preferredUsername") or "",
        domain=extract_domain_from_actor_id(link),
        is_local=False,
        properties=document,
    )
    db.add(actor)
    await db.commit()
    logger.debug("cached remote actor %s", link)
    return actor

@actor_router.get("/{username}")
async def get_actor(
    username: str,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Get local Actor document"""
    actor = await get_by_id(db, actor_url(request.url.hostname, username))
    if actor is None or not actor.is_local:
        raise HTTPException(status_code=404, detail="Actor not found")

    return ORJSONResponse(create_actor_object(actor), media_type=ACTIVITY_JSON)
