import logging
import uuid
from dataclasses import dataclass, field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, List, Optional, Tuple, Union

from fedistatus.core.federation_client import FederationClient
from fedistatus.core.activitypub.actor import get_and_cache
from fedistatus.core.activitypub.utils import get_id, extract_domain_from_actor_id
from fedistatus.core.time import parse_published
from fedistatus.models.activitypub import Object, OutboxObject

logger = logging.getLogger(__name__)

# 只快取物件，不觸發投遞或通知
CACHING = "caching"

@dataclass
class ProcessResult:
    created_objects: List[Object] = field(default_factory=list)

async def process_activity(
    domain: str,
    activity: Union[Dict[str, Any], str],
    db: AsyncSession,
    user_kek: Optional[str],
    mode: str = CACHING,
    client: Optional[FederationClient] = None,
) -> ProcessResult:
    """Process ActivityPub activity

    Only the caching mode is supported: the objects carried by ``Create`` and
    ``Announce`` are materialized locally and recorded in the origin actor's
    outbox. ``user_kek`` is accepted for signed fetches and is not needed
    for public objects. Activities given by id only are fetched first.
    """
    if mode != CACHING:
        raise ValueError(f"unsupported processing mode: {mode}")

    client = client or FederationClient()
    result = ProcessResult()
    activity = await resolve_object(activity, client)
    if activity is None:
        logger.debug("Ignoring activity that is neither an object nor an id")
        return result
    activity_type = activity.get("type")

    if activity_type == "Create":
        obj = await process_create(domain, activity, db, client)
    elif activity_type == "Announce":
        obj = await process_announce(domain, activity, db, client)
    else:
        logger.debug("Ignoring %s activity in caching mode", activity_type)
        obj = None

    if obj is not None:
        result.created_objects.append(obj)
    return result

async def process_create(domain: str, activity: Dict[str, Any], db: AsyncSession, client: FederationClient) -> Optional[Object]:
    """處理 Create 活動"""
    actor_id = get_id(activity.get("actor"))
    object_data = await resolve_object(activity.get("object"), client)
    if not actor_id or object_data is None:
        return None

    await get_and_cache(db, actor_id, client)
    _, obj = await cache_object(domain, object_data, db, actor_id)
    await add_object_in_outbox(db, actor_id, obj, activity.get("published") or object_data.get("published"))
    return obj

async def process_announce(domain: str, activity: Dict[str, Any], db: AsyncSession, client: FederationClient) -> Optional[Object]:
    """處理 Announce 活動（轉發）"""
    actor_id = get_id(activity.get("actor"))
    object_data = await resolve_object(activity.get("object"), client)
    if not actor_id or object_data is None:
        return None

    original_actor_id = get_id(object_data.get("attributedTo")) or actor_id
    await get_and_cache(db, actor_id, client)
    _, obj = await cache_object(domain, object_data, db, original_actor_id)
    await add_object_in_outbox(db, actor_id, obj, activity.get("published"))
    return obj

async def resolve_object(value: Any, client: FederationClient) -> Optional[Dict[str, Any]]:
    """內嵌物件直接使用；僅有 id 時向來源取回"""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        return await client.fetch_object(value)
    return None

async def cache_object(
    domain: str,
    object_data: Dict[str, Any],
    db: AsyncSession,
    original_actor_id: str,
) -> Tuple[bool, Object]:
    """Store a remote object once, keyed by its origin URL

    Returns ``(created, object)``; ``created`` is false when the object was
    already cached.
    """
    original_object_id = object_data.get("id")
    if original_object_id:
        result = await db.execute(
            select(Object).where(Object.original_object_id == original_object_id)
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            return False, existing

    obj = Object(
        id=str(uuid.uuid4()),
        mastodon_id=str(uuid.uuid4()),
        type=object_data.get("type", ""),
        properties=object_data,
        original_actor_id=original_actor_id,
        original_object_id=original_object_id,
        local=extract_domain_from_actor_id(original_object_id) == domain,
    )
    db.add(obj)
    await db.commit()
    logger.debug("cached %s %s as %s", obj.type, original_object_id, obj.id)
    return True, obj

async def add_object_in_outbox(db: AsyncSession, actor_id: str, obj: Object, published: Optional[str] = None) -> None:
    result = await db.execute(
        select(OutboxObject.id).where(OutboxObject.actor_id == actor_id, OutboxObject.object_id == obj.id)
    )
    if result.first() is not None:
        return

    db.add(OutboxObject(actor_id=actor_id, object_id=obj.id, cdate=parse_published(published)))
    await db.commit()
