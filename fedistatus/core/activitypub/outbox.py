import logging
from typing import Dict, Any, List, Optional

from fedistatus.core.config import settings
from fedistatus.core.federation_client import FederationClient
from fedistatus.models.activitypub import Actor

logger = logging.getLogger(__name__)

async def get(actor: Actor, client: Optional[FederationClient] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Fetch an actor's outbox and return its first activities in source order

    The outbox is an ``OrderedCollection``; its items are either inline or on
    the page referenced by ``first``.
    """
    client = client or FederationClient()
    limit = limit or settings.OUTBOX_PAGE_LIMIT

    if not actor.outbox_url:
        raise ValueError(f"actor {actor.id} has no outbox")

    collection = await client.get_json(actor.outbox_url)
    page = collection
    first = collection.get("first")
    if isinstance(first, str):
        page = await client.get_json(first)
    elif isinstance(first, dict):
        page = first

    items = page.get("orderedItems") or page.get("items") or []
    logger.debug("outbox %s: %d items", actor.outbox_url, len(items))
    return items[:limit]
