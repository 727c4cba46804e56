"""Account statuses for local and remote actors.

Local statuses are read from the ``outbox_objects`` log. Remote statuses are
obtained by resolving the account over WebFinger, fetching the actor's outbox
and running every activity through the processor in caching mode.

Pagination note: ``max_id`` selects the entries whose outbox ``cdate`` is
strictly greater than the one the referenced object has in the same
actor's outbox, newest first. Object ids are UUIDs rather than incrementing
integers, so the ordering key of the referenced row has to be looked up first.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fedistatus.core.config import settings
from fedistatus.core.errors import CursorNotFound, RemoteResolutionFailure, StorageError
from fedistatus.core.federation_client import FederationClient
from fedistatus.core.activitypub import actor as actors
from fedistatus.core.activitypub import outbox
from fedistatus.core.activitypub.processor import process_activity, CACHING
from fedistatus.core.activitypub.utils import actor_url, object_uri
from fedistatus.core.activitypub.webfinger import query_acct_link
from fedistatus.core.mastodon.account import load_external_account
from fedistatus.core.mastodon.handle import LocalHandle, RemoteHandle
from fedistatus.core.mastodon.status import project_status
from fedistatus.core.time import to_iso8601
from fedistatus.models.activitypub import Object, OutboxObject, ActorFavourite, ActorReblog
from fedistatus.models.mastodon import Status

logger = logging.getLogger(__name__)

# "beginning of time": every stored entry is newer
BEGINNING_OF_TIME = datetime.min


def page_size(limit: Optional[int]) -> int:
    if limit is None:
        return settings.DEFAULT_STATUS_LIMIT
    return max(1, min(limit, settings.MAX_STATUS_LIMIT))


async def resolve_cursor(db: AsyncSession, actor_id: str, max_id: Optional[str]) -> datetime:
    """Turn ``max_id`` into the cdate of that object in the actor's outbox."""
    if max_id is None:
        return BEGINNING_OF_TIME

    try:
        result = await db.execute(
            select(OutboxObject.cdate)
            .where(OutboxObject.actor_id == actor_id, OutboxObject.object_id == max_id)
            .limit(1)
        )
    except SQLAlchemyError as e:
        raise StorageError(f"SQL error: {e}") from e

    cdate = result.scalar_one_or_none()
    if cdate is None:
        raise CursorNotFound(max_id)
    return cdate


def local_statuses_query(actor_id: str, after: datetime, limit: int):
    favourites_count = (
        select(func.count(ActorFavourite.id))
        .where(ActorFavourite.object_id == Object.id)
        .correlate(Object)
        .scalar_subquery()
    )
    reblogs_count = (
        select(func.count(ActorReblog.id))
        .where(ActorReblog.object_id == Object.id)
        .correlate(Object)
        .scalar_subquery()
    )
    return (
        select(
            Object,
            OutboxObject.actor_id,
            favourites_count.label("favourites_count"),
            reblogs_count.label("reblogs_count"),
        )
        .join(OutboxObject, OutboxObject.object_id == Object.id)
        .where(
            OutboxObject.actor_id == actor_id,
            OutboxObject.cdate > after,
            Object.type == "Note",
        )
        .order_by(OutboxObject.cdate.desc())
        .limit(limit)
    )


async def get_local_statuses(
    db: AsyncSession,
    domain: str,
    handle: LocalHandle,
    max_id: Optional[str] = None,
    limit: Optional[int] = None,
    pinned: bool = False,
) -> List[Status]:
    if pinned:
        # TODO: pinned statuses are not stored yet; an empty list avoids
        # returning statuses that aren't pinned.
        return []

    actor_id = actor_url(domain, handle.local_part)
    after = await resolve_cursor(db, actor_id, max_id)

    try:
        result = await db.execute(local_statuses_query(actor_id, after, page_size(limit)))
        rows = result.all()
    except SQLAlchemyError as e:
        raise StorageError(f"SQL error: {e}") from e

    statuses = []
    for obj, author_id, favourites_count, reblogs_count in rows:
        author = await actors.get_by_id(db, author_id)
        if author is None:
            logger.warning("note %s author %s is unknown, skipping", obj.id, author_id)
            continue

        account = await load_external_account(f"{author.preferred_username}@{domain}", author)
        statuses.append(project_status(
            obj,
            account,
            status_id=obj.id,
            uri=object_uri(domain, obj.id),
            created_at=to_iso8601(obj.cdate),
            counters=(favourites_count, reblogs_count),
        ))
    return statuses


async def get_remote_statuses(
    db: AsyncSession,
    domain: str,
    handle: RemoteHandle,
    pinned: bool = False,
    client: Optional[FederationClient] = None,
) -> List[Status]:
    if pinned:
        # pinned statuses are not stored yet
        return []

    client = client or FederationClient()
    acct = handle.acct
    link = await query_acct_link(handle.domain, acct, client)
    if link is None:
        raise RemoteResolutionFailure(acct)

    actor = await actors.get_and_cache(db, link, client)
    activities = await outbox.get(actor, client)

    # one activity at a time, keeping the outbox order
    objects: List[Object] = []
    for activity in activities:
        result = await process_activity(domain, activity, db, settings.USER_KEK, CACHING, client)
        objects.extend(result.created_objects)

    account = await load_external_account(acct, actor)

    statuses = []
    for obj in objects:
        if obj.type != "Note":
            continue
        statuses.append(project_status(
            obj,
            account,
            status_id=obj.mastodon_id,
            uri=object_uri(domain, obj.id),
            # passed through as published by the origin server
            created_at=obj.properties.get("published", ""),
        ))
    return statuses
