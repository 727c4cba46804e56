from typing import Optional, Tuple

from fedistatus.models.activitypub import Object
from fedistatus.models.mastodon import Account, Status

def project_status(
    obj: Object,
    account: Account,
    status_id: str,
    uri: str,
    created_at: str,
    counters: Optional[Tuple[int, int]] = None,
) -> Status:
    """Map an object and its account into a Mastodon status

    ``counters`` is ``(favourites_count, reblogs_count)``; remote statuses
    carry none.
    """
    favourites_count, reblogs_count = counters or (0, 0)
    return Status(
        id=status_id,
        uri=uri,
        created_at=created_at,
        content=obj.properties.get("content") or "",
        account=account,
        favourites_count=favourites_count,
        reblogs_count=reblogs_count,
        # TODO: emojis, media, tags and mentions are not rendered yet
        emojis=[],
        media_attachments=[],
        tags=[],
        mentions=[],
        visibility="public",
        spoiler_text="",
    )
