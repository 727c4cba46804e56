from fedistatus.core.time import to_iso8601
from fedistatus.models.activitypub import Actor
from fedistatus.models.mastodon import Account

async def load_external_account(acct: str, actor: Actor) -> Account:
    """Project an ActivityPub actor into a Mastodon account block"""
    avatar = actor.icon_url or ""
    header = actor.header_url or ""
    return Account(
        id=acct,
        username=actor.preferred_username,
        acct=acct,
        url=actor.profile_url,
        display_name=actor.name,
        note=actor.summary,
        avatar=avatar,
        avatar_static=avatar,
        header=header,
        header_static=header,
        locked=bool(actor.properties.get("manuallyApprovesFollowers", False)),
        bot=actor.type in ("Service", "Application"),
        discoverable=bool(actor.properties.get("discoverable", True)),
        group=actor.type == "Group",
        created_at=to_iso8601(actor.cdate) if actor.cdate else "",
    )
