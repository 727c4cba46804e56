"""Time helpers shared by the models and the status projection."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in ``cdate`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_iso8601(value: datetime) -> str:
    """Format a stored UTC datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def parse_published(value) -> datetime:
    """Parse an ActivityStreams ``published`` value, falling back to now."""
    if not value:
        return utcnow()
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return utcnow()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
