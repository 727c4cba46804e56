"""Account identifier parsing.

An identifier is ``name``, ``@name``, ``name@domain`` or ``@name@domain``,
possibly percent-encoded. classify_handle sorts it into one handle
variant relative to the host the request was addressed to.
"""
import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from urllib.parse import unquote

LOCAL_PART_RE = re.compile(r"^[\w.-]+$")
DOMAIN_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9.-]*[A-Za-z0-9])?(:\d+)?$")


@dataclass(frozen=True)
class LocalHandle:
    local_part: str


@dataclass(frozen=True)
class RemoteHandle:
    local_part: str
    domain: str

    @property
    def acct(self) -> str:
        return f"{self.local_part}@{self.domain}"


@dataclass(frozen=True)
class InvalidHandle:
    raw: str


Handle = Union[LocalHandle, RemoteHandle, InvalidHandle]


def parse_handle(raw: str) -> Optional[Tuple[str, Optional[str]]]:
    """Split ``raw`` into ``(local_part, domain)``; ``None`` if malformed."""
    query = unquote(raw or "")
    if query.startswith("@"):
        query = query[1:]

    parts = query.split("@")
    if len(parts) > 2:
        return None

    local_part = parts[0]
    if not LOCAL_PART_RE.match(local_part):
        return None
    if len(parts) == 1:
        return local_part, None

    domain = parts[1]
    if not DOMAIN_RE.match(domain):
        return None
    return local_part, domain


def classify_handle(raw: str, request_host: str) -> Handle:
    parsed = parse_handle(raw)
    if parsed is None:
        return InvalidHandle(raw)

    local_part, domain = parsed
    if domain is None or domain.lower() == (request_host or "").lower():
        return LocalHandle(local_part)
    return RemoteHandle(local_part, domain)
