# tests/conftest.py
import os
import uuid
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ACTIVITYPUB_PROTOCOL", "https")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fedistatus.core.activitypub.utils import actor_url
from fedistatus.core.database import Base, get_db
from fedistatus.core.federation_client import FederationClient
from fedistatus.main import app as fastapi_app
from fedistatus.models.activitypub import Actor, Object, OutboxObject

TEST_DB_URL = "sqlite+aiosqlite://"
LOCAL_DOMAIN = "social.example"
REMOTE_DOMAIN = "remote.example"


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


class RemoteServer:
    """Canned responses for remote federation endpoints, keyed by URL without query."""

    def __init__(self):
        self.routes: Dict[str, Any] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, json: Optional[Dict[str, Any]] = None, status_code: int = 200) -> None:
        self.routes[url] = (status_code, json)

    def requested_urls(self) -> List[str]:
        return [_route_key(request.url) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(_route_key(request.url))
        if route is None:
            return httpx.Response(404)
        status_code, json = route
        return httpx.Response(status_code, json=json)


def _route_key(url: httpx.URL) -> str:
    return f"{url.scheme}://{url.host}{url.path}"


@pytest.fixture()
def remote_server() -> RemoteServer:
    return RemoteServer()


@pytest_asyncio.fixture()
async def federation_client(remote_server: RemoteServer) -> AsyncIterator[FederationClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(remote_server.handler))
    FederationClient.set_shared_client(http_client)
    try:
        yield FederationClient(client=http_client)
    finally:
        FederationClient.set_shared_client(None)
        await http_client.aclose()


@pytest_asyncio.fixture()
async def client(db_session: AsyncSession, federation_client: FederationClient) -> AsyncIterator[httpx.AsyncClient]:
    async def _get_db_override() -> AsyncIterator[AsyncSession]:
        yield db_session

    fastapi_app.dependency_overrides[get_db] = _get_db_override
    transport = httpx.ASGITransport(app=fastapi_app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url=f"http://{LOCAL_DOMAIN}") as test_client:
            yield test_client
    finally:
        fastapi_app.dependency_overrides.pop(get_db, None)


async def create_local_actor(db: AsyncSession, username: str, domain: str = LOCAL_DOMAIN, name: Optional[str] = None) -> Actor:
    actor_id = actor_url(domain, username)
    actor = Actor(
        id=actor_id,
        type="Person",
        preferred_username=username,
        domain=domain,
        is_local=True,
        properties={
            "id": actor_id,
            "type": "Person",
            "preferredUsername": username,
            "name": name or username.title(),
            "summary": f"{username}'s profile",
            "icon": {"type": "Image", "url": f"https://{domain}/avatars/{username}.png"},
        },
        cdate=datetime(2023, 12, 1),
    )
    db.add(actor)
    await db.commit()
    return actor


async def publish(
    db: AsyncSession,
    actor_id: str,
    content: str,
    cdate: datetime,
    object_type: str = "Note",
) -> Object:
    """Store an object and record it in the actor's outbox at ``cdate``."""
    obj = Object(
        id=str(uuid.uuid4()),
        mastodon_id=str(uuid.uuid4()),
        type=object_type,
        properties={"type": object_type, "content": content},
        original_actor_id=actor_id,
        local=True,
        cdate=cdate,
    )
    db.add(obj)
    await db.flush()
    db.add(OutboxObject(actor_id=actor_id, object_id=obj.id, cdate=cdate))
    await db.commit()
    return obj


def serve_remote_actor(
    remote_server: RemoteServer,
    username: str,
    activities: List[Dict[str, Any]],
    domain: str = REMOTE_DOMAIN,
) -> str:
    """Publish WebFinger, actor and paged outbox documents for a remote actor."""
    actor_id = f"https://{domain}/users/{username}"
    outbox_id = f"{actor_id}/outbox"
    remote_server.add(f"https://{domain}/.well-known/webfinger", {
        "subject": f"acct:{username}@{domain}",
        "links": [
            {"rel": "http://webfinger.net/rel/profile-page", "type": "text/html", "href": f"https://{domain}/@{username}"},
            {"rel": "self", "type": "application/activity+json", "href": actor_id},
        ],
    })
    remote_server.add(actor_id, {
        "@context": "https://www.w3.org/ns/activitystreams",
        "id": actor_id,
        "type": "Person",
        "preferredUsername": username,
        "name": username.title(),
        "summary": "<p>remote profile</p>",
        "icon": {"type": "Image", "url": f"https://{domain}/avatars/{username}.png"},
        "inbox": f"{actor_id}/inbox",
        "outbox": outbox_id,
    })
    remote_server.add(outbox_id, {
        "id": outbox_id,
        "type": "OrderedCollection",
        "totalItems": len(activities),
        "first": f"{outbox_id}/page/1",
    })
    remote_server.add(f"{outbox_id}/page/1", {
        "id": f"{outbox_id}/page/1",
        "type": "OrderedCollectionPage",
        "orderedItems": activities,
    })
    return actor_id


def create_note_activity(actor_id: str, note_id: str, content: str, published: str, embed: bool = True) -> Dict[str, Any]:
    note = {
        "id": note_id,
        "type": "Note",
        "attributedTo": actor_id,
        "content": content,
        "published": published,
        "to": ["https://www.w3.org/ns/activitystreams#Public"],
    }
    return {
        "id": f"{note_id}/activity",
        "type": "Create",
        "actor": actor_id,
        "published": published,
        "object": note if embed else note_id,
    }
