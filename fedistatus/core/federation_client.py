import logging
import httpx
from typing import Dict, Any, Optional
from fedistatus.core.config import settings

logger = logging.getLogger(__name__)

ACTIVITY_JSON = "application/activity+json"

class FederationClient:
    """HTTP client for talking to other federated servers"""
    # 共享 httpx AsyncClient（由應用啟動時注入）
    shared_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def set_shared_client(cls, client: Optional[httpx.AsyncClient]) -> None:
        cls.shared_client = client

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        # 優先採用注入 client；否則採用 shared_client；最後回退到本地臨時 client
        self.client = client or FederationClient.shared_client
        self.headers = {
            "User-Agent": settings.USER_AGENT,
        }

    async def get(self, url: str, accept: str = ACTIVITY_JSON, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        headers = {**self.headers, "Accept": accept}
        client: Optional[httpx.AsyncClient] = self.client
        if client is not None:
            return await client.get(url, params=params, headers=headers)
        # 回退：臨時 client
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as temp_client:
            return await temp_client.get(url, params=params, headers=headers)

    async def get_json(self, url: str, accept: str = ACTIVITY_JSON, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a JSON document, raising ``httpx.HTTPStatusError`` on non-2xx"""
        response = await self.get(url, accept=accept, params=params)
        if response.is_error:
            logger.warning("GET %s failed: %s", url, response.status_code)
        response.raise_for_status()
        return response.json()

    async def fetch_actor(self, actor_url: str) -> Dict[str, Any]:
        return await self.get_json(actor_url)

    async def fetch_object(self, object_url: str) -> Dict[str, Any]:
        return await self.get_json(object_url)
