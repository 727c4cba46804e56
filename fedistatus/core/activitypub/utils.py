from typing import Dict, Any, Optional, Union
from urllib.parse import urlparse

from fedistatus.core.config import settings

def actor_url(domain: str, username: str) -> str:
    """生成本地 Actor ID"""
    return f"{settings.ACTIVITYPUB_PROTOCOL}://{domain}/users/{username}"

def object_uri(domain: str, object_id: str) -> str:
    """生成 Object 的公開 URI"""
    return f"{settings.ACTIVITYPUB_PROTOCOL}://{domain}/ap/o/{object_id}"

def get_id(value: Union[str, Dict[str, Any], None]) -> Optional[str]:
    """ActivityStreams 欄位可以是 id 字串或內嵌物件"""
    if isinstance(value, dict):
        return value.get("id")
    return value

def extract_domain_from_actor_id(actor_id: str) -> str:
    """從 Actor ID 中提取域名"""
    if not actor_id:
        return ""

    # 格式: https://domain.com/users/username
    return urlparse(actor_id).hostname or ""

def create_actor_object(actor) -> Dict[str, Any]:
    """建立 Actor 物件"""
    document = {
        "@context": [
            "https://www.w3.org/ns/activitystreams",
            "https://w3id.org/security/v1"
        ],
        "id": actor.id,
        "type": actor.type,
        "preferredUsername": actor.preferred_username,
        "name": actor.name,
        "summary": actor.summary,
        "inbox": f"{actor.id}/inbox",
        "outbox": f"{actor.id}/outbox",
        "followers": f"{actor.id}/followers",
        "following": f"{actor.id}/following",
    }
    # 保留已儲存的欄位（icon, publicKey ...）
    for key, value in actor.properties.items():
        if key not in ("@context", "id", "type"):
            document.setdefault(key, value)
    return document
