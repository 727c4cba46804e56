"""Mastodon client API representations"""
from pydantic import BaseModel, Field
from typing import List, Dict, Any

class Account(BaseModel):
    id: str
    username: str
    acct: str
    url: str
    display_name: str = ""
    note: str = ""
    avatar: str = ""
    avatar_static: str = ""
    header: str = ""
    header_static: str = ""
    locked: bool = False
    bot: bool = False
    discoverable: bool = True
    group: bool = False
    created_at: str = ""
    followers_count: int = 0
    following_count: int = 0
    statuses_count: int = 0
    emojis: List[Dict[str, Any]] = Field(default_factory=list)
    fields: List[Dict[str, Any]] = Field(default_factory=list)

class Status(BaseModel):
    id: str
    uri: str
    # 本地為 ISO-8601；遠端為來源提供的 published 原值
    created_at: str
    content: str
    account: Account
    favourites_count: int = 0
    reblogs_count: int = 0

    # 尚未實作的欄位，固定為 stub 值
    emojis: List[Dict[str, Any]] = Field(default_factory=list)
    media_attachments: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Dict[str, Any]] = Field(default_factory=list)
    mentions: List[Dict[str, Any]] = Field(default_factory=list)
    visibility: str = "public"
    spoiler_text: str = ""
