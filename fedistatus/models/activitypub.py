from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey, Integer, Index

from fedistatus.core.database import Base
from fedistatus.core.time import utcnow

class Actor(Base):
    """ActivityPub Actor（本地與快取的遠端 Actor）"""
    __tablename__ = "actors"

    id = Column(String(500), primary_key=True)  # Actor URL
    type = Column(String(50), nullable=False, default="Person")
    preferred_username = Column(String(255), index=True, nullable=False)
    domain = Column(String(255), nullable=False)
    is_local = Column(Boolean, default=False, nullable=False)

    # 完整的 Actor 文件（name, summary, icon, inbox, outbox ...）
    properties = Column(JSON, nullable=False, default=dict)

    cdate = Column(DateTime, default=utcnow, nullable=False)

    @property
    def name(self):
        return self.properties.get("name") or self.preferred_username

    @property
    def summary(self):
        return self.properties.get("summary") or ""

    @property
    def outbox_url(self):
        return self.properties.get("outbox")

    @property
    def profile_url(self):
        return _link_href(self.properties.get("url")) or self.id

    @property
    def icon_url(self):
        return _image_url(self.properties.get("icon"))

    @property
    def header_url(self):
        return _image_url(self.properties.get("image"))

class Object(Base):
    """ActivityPub Object（Note 即為 status）"""
    __tablename__ = "objects"

    id = Column(String(64), primary_key=True)
    mastodon_id = Column(String(64), unique=True, nullable=False)
    type = Column(String(50), index=True, nullable=False)
    properties = Column(JSON, nullable=False, default=dict)

    # 遠端物件的來源資訊
    original_actor_id = Column(String(500))
    original_object_id = Column(String(500), unique=True)
    local = Column(Boolean, default=False, nullable=False)

    cdate = Column(DateTime, default=utcnow, nullable=False)

class OutboxObject(Base):
    """Actor 發佈物件的紀錄，cdate 為排序鍵"""
    __tablename__ = "outbox_objects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(String(500), ForeignKey("actors.id"), nullable=False)
    object_id = Column(String(64), ForeignKey("objects.id"), nullable=False)
    cdate = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_outbox_objects_actor_cdate", "actor_id", "cdate"),
        Index("ix_outbox_objects_object_id", "object_id"),
    )

class ActorFavourite(Base):
    """按讚紀錄（僅用於計數）"""
    __tablename__ = "actor_favourites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(String(500), ForeignKey("actors.id"), nullable=False)
    object_id = Column(String(64), ForeignKey("objects.id"), index=True, nullable=False)
    cdate = Column(DateTime, default=utcnow, nullable=False)

class ActorReblog(Base):
    """轉發紀錄（僅用於計數）"""
    __tablename__ = "actor_reblogs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(String(500), ForeignKey("actors.id"), nullable=False)
    object_id = Column(String(64), ForeignKey("objects.id"), index=True, nullable=False)
    cdate = Column(DateTime, default=utcnow, nullable=False)

def _link_href(value):
    # url may be a bare URL, a Link object, or a list of them
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("href")
    return value

def _image_url(value):
    # icon/image may be a bare URL, an Image object, or a list of them
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return _link_href(value.get("url"))
    return value
