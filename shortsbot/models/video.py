"""Video draft records and the persisted application state."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from .channel import ChannelInfo
from .token import TokenRecord

STATUS_DRAFT = "draft"
STATUS_SCHEDULED = "scheduled"
STATUS_ERROR = "error"


@dataclass
class PublishMetadata:
    """Platform-ready metadata attached when a draft is scheduled."""

    title: str
    description: str
    tags: list[str]
    category_id: str = "22"  # People & Blogs
    privacy_status: str = "public"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublishMetadata:
        return cls(**data)


@dataclass
class VideoDraft:
    """One generated short-form video candidate."""

    id: str
    topic: str
    tone: str
    length: int  # seconds
    title: str
    hook: str
    script: str
    hashtags: str
    created_at: datetime
    status: str = STATUS_DRAFT  # 'draft' | 'scheduled' | 'error'
    emoji: str = ""
    scheduled_for: str | None = None
    scheduled_at: datetime | None = None
    error: str | None = None
    publish_metadata: PublishMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "topic": self.topic,
            "tone": self.tone,
            "length": self.length,
            "title": self.title,
            "hook": self.hook,
            "script": self.script,
            "hashtags": self.hashtags,
            "status": self.status,
            "emoji": self.emoji,
            "created_at": self.created_at.isoformat(),
            "scheduled_for": self.scheduled_for,
            "scheduled_at": self.scheduled_at.isoformat() if self.scheduled_at else None,
            "error": self.error,
            "publish_metadata": self.publish_metadata.to_dict() if self.publish_metadata else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoDraft:
        scheduled_at = data.get("scheduled_at")
        metadata = data.get("publish_metadata")
        return cls(
            id=data["id"],
            topic=data["topic"],
            tone=data["tone"],
            length=data["length"],
            title=data["title"],
            hook=data["hook"],
            script=data["script"],
            hashtags=data["hashtags"],
            status=data.get("status", STATUS_DRAFT),
            emoji=data.get("emoji", ""),
            created_at=datetime.fromisoformat(data["created_at"]),
            scheduled_for=data.get("scheduled_for"),
            scheduled_at=datetime.fromisoformat(scheduled_at) if scheduled_at else None,
            error=data.get("error"),
            publish_metadata=PublishMetadata.from_dict(metadata) if metadata else None,
        )


@dataclass
class AppState:
    """The ``state`` document: drafts (newest first), token record, channel."""

    videos: list[VideoDraft] = field(default_factory=list)
    tokens: TokenRecord | None = None
    channel: ChannelInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "videos": [v.to_dict() for v in self.videos],
            "tokens": self.tokens.to_dict() if self.tokens else None,
            "channel": self.channel.to_dict() if self.channel else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppState:
        tokens = data.get("tokens")
        channel = data.get("channel")
        return cls(
            videos=[VideoDraft.from_dict(v) for v in data.get("videos", [])],
            tokens=TokenRecord.from_dict(tokens) if tokens else None,
            channel=ChannelInfo.from_dict(channel) if channel else None,
        )
