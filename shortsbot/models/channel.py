"""Cached YouTube channel snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ChannelInfo:
    """Channel profile and statistics as last fetched from the Data API."""

    id: str
    title: str
    handle: str
    thumbnail_url: str | None = None
    subscriber_count: int = 0
    view_count: int = 0
    video_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelInfo:
        return cls(**data)
