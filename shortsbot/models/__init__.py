"""Data models for the ShortsBot backend."""

from .channel import ChannelInfo
from .credentials import Credentials
from .script import ScriptArtifact
from .token import TokenRecord
from .video import (
    STATUS_DRAFT,
    STATUS_ERROR,
    STATUS_SCHEDULED,
    AppState,
    PublishMetadata,
    VideoDraft,
)

__all__ = [
    "STATUS_DRAFT",
    "STATUS_ERROR",
    "STATUS_SCHEDULED",
    "AppState",
    "ChannelInfo",
    "Credentials",
    "PublishMetadata",
    "ScriptArtifact",
    "TokenRecord",
    "VideoDraft",
]
