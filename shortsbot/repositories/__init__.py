"""Repositories over the persisted documents."""

from .credentials import CredentialStore
from .documents import DocumentRepository, create_state_repository
from .video_drafts import MAX_DRAFTS, VideoDraftRepository

__all__ = [
    "MAX_DRAFTS",
    "CredentialStore",
    "DocumentRepository",
    "VideoDraftRepository",
    "create_state_repository",
]
