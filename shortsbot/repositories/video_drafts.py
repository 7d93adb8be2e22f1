"""Repository for the video drafts held in the ``state`` document.

Drafts are kept newest first and capped at ``MAX_DRAFTS``; inserting past the
cap drops the oldest entries (insertion order, not access order).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from shortsbot.models import AppState, VideoDraft

from .documents import DocumentRepository

logger = logging.getLogger(__name__)

MAX_DRAFTS = 50


def next_draft_id(videos: list[VideoDraft], now: datetime) -> str:
    """Epoch milliseconds of *now*, bumped past the newest existing numeric id."""
    candidate = int(now.timestamp() * 1000)
    numeric_ids = [int(v.id) for v in videos if v.id.isdigit()]
    if numeric_ids:
        candidate = max(candidate, max(numeric_ids) + 1)
    return str(candidate)


class VideoDraftRepository:
    """Ordered, bounded collection of drafts."""

    def __init__(self, state: DocumentRepository[AppState], max_drafts: int = MAX_DRAFTS) -> None:
        self.state = state
        self.max_drafts = max_drafts

    def _prepend(self, state: AppState, draft: VideoDraft) -> None:
        state.videos.insert(0, draft)
        evicted = state.videos[self.max_drafts :]
        if evicted:
            del state.videos[self.max_drafts :]
            logger.debug(f"Evicted {len(evicted)} oldest draft(s): {[v.id for v in evicted]}")

    async def insert(self, draft: VideoDraft) -> VideoDraft:
        """Prepend *draft*, then truncate to the newest ``max_drafts`` entries."""
        async with self.state.mutate() as state:
            self._prepend(state, draft)
        return draft

    async def create(self, build: Callable[[str], VideoDraft], now: datetime) -> VideoDraft:
        """Assign a fresh id and insert the draft *build(id)* in one critical section."""
        async with self.state.mutate() as state:
            draft = build(next_draft_id(state.videos, now))
            self._prepend(state, draft)
        return draft

    async def list(self) -> list[VideoDraft]:
        """All drafts, newest first."""
        state = await self.state.read()
        return state.videos

    async def count(self) -> int:
        state = await self.state.read()
        return len(state.videos)

    async def get(self, video_id: str) -> VideoDraft | None:
        state = await self.state.read()
        return next((v for v in state.videos if v.id == video_id), None)

    async def delete(self, video_id: str) -> bool:
        """Remove a draft by id. Unknown ids are ignored; returns whether one was removed."""
        async with self.state.mutate() as state:
            before = len(state.videos)
            state.videos = [v for v in state.videos if v.id != video_id]
            removed = len(state.videos) != before
        if removed:
            logger.info(f"Deleted draft {video_id}")
        return removed

    async def update(
        self, video_id: str, change: Callable[[VideoDraft], None]
    ) -> VideoDraft | None:
        """Apply *change* to the stored draft and persist it. None if the id is unknown."""
        async with self.state.mutate() as state:
            draft = next((v for v in state.videos if v.id == video_id), None)
            if draft is None:
                return None
            change(draft)
        return draft
