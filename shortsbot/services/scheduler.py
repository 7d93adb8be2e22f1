"""Draft → scheduled state machine.

``schedule_post`` validates that a usable access token exists and finalizes
the publish metadata. It does not upload anything: "scheduled" means the
draft is ready to publish.

Transitions::

    draft  ──token ok──▶ scheduled
    draft  ──token err─▶ error      (retry by calling schedule_post again)
    error  ──token ok──▶ scheduled
    error  ──token err─▶ error

A failed transition is persisted on the draft before the error propagates,
so the reason stays visible on later reads.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from shortsbot.core.errors import NotFound, ShortsBotError, UpstreamError
from shortsbot.models import STATUS_ERROR, STATUS_SCHEDULED, PublishMetadata, VideoDraft
from shortsbot.repositories import VideoDraftRepository

from .token_manager import TokenManager, utcnow

logger = logging.getLogger(__name__)

PLATFORM_MARKER_TAG = "#Shorts"


def parse_tags(hashtags: str) -> list[str]:
    """``"#cooking #shorts"`` → ``["cooking", "shorts"]``; blank tokens are dropped."""
    return [t.strip() for t in hashtags.split("#") if t.strip()]


def build_publish_metadata(draft: VideoDraft) -> PublishMetadata:
    return PublishMetadata(
        title=draft.title,
        description=f"{draft.script}\n\n{draft.hashtags}\n\n{PLATFORM_MARKER_TAG}",
        tags=parse_tags(draft.hashtags),
    )


class PostScheduler:
    def __init__(
        self,
        drafts: VideoDraftRepository,
        token_manager: TokenManager,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.drafts = drafts
        self.token_manager = token_manager
        self._clock = clock

    async def schedule_post(self, video_id: str) -> VideoDraft:
        """Move a draft to ``scheduled``.

        Raises:
            NotFound: no draft with *video_id*; nothing is modified.
            NotAuthenticated, RefreshFailed, UpstreamError: token acquisition
                failed; the draft is left in ``error`` with the message.
        """
        draft = await self.drafts.get(video_id)
        if draft is None:
            raise NotFound("Video not found")

        if draft.status == STATUS_SCHEDULED:
            logger.info(f"Draft {video_id} is already scheduled")
            return draft

        try:
            await self.token_manager.get_valid_token()
        except ShortsBotError as e:
            logger.warning(f"Scheduling draft {video_id} failed: {e.message}")
            await self.drafts.update(video_id, lambda d: _mark_error(d, e.message))
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while scheduling draft {video_id}")
            message = f"Token acquisition failed: {type(e).__name__}: {e}"
            await self.drafts.update(video_id, lambda d: _mark_error(d, message))
            raise UpstreamError(message, reason="unexpected_error") from e

        scheduled_at = self._clock()
        updated = await self.drafts.update(
            video_id, lambda d: _mark_scheduled(d, scheduled_at)
        )
        if updated is None:
            # Deleted while the token was being fetched
            raise NotFound("Video not found")

        logger.info(f"Draft {video_id} scheduled: {updated.title}")
        return updated


def _mark_error(draft: VideoDraft, message: str) -> None:
    draft.status = STATUS_ERROR
    draft.error = message


def _mark_scheduled(draft: VideoDraft, scheduled_at: datetime) -> None:
    draft.status = STATUS_SCHEDULED
    draft.scheduled_at = scheduled_at
    draft.error = None
    draft.publish_metadata = build_publish_metadata(draft)
