"""Draft creation: validate input, generate a script, store the draft."""

import logging
import random
from collections.abc import Callable
from datetime import datetime

from shortsbot.core.errors import ValidationError
from shortsbot.models import VideoDraft
from shortsbot.repositories import VideoDraftRepository

from .script_generator import ScriptGenerator
from .token_manager import utcnow

logger = logging.getLogger(__name__)

EMOJIS = ["🔥", "💡", "🚀", "🎯", "✨", "💫", "⚡", "🎬", "📱", "🧠"]

DEFAULT_TONE = "Engaging"
DEFAULT_LENGTH = 60


class VideoService:
    def __init__(
        self,
        drafts: VideoDraftRepository,
        generator: ScriptGenerator,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.drafts = drafts
        self.generator = generator
        self.rng = rng or random.Random()
        self._clock = clock

    async def generate_draft(
        self,
        topic: str,
        tone: str = DEFAULT_TONE,
        length: int = DEFAULT_LENGTH,
        schedule_for: str | None = None,
    ) -> VideoDraft:
        topic = (topic or "").strip()
        if not topic:
            raise ValidationError("Topic required")
        if length <= 0:
            raise ValidationError("Length must be a positive number of seconds")
        tone = (tone or "").strip() or DEFAULT_TONE

        artifact = await self.generator.generate(topic, tone, length)
        emoji = self.rng.choice(EMOJIS)
        now = self._clock()

        def build(draft_id: str) -> VideoDraft:
            return VideoDraft(
                id=draft_id,
                topic=topic,
                tone=tone,
                length=length,
                title=artifact.title,
                hook=artifact.hook,
                script=artifact.script,
                hashtags=artifact.hashtags,
                created_at=now,
                emoji=emoji,
                scheduled_for=schedule_for,
            )

        draft = await self.drafts.create(build, now)
        logger.info(f"Draft {draft.id} created for topic: {topic}")
        return draft
