"""Short-form script generation.

Two paths produce the same ``ScriptArtifact``:

- the generation API, prompted for a line-prefixed reply
  (``TITLE:`` / ``HOOK:`` / ``SCRIPT:`` / ``HASHTAGS:``) which is parsed field
  by field, each missing field getting a topic-derived default;
- ``LocalScriptWriter``, a template writer driven by an injected
  ``random.Random`` so its choices can be pinned.

``ScriptGenerator.generate`` never raises: any failure on the API path falls
back to the local writer.
"""

import logging
import random
import re

from pydantic import BaseModel, ConfigDict, field_validator

from shortsbot.models import ScriptArtifact
from shortsbot.repositories import CredentialStore

from .generation_api import GenerationAPIClient

logger = logging.getLogger(__name__)

WORDS_PER_SECOND = 2.5

_FIELD_LINE_RE = re.compile(
    r"^[\s*#]*(TITLE|HOOK|SCRIPT|HASHTAGS)\**\s*:\s*\**\s*(.*)$", re.IGNORECASE
)
_MULTILINE_FIELDS = {"script"}


def target_word_count(length_seconds: int) -> int:
    return round(length_seconds * WORDS_PER_SECOND)


def topic_slug(topic: str) -> str:
    return re.sub(r"\s+", "", topic).lower()


def build_prompt(topic: str, tone: str, length_seconds: int) -> str:
    return (
        f'Write a {length_seconds}-second YouTube Shorts script about: "{topic}". Tone: {tone}.\n'
        "Format:\n"
        "TITLE: (catchy title under 60 chars, no quotes)\n"
        "HOOK: (first 3 seconds - one punchy sentence)\n"
        f"SCRIPT: (the full spoken script, ~{target_word_count(length_seconds)} words)\n"
        "HASHTAGS: (5 relevant hashtags)\n"
        "\n"
        "Keep it punchy, mobile-first, no filler. End with a clear call to action."
    )


# ============================================
# API reply parsing
# ============================================


class GeneratedScriptFields(BaseModel):
    """Fields recovered from a generation API reply. Unusable fields are None."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = None
    hook: str | None = None
    script: str | None = None
    hashtags: str | None = None

    @field_validator("title", "hook", "script")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().strip('"').strip()
        return v or None

    @field_validator("hashtags")
    @classmethod
    def normalize_hashtags(cls, v: str | None) -> str | None:
        if v is None:
            return None
        tokens = [t.lstrip("#") for t in re.split(r"[\s,]+", v)]
        tags = [f"#{t}" for t in tokens if t]
        return " ".join(tags) or None

    def is_empty(self) -> bool:
        return not any((self.title, self.hook, self.script, self.hashtags))

    def to_artifact(self, text: str, topic: str) -> ScriptArtifact:
        return ScriptArtifact(
            title=self.title or topic,
            hook=self.hook or "",
            script=self.script or text.strip(),
            hashtags=self.hashtags or f"#{topic_slug(topic)} #shorts #viral #trending",
        )


def extract_fields(text: str) -> GeneratedScriptFields:
    """Collect prefixed fields. Only ``SCRIPT`` continues onto following lines."""
    collected: dict[str, list[str]] = {}
    current: str | None = None

    for line in text.splitlines():
        match = _FIELD_LINE_RE.match(line)
        if match:
            current = match.group(1).lower()
            # First occurrence wins
            if current in collected:
                current = None
                continue
            collected[current] = [match.group(2)]
        elif current in _MULTILINE_FIELDS:
            collected[current].append(line)

    return GeneratedScriptFields(**{k: "\n".join(v) for k, v in collected.items()})


def parse_generated_script(text: str, topic: str) -> ScriptArtifact:
    """Parse a reply into an artifact, defaulting each missing field on its own."""
    return extract_fields(text).to_artifact(text, topic)


# ============================================
# Local fallback
# ============================================


class LocalScriptWriter:
    """Template-based writer. All randomness comes from *rng*."""

    HOOKS = [
        "Nobody talks about this but it's the #1 thing you need to know about {topic}.",
        "Stop scrolling. This {topic} tip will change how you think.",
        "I tried {topic} for 30 days. Here's what actually happened.",
        "The truth about {topic} that nobody tells you.",
        "If you care about {topic}, watch this right now.",
    ]

    TITLES = [
        "The Truth About {words}",
        "{words}: What Nobody Tells You",
        "I Tried {words} For 30 Days",
        "Stop Making This {words} Mistake",
    ]

    BODY = (
        "{hook}\n"
        "\n"
        "Here's what I discovered:\n"
        "\n"
        "First: most people approach {topic} completely wrong. They focus on the wrong "
        "things and wonder why they're not seeing results.\n"
        "\n"
        "Second: the secret is consistency. Not perfection. Not talent. Just showing up "
        "every single day and doing the work.\n"
        "\n"
        "Third: track your progress. What gets measured gets improved. Start small, stay "
        "consistent, and the results will come.\n"
        "\n"
        "The bottom line? {topic} is simpler than you think. Most people overcomplicate it.\n"
        "\n"
        "Save this video and share it with someone who needs to hear this. And follow for "
        "more tips like this every day."
    )

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def write(self, topic: str, tone: str, length_seconds: int) -> ScriptArtifact:
        hook = self.rng.choice(self.HOOKS).format(topic=topic)
        title_words = " ".join(topic.split()[:4])
        title = self.rng.choice(self.TITLES).format(words=title_words)
        return ScriptArtifact(
            title=title,
            hook=hook,
            script=self.BODY.format(hook=hook, topic=topic),
            hashtags=f"#{topic_slug(topic)} #shorts #viral #trending #fyp",
        )


# ============================================
# Generator
# ============================================


class ScriptGenerator:
    """Tries the generation API when a key is configured, else writes locally."""

    def __init__(
        self,
        credentials: CredentialStore,
        api: GenerationAPIClient | None,
        local: LocalScriptWriter,
    ) -> None:
        self.credentials = credentials
        self.api = api
        self.local = local

    async def generate(self, topic: str, tone: str, length_seconds: int) -> ScriptArtifact:
        if self.api is not None:
            try:
                artifact = await self._generate_remote(topic, tone, length_seconds)
                if artifact is not None:
                    return artifact
            except Exception as e:
                logger.warning(f"Generation API error, using fallback: {e}")

        return self.local.write(topic, tone, length_seconds)

    async def _generate_remote(
        self, topic: str, tone: str, length_seconds: int
    ) -> ScriptArtifact | None:
        creds = await self.credentials.load()
        if not creds.generation_api_key:
            return None

        text = await self.api.complete(
            creds.generation_api_key, build_prompt(topic, tone, length_seconds)
        )
        fields = extract_fields(text)
        if fields.is_empty():
            logger.warning("Generation API reply had no recognizable fields, using fallback")
            return None
        return fields.to_artifact(text, topic)
