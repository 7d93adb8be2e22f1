"""Tests for the bounded draft store and draft creation."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from shortsbot.core.errors import ValidationError
from shortsbot.models import STATUS_DRAFT, VideoDraft
from shortsbot.repositories import MAX_DRAFTS
from shortsbot.repositories.video_drafts import next_draft_id

START = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def make_draft(draft_id: str) -> VideoDraft:
    return VideoDraft(
        id=draft_id,
        topic=f"topic {draft_id}",
        tone="Engaging",
        length=60,
        title=f"Title {draft_id}",
        hook="hook",
        script="script",
        hashtags="#a #b",
        created_at=START,
    )


class TestVideoDraftRepository:
    async def test_list_is_newest_first(self, container):
        for i in range(3):
            await container.drafts.insert(make_draft(str(i)))

        assert [v.id for v in await container.drafts.list()] == ["2", "1", "0"]

    async def test_cap_evicts_exactly_the_oldest(self, container):
        for i in range(MAX_DRAFTS):
            await container.drafts.insert(make_draft(str(i)))
        assert await container.drafts.count() == MAX_DRAFTS

        await container.drafts.insert(make_draft("newest"))

        ids = [v.id for v in await container.drafts.list()]
        assert len(ids) == MAX_DRAFTS
        assert ids[0] == "newest"
        assert "0" not in ids
        assert "1" in ids

    async def test_get(self, container):
        await container.drafts.insert(make_draft("42"))

        assert (await container.drafts.get("42")).title == "Title 42"
        assert await container.drafts.get("43") is None

    async def test_delete_is_idempotent(self, container):
        await container.drafts.insert(make_draft("1"))
        await container.drafts.insert(make_draft("2"))

        assert await container.drafts.delete("1") is True
        assert await container.drafts.delete("1") is False
        assert await container.drafts.delete("never-existed") is False
        assert [v.id for v in await container.drafts.list()] == ["2"]

    async def test_update_unknown_id(self, container):
        assert await container.drafts.update("missing", lambda d: None) is None


class TestNextDraftId:
    def test_uses_epoch_millis(self):
        assert next_draft_id([], START) == str(int(START.timestamp() * 1000))

    def test_never_repeats_within_the_same_millisecond(self):
        first = next_draft_id([], START)
        second = next_draft_id([make_draft(first)], START)
        assert int(second) == int(first) + 1

    def test_stays_monotonic_if_clock_goes_back(self):
        latest = next_draft_id([], START)
        earlier = START - timedelta(minutes=1)
        assert int(next_draft_id([make_draft(latest)], earlier)) > int(latest)


class TestGenerateDraft:
    async def test_creates_draft_at_head(self, container, clock):
        draft = await container.video_service.generate_draft(
            "cooking", "Funny", 30, "2026-03-02T09:00"
        )

        listed = await container.drafts.list()
        assert listed[0].id == draft.id
        assert draft.status == STATUS_DRAFT
        assert draft.topic == "cooking"
        assert draft.tone == "Funny"
        assert draft.length == 30
        assert draft.scheduled_for == "2026-03-02T09:00"
        assert draft.created_at == clock()
        assert draft.emoji
        assert draft.title and draft.script and draft.hashtags

    @pytest.mark.parametrize("topic", ["", "   "])
    async def test_blank_topic_rejected(self, container, store, topic):
        saves_before = store.save_count

        with pytest.raises(ValidationError):
            await container.video_service.generate_draft(topic)

        assert store.save_count == saves_before

    async def test_non_positive_length_rejected(self, container):
        with pytest.raises(ValidationError):
            await container.video_service.generate_draft("cooking", length=0)

    async def test_concurrent_creations_are_all_kept(self, container):
        drafts = await asyncio.gather(
            *(container.video_service.generate_draft(f"topic {i}") for i in range(10))
        )

        stored_ids = {v.id for v in await container.drafts.list()}
        assert stored_ids == {d.id for d in drafts}
        assert len(stored_ids) == 10
