"""Single-writer access to a persisted document.

Every read-modify-write of a document goes through ``mutate()``, which holds
an ``asyncio.Lock`` for the whole load → change → save cycle. Two requests
racing on the same document are applied one after the other instead of the
later save silently discarding the earlier one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Generic, Protocol, TypeVar

from shortsbot.core.storage import DocumentStore
from shortsbot.models import AppState

logger = logging.getLogger(__name__)

STATE_DOCUMENT = "state"


class Serializable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


T = TypeVar("T", bound=Serializable)


class DocumentRepository(Generic[T]):
    """Typed, lock-guarded view over one named document in a ``DocumentStore``."""

    def __init__(
        self,
        store: DocumentStore,
        name: str,
        decode: Callable[[dict[str, Any]], T],
        empty: Callable[[], T],
    ) -> None:
        self.store = store
        self.name = name
        self._decode = decode
        self._empty = empty
        self._lock = asyncio.Lock()

    async def _load(self) -> T:
        data = await self.store.load(self.name)
        if data is None:
            return self._empty()
        return self._decode(data)

    async def read(self) -> T:
        """Return a snapshot. Changes to it are never persisted."""
        return await self._load()

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[T]:
        """Load the document under the writer lock and save it when the block exits.

        Nothing is saved if the block raises.
        """
        async with self._lock:
            document = await self._load()
            yield document
            await self.store.save(self.name, document.to_dict())


def create_state_repository(store: DocumentStore) -> DocumentRepository[AppState]:
    return DocumentRepository(store, STATE_DOCUMENT, AppState.from_dict, AppState)
