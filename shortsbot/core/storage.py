"""Durable document storage.

Persistence is modelled as a tiny key-value store of JSON documents. The
application keeps two documents:

- ``state``: ``{"videos": [...], "tokens": {...} | null, "channel": {...} | null}``
- ``credentials``: ``{"client_id", "client_secret", "generation_api_key"}``

Backends only know how to load and save whole documents. Serializing
read-modify-write cycles is the job of ``DocumentRepository``.
"""

import asyncio
import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from shortsbot.core.database import DatabaseManager

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class DocumentStore(ABC):
    """Load/save whole JSON documents by name."""

    @abstractmethod
    async def load(self, name: str) -> Document | None:
        """Return the stored document, or None if it was never saved."""

    @abstractmethod
    async def save(self, name: str, document: Document) -> None:
        """Replace the stored document."""

    async def check_health(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemoryDocumentStore(DocumentStore):
    """Process-local store. Documents are deep-copied in and out."""

    def __init__(self, documents: dict[str, Document] | None = None) -> None:
        self._documents: dict[str, Document] = copy.deepcopy(documents or {})
        self.save_count = 0

    async def load(self, name: str) -> Document | None:
        document = self._documents.get(name)
        return copy.deepcopy(document) if document is not None else None

    async def save(self, name: str, document: Document) -> None:
        self._documents[name] = copy.deepcopy(document)
        self.save_count += 1


class JsonFileDocumentStore(DocumentStore):
    """One ``<name>.json`` file per document under *directory*.

    Writes go to a temporary sibling file which then replaces the target, so
    a crash mid-write never leaves a truncated document behind.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def _read(self, name: str) -> Document | None:
        path = self._path(name)
        if not path.exists():
            return None
        with path.open(encoding="utf-8") as f:
            return json.load(f)

    def _write(self, name: str, document: Document) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(name)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)

    async def load(self, name: str) -> Document | None:
        return await asyncio.to_thread(self._read, name)

    async def save(self, name: str, document: Document) -> None:
        await asyncio.to_thread(self._write, name, document)
        logger.debug(f"Saved document {name} to {self._path(name)}")


class PostgresDocumentStore(DocumentStore):
    """Documents stored as JSONB rows in the ``documents`` table."""

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.db_manager = db_manager

    async def load(self, name: str) -> Document | None:
        async with self.db_manager.pool.acquire() as conn:
            body = await conn.fetchval("SELECT body::text FROM documents WHERE name = $1", name)
        return json.loads(body) if body is not None else None

    async def save(self, name: str, document: Document) -> None:
        async with self.db_manager.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO documents (name, body)
                VALUES ($1, $2::jsonb)
                ON CONFLICT (name) DO UPDATE SET
                    body       = EXCLUDED.body,
                    updated_at = NOW()
                """,
                name,
                json.dumps(document, ensure_ascii=False),
            )

    async def check_health(self) -> bool:
        return await self.db_manager.check_health()

    async def close(self) -> None:
        await self.db_manager.disconnect()
