"""Credential store: OAuth client id/secret and the generation API key."""

from __future__ import annotations

import logging

from shortsbot.core.storage import DocumentStore
from shortsbot.models import Credentials

from .documents import DocumentRepository

logger = logging.getLogger(__name__)

CREDENTIALS_DOCUMENT = "credentials"


class CredentialStore:
    """Persisted credentials with environment-provided defaults.

    A value saved through ``update()`` always wins over the default.
    """

    def __init__(self, store: DocumentStore, defaults: Credentials | None = None) -> None:
        self.document = DocumentRepository(
            store, CREDENTIALS_DOCUMENT, Credentials.from_dict, Credentials
        )
        self.defaults = defaults or Credentials()

    async def load(self) -> Credentials:
        saved = await self.document.read()
        return Credentials(
            client_id=saved.client_id or self.defaults.client_id or None,
            client_secret=saved.client_secret or self.defaults.client_secret or None,
            generation_api_key=saved.generation_api_key
            or self.defaults.generation_api_key
            or None,
        )

    async def update(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        generation_api_key: str | None = None,
    ) -> Credentials:
        """Overwrite the supplied fields. Blank or missing values leave a field as it is."""
        async with self.document.mutate() as saved:
            if client_id and client_id.strip():
                saved.client_id = client_id.strip()
            if client_secret and client_secret.strip():
                saved.client_secret = client_secret.strip()
            if generation_api_key and generation_api_key.strip():
                saved.generation_api_key = generation_api_key.strip()
        logger.info(f"Credentials updated (configured={saved.configured})")
        return await self.load()
