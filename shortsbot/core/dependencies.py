"""Dependency injection utilities for FastAPI

All long-lived objects (document store, HTTP clients, repositories and
services) are built once per application by ``build_container`` and kept on
``app.state.container``. Route handlers receive them through the ``get_*``
dependencies below.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import httpx
from fastapi import Request

from shortsbot.core.config import Settings
from shortsbot.core.database import DatabaseManager
from shortsbot.core.storage import DocumentStore, JsonFileDocumentStore, PostgresDocumentStore
from shortsbot.models import AppState, Credentials
from shortsbot.repositories import (
    CredentialStore,
    DocumentRepository,
    VideoDraftRepository,
    create_state_repository,
)
from shortsbot.services import (
    ChannelService,
    GenerationAPIClient,
    LocalScriptWriter,
    PostScheduler,
    ScriptGenerator,
    TokenManager,
    VideoService,
    YouTubeAPIClient,
)
from shortsbot.services.token_manager import utcnow

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    store: DocumentStore
    state: DocumentRepository[AppState]
    credentials: CredentialStore
    drafts: VideoDraftRepository
    youtube_api: YouTubeAPIClient
    generation_api: GenerationAPIClient
    token_manager: TokenManager
    channel_service: ChannelService
    video_service: VideoService
    scheduler: PostScheduler

    async def close(self) -> None:
        """Close HTTP clients and the storage backend. Call on app shutdown."""
        await self.youtube_api.close()
        await self.generation_api.close()
        await self.store.close()


async def create_store(settings: Settings) -> DocumentStore:
    """Postgres when ``database_url`` is set, JSON files under ``data_dir`` otherwise."""
    if settings.database_url:
        db_manager = DatabaseManager(settings.database_url)
        await db_manager.connect()
        logger.info("Using PostgreSQL document store")
        return PostgresDocumentStore(db_manager)

    logger.info(f"Using JSON document store at {settings.data_dir}")
    return JsonFileDocumentStore(settings.data_dir)


def build_container(
    settings: Settings,
    store: DocumentStore,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> ServiceContainer:
    """Wire every service. *transport*, *rng* and *clock* exist for tests."""
    rng = rng or random.Random()

    state = create_state_repository(store)
    credentials = CredentialStore(
        store,
        defaults=Credentials(
            client_id=settings.google_client_id or None,
            client_secret=settings.google_client_secret or None,
            generation_api_key=settings.anthropic_api_key or None,
        ),
    )
    drafts = VideoDraftRepository(state)

    youtube_api = YouTubeAPIClient(
        redirect_uri=settings.redirect_uri,
        timeout=settings.http_timeout,
        transport=transport,
    )
    generation_api = GenerationAPIClient(
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
        timeout=settings.generation_timeout,
        transport=transport,
    )

    token_manager = TokenManager(state, credentials, youtube_api, clock=clock)
    generator = ScriptGenerator(credentials, generation_api, LocalScriptWriter(rng))

    return ServiceContainer(
        settings=settings,
        store=store,
        state=state,
        credentials=credentials,
        drafts=drafts,
        youtube_api=youtube_api,
        generation_api=generation_api,
        token_manager=token_manager,
        channel_service=ChannelService(state, token_manager, youtube_api),
        video_service=VideoService(drafts, generator, rng=rng, clock=clock),
        scheduler=PostScheduler(drafts, token_manager, clock=clock),
    )


# ============================================
# Service Dependencies
# ============================================


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_settings_dep(request: Request) -> Settings:
    return get_container(request).settings


def get_credentials(request: Request) -> CredentialStore:
    return get_container(request).credentials


def get_token_manager(request: Request) -> TokenManager:
    return get_container(request).token_manager


def get_channel_service(request: Request) -> ChannelService:
    return get_container(request).channel_service


def get_drafts(request: Request) -> VideoDraftRepository:
    return get_container(request).drafts


def get_video_service(request: Request) -> VideoService:
    return get_container(request).video_service


def get_scheduler(request: Request) -> PostScheduler:
    return get_container(request).scheduler
