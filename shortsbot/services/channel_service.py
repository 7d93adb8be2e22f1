"""Channel snapshot: fetched with a valid token, cached in the state document."""

import logging

from shortsbot.core.errors import NotAuthenticated
from shortsbot.models import AppState, ChannelInfo
from shortsbot.repositories import DocumentRepository

from .token_manager import TokenManager
from .youtube_api import YouTubeAPIClient

logger = logging.getLogger(__name__)


class ChannelService:
    def __init__(
        self,
        state: DocumentRepository[AppState],
        token_manager: TokenManager,
        youtube_api: YouTubeAPIClient,
    ) -> None:
        self.state = state
        self.token_manager = token_manager
        self.youtube_api = youtube_api

    async def cached_channel(self) -> ChannelInfo | None:
        state = await self.state.read()
        return state.channel

    async def refresh_channel(self) -> ChannelInfo | None:
        """Fetch fresh channel statistics and replace the cached snapshot."""
        if not await self.token_manager.is_connected():
            raise NotAuthenticated("Not connected")

        token = await self.token_manager.get_valid_token()
        channel = await self.youtube_api.get_channel_info(token)

        async with self.state.mutate() as state:
            if state.tokens is None:
                raise NotAuthenticated("Disconnected while fetching channel info")
            state.channel = channel
        logger.debug(f"Channel snapshot refreshed: {channel.id if channel else None}")
        return channel
