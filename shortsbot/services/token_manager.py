"""OAuth token lifecycle: code exchange, silent refresh, disconnect.

The token record lives in the ``state`` document. ``get_valid_token()`` hands
out the stored access token while it is more than ``REFRESH_BUFFER`` away from
expiry and refreshes it otherwise. A refresh replaces the access token and
expiry together; the refresh token is only ever replaced by a new
authorization. A rejected refresh leaves the stored record untouched so the
operator can retry or re-authorize.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from shortsbot.core.errors import NotAuthenticated, RefreshFailed, UpstreamError, ValidationError
from shortsbot.models import AppState, TokenRecord
from shortsbot.repositories import CredentialStore, DocumentRepository

from .youtube_api import YouTubeAPIClient

logger = logging.getLogger(__name__)

REFRESH_BUFFER = timedelta(seconds=60)


def utcnow() -> datetime:
    return datetime.now(UTC)


class TokenManager:
    """Owns the persisted ``TokenRecord``."""

    def __init__(
        self,
        state: DocumentRepository[AppState],
        credentials: CredentialStore,
        youtube_api: YouTubeAPIClient,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.state = state
        self.credentials = credentials
        self.youtube_api = youtube_api
        self._clock = clock
        self._refresh_lock = asyncio.Lock()

    def _is_fresh(self, record: TokenRecord) -> bool:
        return self._clock() < record.expiry - REFRESH_BUFFER

    async def is_connected(self) -> bool:
        state = await self.state.read()
        return state.tokens is not None

    async def authorization_url(self) -> str:
        """Google consent URL for the configured client id."""
        creds = await self.credentials.load()
        if not creds.client_id:
            raise ValidationError("Client ID not configured")
        return self.youtube_api.generate_oauth_url(creds.client_id)

    async def get_valid_token(self) -> str:
        """Return an access token that is not about to expire, refreshing if needed.

        Raises:
            NotAuthenticated: no token record is stored.
            RefreshFailed: Google rejected the refresh.
            UpstreamError: the token endpoint could not be reached.
        """
        state = await self.state.read()
        if state.tokens is None:
            raise NotAuthenticated()
        if self._is_fresh(state.tokens):
            return state.tokens.access_token

        async with self._refresh_lock:
            # Double-check after acquiring lock: a concurrent caller may have refreshed
            state = await self.state.read()
            if state.tokens is None:
                raise NotAuthenticated()
            if self._is_fresh(state.tokens):
                return state.tokens.access_token
            return await self._refresh(state.tokens)

    async def _refresh(self, record: TokenRecord) -> str:
        creds = await self.credentials.load()
        if not creds.configured:
            raise RefreshFailed("client credentials not configured")

        logger.info("Access token expired or expiring, refreshing")
        result = await self.youtube_api.refresh_access_token(
            record.refresh_token, creds.client_id, creds.client_secret
        )
        if not result.success or not result.access_token:
            raise RefreshFailed(result.error or "unknown_error")

        refreshed = record.with_access_token(
            result.access_token, self._clock() + timedelta(seconds=result.expires_in)
        )

        async with self.state.mutate() as state:
            if state.tokens is None:
                raise NotAuthenticated("Disconnected while the token was being refreshed")
            if state.tokens.refresh_token != record.refresh_token:
                # Re-authorized mid-refresh; the newer record wins
                logger.warning("Token record replaced during refresh, not overwriting it")
            else:
                state.tokens = refreshed

        logger.info(f"Access token refreshed, valid until {refreshed.expiry.isoformat()}")
        return refreshed.access_token

    async def exchange_code(
        self,
        code: str,
        client_id: str | None = None,
        client_secret: str | None = None,
    ) -> TokenRecord:
        """Trade an authorization code for a brand-new token record.

        Channel info is fetched with the new token on a best-effort basis; a
        failure there does not fail the exchange.
        """
        creds = await self.credentials.load()
        client_id = client_id or creds.client_id
        client_secret = client_secret or creds.client_secret
        if not client_id or not client_secret:
            raise ValidationError("OAuth client credentials not configured")

        result = await self.youtube_api.exchange_code_for_token(code, client_id, client_secret)
        if not result.success or not result.access_token:
            reason = result.error or "exchange_failed"
            raise UpstreamError(f"Token exchange failed: {reason}", reason=reason)

        channel = None
        try:
            channel = await self.youtube_api.get_channel_info(result.access_token)
        except UpstreamError as e:
            logger.warning(f"Could not fetch channel info: {e.message}")

        async with self.state.mutate() as state:
            refresh_token = result.refresh_token
            if not refresh_token and state.tokens is not None:
                # Google only sends a refresh token on the first consent
                refresh_token = state.tokens.refresh_token
            if not refresh_token:
                logger.warning("No refresh token granted; the session will end at expiry")
            record = TokenRecord(
                access_token=result.access_token,
                refresh_token=refresh_token or "",
                expiry=self._clock() + timedelta(seconds=result.expires_in),
            )
            state.tokens = record
            state.channel = channel

        logger.info(f"Connected channel: {channel.title if channel else 'unknown'}")
        return record

    async def disconnect(self) -> None:
        """Forget the token record and channel snapshot. Safe to call repeatedly."""
        async with self.state.mutate() as state:
            state.tokens = None
            state.channel = None
        logger.info("Disconnected from YouTube")
