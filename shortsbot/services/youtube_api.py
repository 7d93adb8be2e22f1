"""Google OAuth + YouTube Data API client.

The client is stateless apart from its shared HTTP connection pool: token
storage and refresh policy live in ``TokenManager``. Client credentials are
passed per call because the operator can change them at runtime.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from shortsbot.core.errors import UpstreamError
from shortsbot.models import ChannelInfo

logger = logging.getLogger(__name__)

OAUTH_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"

# Google access tokens live one hour; used when a reply omits expires_in
DEFAULT_EXPIRES_IN = 3600


@dataclass
class TokenResponse:
    """Result of a code exchange or refresh call against the token endpoint."""

    success: bool
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int = 0
    error: str | None = None


class YouTubeAPIClient:
    """Client for Google's token endpoint and the YouTube channels API.

    Manages a shared httpx client for connection reuse.
    """

    SCOPES = [
        "https://www.googleapis.com/auth/youtube.upload",
        "https://www.googleapis.com/auth/youtube.readonly",
    ]

    def __init__(
        self,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.redirect_uri = redirect_uri

        # Shared HTTP client: reuses TCP connections across requests
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # OAuth flow
    # ------------------------------------------------------------------

    def generate_oauth_url(self, client_id: str) -> str:
        """Build the Google consent URL requesting offline access."""
        params = {
            "client_id": client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{OAUTH_AUTHORIZE_URL}?{urlencode(params)}"

    async def _post_token(self, data: dict[str, str], action: str) -> TokenResponse:
        """POST to the token endpoint. Transport failures raise ``UpstreamError``;
        an error payload from Google is returned as an unsuccessful response."""
        try:
            response = await self._http.post(OAUTH_TOKEN_URL, data=data)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during token {action}")
            raise UpstreamError(f"Token {action} timed out", reason="timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error during token {action}: {type(e).__name__}: {e}")
            raise UpstreamError(f"Token {action} failed: {e}", reason="network_error") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.status_code != 200 or "error" in payload:
            error = payload.get("error") or f"HTTP {response.status_code}"
            logger.error(f"Token {action} rejected: {error}")
            return TokenResponse(success=False, error=str(error))

        access_token = payload.get("access_token")
        if not access_token:
            logger.error(f"No access_token in {action} response")
            return TokenResponse(success=False, error="no_access_token")

        try:
            expires_in = int(payload.get("expires_in", DEFAULT_EXPIRES_IN))
        except (TypeError, ValueError):
            expires_in = 0
        if expires_in <= 0:
            logger.error(f"Invalid expires_in in {action} response: {payload.get('expires_in')!r}")
            return TokenResponse(success=False, error="invalid_response")

        return TokenResponse(
            success=True,
            access_token=access_token,
            refresh_token=payload.get("refresh_token"),
            expires_in=expires_in,
        )

    async def exchange_code_for_token(
        self, code: str, client_id: str, client_secret: str
    ) -> TokenResponse:
        """Exchange an authorization code for an access/refresh token pair."""
        return await self._post_token(
            {
                "code": code,
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            "exchange",
        )

    async def refresh_access_token(
        self, refresh_token: str, client_id: str, client_secret: str
    ) -> TokenResponse:
        """Obtain a new access token. Any refresh token in the reply is ignored upstream."""
        return await self._post_token(
            {
                "refresh_token": refresh_token,
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "refresh_token",
            },
            "refresh",
        )

    # ------------------------------------------------------------------
    # Channel data
    # ------------------------------------------------------------------

    async def get_channel_info(self, access_token: str) -> ChannelInfo | None:
        """Fetch the authorized user's own channel. None if the account has no channel."""
        try:
            response = await self._http.get(
                f"{YOUTUBE_API_BASE}/channels",
                params={"part": "snippet,statistics", "mine": "true"},
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Channel fetch failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"Channel fetch failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Channel fetch returned HTTP {response.status_code}")
            raise UpstreamError(f"Channel fetch returned HTTP {response.status_code}")

        try:
            items = response.json().get("items", [])
            if not items:
                logger.warning("Authorized account has no YouTube channel")
                return None
            return parse_channel(items[0])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Malformed channel response: {type(e).__name__}: {e}")
            raise UpstreamError("Channel fetch returned a malformed response") from e


def parse_channel(item: dict) -> ChannelInfo:
    """Map a ``channels`` resource to ``ChannelInfo``."""
    snippet = item.get("snippet", {})
    statistics = item.get("statistics", {})
    title = snippet.get("title", "")
    thumbnail = snippet.get("thumbnails", {}).get("default", {}).get("url")
    return ChannelInfo(
        id=item["id"],
        title=title,
        handle=snippet.get("customUrl") or f"@{title}",
        thumbnail_url=thumbnail,
        subscriber_count=int(statistics.get("subscriberCount", 0)),
        view_count=int(statistics.get("viewCount", 0)),
        video_count=int(statistics.get("videoCount", 0)),
    )
