"""Tests for the Google OAuth / YouTube Data API client."""

import httpx
import pytest

from shortsbot.core.errors import UpstreamError
from shortsbot.services.youtube_api import YouTubeAPIClient, parse_channel


@pytest.fixture
async def youtube_api(upstream):
    client = YouTubeAPIClient("http://shortsbot.test/auth/callback", transport=upstream.transport())
    yield client
    await client.close()


class TestParseChannel:
    def test_maps_snippet_and_statistics(self, upstream):
        channel = parse_channel(upstream.channel_items[0])

        assert channel.id == "UC123"
        assert channel.handle == "@cookingdaily"
        assert channel.thumbnail_url == "https://img.example/cd.jpg"
        assert channel.subscriber_count == 1200
        assert channel.view_count == 45000
        assert channel.video_count == 31

    def test_handle_falls_back_to_title(self):
        channel = parse_channel({"id": "UC9", "snippet": {"title": "Bakes"}, "statistics": {}})

        assert channel.handle == "@Bakes"
        assert channel.thumbnail_url is None
        assert channel.subscriber_count == 0


class TestTokenEndpoint:
    async def test_exchange_sends_authorization_code_grant(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            return httpx.Response(
                200, json={"access_token": "a", "refresh_token": "r", "expires_in": 3599}
            )

        client = YouTubeAPIClient("http://cb", transport=httpx.MockTransport(handler))
        result = await client.exchange_code_for_token("the-code", "cid", "secret")
        await client.close()

        assert result.success
        assert (result.access_token, result.refresh_token, result.expires_in) == ("a", "r", 3599)
        assert "grant_type=authorization_code" in seen["body"]
        assert "code=the-code" in seen["body"]
        assert "redirect_uri=http%3A%2F%2Fcb" in seen["body"]

    async def test_refresh_error_payload(self, youtube_api, upstream):
        upstream.refresh_error = "invalid_grant"

        result = await youtube_api.refresh_access_token("r", "cid", "secret")

        assert not result.success
        assert result.error == "invalid_grant"

    async def test_refresh_transport_error_raises(self, youtube_api, upstream):
        upstream.refresh_network_error = True

        with pytest.raises(UpstreamError):
            await youtube_api.refresh_access_token("r", "cid", "secret")

    async def test_reply_without_access_token(self):
        client = YouTubeAPIClient(
            "http://cb",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
        )
        result = await client.refresh_access_token("r", "cid", "secret")
        await client.close()

        assert not result.success
        assert result.error == "no_access_token"

    async def test_missing_expires_in_defaults_to_one_hour(self):
        client = YouTubeAPIClient(
            "http://cb",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"access_token": "a"})
            ),
        )
        result = await client.refresh_access_token("r", "cid", "secret")
        await client.close()

        assert result.success
        assert result.expires_in == 3600

    async def test_unparseable_expires_in(self, youtube_api, upstream):
        upstream.refresh_payload = {"access_token": "a", "expires_in": "soon"}

        result = await youtube_api.refresh_access_token("r", "cid", "secret")

        assert not result.success
        assert result.error == "invalid_response"


class TestGetChannelInfo:
    async def test_returns_own_channel(self, youtube_api, upstream):
        channel = await youtube_api.get_channel_info("token")

        assert channel.title == "Cooking Daily"
        assert upstream.channel_calls == 1

    async def test_no_channel(self, youtube_api, upstream):
        upstream.channel_items = []
        assert await youtube_api.get_channel_info("token") is None

    async def test_http_error_raises(self, youtube_api, upstream):
        upstream.channel_status = 401
        with pytest.raises(UpstreamError):
            await youtube_api.get_channel_info("token")

    @pytest.mark.parametrize(
        "body",
        ["<html>oops</html>", '{"items": [{"snippet": {"title": "x"}}]}', "[1, 2]"],
    )
    async def test_malformed_reply_raises(self, youtube_api, upstream, body):
        upstream.channel_body = body
        with pytest.raises(UpstreamError):
            await youtube_api.get_channel_info("token")
