"""Setup status and credential configuration routes"""

import logging

from fastapi import APIRouter, Depends

from shortsbot.core.dependencies import (
    get_channel_service,
    get_credentials,
    get_drafts,
    get_token_manager,
)
from shortsbot.repositories import CredentialStore, VideoDraftRepository
from shortsbot.services import ChannelService, TokenManager

from .schemas import ChannelResponse, SetupRequest, StatusResponse, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["setup"])


@router.get("/status", response_model=StatusResponse)
async def get_status(
    credentials: CredentialStore = Depends(get_credentials),
    token_manager: TokenManager = Depends(get_token_manager),
    channel_service: ChannelService = Depends(get_channel_service),
    drafts: VideoDraftRepository = Depends(get_drafts),
) -> StatusResponse:
    """Whether credentials are configured, the channel is connected, and how many drafts exist"""
    creds = await credentials.load()
    channel = await channel_service.cached_channel()
    return StatusResponse(
        configured=creds.configured,
        connected=await token_manager.is_connected(),
        channel=ChannelResponse.model_validate(channel) if channel else None,
        video_count=await drafts.count(),
    )


@router.post("/setup", response_model=SuccessResponse)
async def save_setup(
    body: SetupRequest,
    credentials: CredentialStore = Depends(get_credentials),
) -> SuccessResponse:
    """Save OAuth client credentials and the generation API key"""
    await credentials.update(
        client_id=body.client_id,
        client_secret=body.client_secret,
        generation_api_key=body.generation_api_key,
    )
    return SuccessResponse()
