"""Channel statistics route"""

import logging

from fastapi import APIRouter, Depends

from shortsbot.core.dependencies import get_channel_service
from shortsbot.services import ChannelService

from .schemas import ChannelResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["channel"])


@router.get("/channel", response_model=ChannelResponse | None)
async def get_channel(
    channel_service: ChannelService = Depends(get_channel_service),
) -> ChannelResponse | None:
    """Fetch fresh channel statistics (401 when not connected)"""
    channel = await channel_service.refresh_channel()
    return ChannelResponse.model_validate(channel) if channel else None
