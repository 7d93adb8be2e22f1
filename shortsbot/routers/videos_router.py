"""Video draft routes: generate, list, delete, schedule"""

import logging

from fastapi import APIRouter, Depends

from shortsbot.core.dependencies import get_drafts, get_scheduler, get_video_service
from shortsbot.repositories import VideoDraftRepository
from shortsbot.services import PostScheduler, VideoService

from .schemas import GenerateRequest, SuccessResponse, VideoEnvelope, VideoResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["videos"])


@router.post("/generate", response_model=VideoEnvelope)
async def generate_video(
    body: GenerateRequest,
    video_service: VideoService = Depends(get_video_service),
) -> VideoEnvelope:
    """Generate a script and store it as a new draft"""
    draft = await video_service.generate_draft(
        topic=body.topic,
        tone=body.tone,
        length=body.length,
        schedule_for=body.schedule_for,
    )
    return VideoEnvelope(video=VideoResponse.model_validate(draft))


@router.get("/videos", response_model=list[VideoResponse])
async def list_videos(
    drafts: VideoDraftRepository = Depends(get_drafts),
) -> list[VideoResponse]:
    """All drafts, newest first"""
    return [VideoResponse.model_validate(v) for v in await drafts.list()]


@router.delete("/videos/{video_id}", response_model=SuccessResponse)
async def delete_video(
    video_id: str,
    drafts: VideoDraftRepository = Depends(get_drafts),
) -> SuccessResponse:
    """Delete a draft; unknown ids succeed too"""
    await drafts.delete(video_id)
    return SuccessResponse()


@router.post("/videos/{video_id}/schedule", response_model=VideoEnvelope)
async def schedule_video(
    video_id: str,
    scheduler: PostScheduler = Depends(get_scheduler),
) -> VideoEnvelope:
    """Finalize publish metadata for a draft"""
    draft = await scheduler.schedule_post(video_id)
    return VideoEnvelope(video=VideoResponse.model_validate(draft))
