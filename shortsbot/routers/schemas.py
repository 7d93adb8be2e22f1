"""Request / response models shared by the routers

JSON on the wire is camelCase, the contract the web client was written
against. Request bodies also accept the snake_case field names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    success: bool = True


class ChannelResponse(CamelModel):
    id: str
    title: str
    handle: str
    thumbnail_url: str | None
    subscriber_count: int
    view_count: int
    video_count: int


class PublishMetadataResponse(CamelModel):
    title: str
    description: str
    tags: list[str]
    category_id: str
    privacy_status: str


class VideoResponse(CamelModel):
    id: str
    topic: str
    tone: str
    length: int
    title: str
    hook: str
    script: str
    hashtags: str
    status: str
    emoji: str
    created_at: datetime
    scheduled_for: str | None
    scheduled_at: datetime | None
    error: str | None
    publish_metadata: PublishMetadataResponse | None


class VideoEnvelope(CamelModel):
    success: bool = True
    video: VideoResponse


class StatusResponse(CamelModel):
    configured: bool
    connected: bool
    channel: ChannelResponse | None
    video_count: int


class SetupRequest(CamelModel):
    client_id: str | None = None
    client_secret: str | None = None
    generation_api_key: str | None = Field(default=None, alias="claudeApiKey")


class GenerateRequest(CamelModel):
    topic: str = ""
    tone: str = "Engaging"
    length: int = Field(default=60, description="Target video length in seconds")
    schedule_for: str | None = None
