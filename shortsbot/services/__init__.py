"""Services layer - Business logic

Services are initialized with their dependencies and accessed through
dependency injection (see ``shortsbot.core.dependencies``).
"""

from .channel_service import ChannelService
from .generation_api import GenerationAPIClient
from .scheduler import PostScheduler, build_publish_metadata, parse_tags
from .script_generator import LocalScriptWriter, ScriptGenerator, parse_generated_script
from .token_manager import REFRESH_BUFFER, TokenManager
from .video_service import VideoService
from .youtube_api import TokenResponse, YouTubeAPIClient

__all__ = [
    "REFRESH_BUFFER",
    "ChannelService",
    "GenerationAPIClient",
    "LocalScriptWriter",
    "PostScheduler",
    "ScriptGenerator",
    "TokenManager",
    "TokenResponse",
    "VideoService",
    "YouTubeAPIClient",
    "build_publish_metadata",
    "parse_generated_script",
    "parse_tags",
]
