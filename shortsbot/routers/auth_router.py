"""YouTube OAuth routes"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from shortsbot.core.config import Settings
from shortsbot.core.dependencies import get_settings_dep, get_token_manager
from shortsbot.core.errors import ShortsBotError, UpstreamError, ValidationError
from shortsbot.services import TokenManager

from .schemas import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _frontend_redirect(settings: Settings, query: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.frontend_url.rstrip('/')}/?{query}")


def _error_redirect(settings: Settings, reason: str) -> RedirectResponse:
    return _frontend_redirect(settings, f"auth=error&reason={quote(reason, safe='')}")


@router.get("/connect")
async def connect(
    token_manager: TokenManager = Depends(get_token_manager),
) -> RedirectResponse:
    """Redirect the browser to Google's consent screen"""
    oauth_url = await token_manager.authorization_url()
    return RedirectResponse(url=oauth_url, status_code=302)


@router.get("/callback")
async def oauth_callback(
    code: str | None = None,
    error: str | None = None,
    token_manager: TokenManager = Depends(get_token_manager),
    settings: Settings = Depends(get_settings_dep),
) -> RedirectResponse:
    """Handle Google OAuth callback"""
    if error:
        logger.error(f"OAuth error from Google: {error}")
        return _error_redirect(settings, error)

    if not code:
        logger.error("No OAuth code received from Google")
        return _error_redirect(settings, "no_code")

    try:
        await token_manager.exchange_code(code)
    except UpstreamError as e:
        logger.error(f"Failed to exchange code: {e.reason}")
        return _error_redirect(settings, e.reason)
    except ValidationError as e:
        logger.error(f"Cannot exchange code: {e.message}")
        return _error_redirect(settings, "not_configured")
    except ShortsBotError as e:
        logger.error(f"Failed to exchange code: {e.message}")
        return _error_redirect(settings, "exchange_failed")

    return _frontend_redirect(settings, "auth=success")


@router.post("/disconnect", response_model=SuccessResponse)
async def disconnect(
    token_manager: TokenManager = Depends(get_token_manager),
) -> SuccessResponse:
    """Forget the stored tokens and channel"""
    await token_manager.disconnect()
    return SuccessResponse()
