from typing import Optional

from ...config import Settings
from .static_link_provider import StaticLinkVideoProvider
from .stream_provider import StreamVideoProvider


def build_stream_provider(settings: Settings) -> Optional[StreamVideoProvider]:
    if not settings.video_provider_configured:
        return None
    return StreamVideoProvider(
        api_key=settings.STREAM_API_KEY,
        api_secret=settings.STREAM_API_SECRET,
        frontend_url=settings.FRONTEND_URL,
        base_url=settings.STREAM_BASE_URL,
        timeout_sec=settings.VIDEO_PROVIDER_TIMEOUT_SEC,
    )


def build_video_providers(settings: Settings):
    """Return ``(primary, fallback)``; primary is the static link when Stream is unconfigured."""
    fallback = StaticLinkVideoProvider(settings.MEET_LINK)
    return build_stream_provider(settings) or fallback, fallback
