"""FastAPI dependencies for the Vitality API.

Provides:
- The generation client
- The per-process SessionContent (artifact caches + pipelines)
- The video job registry bound to that SessionContent
"""

from typing import Optional

from .core.ai_client import AIClient, ai_client
from .services.session_content import SessionContent
from .services.video_jobs import VideoJobRegistry

_content: Optional[SessionContent] = None
_video_jobs: Optional[VideoJobRegistry] = None


def get_ai_client() -> AIClient:
    return ai_client


def get_session_content() -> SessionContent:
    global _content
    if _content is None:
        _content = SessionContent.from_settings(client=ai_client)
    return _content


def get_video_jobs() -> VideoJobRegistry:
    global _video_jobs
    if _video_jobs is None:
        _video_jobs = VideoJobRegistry(get_session_content())
    return _video_jobs
