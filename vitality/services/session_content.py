"""Per-session access to visual assets for named entities.

Meal images and exercise videos are cached by name; a miss invokes the image
pipeline or the media operation manager and stores the result before
returning it.
"""

import logging
from typing import Optional

from ..core.ai_client import AIClient, ai_client
from ..infra.redis_cache import RedisArtifactStore
from ..settings import settings
from .content_cache import SessionContentCache
from .image_pipeline import edit_image, synthesize_image
from .media_operations import CancelToken, MediaOperationManager, ProgressCallback

logger = logging.getLogger("vitality.cache")


class SessionContent:
    def __init__(
        self,
        client: Optional[AIClient] = None,
        images: Optional[SessionContentCache] = None,
        videos: Optional[SessionContentCache] = None,
        media: Optional[MediaOperationManager] = None,
    ):
        self.client = client or ai_client
        self.images = images or SessionContentCache(name="images")
        self.videos = videos or SessionContentCache(name="videos")
        self.media = media or MediaOperationManager(client=self.client)

    @classmethod
    def from_settings(cls, client: Optional[AIClient] = None) -> "SessionContent":
        if settings.cache_backend == "redis":
            images = SessionContentCache(RedisArtifactStore("images"), name="images")
            videos = SessionContentCache(RedisArtifactStore("videos"), name="videos")
        else:
            images = videos = None
        return cls(client=client, images=images, videos=videos)

    async def meal_image(self, name: str) -> str:
        return await self.images.get_or_create(name, lambda: synthesize_image(name, client=self.client))

    async def edit_meal_image(self, name: str, instruction: str, current: Optional[str] = None) -> str:
        """Edit the image cached for `name` and make the result the cached value.

        Callers propagate the returned locator to their plans
        (see schemas.apply_meal_image).
        """
        current = current or await self.images.get(name)
        if not current:
            logger.warning("No image to edit for %r", name)
            return ""

        edited = await edit_image(current, instruction, client=self.client)
        if edited != current:
            await self.images.replace(name, edited)
        return edited

    async def exercise_video(
        self,
        name: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
    ) -> str:
        # Progress and cancellation belong to the caller that started the
        # generation: cancelling its token fails every caller joined on `name`,
        # and tokens passed by joined callers are ignored.
        return await self.videos.get_or_create(name, lambda: self.media.run(name, on_progress, cancel))
