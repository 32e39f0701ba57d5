import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from google import genai
from google.genai import types

from ..ai.utils import InlineImage, normalize_model_id
from ..schemas import Coordinates
from ..settings import settings

logger = logging.getLogger("vitality.ai")


class GenerationError(Exception):
    """The generation backend could not be reached or rejected the call."""


@dataclass
class GroundedText:
    text: str
    chunks: list[dict] = field(default_factory=list)


class AIClient:
    """Transport to the Gemini backend. Owns no business logic.

    Structured, grounded and image calls return None when the backend is
    unavailable or fails; long-running video calls raise GenerationError.
    """

    _instance = None

    def __init__(self, api_key: Optional[str] = None, mode: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.mode = (mode or settings.ai_mode).lower()  # "mock" or "gemini"
        self._client: Optional[genai.Client] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

        if self.mode == "gemini" and self.api_key:
            self._client = genai.Client(api_key=self.api_key)

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_available(self) -> bool:
        return self.mode == "gemini" and self._client is not None

    def _record_error(self, e: Exception) -> None:
        self.last_error = f"{e.__class__.__name__}: {str(e)}"
        self.last_error_at = datetime.now(timezone.utc)

    async def generate_json(
        self,
        prompt: str,
        response_schema: Any = None,
        model: Optional[str] = None,
        thinking_budget: Optional[int] = None,
    ) -> Optional[str]:
        """
        Structured generation. Returns the raw response text (expected JSON),
        or None if AI is unavailable or the call fails.
        """
        if not self.is_available():
            logger.warning("AI is not available (mode=%s), skipping structured generation", self.mode)
            return None

        model_id = normalize_model_id(model or settings.gemini_text_model)
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
            thinking_config=types.ThinkingConfig(thinking_budget=thinking_budget) if thinking_budget is not None else None,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            self._record_error(e)
            logger.error(f"Gemini structured generation failed with model {model_id}: {e}")
            return None

        if not response.text:
            logger.warning("Gemini returned empty response from model %s", model_id)
            return None
        return response.text

    async def generate_grounded(
        self,
        prompt: str,
        coords: Optional[Coordinates] = None,
        model: Optional[str] = None,
    ) -> Optional[GroundedText]:
        """Free-text generation grounded on Maps and Search, biased by coords when given."""
        if not self.is_available():
            logger.warning("AI is not available (mode=%s), skipping grounded generation", self.mode)
            return None

        model_id = normalize_model_id(model or settings.gemini_grounding_model)
        tool_config = None
        if coords is not None:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(latitude=coords.latitude, longitude=coords.longitude)
                )
            )
        config = types.GenerateContentConfig(
            tools=[
                types.Tool(google_maps=types.GoogleMaps()),
                types.Tool(google_search=types.GoogleSearch()),
            ],
            tool_config=tool_config,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            self._record_error(e)
            logger.error(f"Gemini grounded generation failed with model {model_id}: {e}")
            return None

        chunks: list[dict] = []
        if response.candidates:
            metadata = response.candidates[0].grounding_metadata
            for chunk in getattr(metadata, "grounding_chunks", None) or []:
                chunks.append(chunk.model_dump(mode="json", exclude_none=True))

        return GroundedText(text=response.text or "", chunks=chunks)

    async def generate_image(
        self,
        prompt: str,
        source: Optional[InlineImage] = None,
        aspect_ratio: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Optional[InlineImage]:
        """
        Generate an image, or edit `source` when given.
        Returns the first inline image of the response, or None.
        """
        if not self.is_available():
            logger.warning("AI is not available, skipping image generation")
            return None

        model_id = normalize_model_id(model or settings.gemini_image_model)
        parts = []
        if source is not None:
            parts.append(types.Part.from_bytes(data=source.data, mime_type=source.mime_type))
        parts.append(types.Part.from_text(text=prompt))

        config = None
        if aspect_ratio:
            config = types.GenerateContentConfig(image_config=types.ImageConfig(aspect_ratio=aspect_ratio))

        try:
            logger.info(f"Generating image with model={model_id} prompt='{prompt[:50]}...'")
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=types.Content(role="user", parts=parts),
                config=config,
            )
        except Exception as e:
            self._record_error(e)
            logger.error(f"Image generation failed: {e}")
            return None

        if response.candidates and response.candidates[0].content and response.candidates[0].content.parts:
            for part in response.candidates[0].content.parts:
                if part.inline_data and part.inline_data.data:
                    # inline_data.data is bytes in most SDK versions, or base64 string
                    data = part.inline_data.data
                    if isinstance(data, str):
                        data = base64.b64decode(data)
                    return InlineImage(mime_type=part.inline_data.mime_type or "image/png", data=data)

        logger.warning("Gemini returned no image data")
        return None

    async def start_video(self, prompt: str, model: Optional[str] = None) -> types.GenerateVideosOperation:
        if not self.is_available():
            raise GenerationError(f"AI is not available (mode={self.mode})")

        model_id = normalize_model_id(model or settings.gemini_video_model)
        try:
            return await self._client.aio.models.generate_videos(
                model=model_id,
                prompt=prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=settings.video_resolution,
                    aspect_ratio=settings.video_aspect_ratio,
                ),
            )
        except Exception as e:
            self._record_error(e)
            raise GenerationError(f"Video submission failed: {e}") from e

    async def poll_video(self, operation: types.GenerateVideosOperation) -> types.GenerateVideosOperation:
        if not self.is_available():
            raise GenerationError(f"AI is not available (mode={self.mode})")
        try:
            return await self._client.aio.operations.get(operation)
        except Exception as e:
            self._record_error(e)
            raise GenerationError(f"Video status call failed: {e}") from e

    def start_chat(self, system_instruction: str, history: Optional[list[types.Content]] = None, model: Optional[str] = None):
        """Open a chat session, or None if AI is unavailable."""
        if not self.is_available():
            return None
        return self._client.aio.chats.create(
            model=normalize_model_id(model or settings.gemini_text_model),
            config=types.GenerateContentConfig(system_instruction=system_instruction),
            history=history or [],
        )


# Singleton instance access
ai_client = AIClient.get_instance()
