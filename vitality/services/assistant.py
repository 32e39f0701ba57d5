import logging
from typing import Optional

from google.genai import types

from ..ai import prompts
from ..core.ai_client import AIClient, ai_client
from ..schemas import GenerationProfile, Language

logger = logging.getLogger("vitality.ai")

FALLBACK_REPLY = "The assistant is unavailable right now. Please try again shortly."


class AssistantSession:
    """Coaching chat that always answers in the profile's chosen language."""

    def __init__(
        self,
        profile: GenerationProfile,
        language: Language,
        history: Optional[list[dict]] = None,
        client: Optional[AIClient] = None,
    ):
        self.client = client or ai_client
        contents = [
            types.Content(role=turn["role"], parts=[types.Part.from_text(text=turn["text"])])
            for turn in history or []
        ]
        self._chat = self.client.start_chat(prompts.assistant_instruction(profile, language), history=contents)

    async def send(self, message: str) -> str:
        if self._chat is None:
            return FALLBACK_REPLY
        try:
            response = await self._chat.send_message(message)
        except Exception as e:
            logger.error(f"Assistant chat failed: {e}")
            return FALLBACK_REPLY
        return response.text or FALLBACK_REPLY
