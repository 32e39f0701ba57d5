from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.ai_client import AIClient
from ..deps import get_ai_client
from ..schemas import GenerationProfile, Language
from ..services.assistant import AssistantSession
from ..settings import settings as app_settings

router = APIRouter(prefix="/ai")


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class AssistantChatRequest(BaseModel):
    profile: GenerationProfile
    language: Language = Language.EN
    message: str
    history: Optional[list[ChatTurn]] = None


class AssistantChatResponse(BaseModel):
    reply: str


@router.get("/status")
def get_ai_status(client: AIClient = Depends(get_ai_client)):
    """Debug endpoint for AI availability."""
    return {
        "ai_mode": app_settings.ai_mode,
        "available": client.is_available(),
        "model_text": app_settings.gemini_text_model,
        "model_grounding": app_settings.gemini_grounding_model,
        "model_image": app_settings.gemini_image_model,
        "model_video": app_settings.gemini_video_model,
        "has_api_key": bool(app_settings.gemini_api_key),
        "last_error": client.last_error,
        "last_error_at": client.last_error_at,
    }


@router.post("/assistant/chat", response_model=AssistantChatResponse)
async def assistant_chat(payload: AssistantChatRequest, client: AIClient = Depends(get_ai_client)):
    history = [turn.model_dump() for turn in payload.history or []]
    session = AssistantSession(payload.profile, payload.language, history=history, client=client)
    return AssistantChatResponse(reply=await session.send(payload.message))
