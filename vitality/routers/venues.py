from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..core.ai_client import AIClient
from ..deps import get_ai_client
from ..schemas import Coordinates, Goal, Language, Venue
from ..services.venue_resolver import resolve_venues

router = APIRouter()


class VenueRequest(BaseModel):
    location: str
    goal: Goal
    language: Language = Language.EN
    coords: Optional[Coordinates] = None


@router.post("/venues", response_model=list[Venue])
async def find_venues(payload: VenueRequest, client: AIClient = Depends(get_ai_client)):
    """Discover venues; an empty list means discovery was unavailable."""
    return await resolve_venues(
        payload.location,
        payload.goal,
        payload.language,
        coords=payload.coords,
        client=client,
    )
