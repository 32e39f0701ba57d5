from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.ai_client import AIClient
from ..deps import get_ai_client
from ..schemas import GenerationProfile, Language, MacroTargets, MealPlanResult, WorkoutResult
from ..services.plan_synthesizer import synthesize_meal_plan, synthesize_workout_plan
from ..services.targets import daily_macro_targets

router = APIRouter(prefix="/plans")


class PlanRequest(BaseModel):
    profile: GenerationProfile
    language: Language = Language.EN


@router.post("/meals", response_model=MealPlanResult)
async def create_meal_plan(payload: PlanRequest, client: AIClient = Depends(get_ai_client)):
    """Generate a fresh meal plan. `available: false` means generation was unavailable; retry."""
    return await synthesize_meal_plan(payload.profile, payload.language, client=client)


@router.post("/workouts", response_model=WorkoutResult)
async def create_workout_plan(payload: PlanRequest, client: AIClient = Depends(get_ai_client)):
    try:
        return await synthesize_workout_plan(payload.profile, payload.language, client=client)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/targets", response_model=MacroTargets)
def get_macro_targets(payload: PlanRequest):
    return daily_macro_targets(payload.profile)
