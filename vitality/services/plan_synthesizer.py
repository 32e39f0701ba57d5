"""Structured plan synthesis.

Meal and workout plans are regenerated on every call and never cached.
Any payload that fails to parse or validate degrades to the canonical empty
result, which callers treat as "generation unavailable, retry".
"""

import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ..ai import prompts
from ..core.ai_client import AIClient, ai_client
from ..schemas import GenerationProfile, Language, MealPlanResult, WorkoutDay, WorkoutResult
from ..settings import settings

logger = logging.getLogger("vitality.plans")

_workout_days = TypeAdapter(list[WorkoutDay])


def parse_meal_plan(raw: Optional[str]) -> MealPlanResult:
    if not raw:
        return MealPlanResult.empty()
    try:
        plan = MealPlanResult.model_validate_json(raw)
    except ValidationError as e:
        logger.error(f"Meal plan payload rejected: {e.error_count()} validation error(s)")
        return MealPlanResult.empty()

    if not plan.days:
        logger.warning("Meal plan payload had no days")
        return MealPlanResult.empty()
    return plan


def parse_workout_plan(raw: Optional[str]) -> WorkoutResult:
    if not raw:
        return WorkoutResult()
    try:
        days = _workout_days.validate_json(raw)
    except ValidationError as e:
        logger.error(f"Workout payload rejected: {e.error_count()} validation error(s)")
        return WorkoutResult()
    return WorkoutResult(days=days)


async def synthesize_meal_plan(
    profile: GenerationProfile,
    language: Language,
    client: Optional[AIClient] = None,
) -> MealPlanResult:
    """Generate a multi-day meal plan and its prep strategy as one atomic result."""
    client = client or ai_client
    prompt = prompts.meal_plan_prompt(profile, language, settings.meal_plan_days)

    logger.info("Synthesizing meal plan goal=%s lang=%s", profile.goal.value, language.value)
    raw = await client.generate_json(prompt, response_schema=MealPlanResult, thinking_budget=0)
    return parse_meal_plan(raw)


async def synthesize_workout_plan(
    profile: GenerationProfile,
    language: Language,
    client: Optional[AIClient] = None,
) -> WorkoutResult:
    """Generate a split workout plan tailored to the profile's experience level."""
    if profile.experience_level is None:
        raise ValueError("Workout synthesis requires an experience level on the profile")

    client = client or ai_client
    prompt = prompts.workout_plan_prompt(profile, language, settings.workout_plan_days)

    logger.info(
        "Synthesizing workout plan goal=%s level=%s lang=%s",
        profile.goal.value, profile.experience_level.value, language.value,
    )
    raw = await client.generate_json(prompt, response_schema=list[WorkoutDay])
    return parse_workout_plan(raw)
