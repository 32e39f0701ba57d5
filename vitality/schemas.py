"""Pydantic schemas for the Vitality content layer.

Contracts for:
- Generation parameters (profile, goal, language)
- Meal plans and prep strategy
- Workout plans
- Venues and grounding links

Field names are snake_case in Python and camelCase on the wire, matching
the JSON the generation backend is asked to produce.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Generation parameters ---

class Language(str, Enum):
    EN = "en"
    RU = "ru"
    ES = "es"

    @property
    def display_name(self) -> str:
        return {"en": "English", "ru": "Russian", "es": "Spanish"}[self.value]


class Goal(str, Enum):
    WEIGHT_LOSS = "Weight Loss"
    MUSCLE_GAIN = "Muscle Gain"
    MAINTENANCE = "Maintenance"
    ATHLETIC_PERFORMANCE = "Athletic Performance"


class ActivityLevel(str, Enum):
    SEDENTARY = "Sedentary"
    MODERATE = "Moderate"
    ACTIVE = "Active"
    VERY_ACTIVE = "Very Active"


class ExperienceLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class GenerationProfile(ContractModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    age: int = Field(..., ge=0)
    weight: float = Field(..., gt=0)  # kg
    height: float = Field(..., gt=0)  # cm
    goal: Goal
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    dietary_preference: str = ""
    location: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    language: Language = Language.EN

    def prompt_context(self) -> dict:
        """Profile attributes embedded into generation prompts."""
        return self.model_dump(mode="json", by_alias=True, exclude={"language"}, exclude_none=True)


# --- Meal plan ---

class MealSubstitution(ContractModel):
    product_name: str
    benefits: str
    instructions: str


class Meal(ContractModel):
    name: str
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fats: float = Field(..., ge=0)
    ingredients: list[str]
    prep_instructions: str
    prep_time: str
    image_url: Optional[str] = None
    substitution: Optional[MealSubstitution] = None


class SupplementEntry(ContractModel):
    product: str = ""
    timing: str = ""
    purpose: str = ""


class MacroTotals(ContractModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0


class DayPlan(ContractModel):
    day: str
    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: list[Meal] = []
    supplement_protocol: list[SupplementEntry] = []

    def meals(self) -> list[Meal]:
        return [self.breakfast, self.lunch, self.dinner, *self.snacks]

    def totals(self) -> MacroTotals:
        totals = MacroTotals()
        for meal in self.meals():
            totals.calories += meal.calories
            totals.protein += meal.protein
            totals.carbs += meal.carbs
            totals.fats += meal.fats
        return totals


class ShoppingItem(ContractModel):
    item: str
    amount: str
    category: str


class PrepStrategy(ContractModel):
    batch_prep_tasks: list[str]
    storage_tips: list[str]
    shopping_list: list[ShoppingItem]


class MealPlanResult(ContractModel):
    days: list[DayPlan]
    prep_strategy: PrepStrategy

    @classmethod
    def empty(cls) -> "MealPlanResult":
        return cls(days=[], prep_strategy=PrepStrategy(batch_prep_tasks=[], storage_tips=[], shopping_list=[]))

    @computed_field
    @property
    def available(self) -> bool:
        return bool(self.days)


def apply_meal_image(plan: MealPlanResult, meal_name: str, locator: str) -> MealPlanResult:
    """Copy of `plan` where every meal called `meal_name` carries `locator`."""

    def swap(meal: Meal) -> Meal:
        if meal.name == meal_name:
            return meal.model_copy(update={"image_url": locator})
        return meal

    days = [
        day.model_copy(update={
            "breakfast": swap(day.breakfast),
            "lunch": swap(day.lunch),
            "dinner": swap(day.dinner),
            "snacks": [swap(s) for s in day.snacks],
        })
        for day in plan.days
    ]
    return plan.model_copy(update={"days": days})


# --- Workout plan ---

class Intensity(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    ELITE = "Elite"


class Exercise(ContractModel):
    name: str
    sets: int = Field(..., ge=0)
    reps: str
    target_muscles: list[str]
    coaching_cue: str
    description: str
    intensity: Intensity


class WorkoutDay(ContractModel):
    day_title: str
    focus: str
    exercises: list[Exercise]
    estimated_duration: str


class WorkoutResult(ContractModel):
    days: list[WorkoutDay] = []

    @computed_field
    @property
    def available(self) -> bool:
        return bool(self.days)


# --- Venues ---

class GroundingLink(ContractModel):
    uri: str
    title: str = "View Source"


class Venue(ContractModel):
    name: str
    address: str = ""
    rating: float = 0
    distance: float = 0  # miles
    amenities: list[str] = []
    highlights: str = ""
    uri: str = ""
    lat: float
    lng: float
    grounding_links: list[GroundingLink] = []


class ExtractedVenue(ContractModel):
    """Shape requested from the extraction pass; coordinates are checked separately."""

    name: str
    address: str
    rating: float
    distance: float
    amenities: list[str]
    highlights: str
    uri: str
    lat: float
    lng: float


class Coordinates(ContractModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class MacroTargets(ContractModel):
    protein: int
    carbs: int
    fats: int
