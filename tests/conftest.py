import json
import os

# Force mock mode before the settings singleton is built.
os.environ["AI_MODE"] = "mock"
os.environ["CACHE_BACKEND"] = "memory"

from unittest.mock import MagicMock

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient

from vitality.core.ai_client import AIClient
from vitality.infra import redis_client


@pytest.fixture(autouse=True)
def mock_redis():
    server = fakeredis.FakeServer()
    redis_client._redis_async = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    yield
    redis_client._redis_async = None


@pytest.fixture
def fake_client():
    """AIClient double: every async transport call is an AsyncMock."""
    client = MagicMock(spec=AIClient)
    client.api_key = "test-key"
    client.mode = "gemini"
    client.last_error = None
    client.last_error_at = None
    client.is_available.return_value = True
    return client


@pytest.fixture
def app_client():
    from vitality.main import app
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_meal(name: str, calories: float = 500, protein: float = 40, carbs: float = 50, fats: float = 15) -> dict:
    return {
        "name": name,
        "calories": calories,
        "protein": protein,
        "carbs": carbs,
        "fats": fats,
        "ingredients": ["ingredient a", "ingredient b"],
        "prepInstructions": "Cook it.",
        "prepTime": "20 min",
        "substitution": {
            "productName": "Formula 1 Shake",
            "benefits": "Fast protein",
            "instructions": "Blend with water",
        },
    }


def make_meal_plan(days: int = 3) -> dict:
    return {
        "days": [
            {
                "day": f"Day {i + 1}",
                "breakfast": make_meal("Oat Bowl", 400, 20, 60, 10),
                "lunch": make_meal("Chicken Quinoa", 600, 50, 55, 15),
                "dinner": make_meal("Grilled Salmon", 650, 45, 30, 30),
                "snacks": [make_meal("Greek Yogurt", 150, 15, 10, 4)],
                "supplementProtocol": [{"product": "Creatine", "timing": "Morning", "purpose": "Strength"}],
            }
            for i in range(days)
        ],
        "prepStrategy": {
            "batchPrepTasks": ["Cook quinoa for 3 days"],
            "storageTips": ["Refrigerate in glass containers"],
            "shoppingList": [{"item": "Salmon", "amount": "600 g", "category": "Protein"}],
        },
    }


@pytest.fixture
def meal_plan_payload() -> str:
    return json.dumps(make_meal_plan())


@pytest.fixture
def profile():
    from vitality.schemas import GenerationProfile
    return GenerationProfile(
        name="Alex",
        age=31,
        weight=85,
        height=182,
        goal="Muscle Gain",
        activity_level="Active",
        dietary_preference="No shellfish",
        location="Austin, TX",
        experience_level="Intermediate",
    )
