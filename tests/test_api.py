import json
import asyncio

from conftest import make_meal_plan
from vitality.ai.utils import InlineImage
from vitality.core.ai_client import GroundedText
from vitality.deps import get_ai_client, get_session_content, get_video_jobs
from vitality.main import app
from vitality.services.media_operations import MediaOperationManager
from vitality.services.session_content import SessionContent
from vitality.services.video_jobs import VideoJobRegistry

PROFILE = {
    "age": 30,
    "weight": 85,
    "height": 180,
    "goal": "Muscle Gain",
    "activityLevel": "Active",
    "experienceLevel": "Beginner",
}


def test_ready(app_client):
    response = app_client.get("/api/ready")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_ai_status_in_mock_mode(app_client):
    response = app_client.get("/api/ai/status")
    assert response.status_code == 200
    data = response.json()
    assert data["ai_mode"] == "mock"
    assert data["available"] is False


def test_meal_plan_endpoint_returns_camel_case_plan(app_client, fake_client):
    fake_client.generate_json.return_value = json.dumps(make_meal_plan())
    app.dependency_overrides[get_ai_client] = lambda: fake_client

    response = app_client.post("/api/plans/meals", json={"profile": PROFILE, "language": "ru"})

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is True
    assert len(data["days"]) == 3
    assert data["days"][0]["breakfast"]["prepTime"] == "20 min"
    assert "Russian" in fake_client.generate_json.call_args.args[0]


def test_meal_plan_endpoint_degrades_in_mock_mode(app_client):
    response = app_client.post("/api/plans/meals", json={"profile": PROFILE})

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["days"] == []
    assert data["prepStrategy"] == {"batchPrepTasks": [], "storageTips": [], "shoppingList": []}


def test_workout_endpoint_requires_experience_level(app_client):
    profile = {k: v for k, v in PROFILE.items() if k != "experienceLevel"}

    response = app_client.post("/api/plans/workouts", json={"profile": profile})

    assert response.status_code == 422


def test_unsupported_language_rejected(app_client):
    response = app_client.post("/api/plans/meals", json={"profile": PROFILE, "language": "fr"})
    assert response.status_code == 422


def test_targets_endpoint(app_client):
    response = app_client.post("/api/plans/targets", json={"profile": PROFILE})

    assert response.status_code == 200
    assert response.json()["protein"] == round(85 * 2.0 * 1.25)


def test_venues_endpoint(app_client, fake_client):
    fake_client.generate_grounded.return_value = GroundedText(text="Gyms", chunks=[])
    fake_client.generate_json.return_value = json.dumps([
        {"name": "Iron Temple", "lat": 30.2, "lng": -97.7},
        {"name": "No Coords"},
    ])
    app.dependency_overrides[get_ai_client] = lambda: fake_client

    response = app_client.post(
        "/api/venues",
        json={"location": "Austin", "goal": "Weight Loss", "coords": {"latitude": 30.2, "longitude": -97.7}},
    )

    assert response.status_code == 200
    venues = response.json()
    assert [v["name"] for v in venues] == ["Iron Temple"]
    assert venues[0]["groundingLinks"] == []


def test_image_endpoints_cache_and_edit(app_client, fake_client):
    fake_client.generate_image.side_effect = [
        InlineImage(mime_type="image/png", data=b"first"),
        InlineImage(mime_type="image/png", data=b"edited"),
    ]
    content = SessionContent(client=fake_client)
    app.dependency_overrides[get_session_content] = lambda: content

    first = app_client.post("/api/media/images", json={"subject": "Grilled Salmon"}).json()
    again = app_client.post("/api/media/images", json={"subject": "Grilled Salmon"}).json()
    edited = app_client.post(
        "/api/media/images/edit",
        json={"subject": "Grilled Salmon", "instruction": "add lemon"},
    ).json()
    after_edit = app_client.post("/api/media/images", json={"subject": "Grilled Salmon"}).json()

    assert first["available"] is True
    assert again["image_url"] == first["image_url"]
    assert edited["image_url"] != first["image_url"]
    assert after_edit["image_url"] == edited["image_url"]
    assert fake_client.generate_image.await_count == 2


def test_edit_unknown_image_is_404(app_client, fake_client):
    app.dependency_overrides[get_session_content] = lambda: SessionContent(client=fake_client)

    response = app_client.post("/api/media/images/edit", json={"subject": "Nope", "instruction": "add lemon"})

    assert response.status_code == 404


def test_cached_video_is_returned_immediately(app_client, fake_client):
    content = SessionContent(client=fake_client, media=MediaOperationManager(client=fake_client, poll_interval=0.001))
    jobs = VideoJobRegistry(content)
    app.dependency_overrides[get_video_jobs] = lambda: jobs
    asyncio.run(content.videos.replace("Plank", "https://files/plank?key=k"))

    response = app_client.post("/api/media/videos", json={"subject": "Plank"})

    assert response.status_code == 202
    job = response.json()
    assert job["state"] == "done"
    assert job["locator"] == "https://files/plank?key=k"

    polled = app_client.get(f"/api/media/videos/{job['id']}")
    assert polled.status_code == 200
    assert polled.json()["locator"] == "https://files/plank?key=k"
    fake_client.start_video.assert_not_called()


def test_unknown_video_job_is_404(app_client):
    assert app_client.get("/api/media/videos/missing").status_code == 404


def test_assistant_falls_back_when_unavailable(app_client):
    response = app_client.post(
        "/api/ai/assistant/chat",
        json={"profile": PROFILE, "language": "es", "message": "How much protein?"},
    )

    assert response.status_code == 200
    assert "unavailable" in response.json()["reply"]
