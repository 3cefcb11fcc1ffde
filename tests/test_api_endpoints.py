"""Tests for schedule API endpoints."""

from dataclasses import replace
from uuid import uuid4

from fastapi.testclient import TestClient

from daily_tracker.api.app import create_app
from tests.conftest import InMemoryLedgerRepository

HEADERS = {"X-Api-Token": "api-token"}
DAY = "2024-03-14"
SQUAT = {"id": "row-1", "exercise_id": "squat", "name": "Squat", "sets": 5}
RICE = {
    "name": "Rice",
    "grams": 200,
    "per_100g": {"calories": 130, "protein_g": 2.7, "fat_g": 0.3, "carbs_g": 28},
}


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_requires_api_token(container) -> None:
    client = _client(container)
    user_id = uuid4()

    missing = client.get(f"/users/{user_id}/ledger/{DAY}")
    wrong = client.get(f"/users/{user_id}/ledger/{DAY}", headers={"X-Api-Token": "x"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_domains_share_the_ledger(container) -> None:
    client = _client(container)
    user_id = uuid4()

    meal = client.put(
        f"/users/{user_id}/meal-plans/{DAY}",
        json={"timeslots": {"6pm": {"foods": [RICE]}, "9:30pm": {"foods": []}}},
        headers=HEADERS,
    )
    gym = client.put(
        f"/users/{user_id}/workouts/{DAY}",
        json={"name": "Leg day", "workout_type": "Lower A", "exercises": [SQUAT]},
        headers=HEADERS,
    )
    cleared = client.put(
        f"/users/{user_id}/workouts/{DAY}",
        json={"name": "Rest", "workout_type": "Lower A", "exercises": []},
        headers=HEADERS,
    )
    ledger = client.get(f"/users/{user_id}/ledger/{DAY}", headers=HEADERS)

    assert meal.status_code == 200
    assert meal.json()["results"][0]["ledger"]["tasks"] == ["meal-6pm"]
    assert gym.json()["ledger"]["tasks"] == ["meal-6pm", "gym-workout"]
    assert cleared.json()["ledger"]["tasks"] == ["meal-6pm"]
    assert ledger.json()["ledger"]["tasks"] == ["meal-6pm"]
    assert ledger.json()["ledger"]["version"] == 3


def test_missing_ledger_is_null(container) -> None:
    response = _client(container).get(
        f"/users/{uuid4()}/ledger/{DAY}", headers=HEADERS
    )

    assert response.status_code == 200
    assert response.json() == {"ledger": None}


def test_custom_task_cannot_claim_feature_tag(container) -> None:
    client = _client(container)
    user_id = uuid4()

    added = client.post(
        f"/users/{user_id}/ledger/{DAY}/tasks",
        json={"task_id": "reading"},
        headers=HEADERS,
    )
    rejected = client.post(
        f"/users/{user_id}/ledger/{DAY}/tasks",
        json={"task_id": "water"},
        headers=HEADERS,
    )
    removed = client.delete(
        f"/users/{user_id}/ledger/{DAY}/tasks/reading", headers=HEADERS
    )

    assert added.json()["ledger"]["tasks"] == ["reading"]
    assert rejected.status_code == 422
    assert removed.json()["ledger"]["tasks"] == []

    day = client.get(f"/users/{user_id}/ledger/{DAY}", headers=HEADERS)
    assert day.json() == {"ledger": None}


def test_water_goal_sets_tag(container) -> None:
    client = _client(container)
    user_id = uuid4()

    for _ in range(3):
        response = client.post(
            f"/users/{user_id}/water/{DAY}/entries",
            json={"source": "preset-1L"},
            headers=HEADERS,
        )

    data = response.json()
    assert data["intake"]["total_ml"] == 3000
    assert data["intake"]["goal_achieved"] is True
    assert data["ledger"]["tasks"] == ["water"]


def test_invalid_water_amount_is_bad_request(container) -> None:
    response = _client(container).post(
        f"/users/{uuid4()}/water/{DAY}/entries",
        json={"amount_ml": -5},
        headers=HEADERS,
    )

    assert response.status_code == 400


def test_template_lifecycle(container) -> None:
    client = _client(container)
    user_id = uuid4()
    body = {"name": "Legs", "workout_type": "Lower A", "exercises": [SQUAT]}

    created = client.post(f"/users/{user_id}/templates", json=body, headers=HEADERS)
    template_id = created.json()["id"]
    cloned = client.post(
        f"/users/{user_id}/templates/{template_id}/clone",
        json={"name": "Legs copy"},
        headers=HEADERS,
    )
    listed = client.get(
        f"/users/{user_id}/templates",
        params={"workout_type": "Lower A"},
        headers=HEADERS,
    )
    foreign = client.get(f"/users/{uuid4()}/templates/{template_id}", headers=HEADERS)
    foreign_delete = client.delete(
        f"/users/{uuid4()}/templates/{template_id}", headers=HEADERS
    )
    foreign_clone = client.post(
        f"/users/{uuid4()}/templates/{template_id}/clone",
        json={"name": "Legs copy"},
        headers=HEADERS,
    )

    assert created.status_code == 201
    assert cloned.status_code == 201
    assert [t["name"] for t in listed.json()["templates"]] == ["Legs copy", "Legs"]
    assert foreign.status_code == 404
    assert foreign_delete.status_code == 404
    assert foreign_clone.status_code == 404


def test_draft_delete_undo_and_schedule(container) -> None:
    client = _client(container)
    user_id = uuid4()
    base = f"/users/{user_id}/draft"

    client.post(f"{base}/type", json={"workout_type": "Upper A"}, headers=HEADERS)
    for row in ("bench", "row", "press"):
        client.post(
            f"{base}/exercises",
            json={"exercise": {"id": row, "exercise_id": row, "name": row}},
            headers=HEADERS,
        )
    deleted = client.post(
        f"{base}/exercises/delete", json={"index": 1}, headers=HEADERS
    )
    undone = client.post(f"{base}/undo", headers=HEADERS)
    scheduled = client.post(
        f"{base}/schedule", json={"day": DAY, "name": "Push"}, headers=HEADERS
    )

    assert deleted.json()["deleted"]["id"] == "row"
    assert deleted.json()["draft"]["undo_available"] is True
    assert undone.json()["restored"]["id"] == "row"
    assert [ex["id"] for ex in undone.json()["draft"]["exercises"]] == [
        "bench",
        "row",
        "press",
    ]
    assert scheduled.json()["ledger"]["tasks"] == ["gym-workout"]


def test_draft_delete_out_of_range(container) -> None:
    response = _client(container).post(
        f"/users/{uuid4()}/draft/exercises/delete", json={"index": 0}, headers=HEADERS
    )

    assert response.status_code == 404


def test_schedule_draft_without_type_is_bad_request(container) -> None:
    response = _client(container).post(
        f"/users/{uuid4()}/draft/schedule",
        json={"day": DAY, "name": "Push"},
        headers=HEADERS,
    )

    assert response.status_code == 400


def test_persistent_conflict_returns_409(
    container, ledger_repository: InMemoryLedgerRepository
) -> None:
    client = _client(container)
    user_id = uuid4()
    client.post(
        f"/users/{user_id}/ledger/{DAY}/tasks",
        json={"task_id": "reading"},
        headers=HEADERS,
    )
    key = next(iter(ledger_repository.ledgers))

    def always_bump(repo: InMemoryLedgerRepository) -> None:
        stored = repo.ledgers[key]
        repo.put(replace(stored, version=stored.version + 1))

    ledger_repository.before_write = always_bump

    response = client.post(
        f"/users/{user_id}/ledger/{DAY}/tasks",
        json={"task_id": "stretching"},
        headers=HEADERS,
    )

    assert response.status_code == 409


def test_write_failure_returns_503(
    container, ledger_repository: InMemoryLedgerRepository
) -> None:
    ledger_repository.fail_writes = True

    response = _client(container).post(
        f"/users/{uuid4()}/ledger/{DAY}/tasks",
        json={"task_id": "reading"},
        headers=HEADERS,
    )

    assert response.status_code == 503


def test_month_listing_and_streaks(container) -> None:
    client = _client(container)
    user_id = uuid4()
    client.post(
        f"/users/{user_id}/water/{DAY}/entries",
        json={"amount_ml": 2500},
        headers=HEADERS,
    )

    month = client.get(
        f"/users/{user_id}/ledger",
        params={"year": 2024, "month": 3},
        headers=HEADERS,
    )
    streaks = client.get(f"/users/{user_id}/streaks", headers=HEADERS)
    water = client.get(f"/users/{user_id}/streaks/water", headers=HEADERS)

    assert [ledger["day"] for ledger in month.json()["ledgers"]] == [DAY]
    assert set(streaks.json()["streaks"]) == {"meal", "gym", "water"}
    assert len(water.json()["streak"]["history"]) == 100
