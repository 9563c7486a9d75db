"""Tests for HTTP endpoints."""

from datetime import timedelta
from uuid import uuid4

from fastapi.testclient import TestClient

from nutribuddy.api.app import create_app
from nutribuddy.domain.daily_log import DailyLog
from tests.conftest import InMemoryDailyLogRepository

GOALS = {"kcal": 2000, "protein_g": 150, "carbs_g": 200, "fat_g": 56}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_profile_metrics(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/profile/metrics",
        json={
            "weight_kg": 70,
            "height_cm": 170,
            "age": 30,
            "activity_level": "Moderate",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["goals"] == {
        "kcal": 2507,
        "protein_g": 112,
        "carbs_g": 357,
        "fat_g": 70,
    }
    assert data["bmi"] == 24.2
    assert data["tdee"] == 2507


def test_goals_override_and_reestimate(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    estimated = client.get(
        f"/users/{user_id}/goals", params={"weight_kg": 70, "height_cm": 170}
    )
    assert estimated.json()["source"] == "estimated"
    assert estimated.json()["kcal"] == 2507

    client.put(f"/users/{user_id}/goals", json=GOALS)
    overridden = client.get(
        f"/users/{user_id}/goals", params={"weight_kg": 90, "height_cm": 190}
    )
    assert overridden.json() == GOALS | {"source": "override"}

    reestimated = client.post(
        f"/users/{user_id}/goals/estimate",
        json={"weight_kg": 70, "height_cm": 170, "age": 30},
    )
    assert reestimated.json()["source"] == "estimated"
    assert reestimated.json()["kcal"] == 2507


def test_override_rejects_negative_goals(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(f"/users/{uuid4()}/goals", json=GOALS | {"fat_g": -1})

    assert response.status_code == 422


def test_extract_endpoint(container) -> None:
    client = TestClient(create_app(container))

    found = client.post("/extract", json={"text": "420 kcal", "goals": GOALS})
    missing = client.post("/extract", json={"text": "hello there", "goals": GOALS})

    assert found.json() == {
        "status": "ok",
        "record": {"kcal": 420, "protein_g": 32, "carbs_g": 47, "fat_g": 12},
    }
    assert missing.json() == {"status": "nothing_to_log", "record": None}


def test_log_entries_accumulate_and_report_progress(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    client.put(f"/users/{user_id}/goals", json=GOALS)

    client.post(
        f"/users/{user_id}/log/entries",
        json={"text": "Quinoa salad - 350 kcal, 12g protein, 50g carbs, 10g fat"},
    )
    response = client.post(
        f"/users/{user_id}/log/entries",
        json={"record": {"kcal": 150, "protein_g": 8}},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["log"] == {
        "date_key": "2025-06-01",
        "kcal": 500,
        "protein_g": 20,
        "carbs_g": 50,
        "fat_g": 10,
    }
    assert data["progress"]["kcal_percent"] == 25


def test_log_entry_with_nothing_to_log(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/users/{uuid4()}/log/entries", json={"text": "Any dinner ideas?"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "nothing_to_log"
    assert response.json()["log"]["kcal"] == 0


def test_log_entry_requires_text_or_record(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(f"/users/{uuid4()}/log/entries", json={})

    assert response.status_code == 422


def test_get_log_rolls_over_and_reset(container, clock) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    repo = container.daily_log_service.repository
    assert isinstance(repo, InMemoryDailyLogRepository)
    repo.logs[user_id] = DailyLog(date_key="2025-06-01", kcal=1200)

    assert client.get(f"/users/{user_id}/log").json()["log"]["kcal"] == 1200

    clock.now = clock.now + timedelta(days=1)
    rolled = client.get(f"/users/{user_id}/log").json()
    assert rolled["log"] == {
        "date_key": "2025-06-02",
        "kcal": 0,
        "protein_g": 0,
        "carbs_g": 0,
        "fat_g": 0,
    }

    repo.logs[user_id] = DailyLog(date_key="2025-06-02", kcal=300)
    reset = client.post(f"/users/{user_id}/log/reset").json()
    assert reset["log"]["kcal"] == 0
    assert repo.logs[user_id].kcal == 0


def test_invalid_timezone_is_bad_request(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/users/{uuid4()}/log", params={"timezone": "Nowhere/City"})

    assert response.status_code == 400


def test_suggested_meals_round_trip_through_extraction(container) -> None:
    client = TestClient(create_app(container))

    meals = client.get("/meals/suggested").json()["meals"]
    assert len(meals) == 3

    for meal in meals:
        extracted = client.post(
            "/extract", json={"text": meal["text"], "goals": GOALS}
        ).json()
        assert extracted["record"] == {
            "kcal": meal["kcal"],
            "protein_g": meal["protein_g"],
            "carbs_g": meal["carbs_g"],
            "fat_g": meal["fat_g"],
        }


def test_non_finite_profile_query_values_fall_back_to_defaults(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()

    response = client.get(
        f"/users/{user_id}/goals", params={"weight_kg": "nan", "height_cm": "inf"}
    )
    default = client.get(f"/users/{user_id}/goals")

    assert response.status_code == 200
    assert response.json() == default.json()


def test_get_log_measures_progress_against_profile_estimate(container) -> None:
    client = TestClient(create_app(container))
    user_id = uuid4()
    client.post(f"/users/{user_id}/log/entries", json={"record": {"kcal": 1000}})

    data = client.get(
        f"/users/{user_id}/log",
        params={"weight_kg": 70, "height_cm": 170, "age": 30},
    ).json()

    assert data["goals"]["kcal"] == 2507
    assert data["goals"]["source"] == "estimated"
    assert data["progress"]["kcal_percent"] == 40
