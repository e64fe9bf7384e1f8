import pytest
from fastapi.testclient import TestClient

from src.fieldplan.main import create_app

WINDOW = {"start": "2024-05-06T09:00:00", "end": "2024-05-06T12:00:00"}


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_schedule_optimize_endpoint(api_client: TestClient) -> None:
    payload = {
        "jobs": ["A", "B"],
        "time_range": WINDOW,
        "job_snapshots": [
            {"id": "A", "title": "Spring cleanup", "priority": "urgent", "estimated_duration": 60},
            {"id": "B", "title": "Hedge trim", "priority": "low", "estimated_duration": 30},
        ],
    }

    response = api_client.post("/api/schedule/optimize", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [(slot["job_id"], slot["start_time"], slot["end_time"]) for slot in body["schedule"]] == [
        ("A", "2024-05-06T09:00:00", "2024-05-06T10:00:00"),
        ("B", "2024-05-06T10:15:00", "2024-05-06T10:45:00"),
    ]
    assert body["metrics"]["utilization"] == pytest.approx(0.5)
    assert body["improvements"] == ["Schedule appears well-optimized"]


def test_schedule_optimize_without_valid_jobs_is_bad_request(api_client: TestClient) -> None:
    payload = {"jobs": ["ghost"], "time_range": WINDOW}

    response = api_client.post("/api/schedule/optimize", json=payload)

    assert response.status_code == 400
    assert "No valid jobs" in response.json()["detail"]


def test_reversed_time_range_is_rejected(api_client: TestClient) -> None:
    payload = {"jobs": ["A"], "time_range": {"start": WINDOW["end"], "end": WINDOW["start"]}}

    response = api_client.post("/api/schedule/optimize", json=payload)

    assert response.status_code == 422


def test_availability_endpoint(api_client: TestClient) -> None:
    payload = {
        "user_ids": ["U1"],
        "crew_ids": ["C1"],
        "time_range": {"start": "2024-05-06T08:00:00", "end": "2024-05-06T17:00:00"},
        "bookings": [
            {
                "id": "J1",
                "title": "Lawn service",
                "scheduled_date": "2024-05-06T10:00:00",
                "estimated_duration": 60,
                "assigned_user_id": "U1",
            }
        ],
    }

    response = api_client.post("/api/schedule/availability", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [slot["start_time"] for slot in body["available_slots"]] == [
        "2024-05-06T08:00:00",
        "2024-05-06T08:00:00",
        "2024-05-06T11:00:00",
    ]
    assert body["conflicts"][0]["resource_type"] == "user"
    assert body["conflicts"][0]["reason"] == "Assigned to job: Lawn service"
    assert body["unchecked_resources"] == ["C1"]


def test_calendar_endpoint(api_client: TestClient) -> None:
    payload = {
        "user_id": "U1",
        "start_date": "2024-05-06T00:00:00",
        "end_date": "2024-05-06T23:59:00",
        "jobs": [
            {
                "id": "J1",
                "title": "Aeration",
                "scheduled_date": "2024-05-06T13:00:00",
                "assigned_user_id": "U1",
                "property_id": "P1",
            }
        ],
        "properties": [{"id": "P1", "address_line1": "9 Oak Ln", "city": "Reno", "state": "NV", "latitude": 39.5, "longitude": -119.8}],
    }

    response = api_client.post("/api/schedule/calendar", json=payload)

    assert response.status_code == 200
    events = response.json()
    assert len(events) == 1
    assert events[0]["end_time"] == "2024-05-06T15:00:00"
    assert events[0]["location"]["address"] == "9 Oak Ln, Reno, NV"


def _route_payload() -> dict:
    return {
        "jobs": [
            {"id": "origin", "title": "Origin", "property_id": "P0", "estimated_duration": 60},
            {"id": "far", "title": "Far", "property_id": "P10", "estimated_duration": 60},
            {"id": "middle", "title": "Middle", "property_id": "P5", "estimated_duration": 60},
        ],
        "properties": [
            {"id": "P0", "address_line1": "Zero", "city": "X", "state": "Y", "latitude": 0, "longitude": 0},
            {"id": "P10", "address_line1": "Ten", "city": "X", "state": "Y", "latitude": 0, "longitude": 10},
            {"id": "P5", "address_line1": "Five", "city": "X", "state": "Y", "latitude": 0, "longitude": 5},
        ],
        "start_location": {"latitude": 0, "longitude": 0, "address": "Yard"},
        "departure_time": "2024-05-06T07:30:00",
    }


def test_route_optimize_endpoint(api_client: TestClient) -> None:
    response = api_client.post("/api/routes/optimize", json=_route_payload())

    assert response.status_code == 200
    body = response.json()
    assert [stop["job_id"] for stop in body["optimized_route"]] == ["origin", "middle", "far"]
    assert [stop["sequence"] for stop in body["optimized_route"]] == [1, 2, 3]
    assert body["optimized_route"][0]["arrival_time"] == "2024-05-06T07:30:00"
    assert body["savings_percent"] > 0


def test_route_without_coordinates_is_bad_request(api_client: TestClient) -> None:
    payload = _route_payload()
    payload["properties"] = []

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 400
    assert "valid locations" in response.json()["detail"]


def test_route_export_returns_csv(api_client: TestClient) -> None:
    response = api_client.post("/api/routes/optimize/export", json=_route_payload())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("sequence,job_id,address,arrival_time")
    assert len(lines) == 4
    assert lines[1].split(",")[1] == "origin"
