from datetime import date, timedelta

import pytest


async def test_list_returns_empty_array(client):
    response = await client.get("/api/sleep-records")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == []


async def test_list_is_ordered_most_recent_first(client, create_record):
    await create_record("2024-01-01", 8, "good sleep")
    await create_record("2024-01-03", 6)
    await create_record("2024-01-02", 7, "average")

    response = await client.get("/api/sleep-records")

    dates = [r["date"] for r in response.json()["data"]]
    assert dates == ["2024-01-03", "2024-01-02", "2024-01-01"]


async def test_create_returns_record_with_generated_id(client):
    response = await client.post(
        "/api/sleep-records", json={"date": "2024-01-01", "hours": 7.5, "note": "slept well"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"]
    record = body["data"]
    assert isinstance(record["id"], int)
    assert record["date"] == "2024-01-01"
    assert record["hours"] == 7.5
    assert record["note"] == "slept well"
    assert record["createdAt"] == record["updatedAt"]


async def test_timestamps_are_serialized_as_utc(client, create_record):
    created = await create_record("2024-01-01", 8)

    fetched = (await client.get(f"/api/sleep-records/{created['id']}")).json()["data"]

    for record in (created, fetched):
        assert record["createdAt"].endswith("+00:00")
        assert record["updatedAt"].endswith("+00:00")


async def test_create_without_note(client):
    response = await client.post("/api/sleep-records", json={"date": "2024-01-01", "hours": 8})

    assert response.status_code == 201
    assert response.json()["data"]["note"] is None


@pytest.mark.parametrize("payload", [
    {"date": "2024-01-01", "hours": -1},
    {"date": "2024-01-01", "hours": 24.5},
    {"date": "2024/01/01", "hours": 8},
    {"date": "24-01-01", "hours": 8},
    {"date": "2024-02-30", "hours": 8},
    {"date": "2024-01-01", "hours": 8, "note": "x" * 501},
    {"hours": 8},
    {"date": "2024-01-01"},
])
async def test_create_rejects_invalid_payload_without_persisting(client, payload):
    response = await client.post("/api/sleep-records", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]

    listing = await client.get("/api/sleep-records")
    assert listing.json()["data"] == []


async def test_create_accepts_boundary_hours(client):
    for hours in (0, 24):
        response = await client.post("/api/sleep-records", json={"date": "2024-01-01", "hours": hours})
        assert response.status_code == 201


async def test_get_by_id(client, create_record):
    created = await create_record("2024-01-01", 8, "good sleep")

    response = await client.get(f"/api/sleep-records/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"] == created


async def test_get_unknown_id_is_404(client):
    response = await client.get("/api/sleep-records/999")

    assert response.status_code == 404
    body = response.json()
    assert body == {"success": False, "error": "Sleep record not found"}


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
async def test_id_beyond_integer_range_is_404(client, method):
    kwargs = {"json": {"hours": 7}} if method == "PUT" else {}

    response = await client.request(method, "/api/sleep-records/99999999999999999999999", **kwargs)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Sleep record not found"}


@pytest.mark.parametrize("bad_id", ["abc", "-1", "1.5"])
async def test_non_numeric_id_is_400(client, bad_id):
    response = await client.get(f"/api/sleep-records/{bad_id}")

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_partial_update_only_changes_given_fields(client, create_record):
    created = await create_record("2024-01-01", 8, "good sleep")

    response = await client.put(f"/api/sleep-records/{created['id']}", json={"hours": 6.5})

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["hours"] == 6.5
    assert updated["date"] == "2024-01-01"
    assert updated["note"] == "good sleep"
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] != created["updatedAt"]


async def test_update_can_clear_note(client, create_record):
    created = await create_record("2024-01-01", 8, "good sleep")

    response = await client.put(f"/api/sleep-records/{created['id']}", json={"note": None})

    assert response.status_code == 200
    assert response.json()["data"]["note"] is None


async def test_update_unknown_id_is_404(client):
    response = await client.put("/api/sleep-records/999", json={"hours": 7})

    assert response.status_code == 404


@pytest.mark.parametrize("payload", [
    {"hours": 25},
    {"hours": None},
    {"date": "2024-1-1"},
    {"date": None},
])
async def test_update_rejects_invalid_fields(client, create_record, payload):
    created = await create_record("2024-01-01", 8)

    response = await client.put(f"/api/sleep-records/{created['id']}", json=payload)

    assert response.status_code == 400
    fetched = await client.get(f"/api/sleep-records/{created['id']}")
    assert fetched.json()["data"]["hours"] == 8
    assert fetched.json()["data"]["date"] == "2024-01-01"


async def test_delete_then_get_is_404(client, create_record):
    created = await create_record("2024-01-01", 8)

    response = await client.delete(f"/api/sleep-records/{created['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] is None

    assert (await client.get(f"/api/sleep-records/{created['id']}")).status_code == 404
    assert (await client.delete(f"/api/sleep-records/{created['id']}")).status_code == 404


async def test_delete_unknown_id_is_404(client):
    response = await client.delete("/api/sleep-records/12345")

    assert response.status_code == 404


async def test_statistics_for_empty_history(client):
    response = await client.get("/api/sleep-records/sleep-statistics")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "overallAverage": 0,
        "weeklyAverages": {},
        "weeklyTrends": [],
    }


async def test_statistics_end_to_end(client, create_record):
    # 2024-01-01 is a Monday
    for day, hours in [
        ("2024-01-01", 8), ("2024-01-02", 7), ("2024-01-03", 6), ("2024-01-04", 9),
        ("2024-01-05", 7.5), ("2024-01-06", 8.5), ("2024-01-07", 9),
        ("2024-01-08", 6.5), ("2024-01-09", 7.5),
    ]:
        await create_record(day, hours)

    response = await client.get("/api/sleep-records/sleep-statistics")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["overallAverage"] == 7.7
    assert data["weeklyAverages"] == {
        "일": 9, "월": 7.3, "화": 7.3, "수": 6, "목": 9, "금": 7.5, "토": 8.5,
    }
    assert data["weeklyTrends"] == [
        {"week": "Week 1", "average": 7.9},
        {"week": "Week 2", "average": 7},
    ]


async def test_summary_reports_streak_and_today(client, create_record):
    today = date.today()
    await create_record((today - timedelta(days=1)).isoformat(), 7)
    await create_record(today.isoformat(), 8)
    await create_record((today - timedelta(days=5)).isoformat(), 6)

    response = await client.get("/api/sleep-records/summary")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalRecords": 3,
        "averageHours": 7.0,
        "currentStreak": 2,
        "todayStatus": "recorded",
    }


async def test_summary_without_records(client):
    response = await client.get("/api/sleep-records/summary")

    assert response.json()["data"] == {
        "totalRecords": 0,
        "averageHours": 0,
        "currentStreak": 0,
        "todayStatus": "not-recorded",
    }


async def test_badges_endpoint_partitions_badges(client, create_record):
    await create_record("2024-01-01", 8)

    response = await client.get("/api/sleep-records/badges")

    assert response.status_code == 200
    board = response.json()["data"]
    assert board["currentStreak"] == 1
    assert board["averageHours"] == 8
    assert len(board["badges"]) == 9
    assert {b["id"] for b in board["earned"]} == {"first-record", "sleep-master"}
    assert {b["id"] for b in board["locked"]} == {"consistency-king", "perfect-week"}
    assert {b["id"] for b in board["inProgress"]} == {
        "early-bird", "week-warrior", "night-owl", "month-master", "hundred-days",
    }
    first = next(b for b in board["badges"] if b["id"] == "first-record")
    assert first["earnedDate"] == "2024-01-01"
    assert first["maxProgress"] == 1
    assert first["progress"] == 1


async def test_health_check(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
