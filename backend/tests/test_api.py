"""Tests for the HTTP API"""

import pytest
from fastapi.testclient import TestClient

from callsheet.main import app
from callsheet.services import ScheduleService


@pytest.fixture
def client(data_dir):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def schedule_id(client):
    project = client.post("/api/projects", json={"title": "단편영화"}).json()
    response = client.post(
        f"/api/projects/{project['id']}/schedules",
        json={"shooting_date": "2026-05-01", "gather_time": "0600"},
    )
    assert response.status_code == 200
    return response.json()["id"]


def _windows(payload):
    return [(s["start_time"], s["end_time"]) for s in payload["scenes"]]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_project_crud(client):
    created = client.post("/api/projects", json={"title": "A", "director": "Lee"}).json()

    patched = client.patch(f"/api/projects/{created['id']}", json={"status": "SHOOTING"}).json()

    assert patched["status"] == "SHOOTING"
    assert patched["director"] == "Lee"
    assert client.delete(f"/api/projects/{created['id']}").json() == {"status": "deleted"}
    assert client.get(f"/api/projects/{created['id']}").status_code == 404


def test_invalid_project_id_is_bad_request(client):
    assert client.get("/api/projects/bad.id").status_code == 400


def test_schedule_gather_time_is_normalized(client, schedule_id):
    schedule = client.get(f"/api/schedules/{schedule_id}").json()

    assert schedule["gather_time"] == "06:00"


def test_quick_add_and_duration_edits(client, schedule_id):
    """Test quick-added scenes cascade from the gather time"""
    for _ in range(3):
        payload = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()
    ids = [s["id"] for s in payload["scenes"]]

    for scene_id, duration in zip(ids, ("20", "40m", "1h40m")):
        payload = client.patch(
            f"/api/schedules/{schedule_id}/scenes/{scene_id}",
            json={"estimated_duration": duration},
        ).json()

    assert _windows(payload) == [
        ("06:00", "06:20"),
        ("06:20", "07:00"),
        ("07:00", "08:40"),
    ]
    assert payload["scenes"][2]["duration_label"] == "1h40m"
    assert all(len(s["cuts"]) == 1 for s in payload["scenes"])

    summary = client.get(f"/api/schedules/{schedule_id}/summary").json()
    assert summary["shooting_end_time"] == "08:40"
    assert summary["total_duration"] == 160
    assert summary["total_duration_label"] == "2시간 40분"
    assert summary["scene_count"] == 3
    assert summary["cut_count"] == 3
    assert summary["times_current"] is True


def test_unparseable_duration_is_rejected(client, schedule_id):
    scene = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()["scenes"][0]

    response = client.patch(
        f"/api/schedules/{schedule_id}/scenes/{scene['id']}",
        json={"estimated_duration": "whenever"},
    )

    assert response.status_code == 400


def test_oversized_duration_text_is_rejected(client, schedule_id):
    scene = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()["scenes"][0]

    response = client.patch(
        f"/api/schedules/{schedule_id}/scenes/{scene['id']}",
        json={"estimated_duration": "9" * 5000},
    )

    assert response.status_code == 400


def test_negative_cut_duration_is_rejected(client, schedule_id):
    scene = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()["scenes"][0]
    url = f"/api/schedules/{schedule_id}/scenes/{scene['id']}/cuts/{scene['cuts'][0]['id']}"

    assert client.patch(url, json={"estimated_duration": -5}).status_code == 400
    assert client.patch(url, json={"estimated_duration": "later"}).status_code == 400

    payload = client.patch(url, json={"estimated_duration": 0}).json()
    assert payload["scenes"][0]["total_cut_duration"] == 0


def test_reorder_and_gather_change(client, schedule_id):
    client.post(
        f"/api/schedules/{schedule_id}/scenes",
        json={"scene_number": "5", "estimated_duration": 30},
    )
    client.post(
        f"/api/schedules/{schedule_id}/scenes",
        json={"scene_number": "9", "estimated_duration": "1:00"},
    )

    payload = client.post(
        f"/api/schedules/{schedule_id}/scenes/reorder",
        json={"from_index": 1, "to_index": 0},
    ).json()

    assert [s["scene_number"] for s in payload["scenes"]] == ["9", "5"]
    assert [s["order"] for s in payload["scenes"]] == [0, 1]
    assert _windows(payload) == [("06:00", "07:00"), ("07:00", "07:30")]

    client.patch(f"/api/schedules/{schedule_id}", json={"gather_time": "9"})
    payload = client.get(f"/api/schedules/{schedule_id}/scenes").json()
    assert _windows(payload) == [("09:00", "10:00"), ("10:00", "10:30")]


def test_delete_scene_closes_up_order(client, schedule_id):
    for _ in range(3):
        payload = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()
    first = payload["scenes"][0]["id"]

    payload = client.delete(f"/api/schedules/{schedule_id}/scenes/{first}").json()

    assert [s["order"] for s in payload["scenes"]] == [0, 1]
    assert _windows(payload) == [("06:00", "06:30"), ("06:30", "07:00")]
    assert client.delete(f"/api/schedules/{schedule_id}/scenes/{first}").status_code == 404


def test_cut_endpoints(client, schedule_id):
    scene = client.post(f"/api/schedules/{schedule_id}/scenes/quick-add").json()["scenes"][0]
    base = f"/api/schedules/{schedule_id}/scenes/{scene['id']}/cuts"

    payload = client.post(f"{base}/quick-add").json()
    cuts = payload["scenes"][0]["cuts"]
    assert [c["cut_number"] for c in cuts] == ["1", "2"]

    payload = client.patch(f"{base}/{cuts[1]['id']}", json={"estimated_duration": "25m"}).json()
    assert payload["scenes"][0]["total_cut_duration"] == 25

    payload = client.post(f"{base}/reorder", json={"from_index": 1, "to_index": 0}).json()
    assert [c["cut_number"] for c in payload["scenes"][0]["cuts"]] == ["2", "1"]

    payload = client.delete(f"{base}/{cuts[0]['id']}").json()
    assert [c["cut_number"] for c in payload["scenes"][0]["cuts"]] == ["2"]
    assert client.delete(f"{base}/{cuts[0]['id']}").status_code == 404


def test_timeline_template_and_items(client, schedule_id):
    base = f"/api/schedules/{schedule_id}/timeline"

    timeline = client.post(f"{base}/templates").json()
    assert timeline["items"][0]["time"] == "06:30"
    assert [t["order"] for t in timeline["items"]] == list(range(7))

    item = client.post(base, json={"time": "1530", "title": "간식"}).json()
    assert item["time"] == "15:30"
    assert item["order"] == 7

    updated = client.patch(f"{base}/{item['id']}", json={"title": "휴식", "type": "BREAK"}).json()
    assert updated["type"] == "BREAK"

    assert client.delete(f"{base}/{item['id']}").json() == {"status": "deleted"}
    assert len(client.get(base).json()["items"]) == 7


def test_missing_schedule_returns_404(client):
    assert client.get("/api/schedules/missing/scenes").status_code == 404
    assert client.post("/api/schedules/missing/scenes/quick-add").status_code == 404


def test_summary_flags_hand_edited_times_until_recalculated(client, schedule_id):
    for _ in range(2):
        client.post(f"/api/schedules/{schedule_id}/scenes/quick-add")
    scene_list = ScheduleService.load_scenes(schedule_id)
    scene_list.scenes[1].start_time = "11:00"
    ScheduleService.replace_scenes(schedule_id, scene_list)

    assert client.get(f"/api/schedules/{schedule_id}/summary").json()["times_current"] is False

    client.post(f"/api/schedules/{schedule_id}/recalculate")
    assert client.get(f"/api/schedules/{schedule_id}/summary").json()["times_current"] is True


def test_staff_crud(client):
    project = client.post("/api/projects", json={"title": "A"}).json()
    base = f"/api/projects/{project['id']}/staff"
    client.post(base, json={"name": "Park", "department": "LIGHTING", "position": "Gaffer"})
    created = client.post(base, json={"name": "Kim", "department": "DIRECTING", "position": "1st AD"}).json()

    assert created["department_label"] == "연출부"
    assert [s["name"] for s in client.get(base).json()] == ["Kim", "Park"]

    patched = client.patch(f"/api/staff/{created['id']}", json={"phone": "010-0000-0000"}).json()
    assert patched["phone"] == "010-0000-0000"
    assert patched["position"] == "1st AD"

    assert client.delete(f"/api/staff/{created['id']}").json() == {"status": "deleted"}
    assert client.patch(f"/api/staff/{created['id']}", json={"name": "x"}).status_code == 404
    assert client.post(base, json={"name": "Lee", "department": "CATERING"}).status_code == 422


def test_cast_crud(client):
    project = client.post("/api/projects", json={"title": "A"}).json()
    base = f"/api/projects/{project['id']}/casts"
    client.post(base, json={"role": "지수", "actor_name": "Han"})
    created = client.post(base, json={"role": "민호", "actor_name": "Yoo"}).json()

    assert [c["role"] for c in client.get(base).json()] == ["민호", "지수"]

    patched = client.patch(f"/api/casts/{created['id']}", json={"actor_name": "Jung"}).json()
    assert patched["actor_name"] == "Jung"
    assert patched["role"] == "민호"

    assert client.delete(f"/api/casts/{created['id']}").json() == {"status": "deleted"}
    assert len(client.get(base).json()) == 1
    assert client.get("/api/projects/missing/casts").status_code == 404
    assert client.delete("/api/casts/bad.id").status_code == 400
