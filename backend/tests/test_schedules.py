"""Tests for Schedule CRUD, ownership and the list projections.

Covers:
- Create / detail / full-replace update / delete
- Time window: start must be before end
- Authorization hook: creator or admin only
- Year / month filtering and participant counts
- My participations
"""
from tests.conftest import create_admin, create_member, create_test_schedule


def _setup(client):
    """Admin plus one approved member."""
    admin, admin_headers = create_admin(client)
    member, member_headers = create_member(client, admin_headers)
    return (admin, admin_headers), (member, member_headers)


class TestScheduleCreate:
    """Schedule creation and time validation."""

    def test_create_schedule(self, client):
        (admin, headers), _ = _setup(client)
        data = create_test_schedule(
            client, headers, title="Practice", location="Olympic Park Court 3", description="Bring balls",
        )
        assert data["title"] == "Practice"
        assert data["date"] == "2025-06-01"
        assert data["startTime"] == "18:00:00"
        assert data["endTime"] == "19:00:00"
        assert data["location"] == "Olympic Park Court 3"
        assert data["createdBy"] == admin["userId"]
        assert data["createdByName"] == "Kim Minsu"

    def test_member_can_create(self, client):
        _, (member, headers) = _setup(client)
        data = create_test_schedule(client, headers)
        assert data["createdBy"] == member["userId"]

    def test_end_before_start_rejected(self, client):
        (_, headers), _ = _setup(client)
        resp = client.post("/api/schedules", headers=headers, json={
            "title": "Backwards", "date": "2025-06-01", "startTime": "19:00", "endTime": "18:00",
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_equal_times_rejected(self, client):
        (_, headers), _ = _setup(client)
        resp = client.post("/api/schedules", headers=headers, json={
            "title": "Zero", "date": "2025-06-01", "startTime": "18:00", "endTime": "18:00",
        })
        assert resp.status_code == 400

    def test_missing_title_rejected(self, client):
        (_, headers), _ = _setup(client)
        resp = client.post("/api/schedules", headers=headers, json={
            "title": "   ", "date": "2025-06-01", "startTime": "18:00", "endTime": "19:00",
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_requires_token(self, client):
        resp = client.post("/api/schedules", json={
            "title": "Practice", "date": "2025-06-01", "startTime": "18:00", "endTime": "19:00",
        })
        assert resp.status_code == 401


class TestScheduleUpdate:
    """Full replace with the creator-or-admin check."""

    def test_creator_can_update(self, client):
        _, (_, headers) = _setup(client)
        schedule = create_test_schedule(client, headers, description="Bring balls")
        resp = client.put(f"/api/schedules/{schedule['id']}", headers=headers, json={
            "title": "Evening Rally", "date": "2025-06-02", "startTime": "20:00", "endTime": "21:30",
        })
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["title"] == "Evening Rally"
        assert data["date"] == "2025-06-02"
        assert data["endTime"] == "21:30:00"
        # Omitted optional fields are cleared
        assert data["description"] is None

    def test_admin_can_update_any(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        schedule = create_test_schedule(client, member_headers)
        resp = client.put(f"/api/schedules/{schedule['id']}", headers=admin_headers, json={
            "title": "Moved by admin", "date": "2025-06-01", "startTime": "17:00", "endTime": "18:00",
        })
        assert resp.status_code == 200
        assert resp.json()["data"]["title"] == "Moved by admin"

    def test_other_member_forbidden(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        schedule = create_test_schedule(client, admin_headers)
        resp = client.put(f"/api/schedules/{schedule['id']}", headers=member_headers, json={
            "title": "Hijacked", "date": "2025-06-01", "startTime": "18:00", "endTime": "19:00",
        })
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_update_invalid_times(self, client):
        (_, headers), _ = _setup(client)
        schedule = create_test_schedule(client, headers)
        resp = client.put(f"/api/schedules/{schedule['id']}", headers=headers, json={
            "title": "Practice", "date": "2025-06-01", "startTime": "19:00", "endTime": "18:30",
        })
        assert resp.status_code == 400

    def test_update_missing(self, client):
        (_, headers), _ = _setup(client)
        resp = client.put("/api/schedules/9999", headers=headers, json={
            "title": "Ghost", "date": "2025-06-01", "startTime": "18:00", "endTime": "19:00",
        })
        assert resp.status_code == 404


class TestScheduleDelete:
    """Deletion cascades to participations."""

    def test_creator_can_delete(self, client):
        _, (_, headers) = _setup(client)
        schedule = create_test_schedule(client, headers)
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=headers, json={"status": "Attending"})

        resp = client.delete(f"/api/schedules/{schedule['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        assert client.get(f"/api/schedules/{schedule['id']}", headers=headers).status_code == 404
        assert client.get("/api/schedules/my-participations", headers=headers).json()["data"] == []

    def test_other_member_cannot_delete(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        schedule = create_test_schedule(client, admin_headers)
        resp = client.delete(f"/api/schedules/{schedule['id']}", headers=member_headers)
        assert resp.status_code == 403

    def test_admin_can_delete_any(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        schedule = create_test_schedule(client, member_headers)
        resp = client.delete(f"/api/schedules/{schedule['id']}", headers=admin_headers)
        assert resp.status_code == 200

    def test_delete_missing(self, client):
        (_, headers), _ = _setup(client)
        resp = client.delete("/api/schedules/9999", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"


class TestScheduleList:
    """Ordering, filtering and counts."""

    def test_ordered_by_date_then_start(self, client):
        (_, headers), _ = _setup(client)
        create_test_schedule(client, headers, title="Late", date="2025-06-01", start_time="20:00", end_time="21:00")
        create_test_schedule(client, headers, title="Next day", date="2025-06-02")
        create_test_schedule(client, headers, title="Early", date="2025-06-01", start_time="07:00", end_time="08:00")

        resp = client.get("/api/schedules", headers=headers)
        assert resp.status_code == 200
        titles = [s["title"] for s in resp.json()["data"]]
        assert titles == ["Early", "Late", "Next day"]

    def test_filter_by_year_and_month(self, client):
        (_, headers), _ = _setup(client)
        create_test_schedule(client, headers, title="May", date="2025-05-31")
        create_test_schedule(client, headers, title="June", date="2025-06-15")
        create_test_schedule(client, headers, title="December", date="2025-12-31")
        create_test_schedule(client, headers, title="Next year", date="2026-01-01")

        def titles(params):
            return [s["title"] for s in client.get("/api/schedules", headers=headers, params=params).json()["data"]]

        assert titles({"year": 2025, "month": 6}) == ["June"]
        assert titles({"year": 2025, "month": 12}) == ["December"]
        assert titles({"year": 2025}) == ["May", "June", "December"]
        # Month alone is ignored
        assert len(titles({"month": 6})) == 4

    def test_invalid_month_rejected(self, client):
        (_, headers), _ = _setup(client)
        resp = client.get("/api/schedules", headers=headers, params={"year": 2025, "month": 13})
        assert resp.status_code == 400

    def test_counts(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        schedule = create_test_schedule(client, admin_headers)
        empty = create_test_schedule(client, admin_headers, title="Nobody", date="2025-06-03")
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=admin_headers,
                    json={"status": "Undecided"})
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=member_headers,
                    json={"status": "Attending"})

        rows = {s["id"]: s for s in client.get("/api/schedules", headers=admin_headers).json()["data"]}
        assert rows[schedule["id"]]["participantCount"] == 2
        assert rows[schedule["id"]]["confirmedCount"] == 1
        assert rows[empty["id"]]["participantCount"] == 0
        assert rows[empty["id"]]["confirmedCount"] == 0


class TestScheduleDetail:
    """Detail view with participants."""

    def test_example_flow(self, client):
        """Kim creates Practice, a second approved member attends."""
        (_, admin_headers), (member, member_headers) = _setup(client)
        schedule = create_test_schedule(client, admin_headers, title="Practice")
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=member_headers,
                    json={"status": "Attending"})

        resp = client.get(f"/api/schedules/{schedule['id']}", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["participantCount"] == 1
        assert data["confirmedCount"] == 1
        assert data["createdByName"] == "Kim Minsu"
        participant = data["participants"][0]
        assert participant["userId"] == member["userId"]
        assert participant["userName"] == "Lee Jiwon"
        assert participant["userPhone"] == "01022223333"
        assert participant["status"] == "Attending"

    def test_participants_oldest_first(self, client):
        (admin, admin_headers), (member, member_headers) = _setup(client)
        schedule = create_test_schedule(client, admin_headers)
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=admin_headers,
                    json={"status": "Undecided"})
        client.post(f"/api/schedules/{schedule['id']}/participate", headers=member_headers,
                    json={"status": "Attending"})

        data = client.get(f"/api/schedules/{schedule['id']}", headers=member_headers).json()["data"]
        assert [p["userId"] for p in data["participants"]] == [admin["userId"], member["userId"]]
        assert [p["status"] for p in data["participants"]] == ["Undecided", "Attending"]

    def test_detail_missing(self, client):
        (_, headers), _ = _setup(client)
        resp = client.get("/api/schedules/9999", headers=headers)
        assert resp.status_code == 404


class TestMyParticipations:
    """Schedules the acting user has a status on."""

    def test_lists_only_my_rows(self, client):
        (_, admin_headers), (_, member_headers) = _setup(client)
        later = create_test_schedule(client, admin_headers, title="Later", date="2025-07-01")
        sooner = create_test_schedule(client, admin_headers, title="Sooner", date="2025-06-01")
        create_test_schedule(client, admin_headers, title="Skipped", date="2025-06-15")
        client.post(f"/api/schedules/{later['id']}/participate", headers=member_headers,
                    json={"status": "NotAttending"})
        client.post(f"/api/schedules/{sooner['id']}/participate", headers=member_headers,
                    json={"status": "Attending"})

        resp = client.get("/api/schedules/my-participations", headers=member_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [row["title"] for row in data] == ["Sooner", "Later"]
        assert [row["myStatus"] for row in data] == ["Attending", "NotAttending"]
        assert data[0]["createdByName"] == "Kim Minsu"
