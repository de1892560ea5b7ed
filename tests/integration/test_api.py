"""
Integration Tests for the FastAPI backend

Health, severity, records, reminders, notifications, family and dashboard
endpoints. Uses async httpx for ASGI app testing.
"""
import pytest
from datetime import datetime, timedelta, timezone

from medora.models.domain import UserStatus

LAB_TEXT = "Blood Sugar: 250 mg/dL\nBlood Pressure: 118/76\nCholesterol: 190"


async def _create_record(client, headers, **overrides):
    body = {
        "category": "Lab Report",
        "description": "Quarterly lab panel",
        "labName": "City Diagnostics",
        "tags": "fasting, quarterly",
        "extractedText": LAB_TEXT,
    }
    body.update(overrides)
    response = await client.post("/api/records", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["uptime_seconds"] >= 0

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_docs_endpoint(self, async_client):
        response = await async_client.get("/docs")
        assert response.status_code == 200


@pytest.mark.asyncio
class TestSeverityEndpoints:
    """Stateless classification needs no token."""

    @pytest.mark.parametrize("value,metric,expected", [
        (65, "bloodSugar", "Low"),
        (141, "bloodSugar", "High"),
        (201, "bloodSugar", "Critical"),
        (120, "bloodPressure", "Normal"),
        (None, "cholesterol", "N/A"),
        (100, "weight", "N/A"),
    ])
    async def test_classify(self, async_client, value, metric, expected):
        response = await async_client.post("/api/severity/classify", json={"value": value, "type": metric})
        assert response.status_code == 200
        assert response.json() == {"type": metric, "value": value, "severity": expected}

    async def test_classify_missing_value_field(self, async_client):
        response = await async_client.post("/api/severity/classify", json={"type": "bloodSugar"})
        assert response.status_code == 200
        assert response.json()["severity"] == "N/A"

    @pytest.mark.parametrize("raw", ["1e999", "-1e999"])
    async def test_classify_rejects_out_of_range_numbers(self, async_client, raw):
        response = await async_client.post(
            "/api/severity/classify",
            content=f'{{"type": "bloodSugar", "value": {raw}}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    async def test_classify_requires_type(self, async_client):
        response = await async_client.post("/api/severity/classify", json={"value": 100})
        assert response.status_code == 422

    async def test_thresholds(self, async_client):
        response = await async_client.get("/api/severity/thresholds")
        assert response.status_code == 200
        assert set(response.json()["thresholds"]) == {"bloodSugar", "bloodPressure", "cholesterol"}

    async def test_predict_without_data(self, async_client, patient_headers):
        response = await async_client.get("/api/severity/predict", headers=patient_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "No health data available"

    async def test_predict_incomplete_data(self, async_client, patient_headers):
        await _create_record(async_client, patient_headers, extractedText="Cholesterol: 190")
        response = await async_client.get("/api/severity/predict", headers=patient_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Incomplete health data"

    async def test_predict_reuses_stored_prediction(self, async_client, patient_headers, store, patient):
        created = await _create_record(async_client, patient_headers)
        alerts_before = len(store.list_notifications_for_user(patient.id))

        response = await async_client.get("/api/severity/predict", headers=patient_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["recordId"] == created["record"]["id"]
        assert data["severity"] == {"bloodSugar": "Critical", "bloodPressure": "Normal", "cholesterol": "Normal"}
        assert len(store.list_notifications_for_user(patient.id)) == alerts_before


@pytest.mark.asyncio
class TestAuthentication:
    async def test_missing_token(self, async_client):
        response = await async_client.get("/api/records")
        assert response.status_code == 401
        assert response.json()["message"] == "Auth token missing"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_invalid_token(self, async_client):
        response = await async_client.get("/api/records", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Token expired or invalid"

    async def test_register_then_profile(self, async_client):
        response = await async_client.post("/api/auth/register", json={
            "name": "Meera", "email": "meera@example.com", "gender": "Female", "password": "s3cret-pass",
        })
        assert response.status_code == 201
        token = response.json()["accessToken"]

        profile = await async_client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200
        assert profile.json()["email"] == "meera@example.com"
        assert profile.json()["role"] == "user"

    async def test_duplicate_registration(self, async_client, patient):
        response = await async_client.post(
            "/api/auth/register", json={"name": "X", "email": patient.email, "password": "another-pass"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_blocked_user_refused(self, async_client, patient_headers, store, patient):
        store.set_user_status(patient.id, UserStatus.BLOCKED)
        response = await async_client.get("/api/records", headers=patient_headers)
        assert response.status_code == 403

    async def test_push_token_validation(self, async_client, patient_headers):
        bad = await async_client.put("/api/profile/push-token", json={"expoPushToken": "abc"}, headers=patient_headers)
        assert bad.status_code == 400
        good = await async_client.put(
            "/api/profile/push-token", json={"expoPushToken": "ExpoPushToken[new]"}, headers=patient_headers
        )
        assert good.status_code == 200


@pytest.mark.asyncio
class TestPasswordLogin:
    async def _register(self, client, email="nila@example.com", password="correct-horse"):
        response = await client.post("/api/auth/register", json={
            "name": "Nila", "email": email, "password": password,
        })
        assert response.status_code == 201
        return response.json()

    async def test_login_after_registering(self, async_client):
        registered = await self._register(async_client)

        response = await async_client.post("/api/auth/login", json={
            "email": "Nila@Example.com", "password": "correct-horse",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == registered["user"]["id"]
        assert data["tokenType"] == "bearer"

        profile = await async_client.get("/api/profile", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert profile.json()["email"] == "nila@example.com"

    async def test_registering_again_is_refused_but_login_still_works(self, async_client):
        await self._register(async_client)
        again = await async_client.post("/api/auth/register", json={
            "name": "Nila", "email": "nila@example.com", "password": "correct-horse",
        })
        assert again.status_code == 400

        login = await async_client.post("/api/auth/login", json={
            "email": "nila@example.com", "password": "correct-horse",
        })
        assert login.status_code == 200

    async def test_wrong_password(self, async_client):
        await self._register(async_client)
        response = await async_client.post("/api/auth/login", json={
            "email": "nila@example.com", "password": "wrong-horse",
        })
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_unknown_email(self, async_client):
        response = await async_client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_account_without_password_cannot_log_in(self, async_client, patient):
        response = await async_client.post("/api/auth/login", json={"email": patient.email, "password": "anything"})
        assert response.status_code == 401

    async def test_password_never_returned(self, async_client):
        registered = await self._register(async_client)
        assert "password" not in str(registered["user"]).lower()

    async def test_short_password_rejected(self, async_client):
        response = await async_client.post("/api/auth/register", json={
            "name": "Nila", "email": "nila@example.com", "password": "abc",
        })
        assert response.status_code == 422


@pytest.mark.asyncio
class TestRecordEndpoints:
    async def test_create_record_extracts_and_predicts(self, async_client, patient_headers, push_requests):
        data = await _create_record(async_client, patient_headers)

        record = data["record"]
        assert record["tags"] == ["fasting", "quarterly"]
        assert record["extractedMetrics"] == {"bloodSugar": 250.0, "bloodPressure": "118/76", "cholesterol": 190.0}
        assert data["prediction"] == {"bloodSugar": "Critical", "bloodPressure": "Normal", "cholesterol": "Normal"}

        notes = await async_client.get("/api/notifications", headers=patient_headers)
        assert [n["title"] for n in notes.json()] == ["Blood Sugar Alert"]
        assert len(push_requests) == 1

    async def test_record_without_text_has_no_prediction(self, async_client, patient_headers):
        data = await _create_record(async_client, patient_headers, category="Prescription", extractedText=None)
        assert data["prediction"] is None

    async def test_invalid_category_rejected(self, async_client, patient_headers):
        response = await async_client.post(
            "/api/records", json={"category": "Selfie", "description": "x"}, headers=patient_headers
        )
        assert response.status_code == 422

    async def test_description_required(self, async_client, patient_headers):
        response = await async_client.post("/api/records", json={"category": "Imaging"}, headers=patient_headers)
        assert response.status_code == 422

    async def test_list_filter_and_counts(self, async_client, patient_headers):
        await _create_record(async_client, patient_headers)
        await _create_record(async_client, patient_headers, category="Imaging", extractedText=None)

        everything = await async_client.get("/api/records", headers=patient_headers)
        assert len(everything.json()) == 2

        imaging = await async_client.get("/api/records", params={"category": "imaging"}, headers=patient_headers)
        assert [r["category"] for r in imaging.json()] == ["Imaging"]

        counts = await async_client.get("/api/records/counts", headers=patient_headers)
        assert counts.json() == {
            "labReports": 1, "prescription": 0, "doctorNotes": 0, "imaging": 1, "medicalExpense": 0,
        }

    async def test_latest_metrics(self, async_client, patient_headers):
        missing = await async_client.get("/api/records/latest-metrics", headers=patient_headers)
        assert missing.status_code == 404

        await _create_record(async_client, patient_headers)
        latest = await async_client.get("/api/records/latest-metrics", headers=patient_headers)
        assert latest.status_code == 200
        assert latest.json()["bloodSugar"] == 250.0

    async def test_other_users_record_is_forbidden(self, async_client, patient_headers, other_headers):
        record_id = (await _create_record(async_client, patient_headers))["record"]["id"]

        response = await async_client.get(f"/api/records/{record_id}", headers=other_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Unauthorized access"

        response = await async_client.delete(f"/api/records/{record_id}", headers=other_headers)
        assert response.status_code == 403

    async def test_get_prediction_and_delete(self, async_client, patient_headers):
        record_id = (await _create_record(async_client, patient_headers))["record"]["id"]

        prediction = await async_client.get(f"/api/records/{record_id}/prediction", headers=patient_headers)
        assert prediction.status_code == 200
        assert prediction.json()["bloodSugar"] == "Critical"

        deleted = await async_client.delete(f"/api/records/{record_id}", headers=patient_headers)
        assert deleted.status_code == 200

        gone = await async_client.get(f"/api/records/{record_id}", headers=patient_headers)
        assert gone.status_code == 404
        assert gone.json()["error"] == "NOT_FOUND"


@pytest.mark.asyncio
class TestReminderEndpoints:
    async def test_reminder_lifecycle(self, async_client, patient_headers, store, patient):
        remind_at = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
        created = await async_client.post("/api/reminders", json={
            "title": "Metformin", "type": "medication", "remindAt": remind_at,
        }, headers=patient_headers)
        assert created.status_code == 201
        reminder = created.json()
        assert reminder["message"] == "Metformin"

        scheduled = [n for n in store.notifications.values() if n.reminder_id == reminder["id"]]
        assert len(scheduled) == 1
        assert scheduled[0].title == "Reminder: Metformin"
        assert scheduled[0].scheduled_at is not None

        upcoming = await async_client.get("/api/reminders/upcoming", headers=patient_headers)
        assert [r["id"] for r in upcoming.json()] == [reminder["id"]]

        renamed = await async_client.put(
            f"/api/reminders/{reminder['id']}", json={"title": "Metformin 500mg"}, headers=patient_headers
        )
        assert renamed.json()["title"] == "Metformin 500mg"
        scheduled = [n for n in store.notifications.values() if n.reminder_id == reminder["id"]]
        assert [n.title for n in scheduled] == ["Reminder: Metformin 500mg"]

        done = await async_client.put(
            f"/api/reminders/{reminder['id']}", json={"isCompleted": True}, headers=patient_headers
        )
        assert done.json()["isCompleted"] is True
        assert not [n for n in store.notifications.values() if n.reminder_id == reminder["id"]]

        upcoming = await async_client.get("/api/reminders/upcoming", headers=patient_headers)
        assert upcoming.json() == []

        deleted = await async_client.delete(f"/api/reminders/{reminder['id']}", headers=patient_headers)
        assert deleted.status_code == 200

    async def test_title_length_limit(self, async_client, patient_headers):
        response = await async_client.post("/api/reminders", json={
            "title": "x" * 101, "remindAt": datetime.now(timezone.utc).isoformat(),
        }, headers=patient_headers)
        assert response.status_code == 422

    async def test_cannot_edit_someone_elses_reminder(self, async_client, patient_headers, other_headers):
        created = await async_client.post("/api/reminders", json={
            "title": "Checkup", "remindAt": "2030-01-01T09:00:00",
        }, headers=patient_headers)
        response = await async_client.put(
            f"/api/reminders/{created.json()['id']}", json={"title": "hijack"}, headers=other_headers
        )
        assert response.status_code == 404


@pytest.mark.asyncio
class TestNotificationEndpoints:
    async def test_read_and_delete(self, async_client, patient_headers):
        await _create_record(async_client, patient_headers)
        notes = (await async_client.get("/api/notifications", headers=patient_headers)).json()
        note_id = notes[0]["id"]

        read = await async_client.put(f"/api/notifications/{note_id}/read", headers=patient_headers)
        assert read.json()["isRead"] is True

        deleted = await async_client.delete(f"/api/notifications/{note_id}", headers=patient_headers)
        assert deleted.status_code == 200
        assert (await async_client.get("/api/notifications", headers=patient_headers)).json() == []

    async def test_mark_all_and_delete_all(self, async_client, patient_headers):
        await _create_record(async_client, patient_headers, extractedText="Blood sugar 40 Cholesterol 300")

        marked = await async_client.put("/api/notifications/mark-all-read", headers=patient_headers)
        assert marked.json()["updated"] == 2

        cleared = await async_client.delete("/api/notifications/delete-all", headers=patient_headers)
        assert cleared.json()["deleted"] == 2

    async def test_other_users_notification_not_found(self, async_client, patient_headers, other_headers):
        await _create_record(async_client, patient_headers)
        note_id = (await async_client.get("/api/notifications", headers=patient_headers)).json()[0]["id"]
        response = await async_client.put(f"/api/notifications/{note_id}/read", headers=other_headers)
        assert response.status_code == 404

    async def test_broadcast_can_be_read_and_dismissed(
        self, async_client, superadmin_headers, patient_headers, other_headers
    ):
        await async_client.post("/api/superadmin/notifications/send", json={
            "title": "Clinic closed", "message": "Closed on Monday", "role": "all",
        }, headers=superadmin_headers)
        inbox = (await async_client.get("/api/notifications", headers=patient_headers)).json()
        note_id = inbox[0]["id"]
        assert inbox[0]["isRead"] is False

        read = await async_client.put(f"/api/notifications/{note_id}/read", headers=patient_headers)
        assert read.status_code == 200
        assert read.json()["isRead"] is True

        dashboard = (await async_client.get("/api/dashboard", headers=patient_headers)).json()
        assert dashboard["unreadNotifications"] == 0
        others = (await async_client.get("/api/notifications", headers=other_headers)).json()
        assert others[0]["isRead"] is False

        deleted = await async_client.delete(f"/api/notifications/{note_id}", headers=patient_headers)
        assert deleted.status_code == 200
        assert (await async_client.get("/api/notifications", headers=patient_headers)).json() == []
        assert len((await async_client.get("/api/notifications", headers=other_headers)).json()) == 1

    async def test_mark_all_read_covers_broadcasts(self, async_client, superadmin_headers, patient_headers):
        await _create_record(async_client, patient_headers)
        await async_client.post("/api/superadmin/notifications/send", json={
            "title": "Camp", "message": "Free screening", "role": "user",
        }, headers=superadmin_headers)

        marked = await async_client.put("/api/notifications/mark-all-read", headers=patient_headers)
        assert marked.json()["updated"] == 2
        dashboard = (await async_client.get("/api/dashboard", headers=patient_headers)).json()
        assert dashboard["unreadNotifications"] == 0

    async def test_future_reminder_not_in_inbox_yet(self, async_client, patient_headers):
        await async_client.post("/api/reminders", json={
            "title": "Dentist", "remindAt": (datetime.now(timezone.utc) + timedelta(days=3)).isoformat(),
        }, headers=patient_headers)

        assert (await async_client.get("/api/notifications", headers=patient_headers)).json() == []
        dashboard = (await async_client.get("/api/dashboard", headers=patient_headers)).json()
        assert dashboard["unreadNotifications"] == 0
        assert [r["title"] for r in dashboard["upcomingReminders"]] == ["Dentist"]


@pytest.mark.asyncio
class TestFamilyAndDashboard:
    async def test_family_members(self, async_client, patient_headers, other_headers):
        added = await async_client.post("/api/family", json={
            "name": "Lakshmi", "relation": "Mother", "dateOfBirth": "1960-04-12",
        }, headers=patient_headers)
        assert added.status_code == 201
        member = added.json()
        assert member["dateOfBirth"] == "1960-04-12"

        listed = await async_client.get("/api/family", headers=patient_headers)
        assert [m["name"] for m in listed.json()] == ["Lakshmi"]

        foreign = await async_client.delete(f"/api/family/{member['id']}", headers=other_headers)
        assert foreign.status_code == 404

        removed = await async_client.delete(f"/api/family/{member['id']}", headers=patient_headers)
        assert removed.status_code == 200

    async def test_dashboard(self, async_client, patient_headers):
        empty = (await async_client.get("/api/dashboard", headers=patient_headers)).json()
        assert empty["latestSeverity"] is None
        assert len(empty["wellnessTips"]) > 0

        await _create_record(async_client, patient_headers)
        data = (await async_client.get("/api/dashboard", headers=patient_headers)).json()
        assert data["latestSeverity"]["bloodSugar"] == "Critical"
        assert data["unreadNotifications"] == 1
        assert data["recordCounts"]["Lab Report"] == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
