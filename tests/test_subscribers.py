"""
Tests for subscriber storage and the subscribe/admin endpoints.
"""

import json
from datetime import timedelta

import pytest
from jose import jwt

from fincalc.auth.jwt import create_admin_token, decode_admin_token
from fincalc.config import get_settings
from fincalc.services.subscribers import (
    CSV_HEADERS,
    SubscriberStore,
    SubscriberStoreError,
    export_csv,
)


class TestSubscriberStore:
    """Test the flat-file store."""

    def test_missing_file_is_empty(self, subscriber_store):
        assert subscriber_store.list() == []

    def test_append_creates_file(self, subscriber_store, subscribers_file):
        record, created = subscriber_store.append_or_update(
            "Jane@FinCalc.io", source="fire", path="/fire"
        )
        assert created
        assert record["email"] == "jane@fincalc.io"
        assert record["subscribedAt"] == record["lastUpdated"]

        stored = json.loads(subscribers_file.read_text())
        assert stored == [record]

    def test_update_matches_case_insensitively(self, subscriber_store):
        first, _ = subscriber_store.append_or_update("jane@fincalc.io", source="fire")
        second, created = subscriber_store.append_or_update(
            "JANE@fincalc.io", source="sip", path="/sip"
        )

        assert not created
        assert second["subscribedAt"] == first["subscribedAt"]
        assert second["source"] == "sip"
        assert len(subscriber_store.list()) == 1

    def test_metadata_is_kept(self, subscriber_store):
        record, _ = subscriber_store.append_or_update(
            "jane@fincalc.io", metadata={"monthlyExpense": 60000}
        )
        assert record["monthlyExpense"] == 60000
        assert subscriber_store.list()[0]["monthlyExpense"] == 60000

    def test_corrupt_file_raises(self, subscriber_store, subscribers_file):
        subscribers_file.parent.mkdir(parents=True)
        subscribers_file.write_text("{not json")

        with pytest.raises(SubscriberStoreError):
            subscriber_store.list()

    def test_non_list_file_raises(self, subscriber_store, subscribers_file):
        subscribers_file.parent.mkdir(parents=True)
        subscribers_file.write_text('{"email": "jane@fincalc.io"}')

        with pytest.raises(SubscriberStoreError):
            subscriber_store.append_or_update("jane@fincalc.io")

    def test_failed_replace_leaves_no_temp_file(
        self, subscriber_store, subscribers_file, monkeypatch
    ):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("fincalc.services.subscribers.os.replace", fail_replace)

        with pytest.raises(SubscriberStoreError):
            subscriber_store.append_or_update("jane@fincalc.io")
        assert list(subscribers_file.parent.iterdir()) == []

    def test_unserialisable_metadata_leaves_file_intact(
        self, subscriber_store, subscribers_file
    ):
        subscriber_store.append_or_update("jane@fincalc.io")

        with pytest.raises(SubscriberStoreError):
            subscriber_store.append_or_update("bob@fincalc.io", metadata={"when": object()})
        assert list(subscribers_file.parent.iterdir()) == [subscribers_file]
        assert [s["email"] for s in subscriber_store.list()] == ["jane@fincalc.io"]

    def test_separate_stores_share_file(self, subscribers_file):
        SubscriberStore(str(subscribers_file)).append_or_update("a@fincalc.io")
        SubscriberStore(str(subscribers_file)).append_or_update("b@fincalc.io")
        emails = [s["email"] for s in SubscriberStore(str(subscribers_file)).list()]
        assert emails == ["a@fincalc.io", "b@fincalc.io"]


class TestExportCSV:
    """Test CSV rendering."""

    def test_empty(self):
        assert export_csv([]) == '"Email","Subscribed At","Source","Path"\n'

    def test_rows_are_quoted(self):
        csv_text = export_csv(
            [
                {
                    "email": "jane@fincalc.io",
                    "subscribedAt": "2025-01-01T00:00:00+00:00",
                    "source": "debt, payoff",
                    "path": None,
                }
            ]
        )
        lines = csv_text.splitlines()
        assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
        assert lines[1] == (
            '"jane@fincalc.io","2025-01-01T00:00:00+00:00","debt, payoff",""'
        )


def _admin_headers():
    token = create_admin_token()
    return {"Authorization": f"Bearer {token}"}


class TestSubscribeAPI:
    """Test the public subscribe endpoint."""

    def test_subscribe_new(self, client, email_outbox, subscriber_store):
        response = client.post(
            "/api/subscribe",
            json={"email": "jane@fincalc.io", "source": "fire", "path": "/fire"},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Successfully subscribed"}
        assert email_outbox.sent == [
            {"to": "jane@fincalc.io", "source": "fire", "path": "/fire"}
        ]
        assert subscriber_store.list()[0]["source"] == "fire"

    def test_subscribe_again_updates(self, client, email_outbox, subscriber_store):
        client.post("/api/subscribe", json={"email": "jane@fincalc.io"})
        response = client.post(
            "/api/subscribe", json={"email": "Jane@fincalc.io", "source": "sip"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Subscription updated"
        # Only the first subscription sends a welcome email
        assert len(email_outbox.sent) == 1
        assert len(subscriber_store.list()) == 1

    def test_extra_fields_are_stored(self, client, subscriber_store):
        response = client.post(
            "/api/subscribe",
            json={"email": "jane@fincalc.io", "retirementAge": 55},
        )
        assert response.status_code == 200
        assert subscriber_store.list()[0]["retirementAge"] == 55

    def test_invalid_email(self, client, email_outbox):
        response = client.post("/api/subscribe", json={"email": "not-an-email"})
        assert response.status_code == 422
        assert email_outbox.sent == []

    def test_store_failure(self, client, subscribers_file, email_outbox):
        subscribers_file.parent.mkdir(parents=True)
        subscribers_file.write_text("[broken")

        response = client.post("/api/subscribe", json={"email": "jane@fincalc.io"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to process subscription"
        assert email_outbox.sent == []


class TestAdminAPI:
    """Test admin login and subscriber listing."""

    def test_wrong_password(self, client):
        response = client.post("/api/admin/auth", json={"password": "wrong"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"

    def test_login_returns_token(self, client):
        response = client.post(
            "/api/admin/auth", json={"password": get_settings().admin_password}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"]
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert "access_token" in response.cookies

    def test_list_requires_token(self, client):
        response = client.get("/api/subscribers")
        assert response.status_code == 401

    def test_list_rejects_garbage_token(self, client):
        response = client.get(
            "/api/subscribers", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    def test_list_with_bearer_token(self, client, subscriber_store):
        subscriber_store.append_or_update("jane@fincalc.io", source="fire")

        response = client.get("/api/subscribers", headers=_admin_headers())
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["subscribers"][0]["email"] == "jane@fincalc.io"

    def test_list_with_cookie(self, client):
        login = client.post(
            "/api/admin/auth", json={"password": get_settings().admin_password}
        )
        client.cookies.clear()

        response = client.get(
            "/api/subscribers",
            headers={"Cookie": f"access_token={login.json()['access_token']}"},
        )
        assert response.status_code == 200
        assert response.json() == {"subscribers": [], "count": 0}

    def test_list_corrupt_file(self, client, subscribers_file):
        subscribers_file.parent.mkdir(parents=True)
        subscribers_file.write_text("nope")

        response = client.get("/api/subscribers", headers=_admin_headers())
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to read subscribers"

    def test_export_csv(self, client, subscriber_store):
        subscriber_store.append_or_update("jane@fincalc.io", source="fire", path="/fire")

        response = client.get("/api/subscribers/export", headers=_admin_headers())
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert len(lines) == 2
        assert lines[1].startswith('"jane@fincalc.io"')
        assert lines[1].endswith('"fire","/fire"')

    def test_export_requires_token(self, client):
        response = client.get("/api/subscribers/export")
        assert response.status_code == 401

    def test_expired_token_rejected(self, client):
        token = create_admin_token(expires_delta=timedelta(minutes=-1))
        response = client.get(
            "/api/subscribers", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestAdminTokens:
    """Test token issue and validation."""

    def test_round_trip_claims(self):
        claims = decode_admin_token(create_admin_token())
        assert claims["sub"] == "admin"
        assert claims["type"] == "access"

    def test_wrong_secret_rejected(self):
        forged = jwt.encode({"sub": "admin", "type": "access"}, "not-the-secret")
        assert decode_admin_token(forged) is None

    def test_other_subject_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "someone", "type": "access"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_admin_token(token) is None
