"""HTTP-level tests: routing, payload validation and error mapping.

Stores are swapped for in-memory doubles through FastAPI dependency
overrides, so no database is touched and the lifespan is not run.
"""
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.api.deps import (
    get_chat_store,
    get_preview_chat_store,
    get_profile_store,
    get_request_store,
)
from app.database import get_isolated_db
from app.main import app
from tests.fakes import FakeChatStore, FakeProfileStore, FakeRequestStore

API = "/api/v1"


@pytest.fixture
def stores():
    return {
        "profiles": FakeProfileStore(),
        "requests": FakeRequestStore(),
        "chats": FakeChatStore(),
    }


@pytest.fixture
def client(stores):
    app.dependency_overrides[get_profile_store] = lambda: stores["profiles"]
    app.dependency_overrides[get_request_store] = lambda: stores["requests"]
    app.dependency_overrides[get_chat_store] = lambda: stores["chats"]
    app.dependency_overrides[get_preview_chat_store] = lambda: stores["chats"]
    yield TestClient(app)
    app.dependency_overrides.clear()


def _put_profile(client, user_id, **overrides):
    body = {
        "role": "supporter",
        "first_name": "Priya Shah",
        "primary_category": "Breast Cancer",
        "secondary_category": "Chemotherapy",
        "support_tags": ["Peer Support"],
    }
    body.update(overrides)
    return client.put(f"{API}/profiles/{user_id}", json=body)


def _send(client, sender="alice", receiver="bob"):
    return client.post(
        f"{API}/connections/requests",
        json={
            "sender_id": sender,
            "sender_name": sender.title(),
            "receiver_id": receiver,
            "receiver_name": receiver.title(),
        },
    )


class TestHealth:

    def test_liveness(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestProfilesApi:

    def test_put_then_get(self, client):
        response = _put_profile(client, "p1")
        assert response.status_code == 200
        assert response.json()["first_name"] == "Priya"

        fetched = client.get(f"{API}/profiles/p1").json()
        assert fetched["available"] is True
        assert fetched["support_tags"] == ["Peer Support"]

    def test_missing_profile_is_404(self, client):
        response = client.get(f"{API}/profiles/ghost")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_availability_toggle(self, client):
        _put_profile(client, "p1")
        response = client.patch(f"{API}/profiles/p1/availability", json={"available": False})
        assert response.status_code == 200
        assert response.json()["available"] is False

    def test_list_by_role(self, client):
        _put_profile(client, "p1")
        _put_profile(client, "s1", role="seeker")
        response = client.get(f"{API}/profiles", params={"role": "supporter"})
        assert [p["id"] for p in response.json()] == ["p1"]

    def test_invalid_role_is_422(self, client):
        response = _put_profile(client, "p1", role="mentor")
        assert response.status_code == 422


class TestMatchingApi:

    def test_rank_worked_example(self, client):
        _put_profile(client, "x")
        _put_profile(client, "y", primary_category="Lung Cancer", secondary_category=None, support_tags=[])
        _put_profile(client, "hidden", available=False)

        response = client.post(
            f"{API}/match/rank",
            json={
                "role": "seeker",
                "attributes": {
                    "primary_category": "Breast Cancer",
                    "secondary_category": "Chemotherapy",
                    "support_tags": ["Peer Support", "Spiritual"],
                },
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        first, second = body["candidates"]
        assert (first["profile"]["id"], first["score"], first["tier"]) == ("x", 110, "best")
        assert first["reasons"] == [
            "same primary category",
            "same secondary category",
            "1 support match",
        ]
        assert (second["profile"]["id"], second["score"], second["tier"]) == ("y", 0, "other")
        assert body["tier_counts"] == {"best": 1, "good": 0, "other": 1}

    def test_rank_for_unknown_user(self, client):
        assert client.get(f"{API}/match/for/ghost").status_code == 404

    def test_rank_for_stored_user(self, client):
        _put_profile(client, "x")
        _put_profile(client, "s1", role="seeker", first_name="Maya")
        body = client.get(f"{API}/match/for/s1").json()
        assert [c["profile"]["id"] for c in body["candidates"]] == ["x"]


class TestConnectionsApi:

    def test_full_lifecycle(self, client):
        created = _send(client)
        assert created.status_code == 201
        request_id = created.json()["request_id"]

        status = client.get(
            f"{API}/connections/status", params={"user_a": "bob", "user_b": "alice"}
        ).json()
        assert status["status"] == "pending_received"
        assert status["request_id"] == request_id

        received = client.get(f"{API}/connections/requests/received/bob").json()
        assert [r["id"] for r in received] == [request_id]

        accepted = client.post(f"{API}/connections/requests/{request_id}/accept")
        assert accepted.status_code == 200
        assert accepted.json() == {"chat_id": "alice_bob"}

        status = client.get(
            f"{API}/connections/status", params={"user_a": "alice", "user_b": "bob"}
        ).json()
        assert status["status"] == "connected"
        assert status["chat_id"] == "alice_bob"

    def test_duplicate_is_409(self, client):
        _send(client, "alice", "bob")
        response = _send(client, "bob", "alice")
        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_request"

    def test_self_request_is_422(self, client):
        response = _send(client, "alice", "alice")
        assert response.status_code == 422
        assert response.json()["code"] == "self_connection"

    def test_separator_in_id_is_422(self, client):
        response = _send(client, "a_b", "c")
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_user_id"

    def test_reject_then_accept_is_409(self, client):
        request_id = _send(client).json()["request_id"]
        assert client.post(f"{API}/connections/requests/{request_id}/reject").status_code == 204

        response = client.post(f"{API}/connections/requests/{request_id}/accept")
        assert response.status_code == 409
        assert response.json()["code"] == "invalid_request_state"

    def test_cancel_and_resend(self, client):
        request_id = _send(client).json()["request_id"]
        assert client.delete(f"{API}/connections/requests/{request_id}").status_code == 204
        assert client.get(f"{API}/connections/requests/sent/alice").json() == []
        assert _send(client).status_code == 201

    def test_unknown_request_is_404(self, client):
        response = client.delete(f"{API}/connections/requests/{uuid.uuid4()}")
        assert response.status_code == 404


class TestChatsApi:

    def test_create_list_and_preview(self, client):
        created = client.post(
            f"{API}/chats",
            json={"user_a": "zoe", "user_b": "adam", "name_a": "Zoe Park", "name_b": "Adam Lee"},
        )
        assert created.json() == {"chat_id": "adam_zoe"}

        ack = client.post(
            f"{API}/chats/adam_zoe/last-message",
            json={"text": "hello", "sender_id": "zoe", "sender_name": "Zoe"},
        )
        assert ack.status_code == 202
        assert ack.json() == {"chat_id": "adam_zoe", "updated": True}

        chats = client.get(f"{API}/chats/user/adam").json()
        assert [c["id"] for c in chats] == ["adam_zoe"]
        assert chats[0]["last_message"]["text"] == "hello"

        other = client.get(f"{API}/chats/adam_zoe/other/adam").json()
        assert other == {"user_id": "zoe", "first_name": "Zoe"}

    def test_preview_for_missing_chat_still_accepted(self, client):
        ack = client.post(
            f"{API}/chats/nope/last-message",
            json={"text": "hello", "sender_id": "zoe", "sender_name": "Zoe"},
        )
        assert ack.status_code == 202
        assert ack.json()["updated"] is False

    def test_create_without_trailing_slash_is_not_redirected(self, client):
        response = client.post(
            f"{API}/chats",
            json={"user_a": "a", "user_b": "b", "name_a": "Ann", "name_b": "Ben"},
            follow_redirects=False,
        )
        assert response.status_code == 200
        assert response.json() == {"chat_id": "a_b"}

    def test_preview_commit_failure_still_accepted(self, client):
        session = MagicMock()
        session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("connection reset"))
        )

        async def failing_session():
            yield session

        app.dependency_overrides.pop(get_preview_chat_store)
        app.dependency_overrides[get_isolated_db] = failing_session

        ack = client.post(
            f"{API}/chats/a_b/last-message",
            json={"text": "hello", "sender_id": "a", "sender_name": "Ann"},
        )
        assert ack.status_code == 202
        assert ack.json() == {"chat_id": "a_b", "updated": False}
        session.commit.assert_awaited_once()
