"""Integration tests for the HTTP API against a SQLite database."""

import uuid

import pytest_asyncio
from httpx import AsyncClient

API = "/api/v1"


async def register(client: AsyncClient, username: str) -> dict:
    response = await client.post(
        f"{API}/auth/register",
        json={
            "email": f"{username}@example.com",
            "username": username,
            "password": "SecurePass123",
        },
    )
    assert response.status_code == 201, response.text
    data = response.json()
    return {
        "id": data["user"]["id"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest_asyncio.fixture
async def users(client: AsyncClient) -> dict:
    return {name: await register(client, name) for name in ("asker", "helper", "voter", "other")}


@pytest_asyncio.fixture
async def thread(client: AsyncClient, users: dict) -> dict:
    """A question from asker with one answer from helper."""
    response = await client.post(
        f"{API}/questions",
        json={"title": "How do I flatten a list?", "body": "Nested one level."},
        headers=users["asker"]["headers"],
    )
    assert response.status_code == 201, response.text
    question = response.json()

    response = await client.post(
        f"{API}/questions/{question['id']}/answers",
        json={"content": "Use itertools.chain."},
        headers=users["helper"]["headers"],
    )
    assert response.status_code == 201, response.text
    return {"question": question, "answer": response.json()["answer"]}


class TestAuthAPI:
    """Tests for /api/v1/auth endpoints."""

    async def test_register_and_me(self, client: AsyncClient):
        user = await register(client, "newuser")

        response = await client.get(f"{API}/auth/me", headers=user["headers"])

        assert response.status_code == 200
        assert response.json()["username"] == "newuser"

    async def test_register_duplicate(self, client: AsyncClient):
        await register(client, "dupe")
        response = await client.post(
            f"{API}/auth/register",
            json={"email": "dupe@example.com", "username": "dupe2", "password": "SecurePass123"},
        )
        assert response.status_code == 400

    async def test_login(self, client: AsyncClient):
        await register(client, "loginuser")

        ok = await client.post(
            f"{API}/auth/login",
            json={"email": "loginuser@example.com", "password": "SecurePass123"},
        )
        bad = await client.post(
            f"{API}/auth/login",
            json={"email": "loginuser@example.com", "password": "WrongPass123"},
        )

        assert ok.status_code == 200
        assert "access_token" in ok.json()
        assert bad.status_code == 401

    async def test_commands_require_token(self, client: AsyncClient):
        response = await client.post(
            f"{API}/vote",
            json={"target_kind": "answer", "target_id": str(uuid.uuid4()), "direction": "up"},
        )
        assert response.status_code == 401


class TestVoteAPI:
    """Tests for POST /vote."""

    async def test_vote_toggle_and_switch(self, client: AsyncClient, users, thread):
        body = {"target_kind": "answer", "target_id": thread["answer"]["id"], "direction": "up"}
        headers = users["voter"]["headers"]

        first = await client.post(f"{API}/vote", json=body, headers=headers)
        second = await client.post(f"{API}/vote", json=body, headers=headers)
        third = await client.post(
            f"{API}/vote", json={**body, "direction": "down"}, headers=headers
        )

        assert first.json()["score"] == 1
        assert first.json()["current_vote"] == "up"
        assert second.json()["score"] == 0
        assert second.json()["current_vote"] is None
        assert third.json()["score"] == -1
        assert "warnings" not in third.json()

    async def test_invalid_direction(self, client: AsyncClient, users, thread):
        response = await client.post(
            f"{API}/vote",
            json={"target_kind": "answer", "target_id": thread["answer"]["id"], "direction": "sideways"},
            headers=users["voter"]["headers"],
        )
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_argument"

    async def test_vote_on_missing_entity(self, client: AsyncClient, users):
        response = await client.post(
            f"{API}/vote",
            json={"target_kind": "question", "target_id": str(uuid.uuid4()), "direction": "up"},
            headers=users["voter"]["headers"],
        )
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestAcceptAPI:
    """Tests for POST /accept."""

    async def test_accept_and_switch(self, client: AsyncClient, users, thread):
        question_id = thread["question"]["id"]
        first_answer = thread["answer"]["id"]
        second = await client.post(
            f"{API}/questions/{question_id}/answers",
            json={"content": "Use a list comprehension."},
            headers=users["other"]["headers"],
        )
        second_answer = second.json()["answer"]["id"]

        accepted = await client.post(
            f"{API}/accept",
            json={"question_id": question_id, "answer_id": first_answer},
            headers=users["asker"]["headers"],
        )
        switched = await client.post(
            f"{API}/accept",
            json={"question_id": question_id, "answer_id": second_answer},
            headers=users["asker"]["headers"],
        )

        assert accepted.status_code == 200
        assert accepted.json() == {
            "accepted_answer_id": first_answer,
            "changed": True,
            "warnings": [],
        }
        assert switched.json()["accepted_answer_id"] == second_answer

        detail = (await client.get(f"{API}/questions/{question_id}")).json()
        assert detail["accepted_answer_id"] == second_answer
        flags = {a["id"]: a["is_accepted"] for a in detail["answers"]}
        assert flags == {first_answer: False, second_answer: True}

    async def test_non_author_forbidden(self, client: AsyncClient, users, thread):
        response = await client.post(
            f"{API}/accept",
            json={"question_id": thread["question"]["id"], "answer_id": thread["answer"]["id"]},
            headers=users["helper"]["headers"],
        )

        assert response.status_code == 403
        assert response.json()["code"] == "unauthorized"
        detail = (await client.get(f"{API}/questions/{thread['question']['id']}")).json()
        assert detail["accepted_answer_id"] is None

    async def test_answer_from_other_question(self, client: AsyncClient, users, thread):
        other = await client.post(
            f"{API}/questions",
            json={"title": "Unrelated"},
            headers=users["asker"]["headers"],
        )

        response = await client.post(
            f"{API}/accept",
            json={"question_id": other.json()["id"], "answer_id": thread["answer"]["id"]},
            headers=users["asker"]["headers"],
        )

        assert response.status_code == 422
        assert response.json()["code"] == "invalid_reference"


class TestNotificationAPI:
    """Tests for the notification feed."""

    async def test_answer_and_accept_notify(self, client: AsyncClient, users, thread):
        asker_feed = await client.get(f"{API}/notifications", headers=users["asker"]["headers"])
        items = asker_feed.json()["items"]
        assert asker_feed.json()["total"] == 1
        assert items[0]["kind"] == "answer-posted"
        assert items[0]["message"] == "helper answered your question: How do I flatten a list?"

        await client.post(
            f"{API}/accept",
            json={"question_id": thread["question"]["id"], "answer_id": thread["answer"]["id"]},
            headers=users["asker"]["headers"],
        )

        unread = await client.get(
            f"{API}/notifications/unread-count", headers=users["helper"]["headers"]
        )
        assert unread.json() == {"unread": 1}

    async def test_self_answer_is_silent(self, client: AsyncClient, users):
        question = await client.post(
            f"{API}/questions",
            json={"title": "Answering myself"},
            headers=users["asker"]["headers"],
        )
        await client.post(
            f"{API}/questions/{question.json()['id']}/answers",
            json={"content": "Figured it out."},
            headers=users["asker"]["headers"],
        )

        feed = await client.get(f"{API}/notifications", headers=users["asker"]["headers"])
        assert feed.json()["total"] == 0


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.headers["X-Request-ID"] == "abc123"


class TestErrorMapping:
    """Engine error codes that can reach the HTTP layer."""

    def test_only_caller_facing_codes_are_mapped(self):
        from stackit.kernel import errors
        from stackit.main import ERROR_STATUS

        # Version conflicts are retried and end as ConflictError; delivery
        # failures come back as warnings on a successful result.
        internal = {errors.VersionConflictError.code, errors.NotificationDeliveryFailure.code}
        raised = {cls.code for cls in errors.EngineError.__subclasses__()} - internal

        assert set(ERROR_STATUS) == raised
        assert ERROR_STATUS["conflict"] == 409
