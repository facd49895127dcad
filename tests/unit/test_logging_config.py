"""Unit tests for structured logging and request correlation."""

import json
import logging
import uuid

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from stackit.api.middleware.request_id import RequestIdMiddleware, resolve_request_id
from stackit.kernel.store import VoteDirection
from stackit.logging_config import (
    DevFormatter,
    JsonFormatter,
    RequestIdFilter,
    get_request_id,
    request_id_var,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="stackit.engines.voting.facade",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Vote committed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    RequestIdFilter().filter(record)
    return record


class TestJsonFormatter:
    """Tests for production log lines."""

    def test_engine_fields_are_serialized(self):
        entity_id = uuid.uuid4()
        repaired = [uuid.uuid4(), uuid.uuid4()]
        token = request_id_var.set("req-42")
        try:
            record = make_record(
                entity_id=entity_id,
                answer_ids=repaired,
                direction=VoteDirection.UP,
                attempts=5,
            )
        finally:
            request_id_var.reset(token)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["msg"] == "Vote committed"
        assert payload["request_id"] == "req-42"
        assert payload["entity_id"] == str(entity_id)
        assert payload["answer_ids"] == [str(a) for a in repaired]
        assert payload["direction"] == "up"
        assert payload["attempts"] == 5

    def test_voter_sets_become_sorted_lists(self):
        payload = json.loads(JsonFormatter().format(make_record(voters=frozenset({"b", "a"}))))

        assert payload["voters"] == ["a", "b"]
        assert "request_id" not in payload


class TestDevFormatter:
    def test_fields_appended(self):
        line = DevFormatter().format(make_record(operation="vote", attempts=3))

        assert "req=- Vote committed" in line
        assert line.endswith('operation="vote" attempts=3')


class TestRequestIdMiddleware:
    """Tests for X-Request-ID handling."""

    @staticmethod
    def make_client() -> AsyncClient:
        app = FastAPI()
        app.add_middleware(RequestIdMiddleware)

        @app.get("/echo")
        async def echo():
            return {"request_id": get_request_id()}

        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    async def test_incoming_id_is_reused_and_bound(self):
        async with self.make_client() as client:
            response = await client.get("/echo", headers={"X-Request-ID": "cli-7.a_b"})

        assert response.headers["X-Request-ID"] == "cli-7.a_b"
        assert response.json() == {"request_id": "cli-7.a_b"}

    async def test_malformed_id_is_replaced(self):
        async with self.make_client() as client:
            response = await client.get("/echo", headers={"X-Request-ID": "not/valid id"})

        issued = response.headers["X-Request-ID"]
        assert issued != "not/valid id"
        assert uuid.UUID(issued)
        assert response.json() == {"request_id": issued}

    def test_resolve_request_id(self):
        assert resolve_request_id("x" * 64) == "x" * 64
        assert resolve_request_id("x" * 65) != "x" * 65
        assert uuid.UUID(resolve_request_id(None))
