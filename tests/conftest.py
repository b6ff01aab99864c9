"""Shared fixtures: a harness wired to an in-process fake Slack app."""
from __future__ import annotations

import json
from typing import Any, Callable
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

from slack_harness.services.dispatcher import AppClient
from slack_harness.services.harness import SlackHarness
from slack_harness.services.signing import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_signature

SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
TEAM_ID = "T_TEST"
EVENTS_URL = "http://bot.test/slack/events"
ACTIONS_URL = "http://bot.test/slack/actions"


class FakeBot:
    """Stand-in for the application under test.

    Receives the harness's signed events and interactions through an
    httpx.MockTransport and reacts by calling the mock Web API, the way a
    real bot would call Slack.  Reactions are plain callables set per test.
    """

    def __init__(self, secret: str):
        self.secret = secret
        self.api: TestClient | None = None
        self.events: list[dict] = []
        self.interactions: list[dict] = []
        self.on_event: Callable[[dict], None] | None = None
        self.on_action: Callable[[dict], dict | None] | None = None
        self.status_code = 200

    def attach(self, api: TestClient) -> None:
        self.api = api

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = request.content.decode("utf-8")
        if not verify_signature(
            self.secret,
            request.headers.get(TIMESTAMP_HEADER, ""),
            body,
            request.headers.get(SIGNATURE_HEADER, ""),
        ):
            return httpx.Response(401)

        if request.url.path.endswith("/events"):
            event = json.loads(body)
            self.events.append(event)
            if self.on_event:
                self.on_event(event)
            return httpx.Response(self.status_code)

        payload = json.loads(parse_qs(body)["payload"][0])
        self.interactions.append(payload)
        result = self.on_action(payload) if self.on_action else None
        if result is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=result)

    # -- Web API calls, form-encoded like most Slack SDKs send them --

    def post_message(self, channel: str, blocks: list[dict]) -> str:
        response = self.api.post(
            "/api/chat.postMessage",
            data={"channel": channel, "blocks": json.dumps(blocks)},
        )
        assert response.status_code == 200
        return response.json()["ts"]

    def update_message(self, channel: str, ts: str, blocks: list[dict]) -> None:
        response = self.api.post(
            "/api/chat.update",
            data={"channel": channel, "ts": ts, "blocks": json.dumps(blocks)},
        )
        assert response.status_code == 200

    def respond(self, response_url: str, blocks: list[dict]) -> None:
        response = self.api.post(urlparse(response_url).path, json={"blocks": blocks, "replace_original": True})
        assert response.status_code == 200

    def open_modal(self, trigger_id: str, view: dict) -> None:
        response = self.api.post("/api/views.open", json={"trigger_id": trigger_id, "view": view})
        assert response.status_code == 200

    def publish_home(self, user_id: str, view: dict) -> None:
        response = self.api.post("/api/views.publish", json={"user_id": user_id, "view": view})
        assert response.status_code == 200


@pytest.fixture
def bot() -> FakeBot:
    return FakeBot(SECRET)


@pytest.fixture
def harness(bot: FakeBot):
    client = AppClient(
        events_url=EVENTS_URL,
        actions_url=ACTIONS_URL,
        signing_secret=SECRET,
        team_id=TEAM_ID,
        http_client=httpx.Client(transport=httpx.MockTransport(bot)),
    )
    h = SlackHarness(
        team_id=TEAM_ID,
        public_url="http://harness.test",
        app_client=client,
        home_timeout=1.0,
        message_timeout=1.0,
        modal_timeout=1.0,
    )
    bot.attach(TestClient(h.app))
    yield h
    h.close()


def action_id_of(payload: dict[str, Any]) -> str:
    return payload["actions"][0]["action_id"] if payload.get("actions") else ""
