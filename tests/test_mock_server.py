import json

import pytest
from block_kit import actions, button, home, modal, section
from fastapi.testclient import TestClient

from slack_harness.app.main import create_app
from slack_harness.domain.blocks import ButtonElement
from slack_harness.domain.models import SlackUser
from slack_harness.state.store import HarnessState


@pytest.fixture
def state():
    return HarnessState()


@pytest.fixture
def api(state):
    return TestClient(create_app(state))


def test_post_message_form_encoded(api, state):
    response = api.post(
        "/api/chat.postMessage",
        data={"channel": "U1", "text": "hi", "blocks": json.dumps([section("Hello")])},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["channel"] == "U1"

    (record,) = state.messages.list("U1")
    assert record.ts == body["ts"]
    assert record.text == "hi"
    assert record.blocks[0].text.text == "Hello"


def test_post_message_json_body(api, state):
    response = api.post("/api/chat.postMessage", json={"channel": "U1", "blocks": [section("Hello")]})

    assert response.status_code == 200
    assert len(state.messages.list("U1")) == 1


def test_message_timestamps_are_unique_and_ordered(api, state):
    ts = [api.post("/api/chat.postMessage", json={"channel": "C1"}).json()["ts"] for _ in range(20)]

    assert len(set(ts)) == 20
    assert [r.ts for r in state.messages.list("C1")] == ts
    assert ts == sorted(ts, key=float)


def test_chat_update_replaces_only_the_matching_message(api, state):
    first = api.post("/api/chat.postMessage", json={"channel": "U1", "blocks": [section("one")]}).json()["ts"]
    api.post("/api/chat.postMessage", json={"channel": "U1", "blocks": [section("two")]})

    response = api.post(
        "/api/chat.update",
        data={"channel": "U1", "ts": first, "blocks": json.dumps([section("edited")])},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "channel": "U1", "ts": first}
    one, two = state.messages.list("U1")
    assert one.blocks[0].text.text == "edited"
    assert two.blocks[0].text.text == "two"
    assert one.updates.take(timeout=0) is True
    assert two.updates.take(timeout=0) is None


def test_response_url_updates_message(api, state):
    ts = api.post("/api/chat.postMessage", json={"channel": "U1", "blocks": [section("one")]}).json()["ts"]

    response = api.post(f"/api/response_url/U1/{ts}", json={"blocks": [section("done")]})

    assert response.status_code == 200
    assert state.messages.get("U1", ts).blocks[0].text.text == "done"


def test_update_of_unknown_message_is_acknowledged(api, state):
    response = api.post("/api/chat.update", json={"channel": "U1", "ts": "1.000001", "blocks": []})

    assert response.status_code == 200
    assert state.messages.list("U1") == []


def test_views_open_delivers_to_pending_trigger(api, state):
    trigger_id, mailbox = state.views.register()

    response = api.post(
        "/api/views.open",
        data={"trigger_id": trigger_id, "view": json.dumps(modal(actions(button("OK", "ok")), callback_id="cb"))},
    )

    assert response.status_code == 200
    assert response.json()["view"]["callback_id"] == "cb"
    view = mailbox.take(timeout=0)
    assert view.callback_id == "cb"
    assert isinstance(view.blocks[0].elements[0], ButtonElement)


def test_views_open_with_unknown_trigger_still_succeeds(api, state):
    response = api.post("/api/views.open", json={"trigger_id": "stale", "view": modal()})

    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_views_publish_queues_home_views_per_user(api, state):
    api.post("/api/views.publish", json={"user_id": "U1", "view": home(section("first"))})
    api.post("/api/views.publish", json={"user_id": "U1", "view": home(section("second"))})

    mailbox = state.home_views.get("U1")
    assert mailbox.take(timeout=0).blocks[0].text.text == "first"
    assert mailbox.take(timeout=0).blocks[0].text.text == "second"
    assert len(state.home_views.get("U2")) == 0


def test_users_info(api, state):
    state.users.register(SlackUser(id="U1", name="ann", is_admin=True))

    response = api.post("/api/users.info", data={"user": "U1"})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "ann"
    assert user["is_admin"] is True


def test_users_info_unknown_user(api):
    response = api.post("/api/users.info", data={"user": "U404"})

    assert response.status_code == 404
    assert response.json() == {"ok": False, "error": "user_not_found"}


@pytest.mark.parametrize(
    "path, data",
    [
        ("/api/chat.postMessage", {"channel": "U1", "blocks": "[not json"}),
        ("/api/chat.postMessage", {"blocks": "[]"}),
        ("/api/chat.update", {"channel": "U1", "ts": "1.0", "blocks": "{"}),
        ("/api/views.open", {"trigger_id": "t"}),
        ("/api/views.publish", {"user_id": "U1", "view": "nope"}),
    ],
)
def test_malformed_requests_are_server_errors(api, path, data):
    response = api.post(path, data=data)

    assert response.status_code == 500
    assert response.json() == {"ok": False, "error": "invalid_payload"}


def test_invalid_json_body_is_a_server_error(api):
    response = api.post(
        "/api/chat.postMessage",
        content=b"{broken",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
