"""
Outbound Dispatcher - Calls Into the Application Under Test

Builds the two kinds of requests Slack would send an app and posts them,
signed, to the configured endpoints:
- Events API callbacks (JSON body) to the events URL;
- interaction payloads (form body, payload=<json>) to the actions URL.

Any non-2xx answer is a TransportError. The body of an interaction response
is returned to the caller because a view_submission may be answered
synchronously with a response_action.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from ..config import settings
from ..domain.blocks import View, dump_blocks
from ..repositories.messages import MessageRecord
from ..state.models import ActionRequest, FormState, InteractionType, dump_form_state
from .exceptions import TransportError
from .signing import signed_headers

logger = logging.getLogger(__name__)


def build_home_opened_event(user_id: str, team_id: str) -> Dict[str, Any]:
    """The event_callback envelope Slack sends when a user opens the app's Home tab."""
    return {
        "type": "event_callback",
        "team_id": team_id,
        "event": {
            "type": "app_home_opened",
            "user": user_id,
            "channel": "",
            "tab": "home",
            "event_ts": "",
            "view": {},
        },
    }


def build_interaction_payload(
    request: ActionRequest,
    user: Dict[str, Any],
    team_id: str,
    trigger_id: str,
    view: Optional[View] = None,
    message: Optional[MessageRecord] = None,
    response_url: str = "",
) -> Dict[str, Any]:
    """
    Shapes an interaction callback.

    The open modal (if any) travels as payload.view together with the form
    values; message-originated actions carry the message coordinates and the
    response_url the app can use to edit it in place.
    """
    payload: Dict[str, Any] = {
        "type": request.type.value,
        "token": "",
        "team": {"id": team_id},
        "user": user,
        "trigger_id": trigger_id,
        "response_url": response_url,
    }

    if request.type == InteractionType.BLOCK_ACTIONS:
        payload["actions"] = [
            {
                "type": "button",
                "action_id": request.action_id,
                "value": request.value,
            }
        ]

    if view is not None:
        payload["view"] = _view_payload(view, request.state)

    if message is not None:
        payload["channel"] = {"id": message.channel}
        payload["container"] = {
            "type": "message",
            "message_ts": message.ts,
            "channel_id": message.channel,
        }
        payload["message"] = {
            "ts": message.ts,
            "text": message.text,
            "blocks": dump_blocks(message.blocks),
        }

    return payload


def _view_payload(view: View, state: FormState) -> Dict[str, Any]:
    return {
        "type": view.type,
        "callback_id": view.callback_id or "",
        "private_metadata": view.private_metadata,
        "blocks": dump_blocks(view.blocks),
        "state": {"values": dump_form_state(state)},
    }


class AppClient:
    """
    Signed HTTP client for the application's events and actions endpoints.
    """

    def __init__(
        self,
        events_url: str,
        actions_url: str,
        signing_secret: str,
        team_id: str,
        timeout: float = settings.HTTP_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.events_url = events_url
        self.actions_url = actions_url
        self.signing_secret = signing_secret
        self.team_id = team_id
        self.client = http_client or httpx.Client(timeout=timeout)

    def push_event(self, event: Dict[str, Any]) -> None:
        body = json.dumps(event)
        headers = signed_headers(self.signing_secret, body)
        headers["Content-Type"] = "application/json"
        self._post(self.events_url, body, headers)

    def send_interaction(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Posts an interaction payload. Returns the decoded JSON response body,
        or None when the app answered with an empty or non-JSON body.
        """
        body = urlencode({"payload": json.dumps(payload)})
        headers = signed_headers(self.signing_secret, body)
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        response = self._post(self.actions_url, body, headers)
        return _json_body(response)

    def send_action(
        self,
        action_id: str,
        interaction_type: InteractionType,
        user: Dict[str, Any],
        trigger_id: str,
        state: Optional[FormState] = None,
    ) -> str:
        """
        Sends a bare interaction with no view or message context and returns
        its trigger id. Kept for callers that drive the app without sessions.
        """
        request = ActionRequest(type=interaction_type, action_id=action_id, state=state or {})
        payload = build_interaction_payload(request, user=user, team_id=self.team_id, trigger_id=trigger_id)
        if state:
            payload["view"] = {"state": {"values": dump_form_state(state)}}
        self.send_interaction(payload)
        return trigger_id

    def close(self) -> None:
        self.client.close()

    def _post(self, url: str, body: str, headers: Dict[str, str]) -> httpx.Response:
        logger.debug(f"POST {url} ({len(body)} bytes)")
        try:
            response = self.client.post(url, content=body.encode("utf-8"), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"request to {url} failed: {e}", url=url) from e

        if not response.is_success:
            raise TransportError(
                f"status code not 200, is {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response


def _json_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
    if not response.content:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
