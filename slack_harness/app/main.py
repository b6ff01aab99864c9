"""
Mock Platform Server

The Slack Web API endpoints the application under test calls. Handlers are
stateless: they decode the request, mutate the shared HarnessState, and
answer with a Slack-shaped envelope. Delivering a view to a waiting session
happens through the state's mailboxes and never blocks a handler.

Requests may be form-encoded (fields holding JSON strings) or JSON (fields
holding decoded structures). Anything that cannot be decoded is answered
with HTTP 500.
"""

import json
import logging
from typing import Any, Dict, List
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..domain.blocks import Block, View, parse_blocks
from ..repositories.messages import MessageRepository
from ..repositories.users import UserRepository
from ..services.exceptions import MalformedRequestError
from ..services.rendezvous import MailboxMap, ViewRegistry
from ..state.store import HarnessState
from .dependencies import (
    get_home_views,
    get_message_repository,
    get_user_repository,
    get_view_registry,
)
from .schemas import MessageResponse, UserInfoResponse, ViewResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Request decoding ---


async def read_payload(request: Request) -> Dict[str, Any]:
    body = await request.body()
    content_type = request.headers.get("content-type", "")

    try:
        if "application/json" in content_type:
            data = json.loads(body) if body else {}
        else:
            data = dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedRequestError(f"cannot decode request body: {e}") from e

    if not isinstance(data, dict):
        raise MalformedRequestError("request body is not an object")
    return data


def _json_field(data: Dict[str, Any], name: str) -> Any:
    """A field that is a JSON string in form bodies and a structure in JSON bodies."""
    value = data.get(name)
    if isinstance(value, str):
        if value == "":
            return None
        try:
            return json.loads(value)
        except ValueError as e:
            raise MalformedRequestError(f"field '{name}' is not valid JSON") from e
    return value


def _required(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str) or value == "":
        raise MalformedRequestError(f"missing field '{name}'")
    return value


def _blocks(data: Dict[str, Any]) -> List[Block]:
    try:
        return parse_blocks(_json_field(data, "blocks"))
    except ValidationError as e:
        raise MalformedRequestError(f"invalid blocks: {e}") from e


def _view(data: Dict[str, Any]) -> View:
    raw = _json_field(data, "view")
    if not isinstance(raw, dict):
        raise MalformedRequestError("missing field 'view'")
    try:
        return View.model_validate(raw)
    except ValidationError as e:
        raise MalformedRequestError(f"invalid view: {e}") from e


# --- Endpoints ---


@router.post("/chat.postMessage", response_model=MessageResponse, response_model_exclude_none=True)
async def post_message(
    request: Request,
    messages: MessageRepository = Depends(get_message_repository),
):
    data = await read_payload(request)
    channel = _required(data, "channel")
    record = messages.post(channel, _blocks(data), text=data.get("text") or "")

    logger.info(f"Message {record.ts} posted to {channel}")
    return MessageResponse(channel=record.channel, ts=record.ts)


def _update_message(messages: MessageRepository, channel: str, ts: str, data: Dict[str, Any]) -> MessageResponse:
    record = messages.update(channel, ts, _blocks(data), text=data.get("text"))
    if record is None:
        logger.warning(f"Update for unknown message {ts} in {channel}")
    return MessageResponse(channel=channel, ts=ts)


@router.post("/chat.update", response_model=MessageResponse, response_model_exclude_none=True)
async def update_message(
    request: Request,
    messages: MessageRepository = Depends(get_message_repository),
):
    data = await read_payload(request)
    return _update_message(messages, _required(data, "channel"), _required(data, "ts"), data)


@router.post("/response_url/{channel}/{ts}", response_model=MessageResponse, response_model_exclude_none=True)
async def response_url_update(
    channel: str,
    ts: str,
    request: Request,
    messages: MessageRepository = Depends(get_message_repository),
):
    data = await read_payload(request)
    return _update_message(messages, channel, ts, data)


@router.post("/views.open", response_model=ViewResponse, response_model_exclude_none=True)
async def open_view(
    request: Request,
    views: ViewRegistry[View] = Depends(get_view_registry),
):
    data = await read_payload(request)
    trigger_id = _required(data, "trigger_id")
    view = _view(data)

    if views.resolve(trigger_id, view):
        logger.info(f"Modal delivered for trigger {trigger_id}")
    return ViewResponse(view=view.model_dump(mode="json", exclude_none=True))


@router.post("/views.publish", response_model=ViewResponse, response_model_exclude_none=True)
async def publish_view(
    request: Request,
    home_views: MailboxMap[View] = Depends(get_home_views),
):
    data = await read_payload(request)
    user_id = _required(data, "user_id")
    view = _view(data)

    home_views.get(user_id).offer(view)
    logger.info(f"Home tab published for {user_id}")
    return ViewResponse(view=view.model_dump(mode="json", exclude_none=True))


@router.post("/users.info", response_model=UserInfoResponse, response_model_exclude_none=True)
async def users_info(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
):
    data = await read_payload(request)
    user_id = _required(data, "user")

    user = users.get(user_id)
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"ok": False, "error": "user_not_found"},
        )
    return UserInfoResponse(user=user)


# --- Application ---


async def _malformed_request_handler(request: Request, exc: MalformedRequestError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "error": "invalid_payload"},
    )


def create_app(state: HarnessState, api_prefix: str = "/api") -> FastAPI:
    """Builds a mock server bound to `state`."""
    app = FastAPI(title="Slack Mock Platform")
    app.state.harness = state

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url}")
        return await call_next(request)

    app.add_exception_handler(MalformedRequestError, _malformed_request_handler)
    app.include_router(router, prefix=api_prefix)
    return app
