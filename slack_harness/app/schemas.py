"""
API Layer - Response Schemas

Pydantic models for the platform-shaped envelopes the mock server returns.
Every response carries "ok"; failures add "error".
"""

from typing import Any, Optional

from pydantic import BaseModel

from ..domain.models import SlackUser


class SlackResponse(BaseModel):
    ok: bool = True
    error: Optional[str] = None


class MessageResponse(SlackResponse):
    channel: str
    ts: str


class ViewResponse(SlackResponse):
    view: Optional[dict[str, Any]] = None


class UserInfoResponse(SlackResponse):
    user: SlackUser
