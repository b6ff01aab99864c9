"""
Dependency Injection Wiring.

The mock server does not own any state: each FastAPI app is built around the
HarnessState of one SlackHarness and stores it on app.state. These providers
hand the pieces of that state to the route handlers, so handlers stay free
of globals and tests can build as many independent apps as they need.
"""

from fastapi import Depends, Request

from ..domain.blocks import View
from ..repositories.messages import MessageRepository
from ..repositories.users import UserRepository
from ..services.rendezvous import MailboxMap, ViewRegistry
from ..state.store import HarnessState


def get_harness_state(request: Request) -> HarnessState:
    return request.app.state.harness


def get_message_repository(state: HarnessState = Depends(get_harness_state)) -> MessageRepository:
    return state.messages


def get_user_repository(state: HarnessState = Depends(get_harness_state)) -> UserRepository:
    return state.users


def get_view_registry(state: HarnessState = Depends(get_harness_state)) -> ViewRegistry[View]:
    return state.views


def get_home_views(state: HarnessState = Depends(get_harness_state)) -> MailboxMap[View]:
    return state.home_views
