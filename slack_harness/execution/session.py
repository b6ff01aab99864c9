"""
Session - The Simulated User
-----------------------------------------------

A UserSession is one workspace member driving the application under test.
It is a Page (the surface the user is looking at right now) plus:
- the home tab view, restored whenever the last modal closes;
- the modal stack, pushed by views.open and popped by submissions;
- the messages posted to the user's DM channel (see MessageView).

Sessions are cheap views over HarnessState. SlackHarness.user() builds a new
one on every call; two sessions for the same user share messages and the
home tab queue but each has its own modal stack and current page.

Action protocol (for every click or submit):
1. Register a fresh trigger id and its mailbox.
2. Post the signed interaction payload to the app.
3. view_submission: apply the app's synchronous response_action, falling
   back to popping the modal when there is none.
4. wait_modal=True: block until views.open answers the trigger, then push
   the modal. wait_modal=False: a daemon thread does the same wait and
   pushes the modal if one ever arrives.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..domain.blocks import View
from ..repositories.messages import MessageRecord
from ..services.dispatcher import AppClient, build_home_opened_event, build_interaction_payload
from ..services.exceptions import HarnessError, HarnessTimeoutError, MessageNotFoundError, TransportError
from ..services.rendezvous import Mailbox
from ..state.models import ActionRequest, InteractionType
from ..state.store import HarnessState
from .page import Page

logger = logging.getLogger(__name__)

# How often open_home_tab checks whether the event post itself failed
_POLL_INTERVAL = 0.05


@dataclass
class SessionOptions:
    team_id: str
    response_url_base: str
    home_timeout: float
    message_timeout: float
    modal_timeout: float

    def response_url(self, channel: str, ts: str) -> str:
        return f"{self.response_url_base}/response_url/{channel}/{ts}"


class UserSession(Page):
    def __init__(self, user_id: str, state: HarnessState, client: AppClient, options: SessionOptions):
        super().__init__(self.dispatch_action)
        self.user_id = user_id
        self.home: Optional[View] = None
        self.modal_stack: List[View] = []
        self.last_errors: Optional[Dict[str, str]] = None

        self._state = state
        self._client = client
        self._options = options
        self._lock = threading.RLock()
        self._home_views: Mailbox[View] = state.home_views.get(user_id)

    @property
    def user(self) -> Dict[str, Any]:
        """The user record sent in payloads; unregistered users are sent as a bare id."""
        registered = self._state.users.get(self.user_id)
        if registered is None:
            return {"id": self.user_id, "team_id": self._options.team_id}
        record = registered.model_dump(mode="json", exclude_none=True)
        record.setdefault("team_id", self._options.team_id)
        return record

    @property
    def options(self) -> SessionOptions:
        return self._options

    @property
    def current_modal(self) -> Optional[View]:
        with self._lock:
            return self.modal_stack[-1] if self.modal_stack else None

    # ==========================================================================
    # Home tab
    # ==========================================================================

    def open_home_tab(self) -> "UserSession":
        """
        Sends app_home_opened and waits for the app to publish the home view.
        """
        # Pushes nobody waited for belong to an earlier state of the app
        stale = self._home_views.clear()
        if stale:
            logger.debug(f"Dropped {len(stale)} stale home views for {self.user_id}")

        event = build_home_opened_event(self.user_id, self._options.team_id)
        failures: Mailbox[HarnessError] = Mailbox()

        def push():
            try:
                self._client.push_event(event)
            except HarnessError as e:
                failures.offer(e)

        threading.Thread(target=push, name=f"home-opened-{self.user_id}", daemon=True).start()

        timeout = self._options.home_timeout
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise HarnessTimeoutError(f"home tab of {self.user_id}", timeout)

            view = self._home_views.take(timeout=min(_POLL_INTERVAL, remaining))
            if view is not None:
                break

            failure = failures.take(timeout=0)
            if failure is not None:
                raise failure

        self._show_home(view)
        return self

    def wait_home_update(self) -> None:
        """Waits for the next views.publish for this user without sending anything."""
        timeout = self._options.home_timeout
        view = self._home_views.take(timeout=timeout)
        if view is None:
            raise HarnessTimeoutError(f"home update of {self.user_id}", timeout)

        self._show_home(view)

    def _show_home(self, view: View) -> None:
        # An open modal stays in front; the new home shows once the stack empties
        with self._lock:
            self.home = view
            if not self.modal_stack:
                self.set(view.blocks)

    # ==========================================================================
    # Messages
    # ==========================================================================

    def messages(self) -> "MessageList":
        """Messages in the user's DM channel, rebuilt from the shared store on every call."""
        records = self._state.messages.list(self.user_id)
        return MessageList((MessageView(record, self) for record in records), channel=self.user_id)

    # ==========================================================================
    # Action protocol
    # ==========================================================================

    def dispatch_action(self, request: ActionRequest, message: Optional[MessageRecord] = None) -> None:
        trigger_id, mailbox = self._state.views.register()

        response_url = ""
        if message is not None:
            response_url = self._options.response_url(message.channel, message.ts)

        payload = build_interaction_payload(
            request,
            user=self.user,
            team_id=self._options.team_id,
            trigger_id=trigger_id,
            view=self.current_modal,
            message=message,
            response_url=response_url,
        )

        logger.info(f"{self.user_id}: {request.type.value} action_id={request.action_id!r} trigger={trigger_id}")
        try:
            response = self._client.send_interaction(payload)
        except HarnessError:
            self._state.views.discard(trigger_id)
            raise

        # The submitted modal closes before any modal opened for this trigger lands
        if request.type == InteractionType.VIEW_SUBMISSION:
            try:
                self._apply_submission_response(response)
            except HarnessError:
                self._state.views.discard(trigger_id)
                raise

        if request.wait_modal:
            timeout = self._options.modal_timeout
            view = mailbox.take(timeout=timeout)
            if view is None:
                self._state.views.discard(trigger_id)
                raise HarnessTimeoutError(f"modal for trigger {trigger_id}", timeout)
            self._push_modal(view)
        else:
            threading.Thread(
                target=self._await_modal,
                args=(trigger_id, mailbox),
                name=f"modal-{trigger_id}",
                daemon=True,
            ).start()

    def _await_modal(self, trigger_id: str, mailbox: Mailbox[View]) -> None:
        view = mailbox.take(timeout=self._options.modal_timeout)
        if view is None:
            # Most actions never open a modal
            self._state.views.discard(trigger_id)
            return
        self._push_modal(view)

    def _push_modal(self, view: View) -> None:
        with self._lock:
            self.modal_stack.append(view)
            self.set(view.blocks)

    def _apply_submission_response(self, response: Optional[Dict[str, Any]]) -> None:
        action = response.get("response_action") if response else None

        with self._lock:
            self.last_errors = None

            if action in ("update", "push"):
                view = _response_view(response)
                if action == "update" and self.modal_stack:
                    self.modal_stack[-1] = view
                else:
                    self.modal_stack.append(view)
                self.set(view.blocks)
                return

            if action == "errors":
                # The modal stays open with the validation messages
                self.last_errors = dict(response.get("errors") or {})
                return

            if action == "clear":
                self.modal_stack.clear()
            elif self.modal_stack:
                self.modal_stack.pop()

            self._redraw()

    def _redraw(self) -> None:
        if self.modal_stack:
            self.set(self.modal_stack[-1].blocks)
        elif self.home is not None:
            self.set(self.home.blocks)


def _response_view(response: Dict[str, Any]) -> View:
    raw = response.get("view")
    if not isinstance(raw, dict):
        raise TransportError(f"submission response_action={response.get('response_action')} carries no view")
    try:
        return View.model_validate(raw)
    except ValidationError as e:
        raise TransportError(f"invalid view in submission response: {e}") from e


class MessageView(Page):
    """
    One message as the user sees it. Clicks are dispatched through the owning
    session with the message's response_url, so modals opened from a message
    land on the session's modal stack.
    """

    def __init__(self, record: MessageRecord, session: UserSession):
        super().__init__(self._dispatch)
        self.record = record
        self.session = session
        self.set(record.blocks)

    @property
    def channel(self) -> str:
        return self.record.channel

    @property
    def ts(self) -> str:
        return self.record.ts

    def _dispatch(self, request: ActionRequest) -> None:
        self.session.dispatch_action(request, message=self.record)

    def wait_update(self, timeout: Optional[float] = None) -> None:
        """Waits until chat.update or the response_url edits this message, then redraws."""
        timeout = timeout if timeout is not None else self.session.options.message_timeout
        if self.record.updates.take(timeout=timeout) is None:
            raise HarnessTimeoutError(f"update of message {self.ts} in {self.channel}", timeout)
        self.set(self.record.blocks)


class MessageList(list):
    def __init__(self, views: Iterable[MessageView] = (), channel: str = ""):
        super().__init__(views)
        self.channel = channel

    def last(self) -> MessageView:
        if not self:
            raise MessageNotFoundError(self.channel)
        return self[-1]
