"""
Slack Harness - Composition Root

SlackHarness wires the shared state, the mock server application and the
outbound client together, and hands out UserSessions to test code.

Typical use:

    harness = SlackHarness(events_url, actions_url, signing_secret)
    harness.start(port=4999)
    harness.register_user(SlackUser(id="U1", name="first"))

    user = harness.user("U1")
    user.open_home_tab()
    user.click_by_text("New", wait_modal=True)
"""

import logging
import threading
import time
from typing import List, Optional, Union

import uvicorn

from ..app.main import create_app
from ..config import settings
from ..domain.models import SlackUser
from ..execution.session import SessionOptions, UserSession
from ..repositories.messages import MessageRecord
from ..state.store import HarnessState
from .dispatcher import AppClient
from .exceptions import HarnessError

logger = logging.getLogger(__name__)

_STARTUP_TIMEOUT = 10.0


class SlackHarness:
    def __init__(
        self,
        events_url: str = settings.EVENTS_URL,
        actions_url: str = settings.ACTIONS_URL,
        signing_secret: str = settings.SIGNING_SECRET,
        team_id: Optional[str] = None,
        public_url: Optional[str] = settings.PUBLIC_URL,
        api_prefix: str = settings.API_PREFIX,
        app_client: Optional[AppClient] = None,
        home_timeout: float = settings.HOME_WAIT_TIMEOUT,
        message_timeout: float = settings.MESSAGE_WAIT_TIMEOUT,
        modal_timeout: float = settings.MODAL_WAIT_TIMEOUT,
    ):
        self.team_id = team_id or settings.TEAM_ID
        self.api_prefix = api_prefix
        self.public_url = public_url
        self.port = settings.PORT
        self.home_timeout = home_timeout
        self.message_timeout = message_timeout
        self.modal_timeout = modal_timeout

        self.state = HarnessState()
        self.client = app_client or AppClient(
            events_url=events_url,
            actions_url=actions_url,
            signing_secret=signing_secret,
            team_id=self.team_id,
        )
        self.app = create_app(self.state, api_prefix=api_prefix)

        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    # ==========================================================================
    # Workspace
    # ==========================================================================

    def register_user(self, user: Union[SlackUser, dict]) -> SlackUser:
        if isinstance(user, dict):
            user = SlackUser.model_validate(user)
        if user.team_id is None:
            user.team_id = self.team_id
        self.state.users.register(user)
        return user

    def set_team(self, team_id: str) -> None:
        self.team_id = team_id
        self.client.team_id = team_id

    def user(self, user_id: str) -> UserSession:
        """
        Returns a new session for `user_id`.

        Sessions are deliberately not cached: each call builds a fresh object
        over the shared messages and home tab queue, so a session obtained
        later always sees what the app has posted so far.
        """
        return UserSession(user_id, self.state, self.client, self._session_options())

    def messages_by_user(self, user_id: str) -> List[MessageRecord]:
        return self.state.messages.list(user_id)

    @property
    def base_url(self) -> str:
        return (self.public_url or f"http://localhost:{self.port}").rstrip("/")

    def response_url(self, channel: str, ts: str) -> str:
        return self._session_options().response_url(channel, ts)

    def _session_options(self) -> SessionOptions:
        return SessionOptions(
            team_id=self.team_id,
            response_url_base=f"{self.base_url}{self.api_prefix}",
            home_timeout=self.home_timeout,
            message_timeout=self.message_timeout,
            modal_timeout=self.modal_timeout,
        )

    # ==========================================================================
    # Server lifecycle
    # ==========================================================================

    def start(self, host: str = settings.HOST, port: Optional[int] = None) -> None:
        """Serves the mock API from a background thread; returns once it accepts requests."""
        if self._server is not None:
            raise HarnessError("mock server already started")

        if port is not None:
            self.port = port

        config = uvicorn.Config(self.app, host=host, port=self.port, log_level=settings.LOG_LEVEL)
        server = uvicorn.Server(config)
        thread = threading.Thread(target=server.run, name="slack-mock-server", daemon=True)
        thread.start()

        deadline = time.monotonic() + _STARTUP_TIMEOUT
        while not server.started:
            if not thread.is_alive() or time.monotonic() > deadline:
                server.should_exit = True
                raise HarnessError(f"mock server failed to start on {host}:{self.port}")
            time.sleep(0.01)

        self._server = server
        self._thread = thread
        logger.info(f"Mock platform server listening on {host}:{self.port}{self.api_prefix}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=_STARTUP_TIMEOUT)
        self._server = None
        self._thread = None

    def close(self) -> None:
        self.stop()
        self.client.close()

    def __enter__(self) -> "SlackHarness":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
