"""
State Layer - Shared Backing State

Everything the mock server request handlers and the test-side sessions
share. Sessions are thin objects constructed over this state on demand; the
state itself lives as long as the harness.
"""

from dataclasses import dataclass, field

from ..domain.blocks import View
from ..repositories.messages import InMemoryMessageRepository, MessageRepository
from ..repositories.users import InMemoryUserRepository, UserRepository
from ..services.rendezvous import MailboxMap, ViewRegistry


@dataclass
class HarnessState:
    """
    Attributes:
        users: Members served by users.info.
        messages: Posted messages, per channel. A user's DM channel id is the user id.
        views: Trigger ids waiting for views.open.
        home_views: Per-user queue of views.publish deliveries.
    """
    users: UserRepository = field(default_factory=InMemoryUserRepository)
    messages: MessageRepository = field(default_factory=InMemoryMessageRepository)
    views: ViewRegistry[View] = field(default_factory=ViewRegistry)
    home_views: MailboxMap[View] = field(default_factory=MailboxMap)
