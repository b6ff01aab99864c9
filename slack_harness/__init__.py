"""
Slack Harness

Drives a Slack app end-to-end without Slack: a mock of the Web API the app
calls, plus simulated users that send it events and interactions and read
back the views it renders.
"""

from slack_harness.domain import (
    Block,
    ButtonElement,
    InputBlock,
    SlackUser,
    View,
    find_by_action_and_value,
    find_by_label,
)
from slack_harness.execution import MessageList, MessageView, Page, UserSession
from slack_harness.services.exceptions import (
    ElementNotFoundError,
    HarnessAssertionError,
    HarnessError,
    HarnessTimeoutError,
    MessageNotFoundError,
    OptionNotFoundError,
    TransportError,
    UnexpectedElementError,
)
from slack_harness.services.harness import SlackHarness

__all__ = [
    # Domain Layer
    "Block",
    "ButtonElement",
    "InputBlock",
    "SlackUser",
    "View",
    "find_by_action_and_value",
    "find_by_label",
    # Execution Layer
    "MessageList",
    "MessageView",
    "Page",
    "UserSession",
    # Errors
    "ElementNotFoundError",
    "HarnessAssertionError",
    "HarnessError",
    "HarnessTimeoutError",
    "MessageNotFoundError",
    "OptionNotFoundError",
    "TransportError",
    "UnexpectedElementError",
    # Entry point
    "SlackHarness",
]
