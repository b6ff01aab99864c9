"""
Execution Layer - Pages and Sessions

Defines the Page view model (DSL over one rendered surface) and the
UserSession / MessageView controllers that run the action protocol against
the application under test.
"""

from slack_harness.execution.page import ActionCallback, Page
from slack_harness.execution.session import MessageList, MessageView, SessionOptions, UserSession


__all__ = [
    "ActionCallback",
    "Page",
    "MessageList",
    "MessageView",
    "SessionOptions",
    "UserSession",
]
