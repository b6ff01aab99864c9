"""
Domain Layer - Block Kit Models and Search

Defines the typed block tree the application renders and the read-only
searches the DSL runs over it.
"""

from slack_harness.domain.blocks import (
    ActionsBlock,
    Block,
    BlockElement,
    ButtonElement,
    DividerBlock,
    HeaderBlock,
    InputBlock,
    MultiSelectElement,
    OptionObject,
    PlainTextInputElement,
    SectionBlock,
    SelectElement,
    TextObject,
    UnknownBlock,
    UnknownElement,
    View,
    dump_blocks,
    parse_blocks,
)
from slack_harness.domain.models import SlackUser
from slack_harness.domain.search import find_by_action_and_value, find_by_label

__all__ = [
    "ActionsBlock",
    "Block",
    "BlockElement",
    "ButtonElement",
    "DividerBlock",
    "HeaderBlock",
    "InputBlock",
    "MultiSelectElement",
    "OptionObject",
    "PlainTextInputElement",
    "SectionBlock",
    "SelectElement",
    "TextObject",
    "UnknownBlock",
    "UnknownElement",
    "View",
    "dump_blocks",
    "parse_blocks",
    "SlackUser",
    "find_by_action_and_value",
    "find_by_label",
]
