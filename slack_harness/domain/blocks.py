"""
Domain Layer - Block Kit Models

Typed models for the renderable surfaces the application under test sends us
(messages, modals, home tabs). Only the fields the harness needs for
traversal are declared; everything else is kept as extra data so a tree can
be serialized back unchanged.

Both blocks and interactive elements are closed unions discriminated on
their "type" field. Types the harness does not know about fall into
UnknownBlock / UnknownElement instead of failing validation.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter


class SlackModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class TextObject(SlackModel):
    type: str = "plain_text"
    text: str = ""


class OptionObject(SlackModel):
    text: TextObject
    value: str = ""


class OptionGroup(SlackModel):
    label: Optional[TextObject] = None
    options: List[OptionObject] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Interactive elements
# ---------------------------------------------------------------------------

SINGLE_SELECT_TYPES = {
    "static_select",
    "users_select",
    "conversations_select",
    "channels_select",
    "external_select",
}

MULTI_SELECT_TYPES = {f"multi_{kind}" for kind in SINGLE_SELECT_TYPES}


class ButtonElement(SlackModel):
    type: Literal["button"] = "button"
    action_id: str = ""
    text: TextObject
    value: str = ""


class PlainTextInputElement(SlackModel):
    type: Literal["plain_text_input"] = "plain_text_input"
    action_id: str = ""
    placeholder: Optional[TextObject] = None


class SelectElement(SlackModel):
    """Any single-choice menu: static, users, conversations, channels, external."""
    type: str = "static_select"
    action_id: str = ""
    placeholder: Optional[TextObject] = None
    options: List[OptionObject] = Field(default_factory=list)
    option_groups: List[OptionGroup] = Field(default_factory=list)

    def all_options(self) -> List[OptionObject]:
        grouped = [option for group in self.option_groups for option in group.options]
        return list(self.options) + grouped


class MultiSelectElement(SelectElement):
    type: str = "multi_static_select"


class UnknownElement(SlackModel):
    type: str
    action_id: str = ""


def _element_kind(value: Any) -> str:
    element_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if element_type == "button":
        return "button"
    if element_type == "plain_text_input":
        return "plain_text_input"
    if element_type in SINGLE_SELECT_TYPES:
        return "select"
    if element_type in MULTI_SELECT_TYPES:
        return "multi_select"
    return "unknown"


BlockElement = Annotated[
    Union[
        Annotated[ButtonElement, Tag("button")],
        Annotated[PlainTextInputElement, Tag("plain_text_input")],
        Annotated[SelectElement, Tag("select")],
        Annotated[MultiSelectElement, Tag("multi_select")],
        Annotated[UnknownElement, Tag("unknown")],
    ],
    Discriminator(_element_kind),
]


# ---------------------------------------------------------------------------
# Layout blocks
# ---------------------------------------------------------------------------

class DividerBlock(SlackModel):
    type: Literal["divider"] = "divider"
    block_id: Optional[str] = None


class ActionsBlock(SlackModel):
    type: Literal["actions"] = "actions"
    block_id: Optional[str] = None
    elements: List[BlockElement] = Field(default_factory=list)


class InputBlock(SlackModel):
    type: Literal["input"] = "input"
    block_id: str = ""
    label: Optional[TextObject] = None
    element: BlockElement


class HeaderBlock(SlackModel):
    type: Literal["header"] = "header"
    block_id: Optional[str] = None
    text: TextObject


class SectionBlock(SlackModel):
    type: Literal["section"] = "section"
    block_id: Optional[str] = None
    text: Optional[TextObject] = None
    accessory: Optional[BlockElement] = None


class UnknownBlock(SlackModel):
    type: str
    block_id: Optional[str] = None


def _block_kind(value: Any) -> str:
    block_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if block_type in ("divider", "actions", "input", "header", "section"):
        return block_type
    return "unknown"


Block = Annotated[
    Union[
        Annotated[DividerBlock, Tag("divider")],
        Annotated[ActionsBlock, Tag("actions")],
        Annotated[InputBlock, Tag("input")],
        Annotated[HeaderBlock, Tag("header")],
        Annotated[SectionBlock, Tag("section")],
        Annotated[UnknownBlock, Tag("unknown")],
    ],
    Discriminator(_block_kind),
]


class View(SlackModel):
    """A modal or home tab as sent to views.open / views.publish."""
    type: str = "modal"
    callback_id: Optional[str] = None
    private_metadata: str = ""
    title: Optional[TextObject] = None
    blocks: List[Block] = Field(default_factory=list)


_blocks_adapter = TypeAdapter(List[Block])


def parse_blocks(data: Any) -> List[Block]:
    """Validates a decoded JSON list into typed blocks. A None tree is empty."""
    if data is None:
        return []
    return _blocks_adapter.validate_python(data)


def dump_blocks(blocks: List[Block]) -> List[dict]:
    return _blocks_adapter.dump_python(blocks, mode="json", exclude_none=True)
