"""
Block Tree Search

Read-only traversal over a block tree. Blocks are visited in declaration
order and composite blocks (actions, input, section accessory) are searched
before moving on to the next sibling, so the first match in reading order
wins.

Both searches return None when nothing matches; turning that into a failure
is the caller's decision.
"""

from typing import Iterable, List, Optional, Union

from .blocks import (
    ActionsBlock,
    Block,
    BlockElement,
    ButtonElement,
    HeaderBlock,
    InputBlock,
    PlainTextInputElement,
    SectionBlock,
    SelectElement,
)

SearchResult = Union[BlockElement, InputBlock, HeaderBlock, SectionBlock]


def _element_label(element: BlockElement) -> Optional[str]:
    """The visible text a user would recognize the element by."""
    if isinstance(element, ButtonElement):
        return element.text.text
    if isinstance(element, (PlainTextInputElement, SelectElement)):
        return element.placeholder.text if element.placeholder else None
    return None


def _child_elements(block: Block) -> List[BlockElement]:
    if isinstance(block, ActionsBlock):
        return list(block.elements)
    if isinstance(block, InputBlock):
        return [block.element]
    if isinstance(block, SectionBlock) and block.accessory is not None:
        return [block.accessory]
    return []


def _search_elements_by_label(elements: Iterable[BlockElement], text: str) -> Optional[BlockElement]:
    for element in elements:
        if _element_label(element) == text:
            return element
    return None


def _search_elements_by_action(
    elements: Iterable[BlockElement], action_id: str, value: str
) -> Optional[ButtonElement]:
    for element in elements:
        if not isinstance(element, ButtonElement):
            continue
        if element.action_id != action_id:
            continue
        if value == "" or element.value == value:
            return element
    return None


def find_by_label(blocks: List[Block], text: str) -> Optional[SearchResult]:
    """
    Finds the first node whose visible text equals `text`.

    Matches button text, input/select placeholders, header text and section
    text. A match inside an input block returns the InputBlock itself, so
    callers can record form values against its block_id.
    """
    for block in blocks:
        if isinstance(block, (HeaderBlock, SectionBlock)):
            if block.text is not None and block.text.text == text:
                return block

        found = _search_elements_by_label(_child_elements(block), text)
        if found is not None:
            return block if isinstance(block, InputBlock) else found

    return None


def find_by_action_and_value(blocks: List[Block], action_id: str, value: str = "") -> Optional[SearchResult]:
    """
    Finds the first button with the given action_id.

    An empty `value` matches any button with that action_id; otherwise the
    button's value must be equal.
    """
    for block in blocks:
        found = _search_elements_by_action(_child_elements(block), action_id, value)
        if found is not None:
            return block if isinstance(block, InputBlock) else found

    return None


__all__ = [
    "SearchResult",
    "find_by_label",
    "find_by_action_and_value",
]
