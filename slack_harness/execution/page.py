"""
Page - View Model of One Rendered Surface

A Page holds the block tree currently shown on a surface (home tab, modal,
message), its JSON snapshot, and the form values typed so far. The DSL
methods locate elements by visible text or action id and either record form
values or hand an ActionRequest to the injected callback.

The page never talks to the network or waits for anything; its owner
(UserSession or MessageView) decides what a dispatched action does.
"""

import json
import logging
import time
from typing import Callable, List, Sequence

from ..domain.blocks import (
    Block,
    ButtonElement,
    InputBlock,
    MultiSelectElement,
    PlainTextInputElement,
    SelectElement,
    dump_blocks,
)
from ..domain.search import SearchResult, find_by_action_and_value, find_by_label
from ..services.exceptions import (
    ElementNotFoundError,
    OptionNotFoundError,
    UnexpectedElementError,
)
from ..state.models import (
    ActionRequest,
    FieldValue,
    FormState,
    InteractionType,
    SelectedOption,
)

logger = logging.getLogger(__name__)

ActionCallback = Callable[[ActionRequest], None]


class Page:
    def __init__(self, action_callback: ActionCallback):
        self.blocks: List[Block] = []
        self.raw: str = "[]"
        self.state: FormState = {}
        self._action_callback = action_callback

    def set(self, blocks: Sequence[Block]) -> None:
        """Replaces the rendered tree."""
        self.blocks = list(blocks)
        self.raw = json.dumps(dump_blocks(self.blocks), ensure_ascii=False)

    # ==========================================================================
    # Search
    # ==========================================================================

    def search_by_text(self, text: str) -> SearchResult:
        found = find_by_label(self.blocks, text)
        if found is None:
            raise ElementNotFoundError(text=text)
        return found

    def _input_by_text(self, text: str) -> InputBlock:
        found = self.search_by_text(text)
        if not isinstance(found, InputBlock):
            raise UnexpectedElementError(f"element with text={text} is not an input, is {found.type}")
        return found

    # ==========================================================================
    # Form values
    # ==========================================================================

    def _record(self, block: InputBlock, action_id: str, value: FieldValue) -> None:
        # A block holds a single element, so recording replaces the block entry
        self.state[block.block_id] = {action_id: value}

    def type_text(self, search_text: str, value: str) -> InputBlock:
        block = self._input_by_text(search_text)
        element = block.element
        if not isinstance(element, PlainTextInputElement):
            raise UnexpectedElementError(f"input '{search_text}' is not a text input, is {element.type}")

        self._record(block, element.action_id, FieldValue(type=element.type, value=value))
        return block

    def select_by_text(self, search_text: str, value: str) -> None:
        """Picks the option whose visible text is `value`."""
        block = self._input_by_text(search_text)
        element = block.element
        if not isinstance(element, SelectElement) or isinstance(element, MultiSelectElement):
            raise UnexpectedElementError(f"input '{search_text}' is not a select, is {element.type}")

        option = next((opt for opt in element.all_options() if opt.text.text == value), None)
        if option is None:
            raise OptionNotFoundError(search_text, value)

        self._record(
            block,
            element.action_id,
            FieldValue(type=element.type, selected_option=SelectedOption(text=option.text, value=option.value)),
        )

    def select_user_by_text(self, text: str, user: str) -> None:
        block = self._input_by_text(text)
        element = block.element
        if not isinstance(element, SelectElement) or isinstance(element, MultiSelectElement):
            raise UnexpectedElementError("input is not user selector")
        if element.type != "users_select":
            raise UnexpectedElementError(f"input is not single user, is {element.type}")

        self._record(block, element.action_id, FieldValue(type=element.type, selected_user=user))

    def select_users_by_text(self, text: str, users: Sequence[str]) -> None:
        block = self._input_by_text(text)
        element = block.element
        if not isinstance(element, MultiSelectElement):
            raise UnexpectedElementError("input is not user selector")
        if element.type != "multi_users_select":
            raise UnexpectedElementError(f"input is not multi user, is {element.type}")

        self._record(block, element.action_id, FieldValue(type=element.type, selected_users=list(users)))

    # ==========================================================================
    # Actions
    # ==========================================================================

    def click_by_text(self, text: str, wait_modal: bool = False) -> None:
        self._click(self.search_by_text(text), wait_modal)

    def click_by_action_id(self, action_id: str, value: str = "", wait_modal: bool = False) -> None:
        found = find_by_action_and_value(self.blocks, action_id, value)
        if found is None:
            raise ElementNotFoundError(action_id=action_id, value=value)
        self._click(found, wait_modal)

    def _click(self, element: SearchResult, wait_modal: bool) -> None:
        if not isinstance(element, ButtonElement):
            raise UnexpectedElementError(f"cannot click by element {element.type}")

        logger.debug(f"click action_id={element.action_id} value={element.value}")
        self._action_callback(
            ActionRequest(
                type=InteractionType.BLOCK_ACTIONS,
                action_id=element.action_id,
                value=element.value,
                wait_modal=wait_modal,
                state=self.state,
            )
        )

    def submit_form(self) -> None:
        """Submits the accumulated form values; they are consumed by the submission."""
        state, self.state = self.state, {}
        self._action_callback(ActionRequest(type=InteractionType.VIEW_SUBMISSION, state=state))

    def wait(self, seconds: float) -> None:
        time.sleep(seconds)
