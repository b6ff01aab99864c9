"""
State Layer - Runtime Data Models

Form values accumulated by the DSL and the action requests a page hands to
its session. The modal stack itself lives on the session (see
execution/session.py).
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.blocks import TextObject


class InteractionType(str, Enum):
    BLOCK_ACTIONS = "block_actions"
    VIEW_SUBMISSION = "view_submission"


class SelectedOption(BaseModel):
    text: Optional[TextObject] = None
    value: str


class FieldValue(BaseModel):
    """
    The submitted value of one input element, shaped like an entry of
    view.state.values. Exactly one of the value fields is set.
    """
    type: str
    value: Optional[str] = None
    selected_option: Optional[SelectedOption] = None
    selected_user: Optional[str] = None
    selected_users: Optional[List[str]] = None


# block_id -> action_id -> value
FormState = Dict[str, Dict[str, FieldValue]]


def dump_form_state(state: FormState) -> Dict[str, Dict[str, dict]]:
    return {
        block_id: {
            action_id: field.model_dump(mode="json", exclude_none=True)
            for action_id, field in fields.items()
        }
        for block_id, fields in state.items()
    }


class ActionRequest(BaseModel):
    """What a page asks its owner to dispatch on a click or submit."""
    type: InteractionType
    action_id: str = ""
    value: str = ""
    wait_modal: bool = False
    state: FormState = Field(default_factory=dict)
