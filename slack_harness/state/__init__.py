"""
State Layer - Runtime Data Models

Defines the form state accumulated by the DSL and the action requests
exchanged between pages and sessions.
"""

from slack_harness.state.models import (
    ActionRequest,
    FieldValue,
    FormState,
    InteractionType,
    SelectedOption,
    dump_form_state,
)
from slack_harness.state.store import HarnessState

__all__ = [
    "ActionRequest",
    "FieldValue",
    "FormState",
    "InteractionType",
    "SelectedOption",
    "dump_form_state",
    "HarnessState",
]
