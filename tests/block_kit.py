"""Builders for Block Kit JSON used across the tests."""
from __future__ import annotations


def plain(text: str) -> dict:
    return {"type": "plain_text", "text": text}


def button(text: str, action_id: str, value: str = "") -> dict:
    element = {"type": "button", "text": plain(text), "action_id": action_id}
    if value:
        element["value"] = value
    return element


def actions(*elements: dict, block_id: str | None = None) -> dict:
    block = {"type": "actions", "elements": list(elements)}
    if block_id:
        block["block_id"] = block_id
    return block


def header(text: str) -> dict:
    return {"type": "header", "text": plain(text)}


def section(text: str, accessory: dict | None = None) -> dict:
    block = {"type": "section", "text": {"type": "mrkdwn", "text": text}}
    if accessory is not None:
        block["accessory"] = accessory
    return block


def divider() -> dict:
    return {"type": "divider"}


def input_block(block_id: str, element: dict, label: str = "Label") -> dict:
    return {"type": "input", "block_id": block_id, "label": plain(label), "element": element}


def text_input(block_id: str, action_id: str, placeholder: str) -> dict:
    return input_block(
        block_id,
        {"type": "plain_text_input", "action_id": action_id, "placeholder": plain(placeholder)},
    )


def static_select(block_id: str, action_id: str, placeholder: str, options: dict[str, str]) -> dict:
    return input_block(
        block_id,
        {
            "type": "static_select",
            "action_id": action_id,
            "placeholder": plain(placeholder),
            "options": [{"text": plain(text), "value": value} for text, value in options.items()],
        },
    )


def users_select(block_id: str, action_id: str, placeholder: str) -> dict:
    return input_block(
        block_id,
        {"type": "users_select", "action_id": action_id, "placeholder": plain(placeholder)},
    )


def multi_users_select(block_id: str, action_id: str, placeholder: str) -> dict:
    return input_block(
        block_id,
        {"type": "multi_users_select", "action_id": action_id, "placeholder": plain(placeholder)},
    )


def modal(*blocks: dict, callback_id: str = "", private_metadata: str = "") -> dict:
    return {
        "type": "modal",
        "callback_id": callback_id,
        "private_metadata": private_metadata,
        "title": plain("Modal"),
        "blocks": list(blocks),
    }


def home(*blocks: dict) -> dict:
    return {"type": "home", "blocks": list(blocks)}
