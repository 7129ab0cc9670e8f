# Copyright (c) Microsoft. All rights reserved.

import json
import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from aioconsole import ainput

from ._logging import get_logger

logger = get_logger("copilotstudio_console.cards")

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"

InputFunc = Callable[[str], Awaitable[str]]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

__all__ = ["ADAPTIVE_CARD_CONTENT_TYPE", "InputFunc", "card_content_to_dict", "resolve_adaptive_card"]


def card_content_to_dict(content: Any) -> dict[str, Any] | None:
    """Normalize attachment content to a plain mapping.

    Content arrives as a dict, a JSON string, or a model object depending on how
    the activity was deserialized. Returns None when it is none of these.
    """
    if isinstance(content, Mapping):
        return dict(content)
    if isinstance(content, (str, bytes)):
        try:
            parsed = json.loads(content)
        except ValueError:
            return None
        return parsed if isinstance(parsed, dict) else None
    if hasattr(content, "model_dump"):
        dumped = content.model_dump(by_alias=True, exclude_none=True)
        return dumped if isinstance(dumped, dict) else None
    return None


def _parse_int(raw: str) -> int | None:
    """Parse a plain ASCII integer, rejecting forms such as ``1_000`` that ``int`` accepts."""
    text = raw.strip()
    return int(text) if _INTEGER_RE.fullmatch(text) else None


async def resolve_adaptive_card(content: Any, input_func: InputFunc | None = None) -> dict[str, Any]:
    """Prompt the operator for every input field of an adaptive card.

    Args:
        content: The attachment content of an adaptive card.
        input_func: Async line reader taking a prompt. Defaults to ``aioconsole.ainput``.

    Returns:
        Mapping of field id to the collected value. Fields whose input cannot be
        parsed are left out. Empty when the card has no usable body.
    """
    read = input_func or ainput
    inputs: dict[str, Any] = {}

    card = card_content_to_dict(content)
    body = card.get("body") if card is not None else None
    if not isinstance(body, list):
        print("[!] Adaptive Card body is missing or malformed.")
        logger.warning("Adaptive card body is missing or malformed; no inputs collected.")
        return inputs

    for item in body:
        if not isinstance(item, Mapping):
            continue
        field_id = item.get("id")
        if field_id is None or not str(field_id).strip():
            continue
        field_id = str(field_id)
        field_type = item.get("type")
        label = item.get("label") or item.get("placeholder") or field_id

        if field_type == "Input.Text":
            inputs[field_id] = await read(f"{label}: ")

        elif field_type == "Input.Number":
            raw = await read(f"{label} (number): ")
            number = _parse_int(raw)
            if number is None:
                logger.debug("Dropping non-numeric input for field '%s'.", field_id)
            else:
                inputs[field_id] = number

        elif field_type == "Input.ChoiceSet":
            choices = [choice for choice in item.get("choices") or [] if isinstance(choice, Mapping)]
            if not choices:
                continue
            print(f"{label}:")
            for index, choice in enumerate(choices, start=1):
                print(f"  {index}. {choice.get('title', '')}")
            raw = await read("Select option number: ")
            selected = _parse_int(raw)
            if selected is None:
                logger.debug("Dropping non-numeric choice for field '%s'.", field_id)
                continue
            if 1 <= selected <= len(choices):
                value = choices[selected - 1].get("value")
                inputs[field_id] = None if value is None else str(value)

        elif field_type == "Input.Toggle":
            answer = (await read(f"{label} (yes/no): ")).strip().lower()
            if answer in ("yes", "y"):
                value_on = item.get("valueOn")
                inputs[field_id] = "true" if value_on is None else str(value_on)
            else:
                value_off = item.get("valueOff")
                inputs[field_id] = "false" if value_off is None else str(value_off)

        elif field_type == "Input.Date":
            inputs[field_id] = await read(f"{label} (yyyy-MM-dd): ")

        elif field_type == "Input.Time":
            inputs[field_id] = await read(f"{label} (HH:mm): ")

    return inputs
