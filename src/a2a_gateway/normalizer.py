"""Flatten A2A messages into the ``{role, content}`` turns agents consume."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .models import DataPart, Message, Part, SendParams, TextPart

Turns = List[Dict[str, str]]


def parse_params(params: Any) -> SendParams:
    """Validate request params. Anything that is not an object counts as empty."""
    if not isinstance(params, dict):
        params = {}
    return SendParams.model_validate(params)


def extract_messages(params: SendParams) -> List[Message]:
    """A single ``message`` wins over ``messages``; neither means no input."""
    if params.message is not None:
        return [params.message]
    if params.messages:
        return list(params.messages)
    return []


def part_to_text(part: Part) -> str:
    if isinstance(part, TextPart):
        return part.text
    if isinstance(part, DataPart):
        return json.dumps(part.data, separators=(",", ":"), ensure_ascii=False)
    return ""


def normalize_message(msg: Message) -> Dict[str, str]:
    return {"role": msg.role, "content": "\n".join(part_to_text(p) for p in msg.parts)}


def normalize_messages(messages: List[Message]) -> Turns:
    return [normalize_message(m) for m in messages]
