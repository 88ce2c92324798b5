# -*- coding: utf-8 -*-
"""Pull the JSON payload out of a free-text model reply."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from chromaleap.errors import MalformedResponse

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json\r?\n(.*?)\r?\n```", flags=re.DOTALL)
_ANY_FENCE = re.compile(r"```[\w+-]*\r?\n(.*?)\r?\n```", flags=re.DOTALL)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def find_json_candidate(raw_text: str) -> str:
    """Return the text that should be parsed as JSON.

    A block fenced as ``json`` wins over any other fenced block; without
    fences the whole reply is the candidate.
    """

    match: Optional[re.Match[str]] = _JSON_FENCE.search(raw_text)
    if match is None:
        match = _ANY_FENCE.search(raw_text)
    if match is not None:
        return match.group(1)
    return raw_text


def extract_json_payload(raw_text: str) -> Any:
    """Parse the model reply strictly, raising :class:`MalformedResponse`."""

    if raw_text is None:
        raise MalformedResponse("")

    candidate = find_json_candidate(raw_text)
    try:
        payload = json.loads(candidate, parse_constant=_reject_constant)
    except (json.JSONDecodeError, ValueError) as exc:
        logger.error("Failed to parse JSON from model reply: %s", exc)
        raise MalformedResponse(raw_text) from exc

    logger.debug("Parsed model reply (%d chars candidate)", len(candidate))
    return payload


__all__ = ["extract_json_payload", "find_json_candidate"]
