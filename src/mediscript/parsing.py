"""JSON extraction from LLM responses.

Unlike a best-effort parser, failures here raise ``MalformedResponse``:
an unparseable verdict must never turn into an empty (and therefore
"safe looking") payload.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from mediscript.exceptions import MalformedResponse

log = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) wrapper, if any."""
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def _try_parse(s: str) -> Any | None:
    s = s.strip()
    if not s:
        return None
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        pass
    try:
        return json.loads(_TRAILING_COMMA.sub(r"\1", s))
    except json.JSONDecodeError:
        return None


def _first_balanced_object(content: str) -> str | None:
    """Return the first balanced ``{...}`` span, honouring string literals."""
    idx = content.find("{")
    if idx == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(idx, len(content)):
        ch = content[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[idx : i + 1]
    return None


def extract_json_object(content: str) -> dict[str, Any]:
    """Parse a JSON object from an LLM response.

    Strategies, in order: fence-stripped content, whole content, first
    balanced ``{...}`` span (prose around the object).

    Raises:
        MalformedResponse: No JSON object could be recovered.
    """
    for candidate in (strip_code_fences(content), content):
        result = _try_parse(candidate)
        if isinstance(result, dict):
            return result

    span = _first_balanced_object(content)
    if span is not None:
        result = _try_parse(span)
        if isinstance(result, dict):
            return result

    log.error(
        "Failed to parse JSON object from LLM response",
        extra={"response_length": len(content), "response_preview": content[:200]},
    )
    raise MalformedResponse("Response does not contain a JSON object", raw_response=content)
