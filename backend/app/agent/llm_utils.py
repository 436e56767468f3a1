"""Extraction of the JSON object embedded in a free-text LLM reply.

The reply is untrusted text. ``extract_json_object`` never raises on bad
input; it returns ``Parsed`` or ``Unparseable`` and the caller decides what a
failure means.
"""

import json
from dataclasses import dataclass
from typing import Any

from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Parsed:
    value: dict[str, Any]


@dataclass(frozen=True)
class Unparseable:
    reason: str


ParseResult = Parsed | Unparseable


def _fix_trailing_commas(text: str) -> str:
    """Remove trailing commas before closing brackets, outside string literals."""
    out: list[str] = []
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
        elif char == "\\" and in_string:
            escape_next = True
        elif char == '"':
            in_string = not in_string
        elif char == "," and not in_string:
            rest = text[i + 1 :].lstrip()
            if rest[:1] in ("}", "]"):
                continue
        out.append(char)

    return "".join(out)


def _try_parse_object(text: str) -> dict[str, Any] | None:
    """Parse ``text`` as a JSON object, or return None.

    Valid JSON is parsed as is; the trailing-comma repair is only a fallback.
    """
    text = text.strip()
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            value = json.loads(_fix_trailing_commas(text))
        except (json.JSONDecodeError, ValueError):
            return None
    return value if isinstance(value, dict) else None


def _greedy_object_span(text: str) -> str | None:
    """Everything from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def _balanced_object_span(text: str) -> str | None:
    """First complete ``{...}`` starting at the first ``{``, using brace counting.

    Braces inside string literals are ignored.
    """
    start_idx = text.find("{")
    if start_idx == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start_idx, len(text)):
        char = text[i]

        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if not in_string:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start_idx : i + 1]

    return None


def extract_json_object(content: str | None) -> ParseResult:
    """Find and parse the JSON object embedded in an LLM reply.

    Tries the greedy span first (it covers the common case of one object
    wrapped in prose or a code fence), then the first balanced object, which
    survives trailing text that contains stray braces.
    """
    if not content:
        return Unparseable("Empty response")

    greedy = _greedy_object_span(content)
    if greedy is None:
        logger.warning("No JSON object in LLM response", content_preview=content[:200])
        return Unparseable("No JSON object found")

    value = _try_parse_object(greedy)
    if value is not None:
        return Parsed(value)

    balanced = _balanced_object_span(content)
    if balanced is not None and balanced != greedy:
        value = _try_parse_object(balanced)
        if value is not None:
            logger.debug("Parsed JSON using balanced-brace strategy")
            return Parsed(value)

    logger.warning("Invalid JSON in LLM response", content_preview=content[:200])
    return Unparseable("Invalid JSON object")
