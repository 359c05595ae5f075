"""
Lenient JSON extraction for oracle responses.

LLM output arrives as plain JSON, markdown-fenced JSON, JSON embedded in
chatter, or garbage. Every caller goes through `extract_json` so that the
parsing rules live in one place.
"""
import json
import re
from typing import Any, Iterator

FENCE_START = re.compile(r'^```(?:json|JSON)?\s*')
FENCE_END = re.compile(r'\s*```\s*$')


def strip_code_fence(text: str) -> str:
    """Remove a leading and trailing triple-backtick fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = FENCE_START.sub('', cleaned)
        cleaned = FENCE_END.sub('', cleaned)
    return cleaned.strip()


def _balanced_block_end(text: str, start: int) -> int | None:
    """
    Index just past the balanced block opening at `start`, ignoring brackets inside strings.
    """
    depth = 1
    in_string = False
    escape_next = False

    for i in range(start + 1, len(text)):
        char = text[i]

        if escape_next:
            escape_next = False
            continue
        if char == '\\' and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char in '{[':
            depth += 1
        elif char in '}]':
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def _json_values(text: str) -> Iterator[Any]:
    """
    Yield every JSON value recoverable from `text`: the whole text first,
    then each balanced block that decodes, left to right.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        pass
    else:
        yield value

    # JSON wrapped in prose, or a fence in the middle of the text
    position = 0
    while position < len(text):
        if text[position] not in '{[':
            position += 1
            continue
        end = _balanced_block_end(text, position)
        if end is None:
            position += 1
            continue
        try:
            value = json.loads(text[position:end])
        except json.JSONDecodeError:
            # Not JSON, but a nested block may be
            position += 1
            continue
        yield value
        position = end


def extract_json(text: str) -> Any:
    """
    Parse JSON out of free-form oracle text.

    Args:
        text: Raw oracle response

    Returns:
        The decoded JSON value (dict, list, ...)

    Raises:
        ValueError: if no JSON value can be recovered
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Empty oracle response")

    cleaned = strip_code_fence(text)
    for value in _json_values(cleaned):
        return value
    raise ValueError(f"No JSON object found in oracle response: {cleaned[:200]!r}")


def extract_json_object(text: str) -> dict:
    """Like `extract_json`, but returns the first JSON object, skipping lists and scalars."""
    data = extract_json(text)
    if isinstance(data, dict):
        return data
    for value in _json_values(strip_code_fence(text)):
        if isinstance(value, dict):
            return value
    raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
