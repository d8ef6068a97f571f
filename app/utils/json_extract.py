"""
Extract a JSON object from free-form LLM output.

Models are asked for "pure JSON" but regularly answer with prose around it,
markdown code fences, or several brace groups. This helper strips fence
markers and returns the first balanced {...} group that parses as a JSON
object.
"""

import json
import re
from typing import Any, Dict, Optional

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


class JSONExtractionError(ValueError):
    """Raised when no well-formed JSON object can be found in the text."""


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _balanced_object_end(text: str, start: int) -> Optional[int]:
    """
    Return the index of the brace closing the object opened at `start`,
    honouring string literals and escapes. None if it never closes.
    """
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Find the first well-formed JSON object in `text`.

    Candidates are tried left to right from every "{"; an unclosed brace or
    a balanced group that is not valid JSON (e.g. "{placeholder}" in prose)
    is skipped.

    Raises:
        JSONExtractionError: if the text is empty or holds no JSON object
    """
    if not text or not text.strip():
        raise JSONExtractionError("Empty response text")

    cleaned = strip_code_fences(text)
    position = cleaned.find("{")

    while position != -1:
        end = _balanced_object_end(cleaned, position)
        parsed = None
        if end is not None:
            try:
                parsed = json.loads(cleaned[position:end + 1])
            except json.JSONDecodeError:
                pass
        if isinstance(parsed, dict):
            return parsed
        position = cleaned.find("{", position + 1)

    raise JSONExtractionError(f"No JSON object found in response: {cleaned[:120]!r}")
