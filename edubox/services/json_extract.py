"""
Best-effort JSON recovery from model output.

Models wrap JSON in Markdown fences, prepend chatter, or ignore the format entirely.
Each helper degrades step by step instead of raising; callers decide what an empty
result means.
"""
import json
import re
from typing import Any

MAX_SUGGESTIONS = 5

_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
_LEADING_FENCE = re.compile(r"^\s*```?\w*\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```\s*$", re.IGNORECASE)
_LEADING_BULLET = re.compile(r"^\s*-\s*")
_SURROUNDING_QUOTES = re.compile(r"^['\"]+|['\"]+$")
_NOISE_LINE = re.compile(r"^`+|^\[+$|^\]+$|^json$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ``` markers (and a leading language tag) while keeping the fenced content."""
    s = text.strip()
    s = _FENCED_BLOCK.sub(lambda m: m.group(0).replace("```", ""), s)
    s = _LEADING_FENCE.sub("", s, count=1)
    s = _TRAILING_FENCE.sub("", s, count=1)
    return s.strip()


def find_balanced_array(text: str) -> str | None:
    """First balanced [...] substring starting at the first '['; None if it never closes."""
    start = text.find("[")
    if start == -1:
        return None
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_string_array(text: str) -> list[str] | None:
    """Fence-stripped direct parse, then first balanced array. None when neither yields a list."""
    if not text:
        return None
    s = strip_code_fences(text)

    try:
        parsed = json.loads(s)
        if isinstance(parsed, list):
            return [_as_text(x) for x in parsed]
    except ValueError:
        pass

    candidate = find_balanced_array(s)
    if candidate is None:
        return None
    try:
        parsed = json.loads(candidate)
    except ValueError:
        return None
    if isinstance(parsed, list):
        return [_as_text(x) for x in parsed]
    return None


def split_lines_fallback(text: str, limit: int = MAX_SUGGESTIONS) -> list[str]:
    """Last resort: one suggestion per line, bullets and quotes stripped, fence/bracket noise dropped."""
    out = []
    for line in re.split(r"\r?\n", text):
        line = _LEADING_BULLET.sub("", line).strip()
        line = _SURROUNDING_QUOTES.sub("", line)
        if not line or _NOISE_LINE.search(line):
            continue
        out.append(line)
        if len(out) >= limit:
            break
    return out


def extract_suggestions(raw: str, limit: int = MAX_SUGGESTIONS) -> list[str]:
    parsed = extract_string_array(raw)
    if parsed is not None:
        return parsed[:limit]
    return split_lines_fallback(raw, limit)


def clean_json_payload(text: str) -> str:
    """Drop fences and any prose before the first '[' / '{' or after the last ']' / '}'."""
    s = text.strip()
    s = re.sub(r"```json\n?", "", s)
    s = re.sub(r"```\n?", "", s)
    s = re.sub(r"^[^\[{]*", "", s)
    s = re.sub(r"[^}\]]*$", "", s)
    return s


def parse_json_array(text: str) -> list[Any]:
    """Strict array parse of cleaned model output. Raises ValueError when it is not a JSON array."""
    parsed = json.loads(clean_json_payload(text))
    if not isinstance(parsed, list):
        raise ValueError("Response is not an array")
    return parsed


def parse_json_object(text: str) -> dict[str, Any]:
    """
    Object parse for replies that were asked for "ONLY valid JSON": strip a ```json / ``` wrapper,
    then take the outermost {...} span. Raises ValueError with the parser message on failure.
    """
    s = text.strip()
    if s.startswith("```json"):
        s = re.sub(r"\s*```$", "", re.sub(r"^```json\s*", "", s))
    elif s.startswith("```"):
        s = re.sub(r"\s*```$", "", re.sub(r"^```\s*", "", s))
    s = s.strip()
    match = re.search(r"\{[\s\S]*\}", s)
    if match:
        s = match.group(0)
    try:
        parsed = json.loads(s)
    except ValueError as e:
        raise ValueError(f"AI returned invalid JSON response: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError("AI returned invalid JSON response: expected an object")
    return parsed


def _as_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
