"""Text repair and span extraction helpers for agent output."""

import re
from typing import Optional

# Precompiled regex for fenced code blocks (optionally tagged json)
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")

# Control characters except tab, newline and carriage return
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")

_BOM = "\ufeff"


def _escape_controls_in_strings(text: str) -> str:
    """Escape raw newlines/tabs/carriage returns that sit inside string literals."""
    out = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            elif ch == "\n":
                out.append("\\n")
                continue
            elif ch == "\t":
                out.append("\\t")
                continue
            elif ch == "\r":
                out.append("\\r")
                continue
        elif ch == '"':
            in_string = True
        out.append(ch)
    return "".join(out)


def clean_json_string(text: str) -> str:
    """Repair common textual defects in near-JSON.

    Strips a leading BOM, trailing commas before ``}``/``]`` and stray control
    characters, then escapes raw line breaks inside string values.
    """
    cleaned = text.strip().lstrip(_BOM).strip()
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    cleaned = _CONTROL_CHARS_RE.sub("", cleaned)
    return _escape_controls_in_strings(cleaned)


def extract_balanced(text: str, open_char: str = "{", close_char: str = "}") -> Optional[str]:
    """Return the first balanced ``open_char ... close_char`` span in text.

    Depth counting starts at the first opener; closers seen at depth 0 are
    ignored and delimiters inside string literals of the span are skipped.
    Returns None when the first opened span never closes.
    """
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and depth > 0:
            in_string = True
        elif ch == open_char:
            if depth == 0:
                start = i
            depth += 1
        elif ch == close_char and depth > 0:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def extract_fenced_block(text: str) -> Optional[str]:
    """Return the stripped content of the first ``` fenced block, if any."""
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return None


def extract_json_candidate(text: str) -> Optional[str]:
    """Locate a JSON-looking region in prose or markdown.

    Fenced blocks win; otherwise the first balanced object, then the first
    balanced array.
    """
    fenced = extract_fenced_block(text)
    if fenced:
        return fenced
    return extract_balanced(text, "{", "}") or extract_balanced(text, "[", "]")


def truncate(text: str, limit: int = 200) -> str:
    """Shorten text for log lines and previews."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
