"""Multi-strategy JSON recovery for agent responses.

Strategies are tried from strictest to most lenient; the first one that
produces a value wins and is recorded on the returned ParseResult:

1. direct             strict json.loads of the trimmed input
2. cleaned            sanitize (trailing commas, control chars, BOM) then parse
3. extracted          fenced block or first balanced {...}/[...] span
   extracted_cleaned  same span after sanitizing
4. partial_recovery   regex scan for "key": value pairs
5. raw_fallback       give up, keep the trimmed text for display
"""

import json
import logging
import re
from typing import Any, Optional

from config.exceptions import AgentResponseParseError
from models.enums import ParseStrategy
from models.parse_result import ParseResult
from tools.response_normalizer import as_mapping
from tools.text_utils import clean_json_string, extract_json_candidate, truncate

logger = logging.getLogger(__name__)

# Lenient decoder that allows control characters (raw newlines, tabs) inside
# JSON strings; agents emit these in place of \n escapes.
_LENIENT_DECODER = json.JSONDecoder(strict=False)

PARTIAL_RECOVERY_MAX_CHARS = 50_000
PARTIAL_RECOVERY_MAX_MATCHES = 500
PARTIAL_RECOVERY_MAX_VALUE_CHARS = 2_000

# "key": <string | true | false | null | number | [...] | {...}>
# Array and object values run to the first closer, so nested containers
# deeper than one level may be cut short and kept as raw text. Each value is
# capped at PARTIAL_RECOVERY_MAX_VALUE_CHARS so an opener with no closer never
# rescans the rest of the input.
_KV_PATTERN = re.compile(
    r'"([^"]+)"\s*:\s*('
    r'"(?:[^"\\]|\\.)*"'
    r"|true|false|null"
    r"|-?\d+(?:\.\d+)?"
    rf"|\[[^\]]{{0,{PARTIAL_RECOVERY_MAX_VALUE_CHARS}}}\]"
    rf"|\{{[^}}]{{0,{PARTIAL_RECOVERY_MAX_VALUE_CHARS}}}\}}"
    r")",
    re.DOTALL,
)
_EDGE_QUOTES_RE = re.compile(r'^"|"$')

SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"


def _try_loads(text: str) -> Any:
    """Try parsing JSON, first strictly then leniently."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass
    # Fallback: allow unescaped control characters in strings
    try:
        return _LENIENT_DECODER.decode(text)
    except (ValueError, RecursionError):
        pass
    raise json.JSONDecodeError("", text, 0)


def partial_recovery(
    text: str,
    max_chars: int = PARTIAL_RECOVERY_MAX_CHARS,
    max_matches: int = PARTIAL_RECOVERY_MAX_MATCHES,
) -> Optional[dict[str, Any]]:
    """Rebuild a best-effort mapping from ``"key": value`` pairs.

    Lossy: values that fail to parse on their own are kept as their raw text
    with surrounding quotes removed. Returns None when no pair was found.
    """
    recovered: dict[str, Any] = {}
    for count, match in enumerate(_KV_PATTERN.finditer(text[:max_chars])):
        if count >= max_matches:
            logger.debug("Partial recovery stopped after %d pairs", max_matches)
            break
        key, value_str = match.group(1), match.group(2)
        try:
            recovered[key] = json.loads(value_str)
        except (ValueError, RecursionError):
            recovered[key] = _EDGE_QUOTES_RE.sub("", value_str)
    return recovered or None


def robust_json_parse(text: Any) -> ParseResult:
    """Interpret untrusted agent text as JSON. Never raises."""
    if not isinstance(text, str) or not text:
        return ParseResult.fail(
            raw="" if text is None else str(text),
            error="Invalid input: expected non-empty string",
            strategy=ParseStrategy.NONE,
        )

    trimmed = text.strip()

    # Strategy 1: direct
    try:
        return ParseResult.ok(json.loads(trimmed), ParseStrategy.DIRECT)
    except (ValueError, RecursionError):
        pass

    # Strategy 2: cleaned
    try:
        data = _try_loads(clean_json_string(trimmed))
        logger.debug("JSON recovered via cleaning")
        return ParseResult.ok(data, ParseStrategy.CLEANED)
    except json.JSONDecodeError:
        pass

    # Strategy 3: extracted from prose / markdown
    extracted = extract_json_candidate(trimmed)
    if extracted:
        try:
            data = json.loads(extracted)
            logger.debug("JSON recovered via extraction (%d chars)", len(extracted))
            return ParseResult.ok(data, ParseStrategy.EXTRACTED)
        except (ValueError, RecursionError):
            pass
        try:
            data = _try_loads(clean_json_string(extracted))
            logger.debug("JSON recovered via extraction + cleaning")
            return ParseResult.ok(data, ParseStrategy.EXTRACTED_CLEANED)
        except json.JSONDecodeError:
            pass

    # Strategy 4: partial key-value recovery
    partial = partial_recovery(trimmed)
    if partial:
        logger.debug("Partial recovery found %d keys", len(partial))
        return ParseResult.ok(partial, ParseStrategy.PARTIAL_RECOVERY)

    # Strategy 5: raw fallback
    logger.debug("All parsing strategies failed: %s", truncate(trimmed, 120))
    return ParseResult.fail(
        raw=trimmed,
        error="All parsing strategies failed",
        strategy=ParseStrategy.RAW_FALLBACK,
    )


def parse_sse_data(data: str) -> ParseResult:
    """Parse one SSE data payload, honouring the ``[DONE]`` sentinel."""
    if isinstance(data, str) and data.startswith(SSE_DATA_PREFIX):
        data = data[len(SSE_DATA_PREFIX):]
    if data == SSE_DONE_SENTINEL:
        return ParseResult.ok({"done": True}, ParseStrategy.SSE_DONE)
    return robust_json_parse(data)


def safe_get(result: ParseResult, key: str, default: Any = None) -> Any:
    """Return ``result.data[key]`` if the parse succeeded and the key exists."""
    if result.success and isinstance(result.data, dict) and key in result.data:
        return result.data[key]
    return default


def parse_json_response(text: str) -> dict:
    """Extract and parse JSON from agent response text.

    Unlike robust_json_parse() this raises on failure, for callers that
    want exceptions. Always returns a dict: lists are wrapped as
    ``{"items": [...]}`` and scalars as ``{"value": v}``.

    Raises:
        AgentResponseParseError: If no strategy produced a value.
    """
    result = robust_json_parse(text)
    if not result.success:
        raise AgentResponseParseError(
            f"Failed to parse JSON from agent response: {truncate(str(text))}",
            raw_response=result.raw or "",
        )
    return as_mapping(result.data)
