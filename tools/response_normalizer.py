"""Map any parsed agent payload onto the canonical response shape.

The cases below are checked in order and the first match wins. An object
holding both ``status`` and ``message`` but no ``result`` therefore lands in
the "status only" case, not the "message only" one.
"""

from collections.abc import Mapping
from typing import Any, Callable

from models.enums import ResponseStatus
from models.response import NormalizedResponse

EMPTY_RESPONSE_MESSAGE = "Empty response from agent"

_RESERVED_KEYS = ("status", "message", "metadata")


def as_mapping(value: Any) -> dict[str, Any]:
    """Coerce a value into a dict suitable for ``result``."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        return {"items": list(value)}
    if isinstance(value, str):
        return {"text": value}
    return {"value": value}


# Floats with no fractional part below this magnitude print without ".0".
_PLAIN_INTEGER_LIMIT = 1e21


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        return str(int(value))
    return str(value)


def _status(value: Any) -> ResponseStatus:
    return ResponseStatus.ERROR if value == "error" else ResponseStatus.SUCCESS


def _message(obj: Mapping) -> str | None:
    message = obj.get("message")
    if message is None:
        return None
    return message if isinstance(message, str) else _stringify(message)


def _metadata(obj: Mapping) -> dict | None:
    metadata = obj.get("metadata")
    return dict(metadata) if isinstance(metadata, Mapping) else None


# ---- case predicates ----

def _is_object(parsed: Any) -> bool:
    return isinstance(parsed, Mapping)


def _is_scalar(parsed: Any) -> bool:
    return not isinstance(parsed, (Mapping, list, tuple))


def _has_status_and_result(parsed: Any) -> bool:
    return _is_object(parsed) and "status" in parsed and "result" in parsed


def _has_status(parsed: Any) -> bool:
    return _is_object(parsed) and "status" in parsed


def _has_result(parsed: Any) -> bool:
    return _is_object(parsed) and "result" in parsed


def _has_text_message(parsed: Any) -> bool:
    return _is_object(parsed) and isinstance(parsed.get("message"), str)


def _has_nested_response(parsed: Any) -> bool:
    return _is_object(parsed) and "response" in parsed


# ---- case builders ----

def _from_empty(parsed: Any) -> NormalizedResponse:
    return NormalizedResponse.error(EMPTY_RESPONSE_MESSAGE)


def _from_string(parsed: str) -> NormalizedResponse:
    return NormalizedResponse(result={"text": parsed}, message=parsed)


def _from_scalar(parsed: Any) -> NormalizedResponse:
    return NormalizedResponse(result={"value": parsed}, message=_stringify(parsed))


def _from_status_and_result(parsed: Mapping) -> NormalizedResponse:
    return NormalizedResponse(
        status=_status(parsed["status"]),
        result=as_mapping(parsed["result"] or None),
        message=_message(parsed),
        metadata=_metadata(parsed),
    )


def _from_status(parsed: Mapping) -> NormalizedResponse:
    rest = {k: v for k, v in parsed.items() if k not in _RESERVED_KEYS}
    return NormalizedResponse(
        status=_status(parsed["status"]),
        result=rest,
        message=_message(parsed),
        metadata=_metadata(parsed),
    )


def _from_result(parsed: Mapping) -> NormalizedResponse:
    return NormalizedResponse(
        result=as_mapping(parsed["result"] or None),
        message=_message(parsed),
        metadata=_metadata(parsed),
    )


def _from_text_message(parsed: Mapping) -> NormalizedResponse:
    return NormalizedResponse(result={"text": parsed["message"]}, message=parsed["message"])


def _from_anything(parsed: Any) -> NormalizedResponse:
    return NormalizedResponse(result=as_mapping(parsed))


_DECISIONS: list[tuple[Callable[[Any], bool], Callable[[Any], NormalizedResponse]]] = [
    (lambda p: p is None, _from_empty),
    (lambda p: isinstance(p, str), _from_string),
    (_is_scalar, _from_scalar),
    (_has_status_and_result, _from_status_and_result),
    (_has_status, _from_status),
    (_has_result, _from_result),
    (_has_text_message, _from_text_message),
]


def normalize_response(parsed: Any) -> NormalizedResponse:
    """Total function from any parsed value to a NormalizedResponse.

    A ``{"response": ...}`` wrapper that matches no other case is unwrapped
    in a loop, so arbitrarily deep nesting cannot exhaust the stack.
    """
    while True:
        for matches, build in _DECISIONS:
            if matches(parsed):
                return build(parsed)
        if not _has_nested_response(parsed):
            return _from_anything(parsed)
        parsed = parsed["response"]


def extract_text(response: NormalizedResponse) -> str:
    """Best human-readable text in a normalized response, or ``""``."""
    if response.message:
        return response.message
    for key in ("text", "message", "answer", "answer_text"):
        value = response.result.get(key)
        if isinstance(value, str) and value:
            return value
    return ""
