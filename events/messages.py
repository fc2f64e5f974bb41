"""Human-readable event messages and sequencing helpers."""

import sys
from typing import Any, Optional

from events.sse_parser import utc_timestamp
from models.enums import CRITICAL_EVENT_TYPES, EventType

RAW_PREVIEW_CHARS = 500


def get_event_message(event: dict[str, Any]) -> str:
    """Describe an event in one line, keyed on its ``type``."""
    event_type = event.get("type")

    if event_type == EventType.TOOL_BLOCKED:
        return f"Tool blocked: {event.get('reason') or 'Unknown reason'}"
    if event_type == EventType.TOOL_ERROR:
        return f"Tool error: {event.get('error') or 'Unknown error'}"
    if event_type == EventType.PARSE_ERROR:
        return f"Parse error: {event.get('error') or 'Failed to parse response'}"
    if event_type == EventType.VALIDATION_ERROR:
        return f"Validation error: {event.get('error') or 'Invalid data'}"
    if event_type == EventType.AGENT_CREATED:
        name = event.get("agent_name") or event.get("name") or "Unknown"
        return f"Agent created: {name}"
    if event_type == EventType.WORKFLOW_UPDATE:
        return "Workflow updated"
    if event_type == EventType.CHAT_COMPLETED:
        return "Task completed"
    if event_type == EventType.CHAT_FAILED:
        return f"Task failed: {event.get('error') or 'Unknown error'}"
    message = event.get("message")
    if isinstance(message, str) and message:
        return message
    return f"Event: {event_type}"


def create_parse_error_event(error: str, raw: str, request_id: Optional[str] = None) -> dict[str, Any]:
    """Build a ``parse_error`` event to stand in for an unreadable payload."""
    return {
        "type": EventType.PARSE_ERROR.value,
        "request_id": request_id or "",
        "timestamp": utc_timestamp(),
        "error": error,
        "raw_content_preview": raw[:RAW_PREVIEW_CHARS],
    }


def is_critical_event(event: dict[str, Any]) -> bool:
    event_type = event.get("type")
    return isinstance(event_type, str) and event_type in CRITICAL_EVENT_TYPES


def get_event_sequence(event: dict[str, Any]) -> int:
    """Sequence number of an event, 0 when absent."""
    seq = event.get("_seq")
    return seq if isinstance(seq, int) else 0


def sort_events_by_sequence(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Stable sort on ``_seq``; events without one go last."""
    def _key(event: dict[str, Any]) -> int:
        seq = event.get("_seq")
        return seq if isinstance(seq, int) else sys.maxsize

    return sorted(events, key=_key)


def events_after_sequence(events: list[dict[str, Any]], after_seq: int) -> list[dict[str, Any]]:
    return [e for e in events if get_event_sequence(e) > after_seq]


def is_newer_event(event: dict[str, Any], than: dict[str, Any]) -> bool:
    return get_event_sequence(event) > get_event_sequence(than)
