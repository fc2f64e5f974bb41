"""Route parsed stream events to UI callbacks."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from events.messages import get_event_message
from models.enums import EventType
from models.events import ParsedSSEEvent

logger = logging.getLogger(__name__)

EventCallback = Callable[[dict[str, Any]], None]
ParseErrorCallback = Callable[[str, str], None]


@dataclass
class EventHandlers:
    """Named callback slots. Any slot may be left as None."""
    on_success: Optional[EventCallback] = None
    on_parse_error: Optional[ParseErrorCallback] = None
    on_tool_blocked: Optional[EventCallback] = None
    on_tool_error: Optional[EventCallback] = None
    on_validation_error: Optional[EventCallback] = None


def dispatch_event(parsed: ParsedSSEEvent, handlers: EventHandlers) -> None:
    """Invoke at most one handler for a parsed event.

    A failed parse always goes to on_parse_error, whatever the declared type.
    """
    if not parsed.success:
        if handlers.on_parse_error:
            handlers.on_parse_error(parsed.raw or "", parsed.error or "Unknown error")
        return

    event = parsed.event
    if event is None:
        return

    if parsed.event_type == EventType.TOOL_BLOCKED:
        callback = handlers.on_tool_blocked
    elif parsed.event_type == EventType.TOOL_ERROR:
        callback = handlers.on_tool_error
    elif parsed.event_type == EventType.PARSE_ERROR:
        if handlers.on_parse_error:
            handlers.on_parse_error(
                str(event.get("raw_content_preview") or ""),
                str(event.get("error") or "Parse error"),
            )
        return
    elif parsed.event_type == EventType.VALIDATION_ERROR:
        callback = handlers.on_validation_error
    else:
        callback = handlers.on_success

    if callback:
        callback(event)


def logging_handlers() -> EventHandlers:
    """Handlers that report every event through the standard logger."""

    def _info(event: dict) -> None:
        logger.info("%s", get_event_message(event))

    def _warn(event: dict) -> None:
        logger.warning("%s", get_event_message(event))

    def _parse_error(raw: str, error: str) -> None:
        logger.error("Parse error: %s (raw=%r)", error, raw[:120])

    return EventHandlers(
        on_success=_info,
        on_parse_error=_parse_error,
        on_tool_blocked=_warn,
        on_tool_error=_warn,
        on_validation_error=_warn,
    )
