"""Events package — SSE reassembly, event dispatch and formatting."""

from events.sse_parser import SSEFrameReassembler, parse_sse_event, parse_sse_stream
from events.dispatch import EventHandlers, dispatch_event, logging_handlers
from events.messages import (
    get_event_message,
    create_parse_error_event,
    is_critical_event,
    sort_events_by_sequence,
    events_after_sequence,
)

__all__ = [
    "SSEFrameReassembler",
    "parse_sse_event",
    "parse_sse_stream",
    "EventHandlers",
    "dispatch_event",
    "logging_handlers",
    "get_event_message",
    "create_parse_error_event",
    "is_critical_event",
    "sort_events_by_sequence",
    "events_after_sequence",
]
