"""SSE frame reassembly and per-frame parsing.

Frames are built from ``event:`` and ``data:`` lines and closed by a blank
line or end of input. Frames are handled strictly in arrival order and carry
no state across each other.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from models.enums import EventType, FrameState, ParseStrategy
from models.events import ParsedSSEEvent
from tools.json_parser import SSE_DONE_SENTINEL, robust_json_parse

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = EventType.MESSAGE.value


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_sse_event(
    event_type: str,
    data: str,
    request_id: Optional[str] = None,
) -> ParsedSSEEvent:
    """Parse the data of one frame.

    ``[DONE]`` short-circuits to a synthetic ``chat_completed`` event without
    touching the JSON parser. Otherwise the payload's own ``type`` wins over
    the declared event type, and ``request_id``/``timestamp`` are filled in
    when missing.
    """
    if data == SSE_DONE_SENTINEL:
        return ParsedSSEEvent(
            success=True,
            event_type=EventType.CHAT_COMPLETED.value,
            event={
                "type": EventType.CHAT_COMPLETED.value,
                "request_id": request_id or "",
                "timestamp": utc_timestamp(),
            },
            parse_strategy=ParseStrategy.SSE_DONE.value,
        )

    result = robust_json_parse(data)
    if result.success:
        payload = result.data
        event: dict[str, Any] = dict(payload) if isinstance(payload, dict) else {"data": payload}
        if not event.get("type"):
            event["type"] = event_type
        if not event.get("request_id") and request_id:
            event["request_id"] = request_id
        if not event.get("timestamp"):
            event["timestamp"] = utc_timestamp()
        return ParsedSSEEvent(
            success=True,
            event_type=str(event["type"]),
            event=event,
            parse_strategy=result.strategy.value,
        )

    logger.warning("Unparseable SSE frame (%s): %s", event_type, result.error)
    return ParsedSSEEvent(
        success=False,
        event_type=EventType.PARSE_ERROR.value,
        raw=result.raw or data,
        error=result.error or "Failed to parse SSE data",
        parse_strategy=result.strategy.value,
    )


class SSEFrameReassembler:
    """Incremental IDLE -> ACCUMULATING -> IDLE frame builder.

    Feed lines one at a time; a completed frame comes back from feed_line()
    as a ParsedSSEEvent. Call flush() at end of stream for a trailing frame.
    """

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id
        self.state = FrameState.IDLE
        self._event_type: Optional[str] = None
        self._data_lines: list[str] = []

    def feed_line(self, line: str) -> Optional[ParsedSSEEvent]:
        line = line.rstrip("\r")
        if not line.strip():
            return self.flush()

        if line.startswith(":"):
            # comment / keep-alive
            return None
        if line.startswith("event:"):
            # Updates the declared type; an in-progress frame is not flushed.
            self._event_type = line[len("event:"):].strip()
        elif line.startswith("data:"):
            value = line[len("data:"):]
            if value.startswith(" "):
                value = value[1:]
            self._data_lines.append(value)
            self.state = FrameState.ACCUMULATING
        return None

    def flush(self) -> Optional[ParsedSSEEvent]:
        """Close the current frame. Frames without data produce no event."""
        parsed = None
        if self._data_lines:
            parsed = parse_sse_event(
                self._event_type or DEFAULT_EVENT_TYPE,
                "\n".join(self._data_lines),
                self.request_id,
            )
        self._event_type = None
        self._data_lines = []
        self.state = FrameState.IDLE
        return parsed


def parse_sse_stream(raw_sse: str, request_id: Optional[str] = None) -> list[ParsedSSEEvent]:
    """Split a raw event-stream text block into parsed events, in order."""
    reassembler = SSEFrameReassembler(request_id)
    events: list[ParsedSSEEvent] = []
    for line in raw_sse.split("\n"):
        parsed = reassembler.feed_line(line)
        if parsed is not None:
            events.append(parsed)
    trailing = reassembler.flush()
    if trailing is not None:
        events.append(trailing)
    logger.debug("Parsed %d SSE events", len(events))
    return events
