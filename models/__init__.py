"""Models package — parse results, normalized responses, events and enums."""

from models.parse_result import ParseResult
from models.response import (
    NormalizedResponse,
    AgentResponse,
    UploadedFile,
    UploadResponse,
    ResponseField,
    ResponseSchema,
)
from models.events import ParsedSSEEvent
from models.enums import (
    ParseStrategy,
    ResponseStatus,
    EventType,
    EventPriority,
    FrameState,
    PRODUCING_STRATEGIES,
    CRITICAL_EVENT_TYPES,
)

__all__ = [
    "ParseResult",
    "NormalizedResponse",
    "AgentResponse",
    "UploadedFile",
    "UploadResponse",
    "ResponseField",
    "ResponseSchema",
    "ParsedSSEEvent",
    "ParseStrategy",
    "ResponseStatus",
    "EventType",
    "EventPriority",
    "FrameState",
    "PRODUCING_STRATEGIES",
    "CRITICAL_EVENT_TYPES",
]
