"""Enumerations for parse provenance, response status and stream events."""

from enum import Enum, IntEnum


class ParseStrategy(str, Enum):
    DIRECT = "direct"
    CLEANED = "cleaned"
    EXTRACTED = "extracted"
    EXTRACTED_CLEANED = "extracted_cleaned"
    PARTIAL_RECOVERY = "partial_recovery"
    RAW_FALLBACK = "raw_fallback"
    SSE_DONE = "sse_done"
    NONE = "none"


# Strategies that yield data; RAW_FALLBACK and NONE never do.
PRODUCING_STRATEGIES = frozenset(s.value for s in (
    ParseStrategy.DIRECT,
    ParseStrategy.CLEANED,
    ParseStrategy.EXTRACTED,
    ParseStrategy.EXTRACTED_CLEANED,
    ParseStrategy.PARTIAL_RECOVERY,
    ParseStrategy.SSE_DONE,
))


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class EventType(str, Enum):
    CHAT_STARTED = "chat_started"
    CHAT_PROGRESS = "chat_progress"
    CHAT_COMPLETED = "chat_completed"
    CHAT_FAILED = "chat_failed"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    MESSAGE = "message"
    MESSAGE_RECEIVED = "message_received"
    STATUS_UPDATE = "status_update"
    ERROR = "error"
    WORKFLOW_UPDATE = "workflow_update"
    WORKFLOW_COMPLETED = "workflow_completed"
    SUBAGENT_SWITCH = "subagent_switch"
    AGENT_CREATED = "agent_created"
    KNOWLEDGE_BASE_CREATED = "knowledge_base_created"
    TOOL_ERROR = "tool_error"
    TOOL_BLOCKED = "tool_blocked"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"


CRITICAL_EVENT_TYPES = frozenset(t.value for t in (
    EventType.ERROR,
    EventType.CHAT_FAILED,
    EventType.TOOL_BLOCKED,
    EventType.PARSE_ERROR,
    EventType.VALIDATION_ERROR,
))


class EventPriority(IntEnum):
    """Lower value means higher priority."""
    CRITICAL = 1
    STATE_CHANGE = 2
    WORKFLOW = 3
    AGENT = 4
    TOOL = 5
    PROGRESS = 6
    INFO = 7


class FrameState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
