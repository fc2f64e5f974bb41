"""Stream event value objects."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ParsedSSEEvent:
    """One reassembled SSE frame after parsing.

    On success ``event`` is the payload mapping with ``type``, ``request_id``
    and ``timestamp`` filled in. On failure ``event_type`` is ``parse_error``
    and ``raw``/``error`` describe what went wrong.
    """
    success: bool
    event_type: str
    event: Optional[dict[str, Any]] = None
    raw: Optional[str] = None
    error: Optional[str] = None
    parse_strategy: Optional[str] = None
