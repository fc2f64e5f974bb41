"""Outcome of interpreting agent text as structured data."""

from dataclasses import dataclass
from typing import Any, Optional

from models.enums import ParseStrategy, PRODUCING_STRATEGIES


@dataclass(frozen=True)
class ParseResult:
    """Tagged result of a parse attempt.

    ``strategy`` is always set. On success ``data`` holds the value (which may
    legitimately be ``None`` for the JSON literal ``null``); on failure ``raw``
    and ``error`` carry diagnostics.
    """
    success: bool
    strategy: ParseStrategy
    data: Any = None
    raw: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any, strategy: ParseStrategy) -> "ParseResult":
        return cls(success=True, data=data, strategy=strategy)

    @classmethod
    def fail(cls, raw: str, error: str, strategy: ParseStrategy) -> "ParseResult":
        return cls(success=False, raw=raw, error=error, strategy=strategy)

    @property
    def is_partial(self) -> bool:
        """True when the data came from key-value recovery rather than a full parse."""
        return self.success and self.strategy == ParseStrategy.PARTIAL_RECOVERY

    def __post_init__(self):
        if self.success and self.strategy.value not in PRODUCING_STRATEGIES:
            raise ValueError(f"strategy {self.strategy.value!r} cannot produce data")
        if not self.success and (self.raw is None or self.error is None):
            raise ValueError("failed ParseResult requires raw and error")
