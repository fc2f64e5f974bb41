"""Canonical agent response shapes handed to presentation code."""

from dataclasses import dataclass, field
from typing import Any, Optional

from config.exceptions import UploadError
from models.enums import ResponseStatus


@dataclass(frozen=True)
class NormalizedResponse:
    """The ``{status, result, message?, metadata?}`` contract.

    ``result`` is always a mapping, even for malformed or scalar payloads.
    """
    status: ResponseStatus = ResponseStatus.SUCCESS
    result: dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @property
    def is_error(self) -> bool:
        return self.status == ResponseStatus.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form; absent optional keys are omitted."""
        out: dict[str, Any] = {"status": self.status.value, "result": self.result}
        if self.message is not None:
            out["message"] = self.message
        if self.metadata is not None:
            out["metadata"] = self.metadata
        return out

    @classmethod
    def error(cls, message: str) -> "NormalizedResponse":
        return cls(status=ResponseStatus.ERROR, result={}, message=message)


@dataclass
class AgentResponse:
    """Full outcome of one agent call."""
    success: bool
    response: NormalizedResponse
    agent_id: Optional[str] = None
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    timestamp: Optional[str] = None
    raw_response: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None
    parse_strategy: Optional[str] = None


@dataclass
class UploadedFile:
    asset_id: str
    file_name: str
    success: bool = True
    error: Optional[str] = None


@dataclass
class UploadResponse:
    """Result of uploading one or more documents to asset storage."""
    success: bool
    asset_ids: list[str] = field(default_factory=list)
    files: list[UploadedFile] = field(default_factory=list)
    total_files: int = 0
    successful_uploads: int = 0
    failed_uploads: int = 0
    message: str = ""
    timestamp: str = ""
    error: Optional[str] = None

    def raise_for_error(self) -> None:
        """Raise UploadError if the upload did not succeed."""
        if not self.success:
            failed = [f.file_name for f in self.files if not f.success]
            raise UploadError(self.error or self.message, failed_files=failed)


@dataclass
class ResponseField:
    """One field detected in a sample agent reply."""
    name: str
    type: str
    sample_value: str
    path: str
    is_array: bool = False
    children: list["ResponseField"] = field(default_factory=list)


@dataclass
class ResponseSchema:
    """Fields detected in a sample reply, for mapping results onto a UI."""
    success: bool
    fields: list[ResponseField] = field(default_factory=list)
    raw_response: Optional[str] = None
    error: Optional[str] = None
