"""Custom exception hierarchy for the document verification client."""

from typing import Optional


class DocVerifyError(Exception):
    """Base exception for all docverify errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Agent Errors ----

class AgentError(DocVerifyError):
    """The remote agent call failed or returned an error status."""


class AgentResponseParseError(AgentError):
    """Agent text could not be turned into structured data."""

    def __init__(self, message: str = "Failed to parse agent response", raw_response: str = ""):
        details = {"raw_response": raw_response[:200]} if raw_response else {}
        super().__init__(message, details)
        self.raw_response = raw_response


# ---- Upload Errors ----

class UploadError(DocVerifyError):
    """Uploading document assets failed."""

    def __init__(self, message: str, failed_files: Optional[list[str]] = None):
        details = {"failed_files": ", ".join(failed_files)} if failed_files else {}
        super().__init__(message, details)
        self.failed_files = failed_files or []


# ---- Validation Errors ----

class ValidationError(DocVerifyError):
    """Input validation failed."""


class InvalidConfigError(ValidationError):
    """Configuration value is invalid or missing."""
