"""Configuration package — settings, logging, and exceptions."""

from config.exceptions import (
    DocVerifyError,
    AgentError,
    AgentResponseParseError,
    UploadError,
    ValidationError,
    InvalidConfigError,
)
from config.logging_config import setup_logging, install_log_forwarder, remove_log_forwarder
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "install_log_forwarder",
    "remove_log_forwarder",
    "DocVerifyError",
    "AgentError",
    "AgentResponseParseError",
    "UploadError",
    "ValidationError",
    "InvalidConfigError",
]
