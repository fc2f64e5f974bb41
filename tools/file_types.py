"""Upload file type checks."""

import mimetypes
from pathlib import Path
from typing import Optional

DEFAULT_MIME_TYPE = "application/octet-stream"

# Extension map for types whose registration varies between platforms.
_EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".md": "text/markdown",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}

SUPPORTED_UPLOAD_TYPES = frozenset(_EXTENSION_MIME_TYPES.values())


def guess_mime_type(path: str | Path) -> str:
    """MIME type for a file name, falling back to ``application/octet-stream``."""
    path = Path(path)
    known = _EXTENSION_MIME_TYPES.get(path.suffix.lower())
    if known:
        return known
    return mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE


def is_supported_file_type(path: str | Path) -> bool:
    return guess_mime_type(path) in SUPPORTED_UPLOAD_TYPES


def validate_upload_file(path: str | Path) -> Optional[str]:
    """Return an error message if the file cannot be uploaded, else None."""
    mime_type = guess_mime_type(path)
    if mime_type not in SUPPORTED_UPLOAD_TYPES:
        return f"Unsupported file type: {mime_type}"
    return None
