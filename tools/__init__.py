"""Tools package — JSON recovery, response normalization and text helpers.

The HTTP facade lives in tools.agent_client and is imported directly.
"""

from tools.json_parser import (
    robust_json_parse,
    partial_recovery,
    parse_sse_data,
    parse_json_response,
    safe_get,
)
from tools.response_normalizer import normalize_response, extract_text, as_mapping
from tools.response_schema import detect_fields, field_type
from tools.file_types import guess_mime_type, is_supported_file_type, validate_upload_file
from tools.text_utils import (
    clean_json_string,
    extract_balanced,
    extract_fenced_block,
    extract_json_candidate,
)

__all__ = [
    "robust_json_parse",
    "partial_recovery",
    "parse_sse_data",
    "parse_json_response",
    "safe_get",
    "normalize_response",
    "extract_text",
    "as_mapping",
    "detect_fields",
    "field_type",
    "guess_mime_type",
    "is_supported_file_type",
    "validate_upload_file",
    "clean_json_string",
    "extract_balanced",
    "extract_fenced_block",
    "extract_json_candidate",
]
