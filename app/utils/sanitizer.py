"""
Best-effort removal of script-like content from form fields
Narrow on purpose: this is not an HTML sanitizer
"""
import re
from typing import Any, Dict, Mapping

SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
IFRAME_TAG = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
JAVASCRIPT_URI = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)


def sanitize_value(value: str) -> str:
    value = SCRIPT_TAG.sub("", value)
    value = IFRAME_TAG.sub("", value)
    value = JAVASCRIPT_URI.sub("", value)
    return EVENT_HANDLER.sub("", value)


def sanitize(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of data with every string value cleaned

    Args:
        data: Raw field mapping

    Returns:
        Dict[str, Any]: New mapping; non-string values are passed through
    """
    return {
        key: sanitize_value(value) if isinstance(value, str) else value
        for key, value in data.items()
    }
