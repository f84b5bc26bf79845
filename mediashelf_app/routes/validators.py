"""Lightweight request validation helpers."""

from typing import Any, Dict, List, Tuple, Optional

from ..lookup.models import ContentKind


Rule = Tuple[str, type, Optional[int]]

MAX_QUERY_LENGTH = 200
MAX_ITEMS_LENGTH = 5000

TAXONOMIES = ('genre', 'theme')
TRUE_VALUES = ('1', 'true', 'yes', 'on')


def validate_fields(payload: Dict[str, Any], rules: List[Rule]) -> Optional[str]:
    """
    Validate required fields with optional max length.

    Args:
        payload: Incoming JSON dict.
        rules: List of (field, type, max_length or None).

    Returns:
        None if valid, or error message string.
    """
    for field, expected_type, max_len in rules:
        if field not in payload:
            return f"Missing required field: {field}"
        value = payload.get(field)
        if not isinstance(value, expected_type):
            return f"Field '{field}' must be {expected_type.__name__}"
        if max_len is not None and len(str(value)) > max_len:
            return f"Field '{field}' exceeds max length {max_len}"
    return None


def validate_kind(kind: Optional[str], required: bool = True) -> Optional[str]:
    """
    Validate a content kind ('anime' or 'manga').

    Returns:
        None if valid, or error message string.
    """
    if not kind:
        return "Missing kind" if required else None
    try:
        ContentKind(kind)
    except ValueError:
        return f"Unknown kind: {kind}"
    return None


def validate_taxonomy(taxonomy: Any) -> Optional[str]:
    if taxonomy not in TAXONOMIES:
        return f"Field 'taxonomy' must be one of {', '.join(TAXONOMIES)}"
    return None


def parse_bool(value: Optional[str]) -> bool:
    """Query-string flag ('1', 'true', 'yes', 'on' are true)."""
    return bool(value) and value.strip().lower() in TRUE_VALUES


def sanitize_string(value: str, max_length: int = 500, allow_newlines: bool = False) -> str:
    """
    Sanitize a string by removing control characters and limiting length.

    Args:
        value: String to sanitize
        max_length: Maximum allowed length
        allow_newlines: Whether to allow newlines

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return ""

    # Remove control characters (except newlines if allowed)
    if allow_newlines:
        result = ''.join(c for c in value if c >= ' ' or c in '\n\r\t')
    else:
        result = ''.join(c for c in value if c >= ' ')

    # Limit length
    return result[:max_length]
