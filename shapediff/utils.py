"""Utility functions for ShapeDiff."""

from __future__ import annotations

import re
import json
from typing import Any


_IDENTIFIER = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


def build_path(parent_path: str, key: str | int) -> str:
    """Build a JSONPath from parent path and key."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    # Handle special characters in key names
    if _IDENTIFIER.match(key):
        return f"{parent_path}.{key}"
    escaped = key.replace("\\", "\\\\").replace("'", "\\'")
    return f"{parent_path}['{escaped}']"


def render_value(value: Any) -> str:
    """Render a JSON value as compact JSON text with sorted keys."""
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return repr(value)


def join_url(base_url: str, endpoint: str) -> str:
    """Join a base URL and an endpoint path with exactly one slash."""
    if not endpoint:
        return base_url
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
