"""
Parsing for serialized filter expressions.

EC2 instance filters and resource tag filters travel inside a variable
query as JSON text, e.g. ``{"tag:Environment": ["prod", "staging"]}``.
They are parsed once at the dispatch boundary into a mapping of
name -> allowed values.
"""

from __future__ import annotations

import json
from typing import Any

from cwvariables.core.errors import FilterParseError


def parse_filter_expression(text: str | None, *, field: str) -> dict[str, list[str]]:
    """
    Parse a serialized filter expression.

    Args:
        text: JSON object text, or None/blank for no filters
        field: Query field the text came from, used in error details

    Returns:
        Mapping of filter name to allowed values. A single string value
        becomes a one-element list.

    Raises:
        FilterParseError: If the text is not a JSON object of strings or
            string lists
    """
    if text is None or not text.strip():
        return {}

    try:
        document: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FilterParseError(
            f"Invalid JSON in {field}: {exc.msg}",
            details={"field": field, "position": exc.pos},
        ) from exc

    if not isinstance(document, dict):
        raise FilterParseError(
            f"{field} must be a JSON object",
            details={"field": field, "type": type(document).__name__},
        )

    filters: dict[str, list[str]] = {}
    for name, value in document.items():
        if isinstance(value, str):
            filters[name] = [value]
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            filters[name] = list(value)
        else:
            raise FilterParseError(
                f"{field} values must be strings or lists of strings",
                details={"field": field, "key": name},
            )
    return filters
