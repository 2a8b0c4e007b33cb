"""Input checks applied before any resolution."""
from typing import Any

from mapping_explainer.exceptions import InvalidInputError


def parse_source_id(value: Any) -> int:
    """Accept a positive integer or its ASCII decimal string form."""
    if isinstance(value, bool):
        raise InvalidInputError("Missing or invalid ssid")
    if isinstance(value, int):
        source_id = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        source_id = int(value.strip())
    else:
        raise InvalidInputError("Missing or invalid ssid")
    if source_id <= 0:
        raise InvalidInputError("Missing or invalid ssid")
    return source_id


def require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Missing or invalid {name}")
    return value.strip()
