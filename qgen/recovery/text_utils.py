from __future__ import annotations

import json
from typing import Any


def has_value(value: Any) -> bool:
    """True unless `value` is None or a blank string."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def as_text(value: Any) -> str:
    """
    Coerce a decoded JSON value to display text: None -> "", containers ->
    compact JSON, anything else -> str().
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return compact_json(value)
    return str(value)
