"""
Cache key derivation.

Key: "<operation>:" + SHA-256(JSON(params with top-level keys sorted))

Only the top-level key order is normalized. Nested mappings are hashed in
the order they were built, so {"a": {"x": 1, "y": 2}} and {"a": {"y": 2, "x": 1}}
produce different keys unless deep canonicalization is requested.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from touchline.common.errors import KeySerializationError


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _deep_sort(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _deep_sort(value[k]) for k in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_deep_sort(v) for v in value]
    return value


def canonicalize(params: Any, *, deep: bool = False) -> str:
    """
    Serialize params into the string that gets hashed.

    Raises:
        KeySerializationError: params hold a circular reference, non-string
            keys that cannot be ordered, or values JSON cannot represent.
    """
    try:
        if deep:
            ordered = _deep_sort(params)
        elif isinstance(params, Mapping):
            ordered = {k: params[k] for k in sorted(params)}
        else:
            ordered = params
        return json.dumps(
            ordered,
            default=_json_default,
            separators=(",", ":"),
            ensure_ascii=False,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise KeySerializationError(
            f"Cannot derive cache key from params: {e}",
            details={"params_type": type(params).__name__},
        ) from e


def derive_key(operation: str, params: Any, *, deep: bool = False) -> str:
    """Compute the cache key for one call of `operation` with `params`."""
    digest = hashlib.sha256(canonicalize(params, deep=deep).encode("utf-8")).hexdigest()
    return f"{operation}:{digest}"


def to_jsonable(value: Any) -> Any:
    """Round-trip through JSON so the value fits a JSON column (dates become ISO strings)."""
    if value is None:
        return None
    return json.loads(json.dumps(value, default=_json_default))
