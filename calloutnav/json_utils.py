"""JSON serialization helpers using optional orjson."""

from __future__ import annotations

try:
    import orjson  # type: ignore[import-not-found]
except ImportError:  # pragma: no cover - optional dependency
    orjson = None  # type: ignore[assignment]

import json
from typing import Any

import attrs

from calloutnav.parser import Annotation


def _default(obj: Any) -> Any:  # noqa: ANN401
    """Serialize attrs records that appear inside ``data``."""

    if isinstance(obj, Annotation):
        return obj.to_dict()
    if attrs.has(type(obj)):
        return attrs.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def json_dumps(data: object, indent: bool = False) -> str:
    """Serialize data to a JSON string.

    Args:
        data: Data structure to serialize. attrs records are converted to
            dictionaries.
        indent: Pretty-print with two space indentation.

    Returns:
        JSON representation of ``data``.
    """

    if orjson is not None:
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps(data, default=_default, option=option).decode()
    return json.dumps(
        data, ensure_ascii=False, default=_default, indent=2 if indent else None
    )


def json_loads(data: str | bytes) -> object:
    """Deserialize JSON data from a string or bytes."""

    if orjson is not None:
        return orjson.loads(data)
    if isinstance(data, (bytes, bytearray)):
        return json.loads(data.decode())
    return json.loads(data)
