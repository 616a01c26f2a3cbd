"""JSON serialization helpers using optional orjson."""

from __future__ import annotations

try:
    import orjson  # type: ignore[import-not-found]
except ImportError:  # pragma: no cover - optional dependency
    orjson = None  # type: ignore[assignment]

import json
from enum import Enum
from typing import Any

from attrs import asdict


def json_dumps(data: object, pretty: bool = False) -> str:
    """Serialize data to a JSON string.

    Args:
        data: Data structure to serialize.
        pretty: Indent the output by two spaces.

    Returns:
        JSON representation of ``data``.
    """

    if orjson is not None:
        option = orjson.OPT_INDENT_2 if pretty else 0
        return orjson.dumps(data, option=option).decode()
    return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)


def json_loads(data: str | bytes) -> object:
    """Deserialize JSON data from a string or bytes.

    Args:
        data: JSON content as ``str`` or ``bytes``.

    Returns:
        Parsed JSON object.
    """

    if orjson is not None:
        return orjson.loads(data)
    if isinstance(data, (bytes, bytearray)):
        return json.loads(data.decode())
    return json.loads(data)


def plain_data(value: object) -> Any:
    """Convert an attrs record to dictionaries, lists and scalars.

    Enum members are replaced by their values so the result can be dumped
    as JSON or YAML.

    Args:
        value: attrs instance to convert.

    Returns:
        Plain representation of ``value``.
    """

    return asdict(
        value,  # type: ignore[arg-type]
        value_serializer=lambda _, __, v: v.value if isinstance(v, Enum) else v,
    )
