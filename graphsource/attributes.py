"""Projection of provider records into item attributes."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from graphsource.errors import AttributeProjectionError

_SCALARS = (str, bool, int, float)


def attribute_name(field_name: str) -> str:
    """Attribute naming rule: first letter lower-cased, rest untouched."""
    if not field_name:
        return field_name
    return field_name[0].lower() + field_name[1:]


def _convert(value: Any, path: str) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {
            attribute_name(str(k)): _convert(v, f"{path}.{k}")
            for k, v in value.items()
            if v is not None
        }
    if isinstance(value, (list, tuple)):
        return [_convert(v, f"{path}[{i}]") for i, v in enumerate(value)]
    raise AttributeProjectionError(
        f"field {path!r} has unsupported type {type(value).__name__}"
    )


def to_attributes(
    record: Mapping[str, Any],
    fields: Optional[Iterable[str]] = None,
    exclude: Iterable[str] = ("tags",),
) -> dict[str, Any]:
    """Project ``record`` into an attribute dict.

    ``fields`` lists the record keys to keep, in output order; when omitted
    every key is kept in record order. Keys in ``exclude`` and None values are
    skipped. Nested mappings have their keys renamed the same way.
    """
    excluded = set(exclude)
    names = list(record) if fields is None else list(fields)

    attributes: dict[str, Any] = {}
    for name in names:
        if name in excluded:
            continue
        value = record.get(name)
        if value is None:
            continue
        attributes[attribute_name(name)] = _convert(value, name)
    return attributes


def tags_to_map(tags: Any) -> dict[str, str]:
    """Flatten provider tags.

    Accepts the ``[{"key": k, "value": v}]`` form (either key casing) or an
    already-flat mapping. A tag without a value maps to ''.
    """
    if not tags:
        return {}
    if isinstance(tags, Mapping):
        return {str(k): "" if v is None else str(v) for k, v in tags.items()}

    result: dict[str, str] = {}
    for tag in tags:
        key = tag.get("key", tag.get("Key"))
        if key is None:
            continue
        value = tag.get("value", tag.get("Value"))
        result[str(key)] = "" if value is None else str(value)
    return result
