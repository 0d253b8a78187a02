"""Turn raw upstream JSON into snapshot records."""

from __future__ import annotations

import json
import typing
from functools import cache
from typing import Any, TypeVar

from gridwatch.ingest.errors import ParseError
from gridwatch.ingest.models import GenerationSnapshot, OutageSnapshot, Record

R = TypeVar("R", bound=Record)


def parse_outage(raw: str) -> OutageSnapshot:
    return build_record(OutageSnapshot, _decode(raw))


def parse_generation(raw: str) -> GenerationSnapshot:
    snapshot = build_record(GenerationSnapshot, _decode(raw))
    for site in snapshot.load_per_site:
        for unit in site.units:
            unit.load_per_site_index = site.index
    return snapshot


def build_record(cls: type[R], payload: Any, path: str = "$") -> R:
    """Build ``cls`` from a decoded payload using its READ_NAMES.

    Unknown keys are ignored. Missing or null fields take the zero value
    unless listed in ``cls.REQUIRED``.
    """
    if not isinstance(payload, dict):
        raise ParseError(f"{path}: expected an object, got {type(payload).__name__}")
    hints = _field_types(cls)
    values: dict[str, Any] = {}
    for name, key in cls.READ_NAMES.items():
        item_path = f"{path}.{key}"
        raw = payload.get(key)
        if raw is None:
            if name in cls.REQUIRED:
                raise ParseError(f"{item_path}: required field is missing")
            continue
        values[name] = _coerce(hints[name], raw, item_path)
    return cls(**values)


@cache
def _field_types(cls: type[Record]) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ParseError(f"payload is not valid JSON: {exc}") from exc


def _coerce(kind: Any, value: Any, path: str) -> Any:
    if kind is Any:
        return value
    if typing.get_origin(kind) is list:
        if not isinstance(value, list):
            raise ParseError(f"{path}: expected an array, got {type(value).__name__}")
        (item_kind,) = typing.get_args(kind)
        return [_coerce(item_kind, item, f"{path}[{i}]") for i, item in enumerate(value)]
    if isinstance(kind, type) and issubclass(kind, Record):
        return build_record(kind, value, path)
    if isinstance(value, (bool, dict, list)):
        raise ParseError(f"{path}: expected {kind.__name__}, got {type(value).__name__}")
    if kind is str:
        return value if isinstance(value, str) else str(value)
    if kind is int:
        return _to_int(value, path)
    if kind is float:
        try:
            return float(value)
        except ValueError as exc:
            raise ParseError(f"{path}: {value!r} is not a number") from exc
    raise ParseError(f"{path}: unsupported field type {kind!r}")  # pragma: no cover


def _to_int(value: Any, path: str) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ParseError(f"{path}: {value!r} is not an integer")
        return int(value)
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError as exc:
        raise ParseError(f"{path}: {value!r} is not an integer") from exc
    if not number.is_integer():
        raise ParseError(f"{path}: {value!r} is not an integer")
    return int(number)
