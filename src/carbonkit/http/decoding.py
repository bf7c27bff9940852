# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Typed decoding of successful response bodies."""

from __future__ import annotations

import dataclasses
import json
import types
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints, is_typeddict

from pydantic import BaseModel, TypeAdapter, ValidationError

from .models import DateDecoding

T = TypeVar("T")

_EPOCH_SCALE = {
    DateDecoding.SECONDS_SINCE_1970: 1.0,
    DateDecoding.MILLISECONDS_SINCE_1970: 1000.0,
}


class DecodingError(ValueError):
    """The body is valid bytes but does not decode as the requested type."""


def _field_hints(type_: Any) -> dict[str, Any]:
    if isinstance(type_, type) and issubclass(type_, BaseModel):
        hints: dict[str, Any] = {}
        for name, info in type_.model_fields.items():
            hints[info.alias or name] = info.annotation
        return hints
    if dataclasses.is_dataclass(type_) or is_typeddict(type_):
        try:
            return get_type_hints(type_)
        except (NameError, TypeError):
            return {}
    return {}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _container_accepts(annotation: Any, value: Any) -> bool:
    origin = get_origin(annotation)
    if isinstance(value, dict):
        return (isinstance(origin, type) and issubclass(origin, Mapping)) or bool(_field_hints(annotation))
    if isinstance(value, list):
        return origin is tuple or (isinstance(origin, type) and issubclass(origin, Iterable) and not issubclass(origin, Mapping))
    return False


def _prepare_dates(value: Any, annotation: Any, policy: DateDecoding) -> Any:
    """
    Apply the date policy to values found at ``datetime`` positions of ``annotation``.

    Epoch policies turn numbers into UTC datetimes; ISO8601 rejects numbers so
    only date strings reach pydantic.
    """
    if annotation is datetime:
        if not _is_number(value):
            return value
        if policy is DateDecoding.ISO8601:
            raise DecodingError(f"Expected an ISO-8601 date string, got {value!r}")
        return datetime.fromtimestamp(value / _EPOCH_SCALE[policy], tz=timezone.utc)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _prepare_dates(value, args[0], policy)

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if datetime in members and (policy is not DateDecoding.ISO8601 or members == [datetime]):
            return _prepare_dates(value, datetime, policy)
        for arg in members:
            if _container_accepts(arg, value):
                return _prepare_dates(value, arg, policy)
        return value

    if isinstance(origin, type) and issubclass(origin, Mapping):
        if isinstance(value, dict) and len(args) == 2:
            return {key: _prepare_dates(item, args[1], policy) for key, item in value.items()}
        return value

    if origin is tuple:
        if not isinstance(value, list) or not args:
            return value
        if len(args) == 2 and args[1] is Ellipsis:
            return [_prepare_dates(item, args[0], policy) for item in value]
        return [_prepare_dates(item, arg, policy) for item, arg in zip(value, args)] + value[len(args) :]

    if isinstance(origin, type) and issubclass(origin, Iterable):
        if isinstance(value, list) and args:
            return [_prepare_dates(item, args[0], policy) for item in value]
        return value

    hints = _field_hints(annotation)
    if hints and isinstance(value, dict):
        return {key: _prepare_dates(item, hints[key], policy) if key in hints else item for key, item in value.items()}

    return value


def decode_json(data: bytes, type_: type[T], date_decoding: DateDecoding = DateDecoding.ISO8601) -> T:
    """
    Decode ``data`` as JSON into ``type_``.

    Pydantic models, dataclasses, TypedDicts and builtin containers are
    supported. Under ISO8601 a ``datetime`` position must hold an ISO-8601
    string; the epoch policies read numbers there as seconds or milliseconds
    since 1970 (UTC). ``bytes`` returns the body as is.
    """
    if type_ is bytes:
        return data  # type: ignore[return-value]

    try:
        adapter: TypeAdapter[T] = TypeAdapter(type_)
    except Exception as exc:  # noqa: BLE001
        raise DecodingError(f"Cannot decode into {type_!r}: {exc}") from exc

    try:
        payload = json.loads(data)
        return adapter.validate_python(_prepare_dates(payload, type_, date_decoding))
    except ValidationError as exc:
        raise DecodingError(str(exc)) from exc
    except DecodingError:
        raise
    except ValueError as exc:
        raise DecodingError(f"Response body is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise DecodingError("Response body is nested too deeply") from exc
    except (OverflowError, OSError) as exc:
        raise DecodingError(f"Date out of range: {exc}") from exc


__all__ = ["DecodingError", "decode_json"]
