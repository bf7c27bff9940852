# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request descriptor and transport data models used by the HTTP core."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import TypeAdapter

from ..config import DEFAULT_TIMEOUT
from ..errors import CError, ErrorCategory

Headers = dict[str, str]

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class DateDecoding(str, Enum):
    """How ``datetime`` fields are read when a response is decoded into a type."""

    ISO8601 = "iso8601"
    SECONDS_SINCE_1970 = "seconds_since_1970"
    MILLISECONDS_SINCE_1970 = "milliseconds_since_1970"


def _encode_payload(payload: Any) -> bytes:
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    try:
        return _ANY_ADAPTER.dump_json(payload)
    except (ValueError, TypeError) as exc:
        raise CError.client(
            f"Request body could not be encoded as JSON: {exc}",
            category=ErrorCategory.ENCODING_ERROR,
            info={"type": type(payload).__name__},
        ) from exc


@dataclass(frozen=True)
class HttpMethod:
    """
    An HTTP verb and, for mutating verbs, the payload it carries.

    The payload is encoded when the method is built, so an unserializable body
    fails at construction rather than being sent empty. GET never has a body.
    """

    verb: Verb = Verb.GET
    payload: Any = None
    _body: bytes | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.verb is Verb.GET or self.payload is None:
            return
        object.__setattr__(self, "_body", _encode_payload(self.payload))

    @classmethod
    def get(cls) -> HttpMethod:
        return cls(Verb.GET)

    @classmethod
    def post(cls, payload: Any) -> HttpMethod:
        return cls(Verb.POST, payload)

    @classmethod
    def put(cls, payload: Any) -> HttpMethod:
        return cls(Verb.PUT, payload)

    @classmethod
    def patch(cls, payload: Any) -> HttpMethod:
        return cls(Verb.PATCH, payload)

    @classmethod
    def delete(cls, payload: Any = None) -> HttpMethod:
        return cls(Verb.DELETE, payload)

    @property
    def verb_string(self) -> str:
        return self.verb.value

    def encoded_body(self) -> bytes | None:
        if self.verb is Verb.GET:
            return None
        return self._body

    @property
    def has_json_body(self) -> bool:
        return self._body is not None and not isinstance(self.payload, (bytes, bytearray, memoryview))


@dataclass(frozen=True)
class NormalHeaders:
    """Ask the headers provider for its current headers; a 401 may trigger one refresh."""

    @property
    def allows_refresh(self) -> bool:
        return True


@dataclass(frozen=True)
class RefreshedHeaders:
    """Headers obtained from a refresh; the request is a retry and is never refreshed again."""

    headers: Mapping[str, str]

    @property
    def allows_refresh(self) -> bool:
        return False


@dataclass(frozen=True)
class ExplicitHeaders:
    """Caller-supplied fixed headers; the provider is not consulted."""

    headers: Mapping[str, str]

    @property
    def allows_refresh(self) -> bool:
        return False


HeadersStrategy = NormalHeaders | RefreshedHeaders | ExplicitHeaders


@dataclass(frozen=True)
class HttpRequest:
    """Immutable description of one intended HTTP call."""

    url: str
    method: HttpMethod = field(default_factory=HttpMethod.get)
    timeout: float = DEFAULT_TIMEOUT
    date_decoding: DateDecoding = DateDecoding.ISO8601
    headers_strategy: HeadersStrategy = field(default_factory=NormalHeaders)

    def __post_init__(self) -> None:
        parts = urlsplit(self.url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"HttpRequest requires an absolute http(s) URL, got {self.url!r}")
        if self.timeout <= 0:
            raise ValueError("HttpRequest timeout must be positive")

    def with_headers(self, headers: Mapping[str, str]) -> HttpRequest:
        """Return a copy that sends exactly ``headers`` and never refreshes them."""
        return replace(self, headers_strategy=ExplicitHeaders(dict(headers)))

    def refreshed(self, headers: Mapping[str, str]) -> HttpRequest:
        """Return the retry attempt for this request, carrying freshly refreshed headers."""
        return replace(self, headers_strategy=RefreshedHeaders(dict(headers)))


@dataclass
class TransportRequest:
    """Normalized request representation consumed by Transport implementations."""

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


@dataclass
class TransportResponse:
    """
    Result of one transport attempt.

    ``ok`` is False when no HTTP exchange completed (connection, timeout,
    framing); a completed exchange has ``ok`` True and a ``status_code``
    whatever that status is.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory | None = None


__all__ = [
    "DateDecoding",
    "ExplicitHeaders",
    "Headers",
    "HeadersStrategy",
    "HttpMethod",
    "HttpRequest",
    "NormalHeaders",
    "RefreshedHeaders",
    "TransportRequest",
    "TransportResponse",
    "Verb",
]
