# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and the structured error raised by the HTTP core."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

CLIENT_ERROR_CODE = -1


class ErrorCategory(str, Enum):
    SERVER_ERROR = "SERVER_ERROR"
    HTTP_STATUS = "HTTP_STATUS"
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    SSL_ERROR = "SSL_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    DECODING_ERROR = "DECODING_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    HEADERS_ERROR = "HEADERS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorPayloadError(ValueError):
    """Raised when a response body does not match the structured error wire format."""


@dataclass(eq=False)
class CError(Exception):
    """
    The single error shape produced by the HTTP core.

    ``code`` is the server-domain code when the body carried a structured error,
    the HTTP status when it did not, and ``-1`` for client-side failures.
    ``raw_body`` is only attached when the body could not be parsed as a
    structured error, so callers can still inspect what the server sent.
    """

    code: int
    message: str
    info: dict[str, str] | None = None
    raw_body: bytes | None = None
    category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR

    def __str__(self) -> str:
        return self.message

    @property
    def is_client_error(self) -> bool:
        return self.code == CLIENT_ERROR_CODE

    @classmethod
    def client(
        cls,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        info: dict[str, str] | None = None,
    ) -> CError:
        """Client-side failure (transport, decoding, headers); never carries a body."""
        return cls(code=CLIENT_ERROR_CODE, message=message, info=info, category=category)

    @classmethod
    def from_payload(cls, data: bytes) -> CError:
        """Decode a server-declared error: ``{"code": int, "description": str, "info": {...}}``."""
        try:
            payload = json.loads(data)
        except (ValueError, TypeError, RecursionError) as exc:
            raise ErrorPayloadError("Bad Data") from exc
        if not isinstance(payload, dict):
            raise ErrorPayloadError("Bad Data")

        code = payload.get("code")
        # bool is an int subclass; true/false is not a domain code.
        if not isinstance(code, int) or isinstance(code, bool):
            raise ErrorPayloadError("Expected code field missing")
        description = payload.get("description")
        if not isinstance(description, str):
            raise ErrorPayloadError("Expected description field missing")

        info: dict[str, str] | None = None
        raw_info = payload.get("info")
        if isinstance(raw_info, dict):
            info = {str(key): value if isinstance(value, str) else json.dumps(value) for key, value in raw_info.items()}

        return cls(code=code, message=description, info=info, category=ErrorCategory.SERVER_ERROR)

    @classmethod
    def from_status(cls, status_code: int, body: bytes) -> CError:
        """Synthesize an error from an HTTP status and an opaque body."""
        text = body.decode("utf-8", errors="replace").strip()
        return cls(
            code=status_code,
            message=text or f"HTTP {status_code}",
            raw_body=body,
            category=ErrorCategory.HTTP_STATUS,
        )

    @classmethod
    def parse(cls, status_code: int, body: bytes) -> CError:
        """Prefer the server's structured error; fall back to the status code."""
        try:
            return cls.from_payload(body)
        except ErrorPayloadError:
            return cls.from_status(status_code, body)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code,
            "description": self.message,
            "category": self.category.value,
        }
        if self.info is not None:
            data["info"] = dict(self.info)
        if self.raw_body is not None:
            data["raw_body"] = self.raw_body.decode("utf-8", errors="replace")
        return data


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    cause = exc.__cause__ or exc.__context__
    if isinstance(exc, httpx.ConnectError) and cause is not None:
        # httpx wraps the socket-level error; look through it once.
        nested = categorize_exception(cause)
        if nested in (ErrorCategory.DNS_ERROR, ErrorCategory.SSL_ERROR):
            return nested

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "CLIENT_ERROR_CODE",
    "CError",
    "ErrorCategory",
    "ErrorPayloadError",
    "categorize_exception",
]
