# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client with a single authorization-refresh retry."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from ..config import HttpSettings, load_http_settings
from ..errors import CError, ErrorCategory, categorize_exception
from ..log import log_request_failure
from .decoding import DecodingError, decode_json
from .headers import header_value
from .models import ExplicitHeaders, Headers, HttpRequest, RefreshedHeaders, TransportRequest, TransportResponse
from .providers import HeadersProvider
from .transport import Transport, create_default_transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNAUTHORIZED = 401


class ResponseClass(str, Enum):
    SUCCESS = "SUCCESS"
    REFRESH = "REFRESH"
    FAILURE = "FAILURE"


def classify_response(status_code: int, request: HttpRequest) -> ResponseClass:
    """
    Classify a completed exchange once per attempt.

    A retry-eligible 401 is checked before anything else looks at the body, so
    a 401 carrying a structured error still refreshes on the first attempt.
    """
    if 200 <= status_code <= 299:
        return ResponseClass.SUCCESS
    if status_code == UNAUTHORIZED and request.headers_strategy.allows_refresh:
        return ResponseClass.REFRESH
    return ResponseClass.FAILURE


class HttpClient:
    """
    Executes HttpRequest descriptors against a Transport.

    The client keeps no per-call state, so one instance can serve any number of
    concurrent calls. Deduplicating concurrent refreshes is the headers
    provider's job.
    """

    def __init__(
        self,
        headers_provider: HeadersProvider,
        *,
        transport: Transport | None = None,
        settings: HttpSettings | None = None,
    ):
        self.headers_provider = headers_provider
        self.settings = settings or load_http_settings()
        self._owns_transport = transport is None
        self.transport = transport or create_default_transport(self.settings)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def fetch_bytes(self, request: HttpRequest) -> bytes:
        """Execute ``request`` and return the body of a 2xx response unmodified."""
        try:
            return await self._fetch(request)
        except CError as error:
            log_request_failure(logger, request, error)
            raise

    async def send(self, request: HttpRequest) -> None:
        """Execute ``request`` for its side effect only."""
        await self.fetch_bytes(request)

    async def send_decoded(self, request: HttpRequest, type_: type[T]) -> T:
        """Execute ``request`` and decode the body as ``type_``."""
        data = await self.fetch_bytes(request)
        return _decode(request, data, type_)

    async def get(self, url: str, type_: type[T]) -> T:
        """GET ``url`` with default settings and decode the body as ``type_``."""
        return await self.send_decoded(HttpRequest(url), type_)

    async def _fetch(self, request: HttpRequest) -> bytes:
        headers = await self._resolve_headers(request)
        try:
            response = await self.transport.send(build_transport_request(request, headers))
        except Exception as exc:  # noqa: BLE001
            response = TransportResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                error_category=categorize_exception(exc),
            )
        status_code = _completed_status(response)

        outcome = classify_response(status_code, request)
        if outcome is ResponseClass.SUCCESS:
            return response.content
        if outcome is ResponseClass.REFRESH:
            logger.info("Unauthorized response for %s, refreshing headers and retrying once", request.url)
            fresh_headers = await self._provider_call(self.headers_provider.refreshed_headers)
            return await self._fetch(request.refreshed(fresh_headers))
        raise CError.parse(status_code, response.content)

    async def _resolve_headers(self, request: HttpRequest) -> Headers:
        strategy = request.headers_strategy
        if isinstance(strategy, (RefreshedHeaders, ExplicitHeaders)):
            return dict(strategy.headers)
        return await self._provider_call(self.headers_provider.current_headers)

    @staticmethod
    async def _provider_call(call: Callable[[], Awaitable[Headers]]) -> Headers:
        try:
            headers = await call()
        except CError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise CError.client(
                f"Could not obtain request headers: {exc}",
                category=ErrorCategory.HEADERS_ERROR,
                info={"error_type": type(exc).__name__},
            ) from exc
        return dict(headers or {})


def build_transport_request(request: HttpRequest, headers: Headers) -> TransportRequest:
    """Translate a descriptor plus resolved headers into a wire request."""
    wire_headers = dict(headers)
    if request.method.has_json_body and not header_value(wire_headers, "Content-Type"):
        wire_headers["Content-Type"] = "application/json"
    return TransportRequest(
        url=request.url,
        method=request.method.verb_string,
        headers=wire_headers,
        body=request.method.encoded_body(),
        timeout=request.timeout,
    )


def _completed_status(response: TransportResponse) -> int:
    if not response.ok:
        info = {"error_type": response.error_type} if response.error_type else None
        raise CError.client(
            response.error_message or "Transport failure",
            category=response.error_category or ErrorCategory.UNKNOWN_ERROR,
            info=info,
        )
    if response.status_code is None:
        raise CError.client("Invalid server response", category=ErrorCategory.INVALID_RESPONSE)
    return response.status_code


def _decode(request: HttpRequest, data: bytes, type_: type[T]) -> T:
    try:
        return decode_json(data, type_, request.date_decoding)
    except DecodingError as exc:
        error = CError.client(
            str(exc),
            category=ErrorCategory.DECODING_ERROR,
            info={"type": getattr(type_, "__name__", repr(type_))},
        )
        log_request_failure(logger, request, error)
        raise error from exc


__all__ = ["HttpClient", "ResponseClass", "build_transport_request", "classify_response"]
