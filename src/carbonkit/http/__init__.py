# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubTransport, stub_response
from .client import HttpClient, ResponseClass, build_transport_request, classify_response
from .decoding import DecodingError, decode_json
from .headers import header_value, normalize_headers
from .httpx_transport import HttpxTransport
from .models import (
    DateDecoding,
    ExplicitHeaders,
    Headers,
    HeadersStrategy,
    HttpMethod,
    HttpRequest,
    NormalHeaders,
    RefreshedHeaders,
    TransportRequest,
    TransportResponse,
    Verb,
)
from .providers import HeadersProvider, StaticHeadersProvider, TokenHeadersProvider
from .transport import Transport, create_default_transport
from .utils import send_once

__all__ = [
    "DateDecoding",
    "DecodingError",
    "ExplicitHeaders",
    "Headers",
    "HeadersProvider",
    "HeadersStrategy",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpxTransport",
    "NormalHeaders",
    "RefreshedHeaders",
    "ResponseClass",
    "StaticHeadersProvider",
    "StubTransport",
    "TokenHeadersProvider",
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "Verb",
    "build_transport_request",
    "classify_response",
    "create_default_transport",
    "decode_json",
    "header_value",
    "normalize_headers",
    "send_once",
    "stub_response",
]
