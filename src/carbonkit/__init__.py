# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
carbonkit package entrypoint.

An asynchronous HTTP core: requests are described by immutable HttpRequest
values, authorization headers come from a pluggable HeadersProvider, a 401 is
answered with exactly one header refresh and retry, and every failure surfaces
as a single structured CError.
"""

from .config import HttpSettings, load_http_settings
from .errors import CError, ErrorCategory
from .http import (
    DateDecoding,
    HeadersProvider,
    HttpClient,
    HttpMethod,
    HttpRequest,
    HttpxTransport,
    StaticHeadersProvider,
    StubTransport,
    TokenHeadersProvider,
    Transport,
    create_default_transport,
    send_once,
)
from .jwt import decode_jwt_claims, jwt_expiry
from .log import setup_logging
from .version import __version__

__all__ = [
    "CError",
    "DateDecoding",
    "ErrorCategory",
    "HeadersProvider",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpSettings",
    "HttpxTransport",
    "StaticHeadersProvider",
    "StubTransport",
    "TokenHeadersProvider",
    "Transport",
    "create_default_transport",
    "decode_jwt_claims",
    "jwt_expiry",
    "load_http_settings",
    "send_once",
    "setup_logging",
    "__version__",
]
