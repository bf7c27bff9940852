# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared HTTP helpers for calls that do not go through a headers provider."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import HttpSettings, load_http_settings
from .client import HttpClient
from .models import HttpRequest
from .providers import StaticHeadersProvider
from .transport import Transport, create_default_transport


async def send_once(
    request: HttpRequest,
    type_: Any = None,
    *,
    headers: Mapping[str, str] | None = None,
    transport: Transport | None = None,
    settings: HttpSettings | None = None,
) -> Any:
    """
    Execute a single request with fixed headers (no refresh, no retry).

    Returns the decoded body when ``type_`` is given, else the raw bytes. A
    temporary transport is created and closed unless one is passed in.
    """
    settings = settings or load_http_settings()
    owned = transport is None
    active_transport = transport or create_default_transport(settings)
    client = HttpClient(StaticHeadersProvider(), transport=active_transport, settings=settings)
    fixed = request.with_headers(dict(headers or {}))
    try:
        if type_ is None:
            return await client.fetch_bytes(fixed)
        return await client.send_decoded(fixed, type_)
    finally:
        if owned:
            await active_transport.aclose()


__all__ = ["send_once"]
