# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Headers providers: the source of authorization headers for HttpClient."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Protocol

from ..jwt import jwt_expiry
from .models import Headers

logger = logging.getLogger(__name__)


class HeadersProvider(Protocol):
    """
    Supplies the headers attached to every request.

    ``current_headers`` may serve cached values. ``refreshed_headers`` must
    renew whatever made them stale (for example a token) and return the new
    values; once it returns, ``current_headers`` must serve those values to any
    caller. Implementations own the serialization of concurrent refreshes.
    """

    async def current_headers(self) -> Headers: ...

    async def refreshed_headers(self) -> Headers: ...


class StaticHeadersProvider:
    """Fixed headers; refreshing is a no-op that returns the same map."""

    def __init__(self, headers: Mapping[str, str] | None = None):
        self._headers: Headers = dict(headers or {})

    async def current_headers(self) -> Headers:
        return dict(self._headers)

    async def refreshed_headers(self) -> Headers:
        return dict(self._headers)


class TokenHeadersProvider:
    """
    Bearer-token headers backed by an async token source.

    The token is fetched lazily and cached. ``current_headers`` renews it when
    none is cached or when it is a JWT whose ``exp`` falls within
    ``expiry_leeway`` seconds. ``refreshed_headers`` always renews.

    Renewals are coalesced: they run one at a time under a lock, and a caller
    that asked for a refresh while another refresh was running takes that
    refresh's token instead of renewing again.
    """

    def __init__(
        self,
        fetch_token: Callable[[], Awaitable[str]],
        *,
        header_name: str = "Authorization",
        scheme: str | None = "Bearer",
        extra_headers: Mapping[str, str] | None = None,
        expiry_leeway: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        self._fetch_token = fetch_token
        self.header_name = header_name
        self.scheme = scheme
        self.extra_headers: Headers = dict(extra_headers or {})
        self.expiry_leeway = expiry_leeway
        self._clock = clock

        self._token: str | None = None
        self._generation = 0
        self._lock = asyncio.Lock()
        self.refresh_count = 0

    def _is_token_valid(self) -> bool:
        if not self._token:
            return False
        expiry = jwt_expiry(self._token)
        if expiry is None:
            return True
        return self._clock() < expiry - self.expiry_leeway

    def _headers(self) -> Headers:
        headers = dict(self.extra_headers)
        value = f"{self.scheme} {self._token}" if self.scheme else str(self._token)
        headers[self.header_name] = value
        return headers

    async def _renew(self) -> None:
        token = await self._fetch_token()
        if not token:
            raise ValueError("Token source returned an empty token")
        self._token = token
        self._generation += 1
        self.refresh_count += 1
        logger.info("Renewed authorization token (generation %d)", self._generation)

    async def current_headers(self) -> Headers:
        # Fast path: no lock while the cached token is usable.
        if self._is_token_valid():
            return self._headers()

        async with self._lock:
            # Another task may have renewed while we waited for the lock.
            if not self._is_token_valid():
                logger.debug("Token missing or about to expire, renewing")
                await self._renew()
            return self._headers()

    async def refreshed_headers(self) -> Headers:
        seen_generation = self._generation
        async with self._lock:
            if self._generation != seen_generation and self._token:
                logger.debug("Token renewed by a concurrent refresh, reusing it")
                return self._headers()
            await self._renew()
            return self._headers()


__all__ = ["HeadersProvider", "StaticHeadersProvider", "TokenHeadersProvider"]
