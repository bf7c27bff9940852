# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import ErrorCategory, categorize_exception
from .headers import normalize_headers
from .models import TransportRequest, TransportResponse


class BodyTooLargeError(Exception):
    """Response body exceeded HttpSettings.max_body_bytes."""


class HttpxTransport:
    """Asynchronous httpx client wrapper."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            transport=transport,
        )

    async def send(self, request: TransportRequest) -> TransportResponse:
        headers = dict(request.headers or {})
        if not any(name.lower() == "user-agent" for name in headers):
            headers["User-Agent"] = self.settings.user_agent

        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        try:
            async with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            ) as resp:
                content = bytearray()
                async for chunk in resp.aiter_bytes():
                    if len(content) + len(chunk) > max_body_bytes:
                        raise BodyTooLargeError(f"Response body exceeded {max_body_bytes} bytes")
                    content.extend(chunk)

            return TransportResponse(
                ok=True,
                status_code=resp.status_code,
                headers=normalize_headers(resp.headers),
                content=bytes(content),
                url=str(resp.url),
            )
        except BodyTooLargeError as exc:
            return TransportResponse(
                ok=False,
                error_message=str(exc),
                error_type=type(exc).__name__,
                error_category=ErrorCategory.INVALID_RESPONSE,
            )
        except Exception as exc:  # noqa: BLE001
            return TransportResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                error_category=categorize_exception(exc),
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
