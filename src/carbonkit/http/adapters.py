# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable Transport implementations for tests and offline use."""

from __future__ import annotations

from collections import deque

from .models import TransportRequest, TransportResponse


class StubTransport:
    """
    Deterministic, programmable Transport.

    Responses are queued per URL and served in order; the last queued response
    for a URL keeps being served once the queue is down to one entry. Every
    request is recorded in ``requests``.
    """

    def __init__(self, responses: dict[str, list[TransportResponse]] | None = None):
        self._responses: dict[str, deque[TransportResponse]] = {
            url: deque(queued) for url, queued in (responses or {}).items()
        }
        self.requests: list[TransportRequest] = []
        self.closed = False

    def add(self, url: str, *responses: TransportResponse) -> None:
        self._responses.setdefault(url, deque()).extend(responses)

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        queued = self._responses.get(request.url)
        if not queued:
            return TransportResponse(ok=False, status_code=None, error_message="No stubbed response configured")
        if len(queued) > 1:
            return queued.popleft()
        return queued[0]

    async def aclose(self) -> None:
        self.closed = True


def stub_response(status_code: int, body: bytes | str = b"", headers: dict[str, str] | None = None) -> TransportResponse:
    """Build a completed-exchange response for StubTransport."""
    content = body.encode("utf-8") if isinstance(body, str) else body
    return TransportResponse(ok=True, status_code=status_code, headers=dict(headers or {}), content=content)


__all__ = ["StubTransport", "stub_response"]
