# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio

import pytest

from carbonkit.config import HttpSettings
from carbonkit.errors import CError
from carbonkit.http.adapters import StubTransport, stub_response
from carbonkit.http.models import HttpMethod, HttpRequest
from carbonkit.http.utils import send_once

URL = "https://auth.example/session"


def test_send_once_uses_fixed_headers_and_decodes():
    transport = StubTransport()
    transport.add(URL, stub_response(200, '{"token": "abc"}'))
    request = HttpRequest(URL, method=HttpMethod.post({"email": "a@example"}))

    result = asyncio.run(send_once(request, dict, headers={"X-Api-Key": "k"}, transport=transport, settings=HttpSettings()))

    assert result == {"token": "abc"}
    assert transport.requests[0].headers == {"X-Api-Key": "k", "Content-Type": "application/json"}
    assert transport.closed is False


def test_send_once_returns_bytes_without_type():
    transport = StubTransport()
    transport.add(URL, stub_response(200, b"raw"))
    assert asyncio.run(send_once(HttpRequest(URL), transport=transport, settings=HttpSettings())) == b"raw"


def test_send_once_never_retries_unauthorized():
    transport = StubTransport()
    transport.add(URL, stub_response(401, '{"code": 9, "description": "bad credentials"}'))

    with pytest.raises(CError) as exc_info:
        asyncio.run(send_once(HttpRequest(URL), dict, transport=transport, settings=HttpSettings()))

    assert exc_info.value.code == 9
    assert len(transport.requests) == 1


def test_send_once_closes_transport_it_creates(monkeypatch):
    created = []

    def factory(settings):  # noqa: ARG001
        transport = StubTransport()
        transport.add(URL, stub_response(204))
        created.append(transport)
        return transport

    monkeypatch.setattr("carbonkit.http.utils.create_default_transport", factory)
    asyncio.run(send_once(HttpRequest(URL), settings=HttpSettings()))

    assert created[0].closed is True
