# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import ssl

import httpx
import pytest

from carbonkit.errors import CError, ErrorCategory, ErrorPayloadError, categorize_exception


def test_from_payload_reads_wire_format():
    error = CError.from_payload(b'{"code": 42, "description": "boom", "info": {"field": "name"}}')
    assert error.code == 42
    assert error.message == "boom"
    assert str(error) == "boom"
    assert error.info == {"field": "name"}
    assert error.raw_body is None
    assert error.category is ErrorCategory.SERVER_ERROR


def test_from_payload_stringifies_non_string_info_values():
    error = CError.from_payload(b'{"code": 1, "description": "d", "info": {"limit": 5, "ok": true}}')
    assert error.info == {"limit": "5", "ok": "true"}


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"service unavailable",
        b"[1, 2]",
        b'{"description": "missing code"}',
        b'{"code": "42", "description": "string code"}',
        b'{"code": true, "description": "bool code"}',
        b'{"code": 42}',
        b'{"code": 42, "description": 7}',
        b"\xff\xfe",
    ],
)
def test_from_payload_rejects_malformed_bodies(body):
    with pytest.raises(ErrorPayloadError):
        CError.from_payload(body)


def test_from_status_attaches_raw_body():
    error = CError.from_status(503, b"service unavailable")
    assert error.code == 503
    assert error.message == "service unavailable"
    assert error.raw_body == b"service unavailable"
    assert error.info is None
    assert error.category is ErrorCategory.HTTP_STATUS


def test_from_status_uses_placeholder_for_empty_body():
    error = CError.from_status(502, b"  ")
    assert error.message == "HTTP 502"
    assert error.raw_body == b"  "


def test_parse_prefers_payload_and_falls_back_to_status():
    decoded = CError.parse(500, b'{"code": 42, "description": "boom"}')
    assert (decoded.code, decoded.message, decoded.raw_body) == (42, "boom", None)

    synthesized = CError.parse(404, b"<html>not found</html>")
    assert synthesized.code == 404
    assert synthesized.raw_body == b"<html>not found</html>"


def test_parse_falls_back_to_status_for_deeply_nested_body():
    body = b"[" * 200000
    with pytest.raises(ErrorPayloadError):
        CError.from_payload(body)

    error = CError.parse(500, body)
    assert error.code == 500
    assert error.raw_body == body
    assert error.category is ErrorCategory.HTTP_STATUS


def test_client_error_and_to_dict():
    error = CError.client("offline", category=ErrorCategory.CONNECTION_ERROR, info={"error_type": "ConnectError"})
    assert error.is_client_error is True
    assert error.to_dict() == {
        "code": -1,
        "description": "offline",
        "category": "CONNECTION_ERROR",
        "info": {"error_type": "ConnectError"},
    }
    assert CError.from_status(500, b"x").to_dict()["raw_body"] == "x"


def test_cerror_is_raisable_and_chains():
    with pytest.raises(CError) as exc_info:
        try:
            raise KeyError("inner")
        except KeyError as exc:
            raise CError.client("wrapped") from exc
    assert isinstance(exc_info.value.__cause__, KeyError)


def test_categorize_exception_maps_common_failures():
    request = httpx.Request("GET", "http://example")
    assert categorize_exception(httpx.ReadTimeout("slow", request=request)) is ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused", request=request)) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ConnectionRefusedError()) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(socket.gaierror()) is ErrorCategory.DNS_ERROR
    assert categorize_exception(ssl.SSLError()) is ErrorCategory.SSL_ERROR
    assert categorize_exception(RuntimeError("x")) is ErrorCategory.UNKNOWN_ERROR


def test_categorize_exception_looks_through_connect_error_cause():
    request = httpx.Request("GET", "http://example")
    try:
        try:
            raise socket.gaierror("name not known")
        except socket.gaierror as inner:
            raise httpx.ConnectError("dns", request=request) from inner
    except httpx.ConnectError as exc:
        assert categorize_exception(exc) is ErrorCategory.DNS_ERROR
