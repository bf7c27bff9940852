# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import pytest
from pydantic import BaseModel

from carbonkit.http.decoding import DecodingError, decode_json
from carbonkit.http.models import DateDecoding


class Event(BaseModel):
    name: str
    at: datetime


@dataclass
class Session:
    user: str
    expires: Optional[datetime] = None


class Page(BaseModel):
    events: list[Event]
    sessions: dict[str, Session]


def test_iso8601_dates_are_parsed_by_default():
    event = decode_json(b'{"name": "launch", "at": "2025-03-01T12:00:00Z"}', Event)
    assert event.at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_seconds_since_1970_policy():
    event = decode_json(b'{"name": "launch", "at": 1740830400}', Event, DateDecoding.SECONDS_SINCE_1970)
    assert event.at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_milliseconds_since_1970_policy_reaches_nested_fields():
    body = b"""
    {
        "events": [{"name": "a", "at": 1740830400000}],
        "sessions": {"s1": {"user": "u", "expires": 1740830400500}}
    }
    """
    page = decode_json(body, Page, DateDecoding.MILLISECONDS_SINCE_1970)
    assert page.events[0].at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert page.sessions["s1"].expires == datetime(2025, 3, 1, 12, 0, 0, 500000, tzinfo=timezone.utc)


def test_epoch_policy_handles_optional_and_missing_dates():
    sessions = decode_json(b'[{"user": "42"}, {"user": "x", "expires": null}]', list[Session], DateDecoding.SECONDS_SINCE_1970)
    assert sessions == [Session(user="42"), Session(user="x", expires=None)]


def test_builtin_containers_and_bytes():
    assert decode_json(b'{"a": [1, 2]}', dict[str, list[int]]) == {"a": [1, 2]}
    assert decode_json(b"\x00raw", bytes) == b"\x00raw"


@pytest.mark.parametrize(
    "body",
    [b"not json", b'{"name": "launch"}', b'{"name": "launch", "at": "yesterday-ish"}', b""],
)
def test_decode_failures_raise_decoding_error(body):
    with pytest.raises(DecodingError):
        decode_json(body, Event)


def test_invalid_json_under_epoch_policy_raises_decoding_error():
    with pytest.raises(DecodingError):
        decode_json(b"{", Event, DateDecoding.SECONDS_SINCE_1970)


def test_iso8601_policy_rejects_numeric_dates():
    with pytest.raises(DecodingError, match="ISO-8601"):
        decode_json(b'{"name": "launch", "at": 1740830400}', Event)
    with pytest.raises(DecodingError):
        decode_json(b'{"user": "u", "expires": 1740830400}', Session)
    assert decode_json(b'{"user": "u", "expires": null}', Session) == Session(user="u")


def test_epoch_policies_reach_optional_containers():
    dates = decode_json(b"[1500]", Optional[list[datetime]], DateDecoding.MILLISECONDS_SINCE_1970)
    assert dates == [datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)]

    sessions = decode_json(b'{"s1": {"user": "u", "expires": 60}}', dict[str, Session] | None, DateDecoding.SECONDS_SINCE_1970)
    assert sessions == {"s1": Session(user="u", expires=datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc))}

    assert decode_json(b"null", Optional[list[datetime]], DateDecoding.SECONDS_SINCE_1970) is None


@pytest.mark.parametrize("date_decoding", list(DateDecoding))
def test_deeply_nested_body_raises_decoding_error(date_decoding):
    with pytest.raises(DecodingError):
        decode_json(b"[" * 200000, list, date_decoding)
