# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Providers and callers
hand us plain dicts with whatever casing they like, so lookups go through these
helpers instead of direct indexing.
"""

from __future__ import annotations

from collections.abc import Mapping


def normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    out: dict[str, str] = {}
    for key, value in (headers or {}).items():
        name = str(key).strip().lower()
        if name:
            out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    lower = name.lower()
    for key, value in (headers or {}).items():
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()
    return default


__all__ = ["header_value", "normalize_headers"]
