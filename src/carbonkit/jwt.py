# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Read-only helpers for JSON Web Tokens.

Signatures are not verified: the claims are only used to decide when a cached
token should be renewed, never to trust its contents.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from typing import Any


def _b64url_decode(segment: str) -> bytes:
    padding = -len(segment) % 4
    return base64.urlsafe_b64decode(segment + "=" * padding)


def decode_jwt_claims(token: str) -> dict[str, Any] | None:
    """Return the claims object of ``token``, or None when it is not a readable JWT."""
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None
    try:
        claims = json.loads(_b64url_decode(parts[1]))
    except (binascii.Error, ValueError, RecursionError):
        return None
    return claims if isinstance(claims, dict) else None


def jwt_expiry(token: str) -> float | None:
    """Return the ``exp`` claim as a unix timestamp, if the token has one."""
    claims = decode_jwt_claims(token)
    if not claims:
        return None
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        expiry = float(exp)
    except OverflowError:
        return None
    return expiry if math.isfinite(expiry) else None


__all__ = ["decode_jwt_claims", "jwt_expiry"]
