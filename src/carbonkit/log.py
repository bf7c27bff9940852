# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for carbonkit."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import CError
    from .http.models import HttpRequest

DEFAULT_LOG_LEVEL = os.getenv("CARBONKIT_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def log_request_failure(logger: logging.Logger, request: HttpRequest, error: CError) -> None:
    """Emit the diagnostic record for a request that ended in a CError."""
    logger.warning(
        "Request failed: url=%s method=%s code=%d category=%s description=%s",
        request.url,
        request.method.verb_string,
        error.code,
        error.category.value,
        error.message,
    )


__all__ = ["log_request_failure", "setup_logging"]
