"""Log context enrichment for producer tasks."""

from __future__ import annotations

import structlog


def bind_context(**kwargs: object) -> None:
    """Bind key-value pairs to the current task's logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)

