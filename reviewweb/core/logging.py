"""Logging setup: stdlib loggers, rendered by rich on stderr."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler

REDACTED = "[REDACTED]"
SECRET_KEYS = frozenset({"api_key", "apiKey", "X-API-Key"})

_configured = False


def configure_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """
    Install a rich handler on the ``reviewweb`` logger.

    stdout carries MCP stdio frames and CLI results, so logs always go to stderr.
    Calling again only changes the level.
    """
    global _configured

    logger = logging.getLogger("reviewweb")
    logger.setLevel(level.upper())

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True


def redact(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``values`` with credentials masked, safe to log."""
    return {
        key: (REDACTED if key in SECRET_KEYS and value else value)
        for key, value in values.items()
    }
