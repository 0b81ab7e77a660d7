"""Static configuration for webclean.

Values here are read once at import time.  ``WEBCLEAN_TIMEOUT`` and
``WEBCLEAN_LOG_LEVEL`` in the environment override the matching defaults;
a value that does not parse falls back to the default.  Everything else is
fixed for the lifetime of the process.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def env_int(name: str, default: int) -> int:
    """Return ``$name`` as a positive int, or *default* if unset or invalid."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def env_log_level(name: str, default: str) -> str:
    """Return ``$name`` upper-cased if it is one of :data:`LOG_LEVELS`."""
    raw = os.environ.get(name, "").strip().upper()
    if not raw:
        return default
    if raw not in LOG_LEVELS:
        logger.warning("Ignoring %s=%r: expected one of %s", name, raw, ", ".join(LOG_LEVELS))
        return default
    return raw


# ---------------------------------------------------------------------------
# Project identity
# ---------------------------------------------------------------------------
SERVER_NAME = "webfetch-clean"
SERVER_VERSION = "1.0.0"

TOOL_NAME = "webfetch_clean"
TOOL_DESCRIPTION = (
    "Fetch a URL, clean HTML by removing ads/scripts/styles/navigation, "
    "and convert to markdown or cleaned HTML"
)

# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------
USER_AGENT = "webfetch-clean/1.0 (HTML cleaning tool)"

ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# Per-request timeout in seconds
DEFAULT_TIMEOUT = env_int("WEBCLEAN_TIMEOUT", 30)

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
OUTPUT_FORMATS: tuple[str, ...] = ("html", "markdown")
DEFAULT_FORMAT = "markdown"

# ---------------------------------------------------------------------------
# JSON-RPC protocol
# ---------------------------------------------------------------------------
PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = env_log_level("WEBCLEAN_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
