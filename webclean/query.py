"""webclean.query - fetch a URL, clean it, and render it.

Basic usage::

    from webclean.query import process

    result = process("https://example.com/blog/some-post")
    if result.ok:
        print(result.title)
        print(result.content)

Low-level access::

    from webclean.query import fetch_html
    from webclean.extractors import clean_html, convert_to_format

    html = fetch_html("https://example.com/blog/post", timeout=10)
    cleaned = clean_html(html, preserve_main_only=True)
    print(convert_to_format(cleaned, "markdown"))
"""

from __future__ import annotations

import gzip
import logging
import urllib.error
import urllib.request
import zlib
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from webclean import settings
from webclean.extractors.cleaner import clean_html
from webclean.extractors.document import CleanError
from webclean.extractors.markdown import (
    ConversionError,
    convert_to_format,
    unsupported_format_message,
)
from webclean.items import CleanOptions, CleanResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
        kind   -- "network-error" | "server-error" | "client-error" |
                  "unexpected-status" | "empty-body"
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        kind: str = "network-error",
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.kind = kind


def _decode_response_body(raw: bytes, headers: object | None) -> str:
    encoding = ""
    if headers is not None:
        try:
            encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        except Exception:
            encoding = ""

    if encoding == "gzip":
        raw = gzip.decompress(raw)
    elif encoding in ("deflate", "zlib"):
        raw = zlib.decompress(raw)

    charset = "utf-8"
    if headers is not None:
        try:
            charset = headers.get_content_charset("utf-8") or "utf-8"
        except Exception:
            charset = "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except (LookupError, ValueError):
        return raw.decode("utf-8", errors="replace")


def _status_error(url: str, status: int) -> FetchError:
    if status >= 500:
        return FetchError(
            f"server error (HTTP {status})", url=url, status=status, kind="server-error",
        )
    if status >= 400:
        return FetchError(
            f"page not found or forbidden (HTTP {status})",
            url=url,
            status=status,
            kind="client-error",
        )
    return FetchError(
        f"unexpected status code: HTTP {status}",
        url=url,
        status=status,
        kind="unexpected-status",
    )


# ---------------------------------------------------------------------------
# Low-level HTTP fetch
# ---------------------------------------------------------------------------

def fetch_html(
    url: str,
    *,
    timeout: int = settings.DEFAULT_TIMEOUT,
) -> str:
    """Fetch *url* and return the response body as a decoded string.

    A single attempt is made; there is no retry.  Anything other than a
    non-empty HTTP 200 response is an error.

    Args:
        url:     Fully-qualified HTTP/HTTPS URL.
        timeout: Request timeout in seconds.

    Raises:
        ValueError: *url* is empty.
        FetchError: On HTTP errors, connection failures, timeouts, invalid
                    URLs, or an empty body.
    """
    if not url:
        raise ValueError("URL cannot be empty")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": settings.USER_AGENT,
            "Accept": settings.ACCEPT,
            "Accept-Language": settings.ACCEPT_LANGUAGE,
            "Accept-Encoding": "gzip, deflate",
        },
    )

    logger.debug("GET %s (timeout=%ss)", url, timeout)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = resp.status
            if status != 200:
                raise _status_error(url, status)
            raw: bytes = resp.read()
            if not raw:
                raise FetchError(
                    "no content received from URL", url=url, status=status, kind="empty-body",
                )
            try:
                body = _decode_response_body(raw, resp.headers)
            except (OSError, zlib.error) as exc:
                raise FetchError(
                    f"failed to read response body: {exc}", url=url, status=status,
                ) from exc
    except urllib.error.HTTPError as exc:
        raise _status_error(url, exc.code) from exc
    except urllib.error.URLError as exc:
        raise FetchError(f"failed to fetch URL: {exc.reason}", url=url) from exc
    except OSError as exc:
        # Socket timeouts and resets surface here
        raise FetchError(f"failed to fetch URL: {exc}", url=url) from exc

    logger.debug("Fetched %d bytes from %s", len(raw), url)
    return body


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def extract_title(html: str) -> str:
    """Return the text of the page's ``<title>``, or ``""``."""
    soup = BeautifulSoup(html, "lxml")
    if soup.title is None:
        return ""
    return soup.title.get_text(strip=True)


def process(
    url: str,
    *,
    output_format: str = settings.DEFAULT_FORMAT,
    options: CleanOptions | None = None,
    timeout: int = settings.DEFAULT_TIMEOUT,
) -> CleanResult:
    """Fetch, clean, and convert *url*.

    Never raises for fetch, cleaning, or conversion failures: the message is
    stored on :attr:`CleanResult.error` and ``content`` is left empty.
    """
    options = options or CleanOptions()
    result = CleanResult(url=url, format=output_format)

    if output_format not in settings.OUTPUT_FORMATS:
        result.error = unsupported_format_message(output_format)
        return result

    try:
        html = fetch_html(url, timeout=timeout)
        title = extract_title(html)
        cleaned = clean_html(
            html,
            preserve_main_only=options.preserve_main_only,
            remove_images=options.remove_images,
        )
        content = convert_to_format(cleaned, output_format)
    except (FetchError, CleanError, ConversionError, ValueError) as exc:
        logger.debug("Processing %s failed: %s", url, exc)
        result.error = str(exc)
        return result

    result.title = title or None
    result.content = content
    return result
