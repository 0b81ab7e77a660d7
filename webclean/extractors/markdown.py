"""Render cleaned HTML in the requested output format."""

from __future__ import annotations

import logging
import re
from typing import Any

from markdownify import markdownify  # type: ignore[import-untyped]

from webclean import settings

logger = logging.getLogger(__name__)

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)


class ConversionError(RuntimeError):
    """Raised when cleaned HTML cannot be rendered as Markdown."""


def convert_to_format(html: str, fmt: str) -> str:
    """Return *html* unchanged for ``"html"``, or as Markdown for ``"markdown"``.

    Raises:
        ValueError: *html* is empty or *fmt* is not a supported format.
        ConversionError: Markdown rendering failed.
    """
    if not html:
        raise ValueError("HTML content cannot be empty")

    if fmt == "html":
        return html
    if fmt == "markdown":
        return html_to_markdown(html)
    raise ValueError(unsupported_format_message(fmt))


def unsupported_format_message(fmt: str) -> str:
    choices = " or ".join(repr(f) for f in settings.OUTPUT_FORMATS)
    return f"unsupported format: {fmt} (use {choices})"


def html_to_markdown(html: str) -> str:
    """Convert *html* to clean Markdown.

    Uses markdownify with ATX heading style.  Post-processes to:
    - Remove excessive blank lines (>2 consecutive)
    - Strip trailing whitespace from lines
    """
    if not html:
        raise ValueError("HTML content cannot be empty")

    try:
        md = markdownify(
            html,
            heading_style="ATX",
            bullets="-",
            code_language_callback=_detect_lang,
        )
    except Exception as exc:
        raise ConversionError(f"failed to convert HTML to Markdown: {exc}") from exc

    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip()


def _detect_lang(el: Any) -> str:
    """Extract language hint from a ``<pre>`` or its ``<code>`` child.

    Only sees a class when the caller rendered HTML that still has one;
    cleaned output has had ``class`` stripped.
    """
    nodes = [el]
    finder = getattr(el, "find", None)
    code = finder("code") if finder else None
    if code is not None:
        nodes.append(code)
    for node in nodes:
        for cls in node.get("class") or []:
            if isinstance(cls, str) and cls.startswith("language-"):
                return cls[len("language-"):]
    return ""
