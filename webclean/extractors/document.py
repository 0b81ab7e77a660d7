"""Thin adapter over BeautifulSoup/lxml used by every cleaning pass.

All tag-name and attribute comparisons in the package go through
:func:`lowered` so case-insensitivity is handled in one place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


class CleanError(RuntimeError):
    """Raised when markup cannot be parsed or the cleaned tree cannot be serialized."""


def parse_document(html: str) -> BeautifulSoup:
    """Parse *html* into a mutable tree.

    Raises:
        ValueError: *html* is empty.
        CleanError: the parser rejected the input.
    """
    if not html:
        raise ValueError("HTML content cannot be empty")
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as exc:
        raise CleanError(f"failed to parse HTML: {exc}") from exc


def serialize_document(soup: BeautifulSoup) -> str:
    try:
        return str(soup)
    except Exception as exc:
        raise CleanError(f"failed to generate cleaned HTML: {exc}") from exc


def lowered(value: Any) -> str:
    """Lowercase an attribute value; multi-valued attributes are space-joined."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value).lower()
    return str(value).lower()


def tag_name(el: Tag) -> str:
    return lowered(el.name)


def attr_text(el: Tag, *names: str) -> str:
    """Return the lowercased values of *names* on *el*, joined by spaces."""
    return " ".join(lowered(el.get(name)) for name in names)


def is_live(el: Tag) -> bool:
    """False once *el* (or an ancestor) has been decomposed by an earlier pass."""
    return isinstance(el, Tag) and not el.decomposed


def remove_tags(soup: BeautifulSoup, names: Iterable[str]) -> int:
    """Decompose every element whose tag name is in *names*; return the count."""
    wanted = {lowered(n) for n in names}
    removed = 0
    for el in soup.find_all(True):
        if not is_live(el):
            continue
        if tag_name(el) in wanted:
            el.decompose()
            removed += 1
    return removed
