"""Cleaning pipeline: strip ads, navigation, and clutter from a page.

The passes run in a fixed order over one tree, each on whatever the earlier
passes left behind:

1. main-content isolation (``preserve_main_only``)
2. structural tags: head, script, style, nav
3. ad, advertisement, banner rules
4. iframes
5. footer/aside, then sidebar, menu, popup, modal, cookie, social, share,
   comment rules
6. images (``remove_images``)
7. attribute allow-list

A pass that finds nothing to remove is a silent no-op.  The tree never
leaves :func:`clean_html`; callers only see the serialized string.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup

from .document import (
    CleanError,
    is_live,
    parse_document,
    remove_tags,
    serialize_document,
)
from .noise import AD_RULES, CLUTTER_RULES, CONTENT_REGION_TAGS, NoiseRule, Verdict, classify

logger = logging.getLogger(__name__)

__all__ = [
    "ALLOWED_ATTRIBUTES",
    "CleanError",
    "apply_rules",
    "clean_html",
    "isolate_main_content",
    "strip_attributes",
]

# Attributes that survive normalization; everything else is stripped
ALLOWED_ATTRIBUTES: frozenset[str] = frozenset({"href", "src", "alt", "title"})

STRUCTURAL_TAGS: tuple[str, ...] = ("head", "script", "style", "nav")
FRAME_TAGS: tuple[str, ...] = ("iframe",)
CHROME_TAGS: tuple[str, ...] = ("footer", "aside")
IMAGE_TAGS: tuple[str, ...] = ("img",)


def clean_html(
    html: str,
    *,
    preserve_main_only: bool = False,
    remove_images: bool = False,
) -> str:
    """Return *html* with noise removed and attributes normalized.

    Args:
        html:               Raw page markup.
        preserve_main_only: Keep only the inner content of the first
                            ``<main>``/``<article>``; no-op when absent.
        remove_images:      Drop every ``<img>``.

    Raises:
        ValueError: *html* is empty.
        CleanError: parse or serialization failure.
    """
    soup = parse_document(html)

    if preserve_main_only and isolate_main_content(soup):
        logger.debug("Isolated main content region")

    removed = remove_tags(soup, STRUCTURAL_TAGS)
    logger.debug("Removed %d structural elements", removed)

    removed = apply_rules(soup, AD_RULES)
    logger.debug("Removed %d ad/banner elements", removed)

    removed = remove_tags(soup, FRAME_TAGS)
    logger.debug("Removed %d iframes", removed)

    removed = remove_tags(soup, CHROME_TAGS) + apply_rules(soup, CLUTTER_RULES)
    logger.debug("Removed %d clutter elements", removed)

    if remove_images:
        removed = remove_tags(soup, IMAGE_TAGS)
        logger.debug("Removed %d images", removed)

    stripped = strip_attributes(soup)
    logger.debug("Stripped %d attributes", stripped)

    return serialize_document(soup)


def isolate_main_content(soup: BeautifulSoup) -> bool:
    """Replace the body's children with those of the first main/article.

    Returns False (tree untouched) when there is no such element.
    """
    region = soup.find(list(CONTENT_REGION_TAGS))
    if region is None:
        return False

    children = list(region.contents)
    body = soup.body
    if body is None:
        # Fragment without a body: the region itself becomes the document
        soup.clear()
        for child in children:
            soup.append(child)
        return True

    body.clear()
    for child in children:
        body.append(child)
    return True


def apply_rules(soup: BeautifulSoup, rules: Iterable[NoiseRule]) -> int:
    """Run each rule as its own sweep over the live tree; return removals."""
    removed = 0
    for rule in rules:
        count = 0
        for el in soup.find_all(True):
            if not is_live(el):
                continue
            if classify(el, rule) is Verdict.REMOVE:
                el.decompose()
                count += 1
        if count:
            logger.debug("Rule %r removed %d elements", rule.category, count)
        removed += count
    return removed


def strip_attributes(
    soup: BeautifulSoup,
    allowed: frozenset[str] = ALLOWED_ATTRIBUTES,
) -> int:
    """Delete every attribute not in *allowed* from every element."""
    stripped = 0
    for el in soup.find_all(True):
        for name in [n for n in el.attrs if n.lower() not in allowed]:
            del el[name]
            stripped += 1
    return stripped
