"""Noise classifier: ordered rule table over ``class``/``id`` substrings.

Each :class:`NoiseRule` names a category, the attributes it scans, the
substrings that trigger it, an optional second tier of precision patterns,
and an optional exception predicate that rescues an otherwise-matching
element.  Classification is a pure function of the element's current
attributes and ancestors, so the order in which the cleaner applies the
rules is the only thing that decides precedence.

Usage::

    from webclean.extractors.noise import NOISE_RULES, Verdict, classify

    for rule in NOISE_RULES:
        if classify(el, rule) is Verdict.REMOVE:
            el.decompose()
            break
"""

from __future__ import annotations

import enum
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from bs4 import Tag

from .document import attr_text

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

class Verdict(enum.Enum):
    KEEP = "keep"
    REMOVE = "remove"


@dataclass(frozen=True)
class NoiseRule:
    """One row of the noise table."""

    category: str
    patterns: tuple[str, ...]
    attrs: tuple[str, ...] = ("class", "id")
    # Second tier: when non-empty, at least one must also match
    precision: tuple[re.Pattern[str], ...] = ()
    # Returns True when a matching element should be kept anyway
    exception: Callable[[Tag], bool] | None = None

    def matches(self, el: Tag) -> bool:
        text = attr_text(el, *self.attrs)
        if not any(p in text for p in self.patterns):
            return False
        if self.precision:
            padded = f" {text} "
            return any(p.search(padded) for p in self.precision)
        return True


# ---------------------------------------------------------------------------
# Exception predicates
# ---------------------------------------------------------------------------

CONTENT_REGION_TAGS: tuple[str, ...] = ("main", "article")


def is_page_header(el: Tag) -> bool:
    """Banner-styled headers carry "header" in their class list."""
    return "header" in attr_text(el, "class")


def in_content_region(el: Tag) -> bool:
    """True when *el* currently sits inside a ``main`` or ``article`` element."""
    return el.find_parent(list(CONTENT_REGION_TAGS)) is not None


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

# "ad" alone hits header, thread, already, ... so an element also needs one of
# these before it counts as an advert.  Matched against the lowercased
# class+id text padded with a space on each side.  A digit may follow the
# token so numbered slots (ad1, top-ad2) still count.
AD_PRECISION_FRAGMENTS: tuple[re.Pattern[str], ...] = (
    re.compile(r"advertisement"),
    re.compile(r"adsbygoogle"),
    re.compile(r"(?<![a-z0-9])ads?(?![a-z])"),
)

AD_RULE = NoiseRule("ad", ("ad",), precision=AD_PRECISION_FRAGMENTS)
ADVERTISEMENT_RULE = NoiseRule("advertisement", ("advertisement",))
BANNER_RULE = NoiseRule("banner", ("banner",), exception=is_page_header)

SIDEBAR_RULE = NoiseRule("sidebar", ("sidebar",))
MENU_RULE = NoiseRule("menu", ("menu",), attrs=("class",), exception=in_content_region)
POPUP_RULE = NoiseRule("popup", ("popup",))
MODAL_RULE = NoiseRule("modal", ("modal",))
COOKIE_RULE = NoiseRule("cookie", ("cookie",))
SOCIAL_RULE = NoiseRule("social", ("social",))
SHARE_RULE = NoiseRule("share", ("share",))
COMMENT_RULE = NoiseRule("comment", ("comment",))

# Applied in this order by the cleaner, ads before frames, clutter after.
AD_RULES: tuple[NoiseRule, ...] = (AD_RULE, ADVERTISEMENT_RULE, BANNER_RULE)
CLUTTER_RULES: tuple[NoiseRule, ...] = (
    SIDEBAR_RULE,
    MENU_RULE,
    POPUP_RULE,
    MODAL_RULE,
    COOKIE_RULE,
    SOCIAL_RULE,
    SHARE_RULE,
    COMMENT_RULE,
)
NOISE_RULES: tuple[NoiseRule, ...] = AD_RULES + CLUTTER_RULES


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify(el: Tag, rule: NoiseRule) -> Verdict:
    """Decide whether *rule* removes *el* in the current tree state."""
    if not rule.matches(el):
        return Verdict.KEEP
    if rule.exception is not None and rule.exception(el):
        return Verdict.KEEP
    return Verdict.REMOVE


def noise_category(el: Tag, rules: Iterable[NoiseRule] = NOISE_RULES) -> str | None:
    """Return the category of the first rule that removes *el*, else None."""
    for rule in rules:
        if classify(el, rule) is Verdict.REMOVE:
            return rule.category
    return None
