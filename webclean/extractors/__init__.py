"""Extraction sub-package: parsing, noise classification, cleaning, rendering."""

from .cleaner import ALLOWED_ATTRIBUTES, clean_html, strip_attributes
from .document import CleanError
from .markdown import ConversionError, convert_to_format, html_to_markdown
from .noise import NOISE_RULES, NoiseRule, Verdict, classify, noise_category

__all__ = [
    "ALLOWED_ATTRIBUTES",
    "CleanError",
    "ConversionError",
    "NOISE_RULES",
    "NoiseRule",
    "Verdict",
    "clean_html",
    "classify",
    "convert_to_format",
    "html_to_markdown",
    "noise_category",
    "strip_attributes",
]
