"""webclean - fetch a web page and keep only its content.

Quick single-URL usage::

    from webclean import process

    result = process("https://example.com/blog/some-post", output_format="markdown")
    print(result.title)
    print(result.content)

Cleaning markup you already have::

    from webclean import clean_html, convert_to_format

    cleaned = clean_html(html, preserve_main_only=True, remove_images=True)
    print(convert_to_format(cleaned, "markdown"))
"""

from webclean.extractors import (
    CleanError,
    ConversionError,
    clean_html,
    convert_to_format,
    html_to_markdown,
)
from webclean.items import CleanOptions, CleanResult
from webclean.query import FetchError, fetch_html, process

__version__ = "1.0.0"
__all__ = [
    "CleanError",
    "CleanOptions",
    "CleanResult",
    "ConversionError",
    "FetchError",
    "clean_html",
    "convert_to_format",
    "fetch_html",
    "html_to_markdown",
    "process",
]
