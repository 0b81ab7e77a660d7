"""Tests for output rendering."""

from __future__ import annotations

import re
from unittest.mock import patch

import pytest

from webclean.extractors.cleaner import clean_html
from webclean.extractors.markdown import (
    ConversionError,
    convert_to_format,
    html_to_markdown,
)

_TAG_RE = re.compile(r"<[a-zA-Z/!][^>]*>")


class TestConvertToFormat:
    def test_html_passthrough(self, page_html):
        cleaned = clean_html(page_html)
        assert convert_to_format(cleaned, "html") == cleaned

    def test_markdown_has_no_tags(self, page_html):
        md = convert_to_format(clean_html(page_html), "markdown")
        assert not _TAG_RE.search(md)

    def test_markdown_structure(self, page_html):
        md = convert_to_format(clean_html(page_html), "markdown")
        assert "## Why clean pages?" in md
        assert "[full guide](https://example.com/guide)" in md
        assert "![Pipeline diagram](/img/diagram.png)" in md

    def test_unsupported_format(self):
        with pytest.raises(ValueError, match="unsupported format: pdf"):
            convert_to_format("<p>x</p>", "pdf")

    def test_empty_html_rejected(self):
        with pytest.raises(ValueError):
            convert_to_format("", "html")


class TestHtmlToMarkdown:
    def test_atx_headings_and_dash_bullets(self):
        md = html_to_markdown("<h1>Title</h1><ul><li>one</li><li>two</li></ul>")
        assert md.startswith("# Title")
        assert "- one" in md
        assert "- two" in md

    def test_blank_lines_collapsed(self):
        md = html_to_markdown("<p>a</p><br><br><br><br><p>b</p>")
        assert "\n\n\n" not in md

    def test_no_trailing_whitespace(self):
        md = html_to_markdown("<p>line one  </p><p>line two</p>")
        assert all(line == line.rstrip() for line in md.splitlines())

    def test_code_language_from_class(self):
        md = html_to_markdown('<pre><code class="language-python">x = 1</code></pre>')
        assert "```python" in md

    def test_renderer_failure_raises_conversion_error(self):
        with patch(
            "webclean.extractors.markdown.markdownify",
            side_effect=RuntimeError("boom"),
        ), pytest.raises(ConversionError, match="boom"):
            html_to_markdown("<p>x</p>")
