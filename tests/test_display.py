"""
Tests for display helpers.
"""

import pytest

from expense_ledger.display import escape_markdown


class TestEscapeMarkdown:
    """Tests for showing notes literally inside Markdown."""

    def test_plain_text_unchanged(self):
        """Test that ordinary notes are left alone."""
        assert escape_markdown("phở with friends") == "phở with friends"

    def test_emphasis_is_escaped(self):
        """Test that bold and italic markers are not interpreted."""
        assert escape_markdown("**x**") == r"\*\*x\*\*"
        assert escape_markdown("_y_") == r"\_y\_"

    def test_link_is_escaped(self):
        """Test that link syntax is not turned into a link."""
        assert escape_markdown("[click](http://example.com)") == (
            r"\[click\]\(http\://example\.com\)"
        )

    def test_html_and_shortcodes_are_escaped(self):
        """Test that tags and Streamlit colour directives stay literal."""
        assert escape_markdown("<b>:red[hi]</b>") == r"\<b\>\:red\[hi\]\</b\>"

    def test_backslash_is_escaped(self):
        """Test that an existing backslash cannot cancel an escape."""
        assert escape_markdown("a\\*b") == "a\\\\\\*b"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
