"""
Display helpers for user-entered text.

Notes are free text. Streamlit renders most strings as Markdown, so a
note has to be escaped before it is shown inside one.
"""

import re


_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$:])")


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown syntax so the text renders literally."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)
