# ABOUTME: Plain-text extraction for HTML-flavoured provider descriptions.
# ABOUTME: Audiobook blurbs arrive as HTML fragments; the publish payload wants plain text.

import html
import re

_BLOCK_BREAK_RE = re.compile(r"<\s*(br|/p|/div|/li)\s*/?\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_plain_text(value: str | None) -> str:
    """Strip tags, decode entities, and collapse whitespace.

    Block-level closers become spaces first so "</p><p>" doesn't glue words.
    """
    if not value:
        return ""
    text = _BLOCK_BREAK_RE.sub(" ", value)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_whitespace(value: str) -> str:
    """Trim and collapse internal runs of whitespace to single spaces."""
    return _WHITESPACE_RE.sub(" ", value).strip()


def tag_key(tag: str) -> str:
    """Comparison key for category tags: whitespace-normalized and casefolded."""
    return normalize_whitespace(tag).casefold()
