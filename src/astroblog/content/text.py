"""
astroblog.content.text

Plain-text helpers for post bodies.
"""

from __future__ import annotations

import math
import re

WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")
_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    # Last, so "&amp;lt;" decodes to "&lt;" and not "<".
    ("&amp;", "&"),
)


def generate_slug(title: str) -> str:
    if not title:
        return ""
    slug = _NON_WORD_RE.sub("", title.lower().strip())
    slug = _SEPARATOR_RE.sub("-", slug)
    return slug.strip("-")


def extract_text_from_html(html: str) -> str:
    if not html:
        return ""
    text = _TAG_RE.sub("", html)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def count_words(text: str) -> int:
    return len(text.split())


def calculate_reading_time(content: str) -> int:
    """
    Minutes to read `content` (HTML or plain text); at least 1 for non-empty input.
    """

    words = count_words(extract_text_from_html(content))
    if words == 0:
        return 0
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def truncate_text(text: str, max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."
