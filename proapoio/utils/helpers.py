"""Helper utilities."""

import math
import re
from typing import Dict, Optional

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
# A "<" only opens a tag when a name, "/" or "!" follows it directly
_TAG_RE = re.compile(r"</?[A-Za-z!][^>]*>")


def strip_html(text: Optional[str]) -> str:
    """Remove markup from user text, keeping the visible text.

    ``<script>`` and ``<style>`` blocks are dropped together with their
    content; every other tag is removed and its inner text preserved.
    Comparison signs in plain text ("idade < 10") are kept.
    """
    if not text:
        return ""
    # Remove scripts/styles completely (tag + content)
    text = _SCRIPT_STYLE_RE.sub("", text)
    # Remove all remaining tags
    text = _TAG_RE.sub("", text)
    return text.strip()


def sanitize_optional_text(text: Optional[str]) -> Optional[str]:
    """Sanitize free text, returning None when nothing is left."""
    cleaned = strip_html(text)
    return cleaned or None


def paginate_query(page: int = 1, page_size: int = 20) -> Dict:
    """Helper for pagination."""
    offset = (page - 1) * page_size
    return {
        "offset": offset,
        "limit": page_size,
        "page": page,
        "page_size": page_size,
    }


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items."""
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)
