from __future__ import annotations

import re
import unicodedata

_SLUG_RE = re.compile(r"[\W_]+")


def slugify(text: str) -> str:
    """URL path segment for an entity name.

    Lowercases and collapses every run of characters that are not letters
    or digits into a single hyphen, e.g. "James Minahan" -> "james-minahan".
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text).lower()
    return _SLUG_RE.sub("-", text).strip("-")
