"""Slug generation for post URLs"""

import re
import unicodedata


def slugify(text: str, fallback: str = "post") -> str:
    """ASCII-fold text into a lowercase, hyphen-separated slug usable as a URL path segment."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9\s_-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", text).strip("-")
    return slug or fallback
