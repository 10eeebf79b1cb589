"""Slug helpers for menu item URLs."""

import re
import unicodedata


def slugify(value: str) -> str:
    """Return a lowercase, dash-separated ASCII slug."""
    normalized = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    normalized = re.sub(r"[^a-zA-Z0-9]+", "-", normalized.strip().lower())
    return normalized.strip("-") or "item"


def unique_slug(base_slug: str, existing: set[str]) -> str:
    """Append ``-1``, ``-2``... until the slug is not in ``existing``."""
    slug = base_slug
    counter = 1
    while slug in existing:
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug
