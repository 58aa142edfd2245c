from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse


_PATH_SEPARATORS = re.compile(r"[/\\:]")
_PATH_UNSAFE = re.compile(r"[?*\"<>|]")
_HEADING_SEPARATOR = re.compile(r"[^a-z0-9]+")
_PATH_COMPONENT_UNSAFE = re.compile(r"[:?*\"<>|]")


def slugify(text: str, fallback: str = "section") -> str:
    """Create a filesystem-friendly slug from arbitrary text."""

    slug = _PATH_SEPARATORS.sub("-", text.strip().lower())
    slug = _PATH_UNSAFE.sub("", slug)
    slug = "-".join(slug.split())
    return slug or fallback


def slugify_heading(text: str) -> str:
    """Turn heading text into an anchor-style identifier (``My Heading!`` -> ``my_heading``)."""

    slug = _HEADING_SEPARATOR.sub("_", text.strip().lower())
    return slug.strip("_")


def url_to_output_dir(page_url: str, base_dir: Path) -> Path:
    """Map a page URL onto a directory under ``base_dir`` that mirrors its path."""

    path = urlparse(page_url).path.replace("\\", "/").strip("/") or "index"
    parts = [_sanitize_component(part) for part in path.split("/")]
    return Path(base_dir).joinpath(*parts)


def _sanitize_component(part: str) -> str:
    part = _PATH_COMPONENT_UNSAFE.sub("_", part)
    if part in ("", ".", ".."):
        return "_"
    return part


__all__ = ["slugify", "slugify_heading", "url_to_output_dir"]
