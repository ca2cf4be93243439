"""Resolve image references to files under the site root."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlsplit

_SITE_PLACEHOLDER_RE = re.compile(r"\{\{-?\s*site\.(?:url|baseurl)\s*-?\}\}")
_URL_FILTER_RE = re.compile(
    r"""\{\{-?\s*(?P<q>["'])(?P<path>[^"']*)(?P=q)\s*\|\s*(?:relative_url|absolute_url)\s*-?\}\}"""
)
_REMOTE_PREFIXES = ("http://", "https://", "//", "data:", "mailto:")


@dataclass(frozen=True, slots=True)
class ResolvedImage:
    target: str
    url_path: str
    path: Path
    within_site: bool = True


def strip_placeholders(target: str) -> str:
    """Remove base-URL templating so only the site-relative path remains.

    >>> strip_placeholders("{{ site.url }}{{ site.baseurl }}/assets/a.png")
    '/assets/a.png'
    >>> strip_placeholders('{{ "/assets/b.png" | relative_url }}')
    '/assets/b.png'
    """
    target = _URL_FILTER_RE.sub(lambda m: m.group("path"), target)
    return _SITE_PLACEHOLDER_RE.sub("", target).strip()


def is_remote(target: str) -> bool:
    return target.lower().startswith(_REMOTE_PREFIXES)


def resolve_image(target: str, site_root: Path) -> ResolvedImage | None:
    """Map an image reference to the file it should point at.

    Returns ``None`` for references that cannot be checked locally: remote
    URLs, data URIs, and targets that still contain Liquid after the known
    placeholders are stripped.

    ``within_site`` is False when the path climbs out of the site root, where
    the generator never publishes anything.
    """
    stripped = strip_placeholders(target.strip())
    if not stripped or is_remote(stripped) or "{{" in stripped or "{%" in stripped:
        return None

    url_path = unquote(urlsplit(stripped).path)
    if not url_path:
        return None

    path = site_root / url_path.lstrip("/")
    within_site = path.resolve().is_relative_to(site_root.resolve())
    return ResolvedImage(target=target, url_path=url_path, path=path, within_site=within_site)


__all__ = ["ResolvedImage", "is_remote", "resolve_image", "strip_placeholders"]
