"""Normalization utilities for scraped field values."""

import html
import re
from typing import Optional

from ..constants.config import THUMBNAIL_TOKEN_REPLACEMENTS, TITLE_SUFFIXES


def decode_text(value: str) -> str:
    """Decode HTML entities and trim surrounding whitespace."""
    return html.unescape(value.strip()).strip()


def strip_title_suffix(title: str) -> str:
    """Remove the site suffixes Crunchyroll appends to page titles.

    Example: "Blue Lock - Watch on Crunchyroll" -> "Blue Lock"
    """
    for suffix in TITLE_SUFFIXES:
        title = title.replace(suffix, "")
    return title.strip()


def upgrade_thumbnail_url(url: str) -> str:
    """
    Rewrite a low resolution thumbnail URL to its 1080p variant.

    Crunchyroll thumbnails look like
    ``.../fit=contain,format=auto,quality=70,width=320,height=180/...``;
    the size and quality tokens are swapped for the 1080p ones. URLs without
    ``width=`` and ``height=`` tokens are returned unchanged.

    Args:
        url: Thumbnail URL as found in the markup

    Returns:
        Upgraded URL, or the input if it has no resolution tokens
    """
    if "width=" not in url or "height=" not in url:
        return url

    # Whole tokens only: width=3200 is not width=320
    for low, high in THUMBNAIL_TOKEN_REPLACEMENTS:
        url = re.sub(rf"(?<!\w){re.escape(low)}(?!\d)", high, url)
    return url


def parse_duration_ms(duration: str) -> Optional[int]:
    """Convert a card duration label like "24m" to milliseconds."""
    match = re.fullmatch(r"\s*(\d+)\s*m\s*", duration, re.IGNORECASE)
    if not match:
        return None
    return int(match.group(1)) * 60 * 1000


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer string, returning None if it isn't one."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def extract_watch_id(url: str) -> Optional[str]:
    """
    Extract the episode ID from a watch URL.

    Watch URLs look like ``/watch/GZ7UDM1KQ/episode-slug`` (absolute or
    relative, with or without a locale prefix such as ``/pt-br``).

    Args:
        url: Episode link href

    Returns:
        The ID segment following ``watch``, or None if there isn't one
    """
    path = url.split("?", 1)[0].split("#", 1)[0]
    parts = [part for part in path.split("/") if part]
    if "watch" not in parts:
        return None

    watch_index = parts.index("watch")
    if watch_index + 1 < len(parts):
        return parts[watch_index + 1]
    return None
