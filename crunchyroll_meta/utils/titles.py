"""Locale-aware parsing of episode card titles."""

import re

from ..constants.config import EPISODE_PREFIX, EPISODE_SEPARATORS, SEASON_PREFIXES
from ..models.episode import ParsedTitle


def build_title_pattern(
    season_prefixes: tuple[str, ...] = SEASON_PREFIXES,
    episode_prefix: str = EPISODE_PREFIX,
    separators: tuple[str, ...] = EPISODE_SEPARATORS,
) -> re.Pattern[str]:
    """
    Build the regex that splits a card title into season, episode and title.

    Supported shapes:
        "T2 E13 - Title"  (pt-BR / es: Temporada)
        "S2 E10: Title"   (en / fr / de: Season, Saison, Staffel)
        "E1 - Title"
        "Title"

    Args:
        season_prefixes: Letters that may introduce a season number
        episode_prefix: Letter that introduces an episode number
        separators: Tokens that must follow the episode number

    Returns:
        Compiled, case-insensitive pattern with season/episode/title groups
    """
    season_alternatives = "|".join(re.escape(prefix) for prefix in season_prefixes)
    separator_class = "".join(re.escape(sep) for sep in separators)
    return re.compile(
        rf"^(?:(?:{season_alternatives})(?P<season>\d+)\s+)?"
        rf"(?:{re.escape(episode_prefix)}(?P<episode>\d+)\s*[{separator_class}]\s*)?"
        r"(?P<title>.+)$",
        re.IGNORECASE | re.DOTALL,
    )


TITLE_PATTERN = build_title_pattern()


def parse_episode_title(raw_title: str) -> ParsedTitle:
    """
    Split a raw episode card title into season, episode and clean title.

    If the episode number isn't followed by "-" or ":" it is left in the
    title. Never raises; when nothing can be parsed the raw input is the
    title.

    Args:
        raw_title: Title text as shown on the card, e.g. "S2 E10: La Bataille Finale"

    Returns:
        ParsedTitle with optional season/episode and the remaining title
    """
    raw_title = raw_title or ""
    match = TITLE_PATTERN.match(raw_title.strip())
    if not match:
        return ParsedTitle(title=raw_title)

    title = match.group("title").strip()
    season = match.group("season")
    episode = match.group("episode")

    return ParsedTitle(
        season=int(season) if season is not None else None,
        episode=int(episode) if episode is not None else None,
        title=title or raw_title,
    )
