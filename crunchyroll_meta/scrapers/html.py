"""Crunchyroll HTML scraper.

Used when API access is blocked and only rendered pages are available.
Extraction is pattern based and degrades field by field: a missing optional
field is left unset, an episode or search card without an identity is
dropped, and a series page without a title yields no record at all.
"""

import logging
from typing import Optional

from ..constants.config import CHALLENGE_PAGE_MARKERS, EMBEDDED_STATE_MARKERS
from ..models.episode import EpisodeImages, EpisodeRecord, NumberSource
from ..models.series import SearchResultRecord, SeriesImages, SeriesRecord
from ..utils.normalization import (
    decode_text,
    extract_watch_id,
    parse_duration_ms,
    parse_int,
    upgrade_thumbnail_url,
)
from ..utils.titles import parse_episode_title
from .cascade import run_cascade
from .patterns import (
    EPISODE_ARIA_NUMBER_STRATEGIES,
    EPISODE_CARD_PATTERN,
    EPISODE_DESCRIPTION_STRATEGIES,
    EPISODE_DURATION_STRATEGIES,
    EPISODE_THUMBNAIL_STRATEGIES,
    EPISODE_TITLE_LINK_PATTERNS,
    SEARCH_POSTER_STRATEGIES,
    SEARCH_TITLE_STRATEGIES,
    SERIES_CARD_PATTERN,
    SERIES_DESCRIPTION_STRATEGIES,
    SERIES_LINK_PATTERN,
    SERIES_POSTER_STRATEGIES,
    SERIES_SLUG_STRATEGIES,
    SERIES_TITLE_STRATEGIES,
)

logger = logging.getLogger(__name__)


def looks_like_challenge_page(html: str) -> bool:
    """Whether the markup is an anti-bot challenge instead of the real page."""
    return any(marker in html for marker in CHALLENGE_PAGE_MARKERS)


def has_embedded_state(html: str) -> bool:
    """Whether the page embeds its JSON application state."""
    return any(marker in html for marker in EMBEDDED_STATE_MARKERS)


def _log_empty_page(html: str, what: str) -> None:
    if looks_like_challenge_page(html):
        logger.warning(
            "[HTML Scraper] No %s found; the page looks like an anti-bot challenge, not content", what
        )
    else:
        logger.warning("[HTML Scraper] No %s found in HTML (%d chars)", what, len(html))


def extract_series_from_html(html: str, series_id: str) -> Optional[SeriesRecord]:
    """
    Extract series information from a series page.

    Args:
        html: HTML content of the series page
        series_id: Crunchyroll series ID the page was fetched for

    Returns:
        The extracted series, or None if no title could be found
    """
    try:
        title = run_cascade(SERIES_TITLE_STRATEGIES, html, "series title")
        if not title:
            if looks_like_challenge_page(html):
                logger.warning(
                    "[HTML Scraper] Failed to extract series title; page looks like an anti-bot challenge"
                )
            else:
                logger.warning("[HTML Scraper] Failed to extract series title from HTML")
            return None

        description = run_cascade(SERIES_DESCRIPTION_STRATEGIES, html, "series description")
        poster_url = run_cascade(SERIES_POSTER_STRATEGIES, html, "series poster")
        slug_title = run_cascade(SERIES_SLUG_STRATEGIES, html, "series slug")

        series = SeriesRecord(
            id=series_id,
            slug_title=slug_title,
            title=title,
            description=description,
            images=SeriesImages.from_poster_url(poster_url) if poster_url else None,
        )
    except Exception:
        logger.exception("[HTML Scraper] Error extracting series from HTML")
        return None

    logger.debug("[HTML Scraper] Extracted series from HTML: %s", series.title)
    return series


def _find_title_link(card_html: str) -> Optional[tuple[str, str]]:
    for pattern in EPISODE_TITLE_LINK_PATTERNS:
        match = pattern.search(card_html)
        if match:
            return match.group("url"), match.group("full_title")
    return None


def parse_episode_card(card_html: str) -> Optional[EpisodeRecord]:
    """
    Build an episode from a single episode card.

    Card title shapes: "T2 E13 - Title", "S1 E5: Title", "E1 - Title" or a
    bare title. If the title has no episode number, the accessibility label
    is tried next. The episode ID always comes from the watch link.

    Args:
        card_html: Markup of one ``episode-card`` element

    Returns:
        EpisodeRecord, or None if the card has no title link or no ID
    """
    link = _find_title_link(card_html)
    if link is None:
        logger.warning("[HTML Scraper] Could not find title link in card")
        return None

    episode_url, raw_title = link
    full_title = decode_text(raw_title)
    episode_id = extract_watch_id(episode_url)
    if not episode_id:
        logger.warning("[HTML Scraper] Card '%s' has no episode ID in its link: %s", full_title, episode_url)
        return None

    parsed = parse_episode_title(full_title)
    if parsed.season is not None:
        logger.debug("[HTML Scraper] Detected Season %s in title: %s", parsed.season, full_title)

    episode_number: Optional[str] = None
    number_source: Optional[NumberSource] = None
    if parsed.episode is not None:
        episode_number = str(parsed.episode)
        number_source = NumberSource.TITLE
    else:
        episode_number = run_cascade(EPISODE_ARIA_NUMBER_STRATEGIES, card_html, "episode number")
        if episode_number:
            number_source = NumberSource.ARIA_LABEL
        else:
            logger.debug("[HTML Scraper] Could not find an episode number for '%s'", full_title)

    episode_number_int = parse_int(episode_number)

    thumbnail_url = run_cascade(EPISODE_THUMBNAIL_STRATEGIES, card_html, "episode thumbnail")
    duration = run_cascade(EPISODE_DURATION_STRATEGIES, card_html, "episode duration")

    return EpisodeRecord(
        id=episode_id,
        url=episode_url,
        episode_number=episode_number,
        episode_number_int=episode_number_int,
        sequence_number=episode_number_int,
        season_number=parsed.season,
        number_source=number_source if episode_number_int is not None else None,
        title=parsed.title,
        description=run_cascade(EPISODE_DESCRIPTION_STRATEGIES, card_html, "episode description"),
        images=(
            EpisodeImages.from_thumbnail_url(upgrade_thumbnail_url(thumbnail_url))
            if thumbnail_url
            else None
        ),
        duration_ms=parse_duration_ms(duration) if duration else None,
    )


def extract_episodes_from_html(html: str) -> list[EpisodeRecord]:
    """
    Extract the episode cards of a series page, in page order.

    A card that fails to parse is logged and skipped; the remaining cards
    are still processed.

    Args:
        html: HTML content of the series page

    Returns:
        List of extracted episodes (possibly empty)
    """
    episodes: list[EpisodeRecord] = []

    if has_embedded_state(html):
        logger.info("[HTML Scraper] Detected embedded JSON state in HTML; it carries data for all seasons")

    try:
        card_matches = list(EPISODE_CARD_PATTERN.finditer(html))
    except Exception:
        logger.exception("[HTML Scraper] Error scanning HTML for episode cards")
        return episodes

    for index, match in enumerate(card_matches):
        try:
            episode = parse_episode_card(match.group(0))
        except Exception:
            logger.exception("[HTML Scraper] Error extracting episode card %d", index)
            continue

        if episode is not None:
            episodes.append(episode)

    if episodes:
        episode_numbers = ", ".join(f"E{e.episode_number or '?'}" for e in episodes)
        logger.info("[HTML Scraper] Extracted %d episodes: %s", len(episodes), episode_numbers)
        logger.info(
            "[HTML Scraper] Episode range: E%s to E%s",
            episodes[0].episode_number or "?",
            episodes[-1].episode_number or "?",
        )
    elif card_matches:
        logger.warning(
            "[HTML Scraper] Found %d episode cards but none could be identified", len(card_matches)
        )
    else:
        _log_empty_page(html, "'episode-card' elements")

    return episodes


def parse_search_card(card_html: str) -> Optional[SearchResultRecord]:
    """
    Build a search result from a single ``browse-card`` element.

    Args:
        card_html: Markup of one search result card

    Returns:
        SearchResultRecord, or None if the card has no series ID or title
    """
    series_id: Optional[str] = None
    slug_title: Optional[str] = None
    link_match = SERIES_LINK_PATTERN.search(card_html)
    if link_match:
        series_id = link_match.group(1)
        slug_title = link_match.group(2)

    title = run_cascade(SEARCH_TITLE_STRATEGIES, card_html, "search result title")
    if not series_id or not title:
        logger.debug("[HTML Scraper] Skipping search card without ID or title")
        return None

    poster_url = run_cascade(SEARCH_POSTER_STRATEGIES, card_html, "search result poster")

    return SearchResultRecord(
        id=series_id,
        slug_title=slug_title,
        title=title,
        images=SeriesImages.from_poster_url(poster_url) if poster_url else None,
    )


def extract_search_results_from_html(html: str) -> list[SearchResultRecord]:
    """
    Extract series cards from a search results page, in page order.

    Args:
        html: HTML content of the search page

    Returns:
        List of search results (possibly empty)
    """
    results: list[SearchResultRecord] = []

    try:
        card_matches = list(SERIES_CARD_PATTERN.finditer(html))
    except Exception:
        logger.exception("[HTML Scraper] Error scanning HTML for search result cards")
        return results

    for index, match in enumerate(card_matches):
        try:
            item = parse_search_card(match.group(0))
        except Exception:
            logger.exception("[HTML Scraper] Error extracting search result card %d", index)
            continue

        if item is not None:
            results.append(item)

    if not card_matches:
        _log_empty_page(html, "'browse-card' elements")

    logger.debug("[HTML Scraper] Extracted %d search results from HTML", len(results))
    return results
