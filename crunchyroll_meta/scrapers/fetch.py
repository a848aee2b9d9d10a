"""Page fetching through a FlareSolverr instance.

Crunchyroll pages sit behind an anti-bot challenge, so plain requests get
the challenge page. FlareSolverr solves it in a headless browser and hands
back the rendered HTML.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus

import aiofiles
import aiohttp

from ..constants.config import (
    FETCH_BACKOFF_SECONDS,
    FETCH_RETRIES,
    FLARESOLVERR_MAX_TIMEOUT_MS,
    FLARESOLVERR_URL,
    SEARCH_URL_PATTERN,
    SERIES_URL_PATTERN,
)
from ..constants.paths import SNAPSHOT_FILENAME_PATTERN, SNAPSHOT_TIMESTAMP_FORMAT, SNAPSHOTS_DIR

logger = logging.getLogger(__name__)


def series_url(series_id: str) -> str:
    """Crunchyroll URL of a series page."""
    return SERIES_URL_PATTERN.format(series_id=series_id)


def search_url(query: str) -> str:
    """Crunchyroll URL of a search results page."""
    return SEARCH_URL_PATTERN.format(query=quote_plus(query.strip()))


async def fetch_page(
    session: aiohttp.ClientSession,
    url: str,
    flaresolverr_url: str = FLARESOLVERR_URL,
    max_timeout_ms: int = FLARESOLVERR_MAX_TIMEOUT_MS,
) -> Optional[str]:
    """
    Fetch a page's rendered HTML through FlareSolverr.

    Args:
        session: aiohttp session
        url: Page URL to fetch
        flaresolverr_url: Base URL of the FlareSolverr instance
        max_timeout_ms: How long FlareSolverr may spend solving the challenge

    Returns:
        The page HTML, or None if the request failed
    """
    payload = {
        "cmd": "request.get",
        "url": url,
        "maxTimeout": max_timeout_ms,
    }
    endpoint = f"{flaresolverr_url.rstrip('/')}/v1"
    timeout = aiohttp.ClientTimeout(total=max_timeout_ms / 1000 + 10)

    try:
        async with session.post(endpoint, json=payload, timeout=timeout) as response:
            if response.status != 200:
                body = await response.text()
                logger.error("[Fetch] FlareSolverr returned %s for %s: %s", response.status, url, body[:500])
                return None
            data = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error("[Fetch] Request for %s via FlareSolverr failed: %s", url, e)
        return None

    solution = data.get("solution") if isinstance(data, dict) else None
    html = solution.get("response") if isinstance(solution, dict) else None
    if not isinstance(html, str):
        logger.error("[Fetch] No 'solution.response' in FlareSolverr reply for %s", url)
        return None

    logger.info("[Fetch] Got %d chars of HTML for %s", len(html), url)
    return html


async def fetch_page_with_retries(
    session: aiohttp.ClientSession,
    url: str,
    flaresolverr_url: str = FLARESOLVERR_URL,
    retries: int = FETCH_RETRIES,
    backoff_seconds: float = FETCH_BACKOFF_SECONDS,
) -> Optional[str]:
    """
    Fetch a page, retrying with a linear backoff.

    Args:
        session: aiohttp session
        url: Page URL to fetch
        flaresolverr_url: Base URL of the FlareSolverr instance
        retries: Number of attempts
        backoff_seconds: Delay multiplied by the attempt number between attempts

    Returns:
        The page HTML, or None if every attempt failed
    """
    for attempt in range(1, retries + 1):
        html = await fetch_page(session, url, flaresolverr_url=flaresolverr_url)
        if html is not None:
            return html
        if attempt < retries:
            logger.warning("[Fetch] Attempt %d/%d for %s failed, retrying", attempt, retries, url)
            await asyncio.sleep(backoff_seconds * attempt)
    return None


async def save_snapshot(html: str, page_id: str, directory: Path = SNAPSHOTS_DIR) -> Path:
    """
    Save fetched HTML so extraction can be re-run against it offline.

    Args:
        html: Page HTML
        page_id: Series ID or search query the page belongs to
        directory: Directory to write into

    Returns:
        Path of the written snapshot
    """
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime(SNAPSHOT_TIMESTAMP_FORMAT)
    safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in page_id)
    path = directory / SNAPSHOT_FILENAME_PATTERN.format(page_id=safe_id, timestamp=timestamp)

    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(html)
    return path
