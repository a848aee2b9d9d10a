"""CLI entry point for extracting and reconciling Crunchyroll metadata."""

import asyncio
import json
import logging
from pathlib import Path

import aiohttp
import click
from pydantic import ValidationError

from .constants.config import FLARESOLVERR_URL
from .constants.paths import DEFAULT_MAPPING_PATH, SNAPSHOTS_DIR


def _read_html(path: str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging from the extractors")
def cli(verbose: bool):
    """Crunchyroll metadata - HTML extraction and episode mapping CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


@cli.command("parse-series")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--series-id", required=True, help="Crunchyroll series ID the page belongs to")
def parse_series(html_file: str, series_id: str):
    """Extract series metadata from a saved series page.

    Examples:

        crmeta parse-series snapshots/series.html --series-id G4PH0WEKE
    """
    from .scrapers.html import extract_series_from_html

    series = extract_series_from_html(_read_html(html_file), series_id)
    if series is None:
        raise click.ClickException("Could not extract a series (no title found)")
    _echo_json(series.model_dump(mode="json"))


@cli.command("parse-episodes")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
def parse_episodes(html_file: str):
    """Extract the episode cards from a saved series page.

    Examples:

        crmeta parse-episodes snapshots/series.html
    """
    from .scrapers.html import extract_episodes_from_html

    episodes = extract_episodes_from_html(_read_html(html_file))
    _echo_json([episode.model_dump(mode="json") for episode in episodes])


@cli.command("parse-search")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
def parse_search(html_file: str):
    """Extract series cards from a saved search results page.

    Examples:

        crmeta parse-search snapshots/search.html
    """
    from .scrapers.html import extract_search_results_from_html

    results = extract_search_results_from_html(_read_html(html_file))
    _echo_json([item.model_dump(mode="json") for item in results])


@cli.command("match-episode")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mapping", "-m",
    "mapping_path",
    default=str(DEFAULT_MAPPING_PATH),
    type=click.Path(dir_okay=False),
    help=f"Season mapping JSON file (default: {DEFAULT_MAPPING_PATH})"
)
@click.option("--season", "-s", required=True, type=int, help="Local season number")
@click.option("--episode", "-e", required=True, type=int, help="Local episode number")
def match_episode(html_file: str, mapping_path: str, season: int, episode: int):
    """Match a local episode against the episodes on a saved season page.

    Examples:

        crmeta match-episode snapshots/season2.html -m mapping.json -s 2 -e 1
    """
    from .processors.reconciler import match_episode as run_match
    from .scrapers.html import extract_episodes_from_html
    from .utils.mappings import load_season_mapping

    try:
        mapping = load_season_mapping(Path(mapping_path))
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid season mapping in {mapping_path}: {e}")
    if mapping is None:
        raise click.ClickException(f"Season mapping file not found: {mapping_path}")

    episodes = extract_episodes_from_html(_read_html(html_file))
    result = run_match(season, episode, mapping.seasons, episodes)
    _echo_json(result.model_dump(mode="json"))


async def _fetch(url: str, page_id: str, flaresolverr: str, save: bool) -> str | None:
    from .scrapers.fetch import fetch_page_with_retries, save_snapshot

    async with aiohttp.ClientSession() as session:
        html = await fetch_page_with_retries(session, url, flaresolverr_url=flaresolverr)

    if html is not None and save:
        path = await save_snapshot(html, page_id)
        click.echo(f"Saved HTML to: {path}", err=True)
    return html


@cli.command("fetch")
@click.argument("series_id")
@click.option(
    "--flaresolverr",
    default=FLARESOLVERR_URL,
    help=f"FlareSolverr base URL (default: {FLARESOLVERR_URL})"
)
@click.option("--save/--no-save", default=True, help=f"Save the HTML under {SNAPSHOTS_DIR}/")
def fetch(series_id: str, flaresolverr: str, save: bool):
    """Fetch a series page through FlareSolverr and extract it.

    Examples:

        crmeta fetch GRDV0019R

        crmeta fetch GRDV0019R --flaresolverr http://flaresolverr:8191 --no-save
    """
    from .scrapers.fetch import series_url
    from .scrapers.html import extract_episodes_from_html, extract_series_from_html

    html = asyncio.run(_fetch(series_url(series_id), series_id, flaresolverr, save))
    if html is None:
        raise click.ClickException("Failed to fetch page")

    series = extract_series_from_html(html, series_id)
    episodes = extract_episodes_from_html(html)

    click.echo(f"Series: {series.title if series else '(no title found)'}")
    for episode in episodes:
        click.echo(f"  E{episode.episode_number or '?'} [{episode.id}] {episode.title}")
    click.echo(f"\nExtracted {len(episodes)} episodes")


@cli.command("search")
@click.argument("query")
@click.option(
    "--flaresolverr",
    default=FLARESOLVERR_URL,
    help=f"FlareSolverr base URL (default: {FLARESOLVERR_URL})"
)
@click.option("--save/--no-save", default=False, help=f"Save the HTML under {SNAPSHOTS_DIR}/")
def search(query: str, flaresolverr: str, save: bool):
    """Search Crunchyroll through FlareSolverr and list matching series.

    Examples:

        crmeta search "blue lock"
    """
    from .scrapers.fetch import search_url
    from .scrapers.html import extract_search_results_from_html

    html = asyncio.run(_fetch(search_url(query), f"search_{query}", flaresolverr, save))
    if html is None:
        raise click.ClickException("Failed to fetch page")

    results = extract_search_results_from_html(html)
    for item in results:
        click.echo(f"{item.id}  {item.title}" + (f"  ({item.slug_title})" if item.slug_title else ""))
    click.echo(f"\nFound {len(results)} series")
