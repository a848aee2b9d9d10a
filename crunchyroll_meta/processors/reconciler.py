"""Episode number reconciliation between the local library and Crunchyroll.

Local libraries often number episodes differently from Crunchyroll (split
seasons, specials, regional releases). A season mapping table gives a
per-season offset; this module resolves local numbers to source numbers,
validates them against the season's known range and scores candidate
episodes.
"""

import logging
from typing import Optional, Sequence

from ..constants.config import (
    CONFIDENCE_ARIA_LABEL,
    CONFIDENCE_EXACT,
    CONFIDENCE_NONE,
    CONFIDENCE_POSITIONAL,
)
from ..models.episode import EpisodeRecord, NumberSource
from ..models.mapping import EpisodeMapping, MappingIssue, MatchResult, SeasonMappingEntry

logger = logging.getLogger(__name__)


class MappingInconsistency(Exception):
    """The mapping table can't translate a local episode (unmapped season or out of range)."""

    def __init__(self, issue: MappingIssue, message: str, source_episode: Optional[int] = None):
        super().__init__(message)
        self.issue = issue
        self.source_episode = source_episode


def find_season_entry(
    season_number: int,
    entries: Sequence[SeasonMappingEntry],
) -> SeasonMappingEntry:
    """
    Find the mapping entry for a local season.

    Args:
        season_number: Local season number
        entries: The series' season mapping table

    Returns:
        The entry whose local season number matches

    Raises:
        MappingInconsistency: If the season is not mapped
    """
    for entry in entries:
        if entry.local_season_number == season_number:
            return entry

    raise MappingInconsistency(
        MappingIssue.UNMAPPED_SEASON,
        f"Season {season_number} has no mapping entry",
    )


def resolve_source_episode(
    season_number: int,
    episode_number: int,
    entries: Sequence[SeasonMappingEntry],
) -> int:
    """
    Translate a local episode number to Crunchyroll's numbering.

    The source number is ``episode_number + episode_offset``. Entries that
    carry a validated range (EpisodeMapping) must contain the result; it is
    never clamped into range.

    Args:
        season_number: Local season number
        episode_number: Local episode number
        entries: The series' season mapping table

    Returns:
        The Crunchyroll episode number

    Raises:
        MappingInconsistency: If the season is unmapped or the result is out of range
    """
    entry = find_season_entry(season_number, entries)
    source_episode = episode_number + entry.episode_offset

    if isinstance(entry, EpisodeMapping) and not entry.contains(source_episode):
        raise MappingInconsistency(
            MappingIssue.OUT_OF_RANGE,
            f"S{season_number}E{episode_number} resolves to episode {source_episode}, outside "
            f"the mapped range {entry.first_episode}-{entry.last_episode} (offset {entry.episode_offset})",
            source_episode=source_episode,
        )

    logger.debug(
        "[Reconciler] S%sE%s -> source episode %s (offset %s)",
        season_number,
        episode_number,
        source_episode,
        entry.episode_offset,
    )
    return source_episode


def resolve_local_episode(source_episode: int, entry: SeasonMappingEntry) -> int:
    """Translate a Crunchyroll episode number back to the local numbering."""
    return source_episode - entry.episode_offset


def derive_episode_mapping(
    entry: SeasonMappingEntry,
    episodes: Sequence[EpisodeRecord],
    source_series_id: Optional[str] = None,
) -> Optional[EpisodeMapping]:
    """
    Build a range-validated mapping from a season entry and its scraped episodes.

    Args:
        entry: Season mapping entry (offset and season identity)
        episodes: Episodes scraped from the Crunchyroll season
        source_series_id: Crunchyroll series ID to record on the mapping

    Returns:
        EpisodeMapping bounded by the lowest and highest episode numbers,
        or None if no episode has a number
    """
    numbers = sorted(e.episode_number_int for e in episodes if e.episode_number_int is not None)
    if not numbers:
        logger.warning(
            "[Reconciler] Cannot derive a range for season %s: no numbered episodes",
            entry.local_season_number,
        )
        return None

    return EpisodeMapping(
        **entry.model_dump(include=set(SeasonMappingEntry.model_fields)),
        source_series_id=source_series_id,
        first_episode=numbers[0],
        last_episode=numbers[-1],
        total_episodes=len(numbers),
    )


def score_match(
    source_episode: int,
    candidate: Optional[EpisodeRecord],
    by_position: bool = False,
) -> MatchResult:
    """
    Score how well a candidate episode matches a resolved source episode.

    Confidence follows how the candidate was identified: number parsed from
    the title (100), number from the accessibility label (80), unnumbered
    card chosen by its position in the listing (50).

    Args:
        source_episode: Resolved Crunchyroll episode number
        candidate: Candidate episode, or None if nothing was found
        by_position: Whether the candidate was chosen by listing position

    Returns:
        MatchResult for this candidate
    """
    if candidate is None:
        return MatchResult(
            success=False,
            confidence=CONFIDENCE_NONE,
            notes=f"No episode found with number {source_episode}",
            source_episode_number=source_episode,
            issue=MappingIssue.NO_CANDIDATE,
        )

    if candidate.episode_number_int is None:
        if by_position:
            return MatchResult(
                success=True,
                episode=candidate,
                confidence=CONFIDENCE_POSITIONAL,
                notes=(
                    f"Episode {candidate.id} has no number on its card; matched to episode "
                    f"{source_episode} by its position in the listing"
                ),
                source_episode_number=source_episode,
            )
        return MatchResult(
            success=False,
            confidence=CONFIDENCE_NONE,
            notes=f"Episode {candidate.id} has no episode number to compare with {source_episode}",
            source_episode_number=source_episode,
            issue=MappingIssue.NO_CANDIDATE,
        )

    if candidate.episode_number_int != source_episode:
        return MatchResult(
            success=False,
            confidence=CONFIDENCE_NONE,
            notes=f"Episode {candidate.id} is number {candidate.episode_number_int}, expected {source_episode}",
            source_episode_number=source_episode,
            issue=MappingIssue.NO_CANDIDATE,
        )

    if candidate.number_source == NumberSource.ARIA_LABEL:
        return MatchResult(
            success=True,
            episode=candidate,
            confidence=CONFIDENCE_ARIA_LABEL,
            notes=f"Episode number {source_episode} recovered from the card's accessibility label",
            source_episode_number=source_episode,
        )

    return MatchResult(
        success=True,
        episode=candidate,
        confidence=CONFIDENCE_EXACT,
        notes=f"Exact match on episode number {source_episode}",
        source_episode_number=source_episode,
    )


def _find_by_position(
    source_episode: int,
    entry: SeasonMappingEntry,
    episodes: Sequence[EpisodeRecord],
) -> Optional[EpisodeRecord]:
    # Only meaningful when the season's first episode number is known
    if not isinstance(entry, EpisodeMapping):
        return None

    index = source_episode - entry.first_episode
    if 0 <= index < len(episodes) and episodes[index].episode_number_int is None:
        return episodes[index]
    return None


def match_episode(
    season_number: int,
    episode_number: int,
    entries: Sequence[SeasonMappingEntry],
    episodes: Sequence[EpisodeRecord],
) -> MatchResult:
    """
    Match a local episode against the episodes scraped for its Crunchyroll season.

    Mapping problems never raise here; they come back as a failed,
    zero-confidence result explaining what went wrong.

    Args:
        season_number: Local season number
        episode_number: Local episode number
        entries: The series' season mapping table
        episodes: Episodes scraped from the mapped Crunchyroll season, in page order

    Returns:
        MatchResult describing the outcome
    """
    try:
        source_episode = resolve_source_episode(season_number, episode_number, entries)
    except MappingInconsistency as e:
        logger.warning("[Reconciler] %s", e)
        return MatchResult(
            success=False,
            confidence=CONFIDENCE_NONE,
            notes=str(e),
            source_episode_number=e.source_episode,
            issue=e.issue,
        )

    candidate = next((e for e in episodes if e.episode_number_int == source_episode), None)
    if candidate is not None:
        result = score_match(source_episode, candidate)
    else:
        entry = find_season_entry(season_number, entries)
        positional = _find_by_position(source_episode, entry, episodes)
        result = score_match(source_episode, positional, by_position=positional is not None)

    if result.success:
        logger.info(
            "[Reconciler] S%sE%s matched episode %s (confidence %s)",
            season_number,
            episode_number,
            result.episode.id if result.episode else "?",
            result.confidence,
        )
    else:
        logger.info("[Reconciler] S%sE%s: %s", season_number, episode_number, result.notes)
    return result
