"""Season mapping and match result models.

A season mapping translates the local library's episode numbering into
Crunchyroll's numbering. If Crunchyroll starts season 2 at episode 25 while
the library calls it episode 1, the offset is 24:

    source_episode = local_episode + episode_offset
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    field_validator,
    model_validator,
)

from .episode import EpisodeRecord


RANGE_FIELDS = frozenset({"first_episode", "last_episode", "total_episodes"})


class MappingIssue(str, Enum):
    """Reasons a local episode could not be mapped to a source episode."""

    UNMAPPED_SEASON = "unmapped_season"
    OUT_OF_RANGE = "out_of_range"
    NO_CANDIDATE = "no_candidate"


class SeasonMappingEntry(BaseModel):
    """Mapping of one local season onto a Crunchyroll season."""

    model_config = ConfigDict(frozen=True)

    local_season_number: int = Field(..., description="Season number as organized in the local library")
    source_season_id: Optional[str] = Field(default=None, description="Crunchyroll season ID")
    source_season_number: Optional[int] = Field(default=None, description="Crunchyroll season number")
    source_season_title: Optional[str] = Field(default=None, description="Season title on Crunchyroll")
    episode_offset: int = Field(default=0, description="Added to a local episode number to get the source number")


class EpisodeMapping(SeasonMappingEntry):
    """Season mapping entry with the validated Crunchyroll episode range."""

    source_series_id: Optional[str] = Field(default=None, description="Crunchyroll series ID")
    first_episode: int = Field(..., description="First episode number of the season on Crunchyroll")
    last_episode: int = Field(..., description="Last episode number of the season on Crunchyroll")
    total_episodes: int = Field(default=0, ge=0, description="Number of episodes in the season")

    @model_validator(mode="after")
    def _check_range(self) -> "EpisodeMapping":
        if self.first_episode > self.last_episode:
            raise ValueError(
                f"first_episode ({self.first_episode}) is after last_episode ({self.last_episode})"
            )
        return self

    def contains(self, source_episode: int) -> bool:
        """Whether a source episode number falls inside this season's range."""
        return self.first_episode <= source_episode <= self.last_episode


class SeasonMapping(BaseModel):
    """Complete season mapping table for one series."""

    model_config = ConfigDict(frozen=True)

    source_series_id: Optional[str] = Field(default=None, description="Crunchyroll series ID")
    series_title: Optional[str] = Field(default=None, description="Series title")
    seasons: List[SerializeAsAny[SeasonMappingEntry]] = Field(
        default_factory=list,
        description="Season entries, one per local season"
    )

    @field_validator("seasons", mode="before")
    @classmethod
    def _promote_ranged_entries(cls, seasons: Any) -> Any:
        # Any range field makes the entry an EpisodeMapping; a half range fails
        if not isinstance(seasons, list):
            return seasons
        return [
            EpisodeMapping.model_validate(entry)
            if isinstance(entry, dict) and RANGE_FIELDS.intersection(entry)
            else entry
            for entry in seasons
        ]

    @field_validator("seasons")
    @classmethod
    def _unique_local_seasons(cls, seasons: list) -> list:
        seen: set[int] = set()
        for entry in seasons:
            if entry.local_season_number in seen:
                raise ValueError(f"local season {entry.local_season_number} is mapped more than once")
            seen.add(entry.local_season_number)
        return seasons


class MatchResult(BaseModel):
    """Result of matching a local episode against scraped Crunchyroll episodes."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="Whether a matching episode was found")
    episode: Optional[EpisodeRecord] = Field(default=None, description="The matched Crunchyroll episode")
    confidence: int = Field(default=0, ge=0, le=100, description="Confidence of the match (0-100)")
    notes: Optional[str] = Field(default=None, description="Notes about the matching process")
    source_episode_number: Optional[int] = Field(default=None, description="Resolved Crunchyroll episode number")
    issue: Optional[MappingIssue] = Field(default=None, description="Why the match failed, if it did")
