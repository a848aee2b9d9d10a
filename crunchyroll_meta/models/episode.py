"""Episode models for scraped episode data."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants.config import THUMBNAIL_HEIGHT, THUMBNAIL_WIDTH
from .series import CrunchyrollImage


class NumberSource(str, Enum):
    """Where an episode number was recovered from."""

    TITLE = "title"
    ARIA_LABEL = "aria_label"


class ParsedTitle(BaseModel):
    """Season, episode and clean title split out of a card title."""

    model_config = ConfigDict(frozen=True)

    season: Optional[int] = None
    episode: Optional[int] = None
    title: str


class EpisodeImages(BaseModel):
    """Thumbnail image set for an episode."""

    model_config = ConfigDict(frozen=True)

    thumbnail: List[List[CrunchyrollImage]] = Field(default_factory=list)

    @classmethod
    def from_thumbnail_url(cls, url: str) -> "EpisodeImages":
        """Wrap a single (already upgraded) thumbnail URL in an image set."""
        thumbnail = CrunchyrollImage(
            source=url,
            width=THUMBNAIL_WIDTH,
            height=THUMBNAIL_HEIGHT,
            type="thumbnail",
        )
        return cls(thumbnail=[[thumbnail]])


class EpisodeRecord(BaseModel):
    """Pydantic model for an episode card scraped from a series page."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Crunchyroll episode ID from the watch URL")
    url: Optional[str] = Field(default=None, description="Watch URL of the episode")
    episode_number: Optional[str] = Field(default=None, description="Episode number as shown on the card")
    episode_number_int: Optional[int] = Field(default=None, description="Parsed episode number")
    sequence_number: Optional[int] = Field(default=None, description="Position of the episode in the season")
    season_number: Optional[int] = Field(default=None, description="Season number found in the card title")
    number_source: Optional[NumberSource] = Field(
        default=None,
        description="Where the episode number came from (None if it could not be recovered)"
    )
    title: str = Field(default="", description="Episode title without season/episode markers")
    description: Optional[str] = Field(default=None, description="Episode synopsis")
    images: Optional[EpisodeImages] = Field(default=None, description="Thumbnail images")
    duration_ms: Optional[int] = Field(default=None, description="Runtime in milliseconds")
