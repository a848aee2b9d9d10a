"""Series, search result and image models for scraped Crunchyroll data."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants.config import POSTER_HEIGHT, POSTER_WIDTH


class CrunchyrollImage(BaseModel):
    """A single image variant served by the Crunchyroll image CDN."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Image URL")
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    type: str = Field(..., description="Image kind, e.g. 'poster_tall' or 'thumbnail'")


class SeriesImages(BaseModel):
    """Poster image set for a series or search result."""

    model_config = ConfigDict(frozen=True)

    poster_tall: List[List[CrunchyrollImage]] = Field(
        default_factory=list,
        description="Tall poster variants, grouped the same way the Crunchyroll API groups them"
    )

    @classmethod
    def from_poster_url(cls, url: str) -> "SeriesImages":
        """Wrap a single poster URL in an image set."""
        poster = CrunchyrollImage(
            source=url,
            width=POSTER_WIDTH,
            height=POSTER_HEIGHT,
            type="poster_tall",
        )
        return cls(poster_tall=[[poster]])


class SeriesRecord(BaseModel):
    """Series metadata extracted from a series page."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Crunchyroll series ID")
    slug_title: Optional[str] = Field(default=None, description="URL slug of the series")
    title: str = Field(..., min_length=1, description="Series title")
    description: Optional[str] = Field(default=None, description="Series synopsis")
    images: Optional[SeriesImages] = Field(default=None, description="Poster images")


class SearchResultRecord(BaseModel):
    """A series card from a search results page."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Crunchyroll series ID")
    slug_title: Optional[str] = Field(default=None, description="URL slug of the series")
    title: str = Field(..., min_length=1, description="Series title")
    images: Optional[SeriesImages] = Field(default=None, description="Poster images")
