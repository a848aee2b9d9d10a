"""Season mapping table access utilities."""

import json
from pathlib import Path
from typing import Optional

from ..constants.paths import DEFAULT_MAPPING_PATH
from ..models.mapping import SeasonMapping


def load_season_mapping(path: Path = DEFAULT_MAPPING_PATH) -> Optional[SeasonMapping]:
    """
    Load a series' season mapping table from a JSON file.

    Args:
        path: Path to the mapping JSON file

    Returns:
        SeasonMapping, or None if the file doesn't exist

    Raises:
        pydantic.ValidationError: If the file isn't a valid mapping table
    """
    if not path.exists():
        return None

    with open(path, "r", encoding="utf-8") as f:
        return SeasonMapping.model_validate(json.load(f))


def save_season_mapping(mapping: SeasonMapping, path: Path = DEFAULT_MAPPING_PATH) -> None:
    """Save a season mapping table to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(mapping.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
