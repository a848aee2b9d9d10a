"""File and directory path constants."""

from pathlib import Path

# Directory names
SNAPSHOTS_DIR = Path("snapshots")

# File paths
DEFAULT_MAPPING_PATH = Path("season-mapping.json")

# Snapshot-related constants
SNAPSHOT_FILENAME_PATTERN = "crunchyroll_{page_id}_{timestamp}.html"
SNAPSHOT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
