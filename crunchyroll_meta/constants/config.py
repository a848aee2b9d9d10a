"""Scraper and reconciliation configuration constants."""

# Crunchyroll URLs
CRUNCHYROLL_BASE_URL = "https://www.crunchyroll.com"
SERIES_URL_PATTERN = f"{CRUNCHYROLL_BASE_URL}/series/{{series_id}}"
SEARCH_URL_PATTERN = f"{CRUNCHYROLL_BASE_URL}/search?q={{query}}"
IMAGE_CDN_URL = "https://imgsrv.crunchyroll.com"

# FlareSolverr (anti-bot challenge solver)
FLARESOLVERR_URL = "http://localhost:8191"
FLARESOLVERR_MAX_TIMEOUT_MS = 60000
FETCH_RETRIES = 3
FETCH_BACKOFF_SECONDS = 2.0

# Title parsing. Season letters: S (season/saison/staffel), T (temporada)
SEASON_PREFIXES = ("S", "T")
EPISODE_PREFIX = "E"
EPISODE_SEPARATORS = ("-", ":")

# Localized words for "episode" found in card accessibility labels
ARIA_EPISODE_KEYWORDS = (
    "Episode",
    "Épisode",
    "Episódio",
    "Episodio",
    "Folge",
)

# Suffixes appended to og:title by the site
TITLE_SUFFIXES = (" - Watch on Crunchyroll", " - Crunchyroll")

# Markers found in the page body
EMBEDDED_STATE_MARKERS = ("__INITIAL_STATE__", "__NEXT_DATA__")
CHALLENGE_PAGE_MARKERS = ("Just a moment", "cf-challenge", "challenge-platform")

# Image sizes
POSTER_WIDTH = 480
POSTER_HEIGHT = 720
THUMBNAIL_WIDTH = 1920
THUMBNAIL_HEIGHT = 1080

# Thumbnail resolution upgrade (low -> high)
THUMBNAIL_TOKEN_REPLACEMENTS = (
    ("width=320", f"width={THUMBNAIL_WIDTH}"),
    ("height=180", f"height={THUMBNAIL_HEIGHT}"),
    ("quality=70", "quality=85"),
)

# Match confidence levels (0-100)
CONFIDENCE_EXACT = 100
CONFIDENCE_ARIA_LABEL = 80
CONFIDENCE_POSITIONAL = 50
CONFIDENCE_NONE = 0
