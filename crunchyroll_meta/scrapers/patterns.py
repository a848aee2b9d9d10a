"""Markup patterns for Crunchyroll series, episode and search pages.

Crunchyroll ships hashed class names (``text--gq6o-``) that change between
deployments, so every field has a structural pattern and one or more
fallbacks keyed on more stable markup (Open Graph tags, data-t attributes).
"""

import re

from ..constants.config import ARIA_EPISODE_KEYWORDS, IMAGE_CDN_URL
from ..utils.normalization import decode_text, strip_title_suffix
from .cascade import ExtractionStrategy

_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL
_CDN = re.escape(IMAGE_CDN_URL)


def _meta_strategies(prop: str, transform=decode_text) -> tuple[ExtractionStrategy, ...]:
    """Strategies for a <meta> tag, in both attribute orders."""
    return (
        ExtractionStrategy(
            name=f"meta:{prop}",
            pattern=re.compile(rf'<meta[^>]*property="{re.escape(prop)}"[^>]*content="([^"]+)"', _I),
            transform=transform,
        ),
        ExtractionStrategy(
            name=f"meta:{prop}:reversed",
            pattern=re.compile(rf'<meta[^>]*content="([^"]+)"[^>]*property="{re.escape(prop)}"', _I),
            transform=transform,
        ),
    )


def _decode_page_title(value: str) -> str:
    return strip_title_suffix(decode_text(value))


# --- Series page ---

SERIES_TITLE_STRATEGIES = (
    ExtractionStrategy(
        name="heading",
        pattern=re.compile(r'<h1[^>]*class="[^"]*heading[^"]*"[^>]*>([^<]+)</h1>', _IS),
        transform=decode_text,
    ),
    *_meta_strategies("og:title", transform=_decode_page_title),
)

SERIES_DESCRIPTION_STRATEGIES = (
    ExtractionStrategy(
        name="description-text",
        pattern=re.compile(
            r'<p[^>]*class="[^"]*text--gq6o-[^"]*text--is-l[^"]*"[^>]*>([^<]+)</p>', _IS
        ),
        transform=decode_text,
    ),
    *_meta_strategies("og:description"),
    ExtractionStrategy(
        name="meta:description",
        pattern=re.compile(r'<meta[^>]*name="description"[^>]*content="([^"]+)"', _I),
        transform=decode_text,
    ),
)

SERIES_POSTER_STRATEGIES = (
    ExtractionStrategy(
        name="poster-image",
        pattern=re.compile(rf'<img[^>]*class="[^"]*poster[^"]*"[^>]*src="({_CDN}[^"]+)"', _I),
    ),
    *_meta_strategies("og:image", transform=str.strip),
)

SERIES_SLUG_STRATEGIES = (
    ExtractionStrategy(
        name="canonical-link",
        pattern=re.compile(
            r'<link[^>]*rel="canonical"[^>]*href="[^"]*/series/[A-Z0-9]+/([a-z0-9-]+)"', _I
        ),
    ),
    ExtractionStrategy(
        name="series-path",
        pattern=re.compile(r"/series/[A-Z0-9]+/([a-z0-9-]+)", _I),
    ),
)

# --- Episode cards ---

EPISODE_CARD_PATTERN = re.compile(
    r'<div[^>]*class="[^"]*playable-card[^"]*"[^>]*data-t="episode-card[^"]*"[^>]*>'
    r".*?</div>\s*</div>\s*</div>\s*</div>\s*</div>",
    _IS,
)

# Visible title link; always rendered, unlike the hover component
EPISODE_TITLE_LINK_PATTERNS = (
    re.compile(
        r'playable-card__title-link[^"]*"[^>]*href="(?P<url>[^"]+)"[^>]*>(?P<full_title>[^<]+)</a>',
        _I,
    ),
    re.compile(
        r'<a[^>]*href="(?P<url>[^"]*/watch/[^"]+)"[^>]*class="[^"]*playable-card__title-link'
        r'[^"]*"[^>]*>(?P<full_title>[^<]+)</a>',
        _I,
    ),
)

EPISODE_ARIA_NUMBER_STRATEGIES = (
    ExtractionStrategy(
        name="aria-label",
        pattern=re.compile(
            r'aria-label="[^"]*?(?:'
            + "|".join(re.escape(keyword) for keyword in ARIA_EPISODE_KEYWORDS)
            + r')\s+(\d+)',
            _I,
        ),
    ),
)

EPISODE_DESCRIPTION_STRATEGIES = (
    ExtractionStrategy(
        name="data-t:description",
        pattern=re.compile(r'data-t="description"[^>]*>([^<]+)<', _I),
        transform=decode_text,
    ),
)

EPISODE_THUMBNAIL_STRATEGIES = (
    ExtractionStrategy(
        name="content-image",
        pattern=re.compile(
            rf'<img[^>]*class="[^"]*content-image__image[^"]*"[^>]*src="({_CDN}[^"]+)"', _I
        ),
    ),
    ExtractionStrategy(
        name="content-image:reversed",
        pattern=re.compile(
            rf'<img[^>]*src="({_CDN}[^"]+)"[^>]*class="[^"]*content-image__image[^"]*"', _I
        ),
    ),
)

EPISODE_DURATION_STRATEGIES = (
    ExtractionStrategy(
        name="data-t:duration-info",
        pattern=re.compile(r'data-t="duration-info"[^>]*>\s*(\d+m)\s*<', _I),
    ),
)

# --- Search results ---

SERIES_CARD_PATTERN = re.compile(
    r'<div[^>]*class="[^"]*browse-card[^"]*"[^>]*>.*?</div>\s*</div>',
    _IS,
)

SERIES_LINK_PATTERN = re.compile(r'href="[^"]*?/series/([A-Z0-9]+)/([a-z0-9-]+)"', _I)

SEARCH_TITLE_STRATEGIES = (
    ExtractionStrategy(
        name="h4",
        pattern=re.compile(r"<h4[^>]*>([^<]+)</h4>", _I),
        transform=decode_text,
    ),
    ExtractionStrategy(
        name="poster-alt",
        pattern=re.compile(rf'<img[^>]*src="{_CDN}[^"]+"[^>]*alt="([^"]+)"', _I),
        transform=decode_text,
    ),
)

SEARCH_POSTER_STRATEGIES = (
    ExtractionStrategy(
        name="poster-image",
        pattern=re.compile(rf'<img[^>]*src="({_CDN}[^"]+)"[^>]*alt="', _I),
    ),
    ExtractionStrategy(
        name="any-cdn-image",
        pattern=re.compile(rf'<img[^>]*src="({_CDN}[^"]+)"', _I),
    ),
)
