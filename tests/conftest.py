import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Ensure root path is available for imports
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

LOW_RES_THUMBNAIL = (
    "https://imgsrv.crunchyroll.com/cdn-cgi/image/fit=contain,format=auto,"
    "quality=70,width=320,height=180/catalog/crunchyroll/4f1c0b.jpg"
)
HIGH_RES_THUMBNAIL = (
    "https://imgsrv.crunchyroll.com/cdn-cgi/image/fit=contain,format=auto,"
    "quality=85,width=1920,height=1080/catalog/crunchyroll/4f1c0b.jpg"
)
POSTER_URL = (
    "https://imgsrv.crunchyroll.com/cdn-cgi/image/fit=contain,format=auto,"
    "quality=85,width=480,height=720/catalog/crunchyroll/blue-lock.jpg"
)


def _episode_card(
    title: Optional[str] = "S1 E1 - Blue Lock",
    href: str = "/watch/GZ7UDM1KQ/blue-lock",
    aria_label: Optional[str] = None,
    description: Optional[str] = "Yoichi Isagi arrives at the Blue Lock facility.",
    thumbnail: Optional[str] = LOW_RES_THUMBNAIL,
    duration: Optional[str] = "24m",
) -> str:
    aria = f' aria-label="{aria_label}"' if aria_label else ""
    image = f'<img class="content-image__image--7tGlg" src="{thumbnail}" alt="">' if thumbnail else ""
    link = (
        f'<a class="playable-card__title-link--96psl" tabindex="0" href="{href}">{title}</a>'
        if title is not None
        else ""
    )
    desc = f'<p class="text--gq6o-" data-t="description">{description}</p>' if description else ""
    runtime = f'<span class="text--gq6o-" data-t="duration-info">{duration}</span>' if duration else ""
    return f"""
<div class="playable-card--GnGy playable-card-hover" data-t="episode-card-{href.split('/')[2] if '/watch/' in href else 'x'}"{aria}>
  <div class="playable-card__thumbnail-wrapper">
    <div class="playable-card__thumbnail"><figure class="content-image">{image}</figure></div>
    <div class="playable-card__body">
      <h4 class="playable-card__title">{link}</h4>
      {desc}
      <div class="playable-card__footer">
        <div class="playable-card__meta">{runtime}</div>
      </div>
    </div>
  </div>
</div>
"""


def _series_page(
    heading: Optional[str] = None,
    og_title: Optional[str] = "Blue Lock - Watch on Crunchyroll",
    description: Optional[str] = None,
    og_description: Optional[str] = "After a disastrous defeat...",
    og_image: Optional[str] = POSTER_URL,
    canonical: Optional[str] = "https://www.crunchyroll.com/series/G4PH0WEKE/blue-lock",
    body: str = "",
) -> str:
    head = []
    if og_title:
        head.append(f'<meta property="og:title" content="{og_title}" />')
    if og_description:
        head.append(f'<meta property="og:description" content="{og_description}" />')
    if og_image:
        head.append(f'<meta property="og:image" content="{og_image}" />')
    if canonical:
        head.append(f'<link rel="canonical" href="{canonical}" />')
    main = []
    if heading:
        main.append(f'<h1 class="heading--nKNOf title">{heading}</h1>')
    if description:
        main.append(f'<p class="text--gq6o- text--is-l--iccTo expandable">{description}</p>')
    return (
        "<html><head>" + "\n".join(head) + "</head><body>"
        + "\n".join(main) + body + "</body></html>"
    )


@pytest.fixture
def episode_card() -> Callable[..., str]:
    """Factory for a rendered episode card."""
    return _episode_card


@pytest.fixture
def series_page() -> Callable[..., str]:
    """Factory for a series page with Open Graph metadata."""
    return _series_page
