import logging
from typing import Optional

from crunchyroll_meta.scrapers.html import extract_search_results_from_html

from conftest import POSTER_URL


def _search_card(
    href: Optional[str] = "/series/G4PH0WEKE/blue-lock",
    title: Optional[str] = "Blue Lock",
    alt: str = "Blue Lock",
    poster: Optional[str] = POSTER_URL,
) -> str:
    link_open = f'<a tabindex="0" class="browse-card__poster-wrapper" href="{href}">' if href else "<span>"
    link_close = "</a>" if href else "</span>"
    image = f'<img class="content-image__image" src="{poster}" alt="{alt}">' if poster else ""
    heading = f'<h4 class="browse-card__title">{title}</h4>' if title else ""
    return f"""
<div class="browse-card--esJdT browse-card-hover">
  <div class="browse-card__body">
    {link_open}{image}{link_close}
    {heading}
  </div>
</div>
"""


def test_search_results_in_page_order():
    html = _search_card() + _search_card(
        href="/pt-br/series/GRDV0019R/jujutsu-kaisen", title="JUJUTSU KAISEN", alt="JUJUTSU KAISEN"
    )

    results = extract_search_results_from_html(html)

    assert [(r.id, r.slug_title, r.title) for r in results] == [
        ("G4PH0WEKE", "blue-lock", "Blue Lock"),
        ("GRDV0019R", "jujutsu-kaisen", "JUJUTSU KAISEN"),
    ]
    assert results[0].images.poster_tall[0][0].source == POSTER_URL


def test_title_falls_back_to_poster_alt():
    results = extract_search_results_from_html(_search_card(title=None, alt="Oshi no Ko &amp; More"))

    assert results[0].title == "Oshi no Ko & More"


def test_cards_without_id_or_title_are_dropped():
    html = (
        _search_card(href=None)
        + _search_card(title=None, poster=None)
        + _search_card(href="/series/GY8VEQ95Y/kaguya-sama", title="Kaguya-sama")
    )

    results = extract_search_results_from_html(html)

    assert [r.id for r in results] == ["GY8VEQ95Y"]


def test_missing_poster_is_left_unset():
    results = extract_search_results_from_html(_search_card(poster=None))

    assert results[0].images is None


def test_empty_page_is_reported(caplog):
    caplog.set_level(logging.WARNING)

    assert extract_search_results_from_html("<html></html>") == []
    assert any("No 'browse-card' elements found" in m for m in caplog.messages)
