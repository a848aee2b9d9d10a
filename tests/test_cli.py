import json

from click.testing import CliRunner

from crunchyroll_meta.cli import cli
from crunchyroll_meta.scrapers import fetch as fetch_module


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_parse_series(tmp_path, series_page):
    html_file = _write(tmp_path, "series.html", series_page())

    result = CliRunner().invoke(cli, ["parse-series", html_file, "--series-id", "G4PH0WEKE"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["id"] == "G4PH0WEKE"
    assert data["title"] == "Blue Lock"
    assert data["slug_title"] == "blue-lock"


def test_parse_series_without_title_fails(tmp_path):
    html_file = _write(tmp_path, "empty.html", "<html></html>")

    result = CliRunner().invoke(cli, ["parse-series", html_file, "--series-id", "G4PH0WEKE"])

    assert result.exit_code != 0
    assert "no title found" in result.output


def test_parse_episodes(tmp_path, episode_card):
    html_file = _write(
        tmp_path,
        "episodes.html",
        episode_card(title="E1 - First", href="/watch/AAAAAAAAA/first")
        + episode_card(title="E2 - Second", href="/watch/BBBBBBBBB/second"),
    )

    result = CliRunner().invoke(cli, ["parse-episodes", html_file])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [e["id"] for e in data] == ["AAAAAAAAA", "BBBBBBBBB"]
    assert data[0]["number_source"] == "title"


def test_match_episode(tmp_path, episode_card):
    html_file = _write(
        tmp_path,
        "season2.html",
        "".join(
            episode_card(title=f"E{n} - Episode {n}", href=f"/watch/ID{n:07d}/episode-{n}")
            for n in range(25, 28)
        ),
    )
    mapping_file = _write(
        tmp_path,
        "mapping.json",
        json.dumps(
            {
                "seasons": [
                    {"local_season_number": 2, "episode_offset": 24, "first_episode": 25, "last_episode": 48}
                ]
            }
        ),
    )

    result = CliRunner().invoke(
        cli, ["match-episode", html_file, "--mapping", mapping_file, "--season", "2", "--episode", "2"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["success"] is True
    assert data["confidence"] == 100
    assert data["episode"]["id"] == "ID0000026"


def test_match_episode_invalid_mapping(tmp_path):
    html_file = _write(tmp_path, "season.html", "<html></html>")
    mapping_file = _write(
        tmp_path,
        "mapping.json",
        json.dumps({"seasons": [{"local_season_number": 1}, {"local_season_number": 1}]}),
    )

    result = CliRunner().invoke(
        cli, ["match-episode", html_file, "-m", mapping_file, "-s", "1", "-e", "1"]
    )

    assert result.exit_code != 0
    assert "Invalid season mapping" in result.output


def test_fetch_prints_summary(mocker, episode_card, series_page):
    html = series_page(body=episode_card(title="S1 E1 - Blue Lock"))
    mocker.patch.object(fetch_module, "fetch_page_with_retries", new=mocker.AsyncMock(return_value=html))

    result = CliRunner().invoke(cli, ["fetch", "G4PH0WEKE", "--no-save"])

    assert result.exit_code == 0, result.output
    assert "Series: Blue Lock" in result.output
    assert "E1 [GZ7UDM1KQ] Blue Lock" in result.output
    assert "Extracted 1 episodes" in result.output


def test_fetch_failure(mocker):
    mocker.patch.object(fetch_module, "fetch_page_with_retries", new=mocker.AsyncMock(return_value=None))

    result = CliRunner().invoke(cli, ["fetch", "G4PH0WEKE", "--no-save"])

    assert result.exit_code != 0
    assert "Failed to fetch page" in result.output


def test_search_lists_results(mocker):
    html = """
<div class="browse-card--esJdT browse-card-hover">
  <div class="browse-card__body">
    <a tabindex="0" class="browse-card__poster-wrapper" href="/series/G4PH0WEKE/blue-lock"></a>
    <h4 class="browse-card__title">Blue Lock</h4>
  </div>
</div>
"""
    fetch_mock = mocker.patch.object(fetch_module, "fetch_page_with_retries", new=mocker.AsyncMock(return_value=html))

    result = CliRunner().invoke(cli, ["search", "blue lock"])

    assert result.exit_code == 0, result.output
    assert fetch_mock.await_args.args[1] == "https://www.crunchyroll.com/search?q=blue+lock"
    assert "G4PH0WEKE  Blue Lock" in result.output
    assert "Found 1 series" in result.output


def test_search_failure(mocker):
    mocker.patch.object(fetch_module, "fetch_page_with_retries", new=mocker.AsyncMock(return_value=None))

    result = CliRunner().invoke(cli, ["search", "blue lock"])

    assert result.exit_code != 0
    assert "Failed to fetch page" in result.output
