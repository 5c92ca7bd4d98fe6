from jobfeed.config import FeedSettings, get_env, load_feed_settings


def test_missing_file_gives_defaults(tmp_path) -> None:
    assert load_feed_settings(tmp_path / "feed.yaml") == FeedSettings()


def test_yaml_overrides_and_unknown_keys(tmp_path) -> None:
    path = tmp_path / "feed.yaml"
    path.write_text("search_keywords: Solution Architect\nresults_per_source: 20\nbogus: 1\n", encoding="utf-8")

    settings = load_feed_settings(path)

    assert settings.search_keywords == "Solution Architect"
    assert settings.results_per_source == 20
    assert settings.adzuna_country == "gb"


def test_empty_yaml_gives_defaults(tmp_path) -> None:
    path = tmp_path / "feed.yaml"
    path.write_text("", encoding="utf-8")
    assert load_feed_settings(path) == FeedSettings()


def test_get_env_strips_whitespace(monkeypatch) -> None:
    monkeypatch.setenv("REED_API_KEY", "  abc\n")
    assert get_env("REED_API_KEY") == "abc"
    assert get_env("ADZUNA_APP_ID") == ""
