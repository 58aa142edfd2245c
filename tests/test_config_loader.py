import pytest
from pydantic import ValidationError

from docscrap.models.configs import ScrapeConfig
from docscrap.orchestration.config_loader import load_scrape_config


def test_load_yaml_config_resolves_paths(tmp_path):
    config_path = tmp_path / "scrape.yaml"
    config_path.write_text(
        "urls: https://example.com/a, https://example.com/b\n"
        "output_dir: out\n"
        "sqlite_db: data/index.db\n"
        "nav_selector: nav\n"
        "max_chars: 100\n",
        encoding="utf-8",
    )

    config = load_scrape_config(config_path)

    assert config.urls == ["https://example.com/a", "https://example.com/b"]
    assert config.output_dir == (tmp_path / "out").resolve()
    assert config.sqlite_db == (tmp_path / "data" / "index.db").resolve()
    assert config.nav_selector == "nav"
    limits = config.chunk_limits()
    assert limits.enabled
    assert (limits.max_bytes, limits.max_chars, limits.max_tokens) == (0, 100, 0)


def test_load_toml_config(tmp_path):
    config_path = tmp_path / "scrape.toml"
    config_path.write_text(
        'urls = ["https://example.com/docs"]\nstrict = true\nwrite_index = false\n',
        encoding="utf-8",
    )

    config = load_scrape_config(config_path)

    assert config.urls == ["https://example.com/docs"]
    assert config.strict is True
    assert config.write_index is False
    assert config.sqlite_db is None


def test_negative_limits_are_rejected():
    with pytest.raises(ValidationError):
        ScrapeConfig(max_markdown_bytes=-1)


def test_missing_and_unsupported_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scrape_config(tmp_path / "missing.yaml")

    config_path = tmp_path / "scrape.ini"
    config_path.write_text("[scrape]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_scrape_config(config_path)


def test_defaults_disable_limits():
    config = ScrapeConfig()

    assert config.urls == []
    assert not config.chunk_limits().enabled
    assert config.write_index is True


def test_settings_under_scrape_table(tmp_path):
    config_path = tmp_path / "tools.json"
    config_path.write_text(
        '{"scrape": {"urls": ["https://example.com"], "max_tokens": 500}, "other": {"x": 1}}',
        encoding="utf-8",
    )

    config = load_scrape_config(config_path)

    assert config.urls == ["https://example.com"]
    assert config.max_tokens == 500
    assert config.output_dir == (tmp_path / "output").resolve()
