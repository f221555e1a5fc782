from pathlib import Path

import pytest

from doccrawl.config import CrawlConfig, default_output_dir
from doccrawl.errors import ConfigurationError


def build(**overrides):
    kw = dict(project_name="Docs", base_url="https://example.com", start_paths=["/"], max_pages=5)
    kw.update(overrides)
    return CrawlConfig(**kw)


def test_valid_config_defaults():
    cfg = build()
    assert cfg.delay_seconds == 0.2
    assert cfg.concurrency == 1
    with pytest.raises(Exception):
        cfg.max_pages = 10  # frozen


@pytest.mark.parametrize(
    "overrides",
    [
        {"project_name": ""},
        {"project_name": "   "},
        {"base_url": "example.com"},
        {"base_url": "ftp://example.com"},
        {"base_url": "https://"},
        {"base_url": "https://example.com:notaport"},
        {"start_paths": []},
        {"start_paths": ["", "   "]},
        {"max_pages": 0},
        {"max_pages": -3},
        {"max_pages": True},
        {"delay_seconds": -1.0},
        {"request_timeout": 0},
        {"concurrency": 0},
        {"retries": -1},
    ],
)
def test_invalid_config_rejected(overrides):
    with pytest.raises(ConfigurationError):
        build(**overrides)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        build(max_pages=0)


def test_output_dir_resolution(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCCRAWL_DATA_DIR", str(tmp_path / "override"))
    assert default_output_dir() == tmp_path / "override"
    monkeypatch.delenv("DOCCRAWL_DATA_DIR")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    assert default_output_dir() == tmp_path / "xdg" / "doccrawl" / "docs_output"
    assert build(output_dir=str(tmp_path / "explicit")).resolved_output_dir() == Path(tmp_path / "explicit")


def test_start_paths_are_trimmed_and_blanks_dropped():
    cfg = build(start_paths=["  /docs/ ", "", "\t", "guide"])
    assert cfg.start_paths == ["/docs/", "guide"]
