# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from link_scout.config import CrawlConfig, build_config, env_overrides, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("start_urls: [http://example.com/dubai/]", ".yaml", None),
        ("start_urls: http://example.com/dubai/", ".yaml", None),
        (json.dumps({"start_urls": ["http://example.com/dubai/"]}), ".json", None),
        ("{}", ".json", ValidationError),
        ("start_urls: []", ".yaml", ValidationError),
        ("start_urls: ['  ', '']", ".yaml", ValidationError),
        ("- just\n- a list", ".yaml", TypeError),
        ("key: [unclosed", ".yaml", ValueError),
        ("{not json", ".json", ValueError),
        ("start_urls = 1", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert cfg.start_urls == ["http://example.com/dubai/"]


def test_defaults():
    cfg = CrawlConfig(start_urls=["https://example.com/"])
    assert cfg.same_domain_only is True
    assert cfg.max_requests_per_crawl == 500
    assert cfg.max_concurrency == 10
    assert cfg.navigation_timeout == 45
    assert cfg.request_handler_timeout == 90
    assert cfg.wait_until == "networkidle"
    assert cfg.headless is True


def test_unknown_keys_are_rejected():
    with pytest.raises(ValidationError):
        CrawlConfig(start_urls=["https://example.com/"], base_url="https://example.com/")


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_env_overrides_parse_variables():
    env = {
        "START_URL": "https://a.com/x/, https://b.com/ ,",
        "SAME_DOMAIN_ONLY": "FALSE",
        "WAIT_UNTIL": "load",
        "PLAYWRIGHT_HEADFUL": "1",
        "MAX_REQUESTS_PER_CRAWL": "25",
        "MAX_CONCURRENCY": "3",
    }
    assert env_overrides(env) == {
        "start_urls": ["https://a.com/x/", "https://b.com/"],
        "same_domain_only": False,
        "wait_until": "load",
        "headless": False,
        "max_requests_per_crawl": "25",
        "max_concurrency": "3",
    }


def test_same_domain_only_is_true_only_for_literal_true():
    assert env_overrides({"SAME_DOMAIN_ONLY": "True"}) == {"same_domain_only": True}
    assert env_overrides({"SAME_DOMAIN_ONLY": "yes"}) == {"same_domain_only": False}


def test_build_config_precedence(tmp_path):
    cfg_path = write_file(
        tmp_path,
        "start_urls: [https://file.com/]\nmax_concurrency: 2\nmax_requests_per_crawl: 7",
        ".yaml",
    )
    env = {"START_URL": "https://env.com/", "MAX_CONCURRENCY": "5"}

    cfg = build_config(cfg_path, {"max_concurrency": None}, environ=env)
    assert cfg.start_urls == ["https://env.com/"]
    assert cfg.max_concurrency == 5
    assert cfg.max_requests_per_crawl == 7

    cfg = build_config(
        cfg_path, {"start_urls": ["https://cli.com/"], "max_concurrency": 9}, environ=env
    )
    assert cfg.start_urls == ["https://cli.com/"]
    assert cfg.max_concurrency == 9

    # an empty CLI seed list falls back to the environment
    cfg = build_config(cfg_path, {"start_urls": []}, environ=env)
    assert cfg.start_urls == ["https://env.com/"]


def test_build_config_without_any_seed_fails():
    with pytest.raises(ValidationError):
        build_config(None, {}, environ={})
