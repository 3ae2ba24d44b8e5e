from pathlib import Path

import pydantic
import pytest

from readtime_agent.config import ReaderConfig


def test_defaults():
    config = ReaderConfig()
    assert config.wpm == 200
    assert config.staging_dir == Path("arxiv")
    assert config.keep_staged is True
    assert config.process_invalid is False


def test_from_env(monkeypatch):
    monkeypatch.setenv("READTIME_WPM", "250")
    monkeypatch.setenv("READTIME_STAGING_DIR", "/tmp/staging")
    monkeypatch.setenv("READTIME_TASK_TIMEOUT", "none")
    monkeypatch.setenv("READTIME_KEEP_STAGED", "false")

    config = ReaderConfig.from_env()
    assert config.wpm == 250
    assert config.staging_dir == Path("/tmp/staging")
    assert config.task_timeout is None
    assert config.keep_staged is False


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("READTIME_WPM", "250")
    assert ReaderConfig.from_env(wpm=300).wpm == 300


def test_rejects_non_positive_wpm(monkeypatch):
    monkeypatch.delenv("READTIME_WPM", raising=False)
    with pytest.raises(pydantic.ValidationError):
        ReaderConfig.from_env(wpm=0)
