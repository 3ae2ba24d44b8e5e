"""Runtime configuration for readtime-agent.

Values come from keyword overrides first, then ``READTIME_*`` environment
variables, then the defaults below.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from .nlp import DEFAULT_SPACY_MODEL

DEFAULT_WPM = 200
DEFAULT_USER_AGENT = "readtime-agent/0.1"

_ENV_VARS = {
    "wpm": "READTIME_WPM",
    "staging_dir": "READTIME_STAGING_DIR",
    "request_timeout": "READTIME_REQUEST_TIMEOUT",
    "task_timeout": "READTIME_TASK_TIMEOUT",
    "keep_staged": "READTIME_KEEP_STAGED",
    "spacy_model": "READTIME_SPACY_MODEL",
}


class ReaderConfig(BaseModel):
    wpm: int = Field(default=DEFAULT_WPM, gt=0)
    staging_dir: Path = Path("arxiv")
    request_timeout: float = Field(default=30.0, gt=0)
    # per-resource deadline covering fetch, parse and analysis; None disables it
    task_timeout: Optional[float] = Field(default=120.0, gt=0)
    keep_staged: bool = True
    process_invalid: bool = False
    spacy_model: str = DEFAULT_SPACY_MODEL
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, **overrides: Any) -> "ReaderConfig":
        values: dict[str, Any] = {}
        for name, var in _ENV_VARS.items():
            raw = os.getenv(var)
            if raw is None or raw == "":
                continue
            if name == "task_timeout" and raw.lower() in ("none", "0", "off"):
                values[name] = None
            else:
                values[name] = raw
        values.update(overrides)
        return cls(**values)


def build_client(config: ReaderConfig) -> httpx.AsyncClient:
    """Create the HTTP client shared by all tasks of one pipeline run."""
    return httpx.AsyncClient(
        timeout=config.request_timeout,
        follow_redirects=True,
        headers={"User-Agent": config.user_agent},
    )
