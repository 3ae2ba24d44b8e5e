from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from pydantic import BaseModel, Field, HttpUrl

from .errors import ReaderError


class ResourceKind(str, Enum):
    """Category of an input URL; decides validation and extraction strategy."""

    BLOG = "blog"
    SUBSTACK = "substack"
    ARXIV_PDF = "arxiv_pdf"
    ARXIV_HTML = "arxiv_html"


class ReadingResource(BaseModel):
    """One reading resource and the state derived from it by the pipeline."""

    # None when the caller asked for a kind outside ResourceKind
    kind: Optional[ResourceKind] = Field(frozen=True)
    raw_url: str
    validated_url: Optional[HttpUrl] = None
    raw_content: List[str] = []
    title: str = ""
    word_count: int = 0
    read_time: Optional[timedelta] = None
    complexity: Optional[float] = None
    base_minutes: Optional[float] = None
    staged_path: Optional[Path] = None

    @property
    def is_valid(self) -> bool:
        return self.validated_url is not None

    @property
    def is_extracted(self) -> bool:
        return bool(self.raw_content)

    @property
    def is_analysed(self) -> bool:
        return self.read_time is not None


@dataclass
class PipelineResult:
    """Aggregate returned by the orchestrator.

    `resources` keeps input order; `errors` has no guaranteed order.
    """

    resources: List[ReadingResource] = field(default_factory=list)
    errors: List[ReaderError] = field(default_factory=list)
    # positions in `resources` whose processing recorded at least one error
    failed_positions: Set[int] = field(default_factory=set)

    @property
    def succeeded(self) -> List[ReadingResource]:
        return [r for pos, r in enumerate(self.resources) if pos not in self.failed_positions]

    def errors_for(self, raw_url: str) -> List[ReaderError]:
        return [e for e in self.errors if e.raw_url == raw_url]
