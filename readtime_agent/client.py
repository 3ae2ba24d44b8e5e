from __future__ import annotations

from typing import Optional, Sequence

from .config import ReaderConfig
from .models import PipelineResult
from .nlp import Tagger
from .pipeline import collect_inputs, run_pipeline_sync


class ReadingTimeClient:
    """Lightweight synchronous client wrapping the pipeline.

    Examples:
        client = ReadingTimeClient(wpm=250)
        result = client.estimate(substack=["https://foo.substack.com/p/post-1"])
    """

    def __init__(self, wpm: Optional[int] = None, config: Optional[ReaderConfig] = None, tagger: Optional[Tagger] = None) -> None:
        self.config = config or ReaderConfig.from_env()
        self.wpm = wpm or self.config.wpm
        self.tagger = tagger

    def estimate(
        self,
        blogs: Sequence[str] = (),
        substack: Sequence[str] = (),
        arxiv_pdf: Sequence[str] = (),
        arxiv_html: Sequence[str] = (),
    ) -> PipelineResult:
        inputs = collect_inputs(blogs, substack, arxiv_pdf, arxiv_html)
        return run_pipeline_sync(inputs, self.wpm, config=self.config, tagger=self.tagger)
