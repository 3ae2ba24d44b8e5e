"""Fan-out/fan-in pipeline: validate -> extract -> analyse.

Validation runs sequentially up front. Every resource then gets its own
asyncio task working on a private deep copy; tasks are all started
together and joined with ``asyncio.gather``. Results and errors go through
a lock-guarded `ResultCollector`, and no failure of one resource affects
another.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

import httpx

from .config import ReaderConfig, build_client
from .errors import AnalysisError, ExtractionError, ReaderError
from .estimator import analyse
from .extractor import extract
from .models import PipelineResult, ReadingResource, ResourceKind
from .nlp import SpacyTagger, Tagger
from .validator import new_resource

logger = logging.getLogger(__name__)

Input = Tuple[Union[ResourceKind, str], str]


def collect_inputs(
    blogs: Sequence[str] = (),
    substack: Sequence[str] = (),
    arxiv_pdf: Sequence[str] = (),
    arxiv_html: Sequence[str] = (),
) -> List[Input]:
    """Flatten the per-kind URL lists into ``(kind, url)`` pairs."""
    pairs: List[Input] = []
    pairs.extend((ResourceKind.BLOG, u) for u in blogs)
    pairs.extend((ResourceKind.SUBSTACK, u) for u in substack)
    pairs.extend((ResourceKind.ARXIV_PDF, u) for u in arxiv_pdf)
    pairs.extend((ResourceKind.ARXIV_HTML, u) for u in arxiv_html)
    return pairs


class ResultCollector:
    """Append-only resource and error aggregates shared by all tasks."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._resources: List[Tuple[int, ReadingResource]] = []
        self._errors: List[ReaderError] = []
        self._failed: Set[int] = set()

    async def add(self, index: int, resource: ReadingResource, errors: Iterable[ReaderError] = ()) -> None:
        errors = list(errors)
        async with self._lock:
            self._resources.append((index, resource))
            self._errors.extend(errors)
            if errors:
                self._failed.add(index)

    def result(self) -> PipelineResult:
        ordered = sorted(self._resources, key=lambda item: item[0])
        return PipelineResult(
            resources=[r for _, r in ordered],
            errors=list(self._errors),
            failed_positions={pos for pos, (index, _) in enumerate(ordered) if index in self._failed},
        )


@dataclass
class _TaskState:
    """Per-task scratch: the task's own resource copy, its errors and current stage."""

    resource: ReadingResource
    errors: List[ReaderError] = field(default_factory=list)
    stage: str = ExtractionError.stage


def _score_copy(resource: ReadingResource, wpm: int, tagger: Tagger) -> ReadingResource:
    return analyse(resource.model_copy(deep=True), wpm, tagger)


async def _extract_and_analyse(
    state: _TaskState,
    client: httpx.AsyncClient,
    wpm: int,
    tagger: Tagger,
    config: ReaderConfig,
) -> None:
    resource = state.resource
    try:
        await extract(resource, client, config.staging_dir, config.keep_staged)
    except ExtractionError as exc:
        state.errors.append(exc)
        return
    except Exception as exc:
        logger.exception(f"Unexpected extraction failure for {resource.raw_url}")
        state.errors.append(ExtractionError(f"unexpected error: {exc}", raw_url=resource.raw_url))
        return

    state.stage = AnalysisError.stage
    try:
        # tagging is CPU-bound; scores are copied back only if the thread finishes in time
        scored = await asyncio.to_thread(_score_copy, resource, wpm, tagger)
    except AnalysisError as exc:
        state.errors.append(exc)
        return
    except Exception as exc:
        logger.exception(f"Unexpected analysis failure for {resource.raw_url}")
        state.errors.append(AnalysisError(f"unexpected error: {exc}", raw_url=resource.raw_url))
        return

    resource.complexity = scored.complexity
    resource.base_minutes = scored.base_minutes
    resource.word_count = scored.word_count
    resource.read_time = scored.read_time


async def _process(
    index: int,
    resource: ReadingResource,
    validation_error: Optional[ReaderError],
    collector: ResultCollector,
    client: httpx.AsyncClient,
    wpm: int,
    tagger: Tagger,
    config: ReaderConfig,
) -> None:
    state = _TaskState(resource.model_copy(deep=True))
    if validation_error is not None:
        state.errors.append(validation_error)

    if validation_error is None or config.process_invalid:
        try:
            await asyncio.wait_for(
                _extract_and_analyse(state, client, wpm, tagger, config),
                timeout=config.task_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Gave up on {state.resource.raw_url} during {state.stage} after {config.task_timeout}s")
            error_cls = AnalysisError if state.stage == AnalysisError.stage else ExtractionError
            state.errors.append(error_cls(f"timed out after {config.task_timeout}s", raw_url=state.resource.raw_url))
    else:
        logger.debug(f"Skipping extraction of invalid resource {state.resource.raw_url}")

    await collector.add(index, state.resource, state.errors)


async def run_pipeline(
    inputs: Iterable[Input],
    wpm: Optional[int] = None,
    *,
    config: Optional[ReaderConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    tagger: Optional[Tagger] = None,
) -> PipelineResult:
    """Validate, extract and analyse every input; never raises per-resource errors.

    Returns one resource per input (in input order) and every error found.
    """
    config = config or ReaderConfig()
    wpm = config.wpm if wpm is None else wpm
    tagger = tagger or SpacyTagger(config.spacy_model)
    collector = ResultCollector()

    prepared: List[Tuple[int, ReadingResource, Optional[ReaderError]]] = []
    for index, (kind, raw_url) in enumerate(inputs):
        resource, error = new_resource(kind, raw_url)
        prepared.append((index, resource, error))

    invalid = sum(1 for _, _, error in prepared if error is not None)
    logger.info(f"Processing {len(prepared)} resources ({invalid} failed validation)")

    close_client = False
    if client is None:
        client = build_client(config)
        close_client = True

    try:
        tasks = [
            asyncio.create_task(_process(index, resource, error, collector, client, wpm, tagger, config))
            for index, resource, error in prepared
        ]
        await asyncio.gather(*tasks)
    finally:
        if close_client:
            await client.aclose()

    return collector.result()


def run_pipeline_sync(*args, **kwargs) -> PipelineResult:
    """Synchronous wrapper for `run_pipeline`."""
    return asyncio.run(run_pipeline(*args, **kwargs))
