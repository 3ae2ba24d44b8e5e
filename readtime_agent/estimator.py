"""Complexity-aware reading time estimation.

The complexity factor is a 2x2 lookup on two signals:

- a syntactic-depth proxy: per sentence, the number of verbs, subordinating
  conjunctions/prepositions (``IN``) and wh-words seen before the sentence
  terminator; the maximum over all sentences is kept.
- average sentence length in approximate words (75% of tokens).

The base estimate is ``tokens / wpm`` minutes and the final reading time is
the base estimate scaled by the factor.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Tuple

from .errors import AnalysisError
from .models import ReadingResource, ResourceKind
from .nlp import TaggedDocument, Tagger

logger = logging.getLogger(__name__)

WORDS_PER_TOKEN = 0.75
MAX_SHALLOW_DEPTH = 4
MAX_SHORT_SENTENCE = 20.0

DEPTH_TAGS = frozenset({"IN", "WDT", "WP", "WRB"})
TERMINATORS = frozenset({".", "!", "?"})

SCORED_KINDS = frozenset({ResourceKind.SUBSTACK, ResourceKind.ARXIV_PDF, ResourceKind.ARXIV_HTML})


def _adds_depth(tag: str) -> bool:
    return tag.startswith("VB") or tag in DEPTH_TAGS


def max_syntactic_depth(doc: TaggedDocument) -> int:
    depth = 0
    max_depth = 0
    for token in doc.tokens:
        if _adds_depth(token.tag):
            depth += 1
        elif token.text in TERMINATORS or token.tag in TERMINATORS:
            max_depth = max(max_depth, depth)
            depth = 0
    return max_depth


def complexity_factor(max_depth: int, average_sentence_length: float) -> float:
    """Map (depth, sentence length) to one of 1.0, 1.5 or 2.0."""
    deep = max_depth > MAX_SHALLOW_DEPTH
    wordy = average_sentence_length > MAX_SHORT_SENTENCE
    if deep and wordy:
        return 2.0
    if deep or wordy:
        return 1.5
    return 1.0


def estimate(doc: TaggedDocument, wpm: int) -> Tuple[float, float]:
    """Return ``(complexity_factor, base_minutes)`` for a tagged document."""
    if wpm <= 0:
        raise AnalysisError(f"reading speed must be positive, got {wpm}")
    if doc.sentence_count <= 0:
        raise AnalysisError("no sentences found in content")

    token_count = len(doc.tokens)
    word_count = int(token_count * WORDS_PER_TOKEN)
    average_sentence_length = word_count / doc.sentence_count

    factor = complexity_factor(max_syntactic_depth(doc), average_sentence_length)
    return factor, token_count / wpm


def analyse(resource: ReadingResource, wpm: int, tagger: Tagger) -> ReadingResource:
    """Score `resource` in place and return it.

    Blog resources are passed through unscored.
    """
    if resource.kind is ResourceKind.BLOG:
        return resource
    if resource.kind not in SCORED_KINDS:
        raise AnalysisError("invalid resource type", raw_url=resource.raw_url)

    text = " ".join(resource.raw_content)
    try:
        doc = tagger(text)
    except RuntimeError as exc:
        raise AnalysisError(str(exc), raw_url=resource.raw_url) from exc

    try:
        factor, base_minutes = estimate(doc, wpm)
    except AnalysisError as exc:
        exc.raw_url = resource.raw_url
        raise

    resource.complexity = factor
    resource.base_minutes = base_minutes
    resource.word_count = int(len(doc.tokens) * WORDS_PER_TOKEN)
    resource.read_time = timedelta(minutes=base_minutes * factor)
    logger.info(
        f"Analysed {resource.raw_url}: complexity={factor} base={base_minutes:.2f}min "
        f"scaled={base_minutes * factor:.2f}min"
    )
    return resource
