"""Minimal NLP utilities: cleaning, and a tokenizer/tagger capability.

The estimator only needs token text, a Penn Treebank part-of-speech tag per
token and a sentence count. That capability is modelled as the `Tagger`
protocol so it can be swapped for a synthetic one in tests. The default
backend is spaCy, loaded lazily; it raises an informative error if the
library or the model is not installed.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

DEFAULT_SPACY_MODEL = "en_core_web_sm"

# Loaded spaCy pipelines, cached by model name
_nlp_cache: Dict[str, Any] = {}
# spaCy pipelines are shared between worker threads; load and tag one at a time
_nlp_lock = threading.RLock()


def clean_text(text: str) -> str:
    """Basic cleaning: normalize whitespace and remove weird control chars."""
    if text is None:
        return ""
    text = text.replace("\xa0", " ")
    text = re.sub(r"\r\n|\r", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


@dataclass(frozen=True)
class TaggedToken:
    text: str
    tag: str


@dataclass(frozen=True)
class TaggedDocument:
    """Tokens in document order plus the number of sentences found."""

    tokens: Tuple[TaggedToken, ...]
    sentence_count: int


class Tagger(Protocol):
    def __call__(self, text: str) -> TaggedDocument: ...


def load_spacy_model(model_name: str = DEFAULT_SPACY_MODEL) -> Any:
    """Load (once) and return the spaCy pipeline called `model_name`.

    Named-entity recognition is excluded; only the tagger and the parser
    (for sentence boundaries) are needed.
    """
    with _nlp_lock:
        if model_name in _nlp_cache:
            return _nlp_cache[model_name]
        try:
            import spacy
        except Exception as e:
            raise RuntimeError("spacy is required for text analysis; install it with `pip install spacy`") from e

        try:
            nlp = spacy.load(model_name, exclude=["ner"])
        except OSError as e:
            raise RuntimeError(
                f"spaCy model {model_name!r} is not installed; run `python -m spacy download {model_name}`"
            ) from e
        _nlp_cache[model_name] = nlp
        return nlp


def split_text(text: str, limit: int) -> List[str]:
    """Split `text` into pieces of at most `limit` characters, preferring whitespace cuts."""
    if len(text) <= limit:
        return [text]
    pieces: List[str] = []
    start = 0
    while start < len(text):
        end = min(start + limit, len(text))
        if end < len(text):
            cut = max(text.rfind(" ", start, end), text.rfind("\n", start, end))
            if cut > start:
                end = cut
        pieces.append(text[start:end])
        start = end
    return pieces


class SpacyTagger:
    """Tagger backed by a spaCy pipeline with a tagger and a sentence splitter.

    Text longer than the pipeline's ``max_length`` is tagged in pieces and
    the results are concatenated.
    """

    def __init__(self, model_name: str = DEFAULT_SPACY_MODEL) -> None:
        self.model_name = model_name

    def __call__(self, text: str) -> TaggedDocument:
        nlp = load_spacy_model(self.model_name)
        tokens: List[TaggedToken] = []
        sentence_count = 0
        with _nlp_lock:
            for doc in nlp.pipe(split_text(text, nlp.max_length)):
                tokens.extend(TaggedToken(t.text, t.tag_) for t in doc if not t.is_space)
                sentence_count += sum(1 for _ in doc.sents)
        return TaggedDocument(tokens=tuple(tokens), sentence_count=sentence_count)
