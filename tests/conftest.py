import re

import fitz
import pytest

from readtime_agent.nlp import TaggedDocument, TaggedToken

_TOKEN_RE = re.compile(r"\w+|[.!?]")


def _simple_tag(text: str) -> TaggedDocument:
    tokens = []
    for word in _TOKEN_RE.findall(text):
        if word in (".", "!", "?"):
            tag = "."
        elif word.lower() in ("is", "was", "sat", "runs", "said"):
            tag = "VBD"
        else:
            tag = "NN"
        tokens.append(TaggedToken(word, tag))
    return TaggedDocument(tokens=tuple(tokens), sentence_count=sum(1 for t in tokens if t.tag == "."))


@pytest.fixture
def simple_tagger():
    """Whitespace/punctuation tagger: '.', '!', '?' end sentences, a few verbs are VBD."""
    return _simple_tag


@pytest.fixture
def make_pdf():
    def _make(path, pages):
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        doc.save(str(path))
        doc.close()
        return path

    return _make
