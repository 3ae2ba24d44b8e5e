from types import SimpleNamespace

import pytest

from readtime_agent import nlp
from readtime_agent.nlp import SpacyTagger, clean_text, split_text


def test_clean_text_basic():
    s = "This  is a\r\n\r\ntest\xa0string."
    out = clean_text(s)
    assert "\r" not in out
    assert "\xa0" not in out
    assert "test string" in out


def test_clean_text_none():
    assert clean_text(None) == ""


class _FakeDoc:
    def __init__(self, tokens, sentences):
        self._tokens = tokens
        self.sents = sentences

    def __iter__(self):
        return iter(self._tokens)


class _FakePipeline:
    def __init__(self, make_doc, max_length=1_000_000):
        self.make_doc = make_doc
        self.max_length = max_length
        self.seen = []

    def pipe(self, texts):
        for text in texts:
            self.seen.append(text)
            yield self.make_doc(text)


def test_spacy_tagger_uses_cached_pipeline(monkeypatch):
    tokens = [
        SimpleNamespace(text="Cats", tag_="NNS", is_space=False),
        SimpleNamespace(text="purr", tag_="VBP", is_space=False),
        SimpleNamespace(text="\n", tag_="_SP", is_space=True),
        SimpleNamespace(text=".", tag_=".", is_space=False),
    ]
    monkeypatch.setitem(nlp._nlp_cache, "fake_model", _FakePipeline(lambda text: _FakeDoc(tokens, [object()])))

    doc = SpacyTagger("fake_model")("Cats purr.")
    assert [t.text for t in doc.tokens] == ["Cats", "purr", "."]
    assert [t.tag for t in doc.tokens] == ["NNS", "VBP", "."]
    assert doc.sentence_count == 1


def test_missing_spacy_model_raises_runtime_error(monkeypatch):
    spacy = pytest.importorskip("spacy")

    def fake_load(name, **kwargs):
        raise OSError(f"[E050] Can't find model '{name}'")

    monkeypatch.setattr(spacy, "load", fake_load)
    with pytest.raises(RuntimeError, match="spacy download"):
        nlp.load_spacy_model("definitely_missing_model")


def test_split_text_respects_limit_and_whitespace():
    text = "alpha beta gamma delta epsilon"
    pieces = split_text(text, 12)
    assert all(len(p) <= 12 for p in pieces)
    assert "".join(pieces) == text
    assert pieces[0] == "alpha beta"


def test_split_text_short_input_is_one_piece():
    assert split_text("short", 100) == ["short"]
    assert split_text("", 100) == [""]


def test_long_text_is_tagged_in_pieces(monkeypatch):
    def make_doc(text):
        words = text.split()
        toks = [SimpleNamespace(text=w, tag_="NN", is_space=False) for w in words]
        return _FakeDoc(toks, [object()] if words else [])

    pipeline = _FakePipeline(make_doc, max_length=20)
    monkeypatch.setitem(nlp._nlp_cache, "tiny_model", pipeline)

    text = " ".join(f"word{i}" for i in range(30))
    doc = SpacyTagger("tiny_model")(text)

    assert len(pipeline.seen) > 1
    assert all(len(piece) <= 20 for piece in pipeline.seen)
    assert [t.text for t in doc.tokens] == text.split()
    assert doc.sentence_count == len(pipeline.seen)


def test_model_is_loaded_without_ner(monkeypatch):
    spacy = pytest.importorskip("spacy")
    calls = []

    def fake_load(name, **kwargs):
        calls.append((name, kwargs))
        return _FakePipeline(lambda text: _FakeDoc([], []))

    monkeypatch.setattr(spacy, "load", fake_load)
    monkeypatch.delitem(nlp._nlp_cache, "some_model", raising=False)
    nlp.load_spacy_model("some_model")
    nlp._nlp_cache.pop("some_model", None)

    assert calls == [("some_model", {"exclude": ["ner"]})]
