"""
Unit Tests for Corpus Loading
=============================

Covers entity and document definitions, file errors and the bundled sample
corpora.
"""

import re
from pathlib import Path

import pytest

from talkcore.chatbot import Bot, BotRequest
from talkcore.corpus import load_corpus, parse_corpus, parse_document, parse_entity, read_corpus
from talkcore.error_handling import ConfigurationError
from talkcore.ner import EnumEntity, RegexpEntity
from talkcore.nlp.stemmer import PorterStemmer

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


class TestParseEntity:
    """Test entity definitions."""

    def test_enum_entity(self):
        entity = parse_entity({"label": "city", "options": ["London", "Paris"]}, PorterStemmer(), 0.8)
        assert isinstance(entity, EnumEntity)
        assert entity.label == "city"
        assert entity.min_threshold == 0.8

    def test_enum_entity_threshold(self):
        entity = parse_entity({"label": "city", "options": {"London": ["London", "Londres"]},
                               "min_threshold": 0.9})
        assert entity.min_threshold == 0.9

    def test_regexp_entity(self):
        entity = parse_entity({"label": "number", "pattern": "\\d+", "flags": ["ignorecase"]})
        assert isinstance(entity, RegexpEntity)
        assert entity.pattern.flags & re.IGNORECASE
        assert [match.option for match in entity.search("1 and 22")] == ["1", "22"]

    def test_requires_exactly_one_kind(self):
        with pytest.raises(ConfigurationError, match="exactly one"):
            parse_entity({"label": "city"})
        with pytest.raises(ConfigurationError, match="exactly one"):
            parse_entity({"label": "city", "options": ["London"], "pattern": "London"})

    def test_requires_label(self):
        with pytest.raises(ConfigurationError, match="label"):
            parse_entity({"options": ["London"]})

    def test_unknown_flag(self):
        with pytest.raises(ConfigurationError, match="Unknown regular expression flag"):
            parse_entity({"label": "number", "pattern": "\\d+", "flags": ["SHOUTING"]})


class TestParseDocument:
    """Test document definitions."""

    def test_document(self):
        doc = parse_document({"intent": "hello", "language": "en", "examples": ["hi"], "answers": ["Hello!"]})
        assert doc.intent == "hello"
        assert doc.language == "en"
        assert doc.examples == ["hi"]
        assert doc.answers == ["Hello!"]
        assert doc.handler is None

    def test_document_without_answers(self):
        doc = parse_document({"intent": "hello", "examples": ["hi"]})
        assert doc.answers is None
        assert doc.language is None

    def test_rejects_handler(self):
        with pytest.raises(ConfigurationError, match="Handlers cannot be declared"):
            parse_document({"intent": "hello", "examples": ["hi"], "handler": "greet"})

    def test_rejects_scalar_examples(self):
        with pytest.raises(ConfigurationError, match="must be lists"):
            parse_document({"intent": "hello", "examples": "hi"})


class TestCorpus:
    """Test corpus files."""

    def test_parse_corpus(self):
        corpus = parse_corpus({
            "entities": [{"label": "city", "options": ["London"]}],
            "documents": [{"intent": "hello", "examples": ["hi"], "answers": ["Hello!"]}],
            "fallback": "Pardon?",
        })
        assert len(corpus.entities) == 1
        assert len(corpus.documents) == 1
        assert corpus.fallback == "Pardon?"

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="Corpus root"):
            parse_corpus(["hello"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Corpus file not found"):
            read_corpus(tmp_path / "missing.yaml")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "corpus.yaml"
        path.write_text("documents: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Malformed corpus file"):
            read_corpus(path)

    @pytest.mark.parametrize("name", ["en.yaml", "uk.yaml"])
    def test_sample_corpora(self, name):
        corpus = read_corpus(SAMPLES_DIR / name)
        assert [entity.label for entity in corpus.entities] == ["insult", "praise"]
        assert len(corpus.documents) == 4
        assert corpus.fallback

    @pytest.mark.asyncio
    async def test_load_corpus(self):
        bot = Bot()
        corpus = load_corpus(SAMPLES_DIR / "en.yaml", bot)
        assert len(bot.entity_manager) == 2
        assert set(bot.documents) == {document.intent for document in corpus.documents}

        bot.train()
        response = await bot.process(BotRequest(text="you are stupid", user_id="0"))
        assert response.intent == "chatter/insult"
        assert response.answer == "Sorry..."
