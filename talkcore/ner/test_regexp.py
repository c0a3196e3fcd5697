"""
Unit Tests for Regular Expression Entities
==========================================
"""

import re

import pytest

from talkcore.error_handling import EntityError
from talkcore.ner import MatchMode, RegexpEntity


def spans(result):
    return [(match.source, match.start) for match in result.entities]


class TestRegexpEntity:
    """Test pattern based extraction."""

    def test_requires_find_all_mode(self):
        with pytest.raises(EntityError, match="must match all occurrences"):
            RegexpEntity("test", r"test", mode=MatchMode.FIRST)

    def test_invalid_pattern(self):
        with pytest.raises(EntityError):
            RegexpEntity("test", r"(unclosed")

    def test_flags_with_compiled_pattern(self):
        with pytest.raises(EntityError):
            RegexpEntity("test", re.compile("a"), flags=re.IGNORECASE)

    def test_simple_expressions(self):
        entity = RegexpEntity("test", r"a+", flags=re.IGNORECASE)

        result = entity.process("aaa bb aa")
        assert result.template == "%test% bb %test%"
        assert spans(result) == [("aaa", 0), ("aa", 7)]

        result = entity.process("bb aaa bb")
        assert result.template == "bb %test% bb"
        assert spans(result) == [("aaa", 3)]

        result = entity.process("aaa aaa a")
        assert result.template == "%test% %test% %test%"
        assert spans(result) == [("aaa", 0), ("aaa", 4), ("a", 8)]

        result = entity.process("bbb bab b")
        assert result.template == "bbb b%test%b b"
        assert spans(result) == [("a", 5)]

    def test_exact_matches_score_one(self):
        matches = RegexpEntity("test", r"b").search("abc")
        assert [match.score for match in matches] == [1.0]
        assert matches[0].end == 2

    def test_grouped_expressions(self):
        entity = RegexpEntity("name", r"(петлюрик)у?", flags=re.IGNORECASE)

        result = entity.process("Петлюрик ти молодець")
        assert result.template == "%name% ти молодець"
        assert [(m.source, m.option) for m in result.entities] == [("Петлюрик", "Петлюрик")]

        result = entity.process("Петлюрику, ти молодець")
        assert result.template == "%name%, ти молодець"
        assert [(m.source, m.option) for m in result.entities] == [("Петлюрику", "Петлюрик")]

    def test_unmatched_optional_group(self):
        entity = RegexpEntity("size", r"\d+(kb)?")
        assert [m.option for m in entity.search("10kb 20")] == ["kb", "20"]

    def test_empty_matches_are_skipped(self):
        assert RegexpEntity("test", r"a*").search("bab") == RegexpEntity("test", r"a+").search("bab")
