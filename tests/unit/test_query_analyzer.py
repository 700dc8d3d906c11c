"""Tests for the query analyzer."""

from src.config.constants import Complexity, QueryIntent
from src.services.analysis.query_analyzer import QueryAnalyzer
from tests.helpers import make_query


def test_keywords_drop_short_tokens():
    analysis = QueryAnalyzer().analyze(make_query(text="Is he an MD in NY state"))
    assert analysis.keywords == ["state"]


def test_medium_complexity_for_four_keywords():
    analysis = QueryAnalyzer().analyze(make_query(text="John Doe Medical License"))
    assert analysis.keywords == ["john", "doe", "medical", "license"]
    assert analysis.complexity == Complexity.MEDIUM


def test_complexity_boundaries():
    assert QueryAnalyzer.classify_complexity(["one", "two"]) == Complexity.SIMPLE
    assert QueryAnalyzer.classify_complexity(["a"] * 5) == Complexity.MEDIUM
    assert QueryAnalyzer.classify_complexity(["a"] * 6) == Complexity.COMPLEX


def test_entities_are_tagged_by_kind():
    text = "confirm Jane Smith born 12/05/1990 email jane@example.com phone 555-123-4567"
    entities = QueryAnalyzer.extract_entities(text)
    assert "email:jane@example.com" in entities
    assert "date:12/05/1990" in entities
    assert "phone:555-123-4567" in entities
    assert "name:Jane Smith" in entities


def test_iso_date_and_parenthesised_phone():
    entities = QueryAnalyzer.extract_entities("issued 2023-01-15 call (555) 123-4567")
    assert "date:2023-01-15" in entities
    assert "phone:(555) 123-4567" in entities


def test_intent_first_match_wins():
    # "find" (lookup) and "compare" both appear; lookup comes first in the table
    assert QueryAnalyzer.detect_intent("find and compare degrees") == QueryIntent.LOOKUP
    assert QueryAnalyzer.detect_intent("Verify employment") == QueryIntent.VERIFICATION
    assert QueryAnalyzer.detect_intent("does the board contain it") == QueryIntent.VERIFICATION


def test_intent_uses_substring_matching():
    # "hash" contains "has"
    assert QueryAnalyzer.detect_intent("hash value") == QueryIntent.EXISTENCE


def test_intent_defaults_to_verification():
    assert QueryAnalyzer.detect_intent("John Doe") == QueryIntent.VERIFICATION


def test_suggested_categories_match_keywords():
    analysis = QueryAnalyzer().analyze(make_query(text="university education record"))
    assert analysis.suggested_categories == ["education"]


def test_empty_query_never_fails():
    analysis = QueryAnalyzer().analyze(make_query(text=""))
    assert analysis.keywords == []
    assert analysis.entities == []
    assert analysis.complexity == Complexity.SIMPLE
    assert analysis.intent == QueryIntent.VERIFICATION
