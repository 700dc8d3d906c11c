"""Query analyzer service."""

import logging
import re

from src.config.constants import Complexity, QueryIntent
from src.services.analysis.models import QueryAnalysis
from src.services.verification.models import VerificationQuery
from src.utils.text_processing import tokenize

logger = logging.getLogger(__name__)

# Order matters: entities are reported kind by kind in this order.
ENTITY_PATTERNS: dict[str, re.Pattern[str]] = {
    "email": re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    "date": re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b|\b\d{4}-\d{2}-\d{2}\b"),
    "phone": re.compile(r"\b\d{3}-\d{3}-\d{4}\b|\(\d{3}\)\s*\d{3}-\d{4}"),
    "name": re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b"),
}

# First matching intent wins.
INTENT_KEYWORDS: list[tuple[QueryIntent, tuple[str, ...]]] = [
    (QueryIntent.VERIFICATION, ("verify", "check", "confirm", "validate")),
    (QueryIntent.LOOKUP, ("find", "search", "get", "retrieve")),
    (QueryIntent.COMPARISON, ("compare", "match", "similar")),
    (QueryIntent.EXISTENCE, ("exists", "has", "contains", "includes")),
]

KNOWN_CATEGORIES: tuple[str, ...] = ("education", "employment", "identity", "finance")


class QueryAnalyzer:
    """Classifies a raw verification query. Never raises."""

    def analyze(self, query: VerificationQuery) -> QueryAnalysis:
        """
        Analyze a query's text.

        Args:
            query: The verification query

        Returns:
            QueryAnalysis with keywords, entities, intent, complexity and
            suggested registry categories
        """
        text = query.query or ""
        keywords = tokenize(text)
        analysis = QueryAnalysis(
            keywords=keywords,
            entities=self.extract_entities(text),
            intent=self.detect_intent(text),
            complexity=self.classify_complexity(keywords),
            suggested_categories=self.suggest_categories(keywords),
        )
        logger.debug(f"Query {query.id} analyzed: {analysis.to_dict()}")
        return analysis

    @staticmethod
    def extract_entities(text: str) -> list[str]:
        entities: list[str] = []
        for kind, pattern in ENTITY_PATTERNS.items():
            entities.extend(f"{kind}:{match.group(0)}" for match in pattern.finditer(text))
        return entities

    @staticmethod
    def detect_intent(text: str) -> QueryIntent:
        lowered = text.lower()
        for intent, keywords in INTENT_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return intent
        return QueryIntent.VERIFICATION

    @staticmethod
    def classify_complexity(keywords: list[str]) -> Complexity:
        if len(keywords) <= 2:
            return Complexity.SIMPLE
        if len(keywords) <= 5:
            return Complexity.MEDIUM
        return Complexity.COMPLEX

    @staticmethod
    def suggest_categories(keywords: list[str]) -> list[str]:
        return [
            category
            for category in KNOWN_CATEGORIES
            if any(keyword in category for keyword in keywords)
        ]
