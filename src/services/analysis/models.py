"""Query analysis models."""

from dataclasses import dataclass, field
from typing import Any

from src.config.constants import Complexity, QueryIntent


@dataclass
class QueryAnalysis:
    """Result from query analysis."""

    keywords: list[str] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)  # "kind:match"
    intent: QueryIntent = QueryIntent.VERIFICATION
    complexity: Complexity = Complexity.SIMPLE
    suggested_categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "keywords": self.keywords,
            "entities": self.entities,
            "intent": self.intent.value,
            "complexity": self.complexity.value,
            "suggested_categories": self.suggested_categories,
        }
