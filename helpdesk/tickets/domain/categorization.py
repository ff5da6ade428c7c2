"""
Ticket Categorization
=====================

Keyword rule table that maps free text to a category, a suggested priority
and a confidence score, plus the prompt and reply parsing used when the
decision is delegated to a language model.

Rules are evaluated in order and the first hit wins, so bug reports take
precedence over feature requests, billing, and technical questions.
"""

import json
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from helpdesk.config import (
    Category, Priority,
    VALID_CATEGORIES, VALID_PRIORITIES,
)

MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 1.0
CONFIDENCE_JITTER = 0.1
URGENCY_BONUS = 0.1


@dataclass(frozen=True)
class CategorizationResult:
    """Category, suggested priority and confidence in [0, 1]."""
    category: Category
    priority: Priority
    confidence: float
    source: str = "heuristic"

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be between 0 and 1")


@dataclass(frozen=True)
class CategorizationRule:
    """Keywords that, when any appears in the text, decide the category."""
    keywords: Tuple[str, ...]
    category: Category
    priority: Priority
    confidence: float

    def matches(self, text: str) -> bool:
        return contains_any(text, self.keywords)


def contains_any(text: str, keywords: Sequence[str]) -> bool:
    """Substring test; `text` is expected to be lower-cased already."""
    return any(keyword in text for keyword in keywords)


CATEGORY_RULES: Tuple[CategorizationRule, ...] = (
    CategorizationRule(
        ("bug", "error", "crash", "broken", "not working", "issue", "problem"),
        Category.BUG_REPORT, Priority.HIGH, 0.9,
    ),
    CategorizationRule(
        ("feature", "enhancement", "request", "add", "new", "implement"),
        Category.FEATURE_REQUEST, Priority.LOW, 0.8,
    ),
    CategorizationRule(
        ("billing", "payment", "invoice", "charge", "subscription", "refund"),
        Category.BILLING, Priority.MEDIUM, 0.85,
    ),
    CategorizationRule(
        ("technical", "api", "integration", "server", "database", "code", "development"),
        Category.TECHNICAL, Priority.HIGH, 0.8,
    ),
)

DEFAULT_RULE = CategorizationRule((), Category.GENERAL, Priority.MEDIUM, 0.7)

URGENT_KEYWORDS = ("urgent", "asap", "immediately", "critical", "emergency", "down", "outage")
LOW_PRIORITY_KEYWORDS = ("minor", "cosmetic", "nice to have", "when possible")


class KeywordCategorizer:
    """
    Rule-based categorizer.

    The random source only perturbs the confidence; inject a seeded
    `random.Random` to make results reproducible.
    """

    def __init__(
        self,
        rules: Sequence[CategorizationRule] = CATEGORY_RULES,
        rng: Optional[random.Random] = None
    ):
        self._rules = tuple(rules)
        self._rng = rng or random.Random()

    def match(self, title: str, description: str) -> Tuple[Category, Priority, float]:
        """
        Deterministic part of the heuristic: category rule plus urgency pass.

        Returns the confidence before random perturbation.
        """
        text = f"{title} {description}".lower()

        rule = next((r for r in self._rules if r.matches(text)), DEFAULT_RULE)
        priority = rule.priority
        confidence = rule.confidence

        if contains_any(text, URGENT_KEYWORDS):
            priority = Priority.URGENT
            confidence = min(confidence + URGENCY_BONUS, MAX_CONFIDENCE)
        elif contains_any(text, LOW_PRIORITY_KEYWORDS):
            priority = Priority.LOW

        return rule.category, priority, confidence

    def categorize(self, title: str, description: str) -> CategorizationResult:
        category, priority, confidence = self.match(title, description)

        confidence += self._rng.uniform(-CONFIDENCE_JITTER, CONFIDENCE_JITTER)
        confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))

        return CategorizationResult(
            category=category,
            priority=priority,
            confidence=round(confidence, 2),
        )


class CategorizationPromptBuilder:
    """
    Builds the prompt used to delegate categorization to a language model.
    """

    PROMPT_TEMPLATE = """Analyze this support ticket and categorize it:

Title: {title}
Description: {description}

Respond with JSON only:
{{
  "category": "technical|billing|general|feature-request|bug-report",
  "priority": "low|medium|high|urgent",
  "confidence": 0.0-1.0
}}"""

    @classmethod
    def build_messages(cls, title: str, description: str) -> list:
        return [
            {"role": "user", "content": cls.PROMPT_TEMPLATE.format(title=title, description=description)}
        ]


def parse_categorization_reply(content: str, source: str = "llm") -> CategorizationResult:
    """
    Parse a model reply into a result.

    Accepts bare JSON or JSON inside a ``` fence. Confidence is clamped to
    [0.5, 1.0].

    Raises:
        ValueError: the reply is not JSON or a field is missing or invalid
    """
    text = content.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Reply is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("Reply is not a JSON object")

    category = data.get("category")
    priority = data.get("priority")
    confidence = data.get("confidence")

    if category not in VALID_CATEGORIES:
        raise ValueError(f"Invalid category in reply: {category!r}")
    if priority not in VALID_PRIORITIES:
        raise ValueError(f"Invalid priority in reply: {priority!r}")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ValueError(f"Invalid confidence in reply: {confidence!r}")

    return CategorizationResult(
        category=category,
        priority=priority,
        confidence=round(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, float(confidence))), 2),
        source=source,
    )
