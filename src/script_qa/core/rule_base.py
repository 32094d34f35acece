"""Rule base class and RuleRegistry singleton."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Rule(ABC):
    """Abstract base for all sanitization rules.

    A rule pairs a detector with a transformer for one category of defect.
    Options are read once from ``config`` at construction time; after that an
    instance holds no state and may be shared across files.
    """

    #: Stable unique identifier, e.g. "script.non_ascii_spaces"
    rule_id: str

    #: Short name shown in "Auto-fixing: <name>"
    name: str = ""

    #: Bullet text shown when the category is detected
    detected_message: str = ""

    #: Position in the evaluation sequence (lower runs first)
    order: int = 0

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = dict(config or {})

    @abstractmethod
    def detect(self, text: str) -> bool:
        """Return True iff ``text`` contains at least one defect of this category."""

    @abstractmethod
    def fix(self, text: str) -> str:
        """Return ``text`` with every defect of this category normalized.

        Must leave unrelated content alone and must be a no-op on clean text.
        """

    def locate(self, text: str) -> list[int]:
        """Return 1-based line numbers of the defects, when the rule can tell."""
        return []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id!r}>"


class RuleRegistry:
    """Singleton registry mapping rule_id -> Rule class, kept in evaluation order."""

    _instance: "RuleRegistry | None" = None
    _rules: dict[str, type[Rule]]

    def __new__(cls) -> "RuleRegistry":
        if cls._instance is None:
            inst = super().__new__(cls)
            inst._rules = {}
            cls._instance = inst
        return cls._instance

    def register(self, cls: type[Rule]) -> type[Rule]:
        """Register a Rule class. Can be used as a decorator."""
        self._rules[cls.rule_id] = cls
        return cls

    def get(self, rule_id: str) -> type[Rule] | None:
        return self._rules.get(rule_id)

    def all_ids(self) -> list[str]:
        return [r.rule_id for r in self.all_rules()]

    def all_rules(self) -> list[type[Rule]]:
        return sorted(self._rules.values(), key=lambda r: (r.order, r.rule_id))


# Module-level convenience instance
registry = RuleRegistry()
