"""Base class for document check rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import LintContext, LintFinding


class LintRule(ABC):
    """Base class for post-parse document rules."""

    def __init__(self, rule_id: str, description: str):
        self.rule_id = rule_id
        self.description = description

    @abstractmethod
    def check(self, context: "LintContext") -> List["LintFinding"]:
        """
        Apply this rule to a successfully parsed document.

        Args:
            context: Parsed document, markup tree and settings

        Returns:
            Every finding this rule produces; rules never stop at the first
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.rule_id!r})"
