"""Exclusion rules for hiding entries and narrowing content eligibility."""

from .base_rules import BaseExclusionRules
from .composite_rules import LayeredExclusionRules, RuleLayer
from .default_rules import DEFAULT_IGNORE_PATTERNS, default_ignore_rules
from .git_rules import IGNORE_FILE_NAMES, GitIgnoreExclusionRules

__all__ = [
    "BaseExclusionRules",
    "DEFAULT_IGNORE_PATTERNS",
    "GitIgnoreExclusionRules",
    "IGNORE_FILE_NAMES",
    "LayeredExclusionRules",
    "RuleLayer",
    "default_ignore_rules",
]
