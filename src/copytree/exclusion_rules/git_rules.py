"""Implementation of exclusion rules using .gitignore pattern syntax."""

import logging
from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pathspec.patterns import GitWildMatchPattern  # type: ignore

from copytree.types import PathType

from .base_rules import BaseExclusionRules

logger = logging.getLogger(__name__)

# Per-directory files whose patterns are honoured during traversal, in load order
IGNORE_FILE_NAMES = (".gitignore", ".ignore")


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using .gitignore pattern syntax.

    This class uses the pathspec library to compile patterns exactly the way Git
    interprets them, and evaluates them itself so that the last matching pattern
    decides. The rules support all standard .gitignore syntax including:
    - Basic globs (*, ?, [abc], [0-9], etc.)
    - Directory-specific patterns (ending in /)
    - Negation patterns (starting with !)
    - Double-asterisk matching (**)
    - Comment lines (starting with #)

    Multiple rule files can be provided during initialization or added incrementally
    with load_rules(). Individual rules can be added with add_rule().

    Attributes:
        patterns (List[GitWildMatchPattern]): Compiled patterns in evaluation order.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("app.log")
        True
        >>> rules.match("keep.log")
        False

    Note:
        Paths must use forward slashes and be relative to the directory the rules
        belong to. Directories should be passed with a trailing slash.
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize GitIgnoreExclusionRules with patterns from specified files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self.patterns: List[GitWildMatchPattern] = []

        if rules_files is not None:
            self.load_rules(rules_files)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "GitIgnoreExclusionRules":
        """Build a rule set from pattern lines, rejecting malformed patterns.

        Args:
            lines: Pattern lines in .gitignore syntax.

        Returns:
            GitIgnoreExclusionRules: The compiled rule set.

        Raises:
            ValueError: If any line is not a valid pattern.

        Example:
            >>> rules = GitIgnoreExclusionRules.from_lines(["docs/*.md"])
            >>> rules.exclude("docs/guide.md")
            True
            >>> rules.exclude("README.md")
            False
        """
        rules = cls()
        for line in lines:
            rules.add_rule(line)
        return rules

    def match(self, path: str) -> Optional[bool]:
        """Evaluate a path against the loaded patterns, last match wins.

        Args:
            path: Slash-separated path relative to the rules' directory.

        Returns:
            True if the last matching pattern excludes the path, False if it is a
            negated pattern, None if nothing matches.

        Example:
            >>> rules = GitIgnoreExclusionRules.from_lines(["build/"])
            >>> rules.match("build/")
            True
            >>> print(rules.match("build"))
            None
        """
        verdict: Optional[bool] = None
        for pattern in self.patterns:
            if pattern.include is None:
                continue
            if pattern.regex.match(path) is not None:
                verdict = bool(pattern.include)
        return verdict

    def has_rules(self) -> bool:
        return any(pattern.include is not None for pattern in self.patterns)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and combine .gitignore patterns from one or more files.

        Patterns are appended in file order, so later files override earlier ones.
        Lines that are not valid patterns are skipped with a warning, the same way
        Git ignores them.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
            OSError: If a rules file cannot be read.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r", encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()

            for number, line in enumerate(lines, start=1):
                try:
                    self.add_rule(line)
                except ValueError as e:
                    logger.warning("Skipping invalid pattern at %s:%d: %s", path, number, e)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern directly.

        Args:
            rule: A single .gitignore pattern (e.g., "*.pyc", "node_modules/",
                 "!important.txt").

        Raises:
            ValueError: If the pattern is malformed.

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("*.pyc")
            >>> rules.exclude("test.pyc")
            True
            >>> rules.add_rule("!important.pyc")
            >>> rules.exclude("important.pyc")
            False
        """
        self.patterns.append(GitWildMatchPattern(rule))


def load_directory_rules(directory: Path) -> Optional[GitIgnoreExclusionRules]:
    """Load the ignore files found directly inside a directory.

    Args:
        directory: Directory whose ignore files should be read.

    Returns:
        The combined rules, or None if the directory holds no ignore file or none
        of its ignore files contain patterns. Unreadable ignore files are skipped
        with a warning.
    """
    rules = GitIgnoreExclusionRules()
    for name in IGNORE_FILE_NAMES:
        candidate = directory / name
        if not candidate.is_file():
            continue
        try:
            rules.load_rules(candidate)
        except OSError as e:
            logger.warning("Cannot read ignore file %s: %s", candidate, e)
    return rules if rules.has_rules() else None
