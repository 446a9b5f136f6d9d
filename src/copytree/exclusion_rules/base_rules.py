from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from copytree.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for path exclusion rules.

    Rules answer a three-way question for a path: excluded (True), explicitly
    re-included (False, e.g. by a negated ``!pattern``), or no opinion (None).
    The three-way answer lets rule sets be layered so that a later, more specific
    layer can override an earlier one. ``exclude()`` collapses the answer to a
    plain boolean for callers that only need a yes/no decision.

    File loading and individual rule addition are optional capabilities that
    depend on the rule type.

    Example:
        >>> from copytree.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule('*.pyc')
        >>> rules.exclude('test.pyc')
        True
        >>> print(rules.match('test.py'))
        None
    """

    @abstractmethod
    def match(self, path: str) -> Optional[bool]:
        """
        Evaluate a path against the rules.

        Args:
            path (str): Path relative to the directory the rules are anchored at,
                using forward slashes. Directories carry a trailing slash so that
                directory-only patterns such as ``build/`` apply to them.

        Returns:
            Optional[bool]: True if the last matching rule excludes the path, False
                if it re-includes it, None if no rule matches.
        """
        pass

    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded.

        Args:
            path (str): The path to check, relative and slash-separated.

        Returns:
            bool: True if the path should be excluded, False otherwise.
        """
        return bool(self.match(path))

    def has_rules(self) -> bool:
        """
        Check whether any rules are configured.

        Returns:
            bool: True unless the subclass knows it is empty.
        """
        return True

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations use this default, which
        raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add, e.g. a gitignore pattern like "*.pyc".

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
