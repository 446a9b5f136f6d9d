"""Fence strategy base class defining how file content is delimited.

A content block always has the shape ``--- <path> ---\\n<content>\\n\\n``.
Fence strategies decide what goes immediately before and after the file text
inside ``<content>``; they never alter the text itself.
"""

from abc import ABC, abstractmethod


class FenceStrategy(ABC):
    """Abstract base class for content fence styles.

    Example:
        >>> class BracketStrategy(FenceStrategy):
        ...     name = "bracket"
        ...
        ...     def format_start(self, relative_path: str, content: str) -> str:
        ...         return "[\\n"
        ...
        ...     def format_end(self, relative_path: str, content: str) -> str:
        ...         return "\\n]"
        >>> BracketStrategy().wrap("a.txt", "hi")
        '[\\nhi\\n]'
    """

    name: str = ""

    @abstractmethod
    def format_start(self, relative_path: str, content: str) -> str:
        """Format the opening delimiter placed before a file's text.

        Args:
            relative_path: Path shown in the block header.
            content: The full text that will be fenced, so that a strategy can pick
                delimiters that do not occur in it.

        Returns:
            The opening delimiter, including any trailing newline.
        """
        pass

    @abstractmethod
    def format_end(self, relative_path: str, content: str) -> str:
        """Format the closing delimiter placed after a file's text.

        Args:
            relative_path: Path shown in the block header.
            content: The fenced text.

        Returns:
            The closing delimiter, including any leading newline.
        """
        pass

    def wrap(self, relative_path: str, content: str) -> str:
        return self.format_start(relative_path, content) + content + self.format_end(relative_path, content)
