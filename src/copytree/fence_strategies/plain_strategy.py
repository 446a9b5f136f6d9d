"""Fence strategy that leaves file content undelimited."""

from .base_strategy import FenceStrategy


class PlainFenceStrategy(FenceStrategy):
    """No delimiters: the block header alone separates files.

    Example:
        >>> PlainFenceStrategy().wrap("a.txt", "hello")
        'hello'
    """

    name = "none"

    def format_start(self, relative_path: str, content: str) -> str:
        return ""

    def format_end(self, relative_path: str, content: str) -> str:
        return ""
