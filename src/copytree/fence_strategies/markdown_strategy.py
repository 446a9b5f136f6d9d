"""Markdown code-fence strategy."""

import re

from .base_strategy import FenceStrategy

_BACKTICK_RUN = re.compile(r"`{3,}")


class MarkdownFenceStrategy(FenceStrategy):
    """Wraps content in a Markdown backtick fence.

    The fence is made one backtick longer than the longest run of three or more
    backticks inside the content, so fenced Markdown files cannot close it early.

    Example:
        >>> strategy = MarkdownFenceStrategy()
        >>> strategy.wrap("a.py", "x = 1")
        '```\\nx = 1\\n```'
        >>> strategy.format_start("README.md", "```sh\\nls\\n```")
        '````\\n'
    """

    name = "markdown"

    def _fence(self, content: str) -> str:
        longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=2)
        return "`" * (longest + 1)

    def format_start(self, relative_path: str, content: str) -> str:
        return self._fence(content) + "\n"

    def format_end(self, relative_path: str, content: str) -> str:
        return "\n" + self._fence(content)
