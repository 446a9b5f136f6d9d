"""XML-style tag fence strategy."""

from xml.sax.saxutils import quoteattr

from .base_strategy import FenceStrategy


class XMLFenceStrategy(FenceStrategy):
    """Wraps content in ``<file path="...">`` / ``</file>`` tags.

    Only the path attribute is escaped. The content is emitted verbatim, since the
    tags are delimiters for a reader rather than a promise of well-formed XML.

    Example:
        >>> strategy = XMLFenceStrategy()
        >>> strategy.wrap("src/main.py", "if a < b: pass")
        '<file path="src/main.py">\\nif a < b: pass\\n</file>'
        >>> strategy.format_start("a & b.txt", "")
        '<file path="a &amp; b.txt">\\n'
    """

    name = "xml"

    def format_start(self, relative_path: str, content: str) -> str:
        return f"<file path={quoteattr(relative_path)}>\n"

    def format_end(self, relative_path: str, content: str) -> str:
        return "\n</file>"
