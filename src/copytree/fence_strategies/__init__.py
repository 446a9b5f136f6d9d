"""Fence styles wrapping the content of each file block."""

from typing import Dict, Type

from .base_strategy import FenceStrategy
from .markdown_strategy import MarkdownFenceStrategy
from .plain_strategy import PlainFenceStrategy
from .xml_strategy import XMLFenceStrategy

FENCE_STRATEGIES: Dict[str, Type[FenceStrategy]] = {
    "none": PlainFenceStrategy,
    "markdown": MarkdownFenceStrategy,
    "xml": XMLFenceStrategy,
}


def create_fence_strategy(style: str) -> FenceStrategy:
    """Create the fence strategy registered under a style name.

    Raises:
        ValueError: If the style is unknown.

    Example:
        >>> create_fence_strategy("markdown").name
        'markdown'
    """
    try:
        return FENCE_STRATEGIES[style.lower()]()
    except KeyError:
        raise ValueError(f"Unsupported fence style: {style}. Must be one of: {', '.join(FENCE_STRATEGIES)}")


__all__ = [
    "FENCE_STRATEGIES",
    "FenceStrategy",
    "MarkdownFenceStrategy",
    "PlainFenceStrategy",
    "XMLFenceStrategy",
    "create_fence_strategy",
]
