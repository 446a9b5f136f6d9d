"""Delivery destinations for the finished document."""

from typing import Optional

from copytree.exceptions import ConfigurationError
from copytree.types import PathType

from .base_sink import OutputSink
from .clipboard_sink import ClipboardSink
from .file_sink import FileSink
from .stdout_sink import StdoutSink


def resolve_sink(clipboard: bool = False, stdout: bool = False, out: Optional[PathType] = None) -> OutputSink:
    """Select the single destination for a run.

    The clipboard is used when no destination is selected.

    Args:
        clipboard: Deliver to the system clipboard.
        stdout: Deliver to standard output.
        out: Deliver to this file, created or overwritten.

    Returns:
        The sink for the selected destination.

    Raises:
        ConfigurationError: If more than one destination is selected.

    Example:
        >>> resolve_sink(stdout=True).name
        'stdout'
        >>> resolve_sink().name
        'clipboard'
    """
    selected = [name for name, chosen in (("clipboard", clipboard), ("stdout", stdout), ("file", out)) if chosen]
    if len(selected) > 1:
        raise ConfigurationError(f"Only one output destination may be selected, got: {', '.join(selected)}")

    if stdout:
        return StdoutSink()
    if out:
        return FileSink(out)
    return ClipboardSink()


__all__ = ["ClipboardSink", "FileSink", "OutputSink", "StdoutSink", "resolve_sink"]
