"""Directory snapshot utilities.

This package renders one or more directory trees together with the contents
of the files they hold into a single text document suitable for pasting into
Large Language Model (LLM) prompts and other size-limited text inputs.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("copytree")
except PackageNotFoundError:
    __version__ = "unknown"
