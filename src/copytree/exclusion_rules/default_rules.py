"""Built-in ignore patterns that apply even when ignore files are disabled."""

from .git_rules import GitIgnoreExclusionRules

DEFAULT_IGNORE_PATTERNS = (
    # Version control metadata
    ".git/",
    ".hg/",
    ".svn/",
    ".bzr/",
    # Caches and tool state
    "__pycache__/",
    ".mypy_cache/",
    ".pytest_cache/",
    ".ruff_cache/",
    ".tox/",
    ".cache/",
    "node_modules/",
    # Lock files
    "*.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    # Images
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.bmp",
    "*.ico",
    "*.webp",
    "*.tiff",
    # OS clutter
    ".DS_Store",
    "Thumbs.db",
)


def default_ignore_rules() -> GitIgnoreExclusionRules:
    """Create a fresh rule set holding the built-in ignore patterns.

    Example:
        >>> rules = default_ignore_rules()
        >>> rules.exclude(".git/")
        True
        >>> rules.exclude("src/logo.png")
        True
        >>> rules.exclude("src/main.py")
        False
    """
    return GitIgnoreExclusionRules.from_lines(DEFAULT_IGNORE_PATTERNS)
