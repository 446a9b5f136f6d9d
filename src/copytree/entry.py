"""Entries discovered under a root and the per-root scan result."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from copytree.types import EntryKind, SkipReason


@dataclass
class Entry:
    """One filesystem object discovered under a root.

    The walker fills in everything except ``content_eligible``, which stays
    ``None`` until the filter engine classifies the entry.

    Attributes:
        relative_path: Path relative to the root, using forward slashes.
        kind: Whether the entry is a directory or a file.
        size: Size in bytes (0 for directories).
        path: Absolute path used for reading.
        tree_visible: False when ignore rules hide the entry.
        content_eligible: Whether the file's text goes into the output body.
        skip_reason: Why the entry contributes no content, or only part of it.

    Example:
        >>> entry = Entry("src/main.py", EntryKind.FILE, 20, Path("/p/src/main.py"))
        >>> entry.name
        'main.py'
        >>> entry.depth
        2
    """

    relative_path: str
    kind: EntryKind
    size: int
    path: Path
    tree_visible: bool = True
    content_eligible: Optional[bool] = None
    skip_reason: Optional[SkipReason] = None

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def parent_path(self) -> str:
        """Relative path of the containing directory ("" for the root)."""
        return self.relative_path.rsplit("/", 1)[0] if "/" in self.relative_path else ""

    @property
    def depth(self) -> int:
        return self.relative_path.count("/") + 1

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE


@dataclass
class RootScan:
    """The walker's result for a single root.

    Attributes:
        argument: The root exactly as supplied by the caller.
        path: The resolved absolute root path.
        label: Name used for the tree's top line and for path prefixes.
        is_dir: False when the root is a single file.
        entries: Entries in canonical depth-first, name-sorted order.
    """

    argument: str
    path: Path
    label: str
    is_dir: bool
    entries: List[Entry] = field(default_factory=list)

    def visible_entries(self) -> List[Entry]:
        return [entry for entry in self.entries if entry.tree_visible]

    def eligible_files(self) -> List[Entry]:
        return [entry for entry in self.entries if entry.is_file and entry.content_eligible]
