"""Deterministic text rendering of the visible entries of each root.

Rendering works purely on already-classified entries; it never touches the
filesystem, so the same entries always render to byte-identical text.
"""

from typing import Dict, Iterable

from anytree import RenderTree
from anytree.render import AbstractStyle

from copytree.entry import RootScan
from copytree.tree_node import TreeNode

# Connector glyphs: continuing child, last child, and the vertical rule that
# continues a parent's column. All three have the same width.
TREE_STYLE = AbstractStyle("│  ", "├─ ", "└─ ")


class TreeRenderer:
    """Renders RootScans as tree text.

    Each root becomes one block whose first line is the root label (with a
    trailing "/" for directories). Children keep the walker's order, so the tree
    lists entries in the same order as the content blocks that follow it.

    Attributes:
        annotate (bool): Append skip reasons, e.g. ``  [binary]``, to entry lines.

    Example:
        >>> from pathlib import Path
        >>> from copytree.entry import Entry, RootScan
        >>> from copytree.types import EntryKind
        >>> scan = RootScan(".", Path("/p/project"), "project", is_dir=True)
        >>> scan.entries = [
        ...     Entry("README.md", EntryKind.FILE, 30, Path("/p/project/README.md")),
        ...     Entry("src", EntryKind.DIRECTORY, 0, Path("/p/project/src")),
        ...     Entry("src/main.py", EntryKind.FILE, 20, Path("/p/project/src/main.py")),
        ... ]
        >>> print(TreeRenderer().render(scan), end="")
        project/
        ├─ README.md
        └─ src/
           └─ main.py
    """

    def __init__(self, annotate: bool = False) -> None:
        self.annotate = annotate

    def build_tree(self, scan: RootScan) -> TreeNode:
        """Build the node hierarchy for the visible entries of a scan.

        Args:
            scan: The classified scan of one root.

        Returns:
            The root node. For a file root it carries the file's entry and has no
            children.
        """
        if not scan.is_dir:
            entry = scan.entries[0] if scan.entries else None
            return TreeNode(scan.label, is_dir=False, entry=entry)

        root = TreeNode(scan.label, is_dir=True)
        directories: Dict[str, TreeNode] = {"": root}

        for entry in scan.visible_entries():
            parent = directories.get(entry.parent_path)
            if parent is None:
                # Parent was hidden, so the entry cannot be shown either
                continue
            node = TreeNode(entry.name, parent=parent, is_dir=entry.is_dir, entry=entry)
            if entry.is_dir:
                directories[entry.relative_path] = node

        return root

    def render(self, scan: RootScan) -> str:
        """Render one root as a block of lines, each ending in a newline."""
        lines = []
        for prefix, _fill, node in RenderTree(self.build_tree(scan), style=TREE_STYLE, childiter=list):
            lines.append(f"{prefix}{node.display_name}{self._annotation(node)}")
        return "\n".join(lines) + "\n"

    def render_all(self, scans: Iterable[RootScan]) -> str:
        """Render several roots as consecutive blocks, in the given order."""
        return "".join(self.render(scan) for scan in scans)

    def _annotation(self, node: TreeNode) -> str:
        if not self.annotate or node.entry is None or node.entry.skip_reason is None:
            return ""
        return f"  [{node.entry.skip_reason.value}]"
