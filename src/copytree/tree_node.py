"""Node representation for entries in the rendered tree."""

from typing import Any, Optional

from anytree import Node

from copytree.entry import Entry


class TreeNode(Node):  # type: ignore
    """Node class representing a file or directory in the rendered tree.

    Extends anytree.Node with the entry it was built from, so that rendering can
    show directory markers and skip reasons without touching the filesystem.

    Attributes:
        name (str): The basename shown in the tree (the label for a root node).
        is_dir (bool): True if this node represents a directory.
        entry (Optional[Entry]): The entry this node was built from; None for a
            directory root.

    Example:
        >>> root = TreeNode("project", is_dir=True)
        >>> child = TreeNode("main.py", parent=root)
        >>> root.display_name
        'project/'
        >>> child.display_name
        'main.py'
    """

    def __init__(
        self,
        name: str,
        parent: Optional["TreeNode"] = None,
        is_dir: bool = False,
        entry: Optional[Entry] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir
        self.entry = entry

    @property
    def display_name(self) -> str:
        return f"{self.name}/" if self.is_dir else self.name
