from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class EntryKind(str, Enum):
    """Kind of filesystem object an entry represents.

    Attributes:
        DIRECTORY: A directory that may have children in the tree.
        FILE: A regular file whose content may be emitted.
    """

    DIRECTORY = "directory"
    FILE = "file"


class SkipReason(str, Enum):
    """Why a tree-visible entry does not contribute (all of) its content.

    Values:
        BINARY: The leading bytes of the file look binary.
        OVERSIZED: The file exceeds the per-file cap and is emitted partially.
        EXCLUDED: The path matches an exclude pattern.
        NOT_INCLUDED: An include allowlist is active and the path matches none of it.
        UNREADABLE: The file or directory could not be read.
    """

    BINARY = "binary"
    OVERSIZED = "oversized"
    EXCLUDED = "excluded"
    NOT_INCLUDED = "not included"
    UNREADABLE = "unreadable"
