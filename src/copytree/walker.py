"""Filesystem traversal with ignore-rule visibility.

The walker enumerates every entry under the supplied roots in a canonical
order (depth-first, children sorted by name) and decides tree visibility from
ignore rules alone. Content eligibility is left to the filter engine.
"""

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from copytree.cli.signal_handler import signal_handler
from copytree.entry import Entry, RootScan
from copytree.exceptions import RootNotFoundError
from copytree.exclusion_rules.composite_rules import LayeredExclusionRules, RuleLayer
from copytree.exclusion_rules.default_rules import default_ignore_rules
from copytree.exclusion_rules.git_rules import load_directory_rules
from copytree.filter_spec import FilterSpec
from copytree.types import EntryKind, PathType, SkipReason

logger = logging.getLogger(__name__)

# (st_dev, st_ino) of a directory, used to detect symlink loops
DirectoryIdentity = Tuple[int, int]


def display_name(name: str) -> str:
    """Make a filesystem name safe to show and encode as UTF-8.

    Names that are not valid in the filesystem encoding come back from
    ``os.listdir`` with surrogate escapes; those bytes are shown as U+FFFD. The
    entry keeps its real path for reading.

    Example:
        >>> display_name("main.py")
        'main.py'
        >>> display_name("bad\\udcff.txt") == "bad\\ufffd.txt"
        True
    """
    return os.fsencode(name).decode("utf-8", errors="replace")


def root_label(path: Path) -> str:
    """Name shown for a root: its own name, or the full path for a filesystem root.

    Example:
        >>> root_label(Path("/home/user/project"))
        'project'
        >>> root_label(Path("/"))
        '/'
    """
    return display_name(path.name or str(path))


class Walker:
    """Enumerates entries under one or more roots.

    Visibility is resolved from three groups of gitignore-style rules, lowest
    precedence first:

    1. Built-in default ignores (VCS metadata, caches, lock files, images). These
       apply even when ignore files are disabled.
    2. When ``FilterSpec.use_ignore_files`` is set: the ``.gitignore``/``.ignore``
       files of the root's ancestors up to the enclosing repository top, then those
       of the root and of every directory on the way down to the entry.
    3. ``FilterSpec.ignore_patterns`` given by the user, evaluated last.

    The last matching rule wins, so negated patterns can re-include anything an
    earlier rule excluded. Ignored directories are recorded as invisible entries
    and not descended into.

    Symbolic links are skipped unless ``FilterSpec.follow_symlinks`` is set, in
    which case directories already on the current path are not entered again.
    Unreadable directories are logged and kept in the tree without children.

    Attributes:
        filter_spec (FilterSpec): Run configuration.

    Example:
        >>> walker = Walker(FilterSpec())  # doctest: +SKIP
        >>> [scan.label for scan in walker.walk(["src", "README.md"])]  # doctest: +SKIP
        ['src', 'README.md']
    """

    def __init__(self, filter_spec: FilterSpec) -> None:
        self.filter_spec = filter_spec

    def walk(self, roots: Sequence[PathType]) -> List[RootScan]:
        """Scan every root in the order supplied.

        Roots that are missing or unreadable are skipped with a warning, as are
        repeated roots that resolve to the same path. Roots sharing a name are
        labelled with as many trailing path components as it takes to tell them
        apart.

        Args:
            roots: Root paths to scan.

        Returns:
            One RootScan per readable root, in the order supplied.

        Raises:
            RootNotFoundError: If no root could be scanned.
            RunInterruptedError: If SIGINT or SIGPIPE arrives during traversal.
        """
        scans: List[RootScan] = []
        seen: Set[Path] = set()

        for root in roots:
            path = Path(root)
            try:
                resolved = path.resolve(strict=True)
            except (OSError, RuntimeError) as e:
                logger.warning("Skipping root %s: %s", root, e)
                continue

            if resolved in seen:
                logger.warning("Skipping duplicate root %s", root)
                continue

            try:
                scans.append(self.scan_root(root))
            except OSError as e:
                logger.warning("Skipping unreadable root %s: %s", root, e)
                continue
            seen.add(resolved)

        if not scans:
            raise RootNotFoundError(list(roots))
        self._disambiguate_labels(scans)
        return scans

    @staticmethod
    def _disambiguate_labels(scans: List[RootScan]) -> None:
        groups: Dict[str, List[RootScan]] = defaultdict(list)
        for scan in scans:
            groups[scan.label].append(scan)

        for group in groups.values():
            if len(group) < 2:
                continue
            # Resolved paths are distinct, so the full paths always differ
            longest = max(len(scan.path.parts) for scan in group)
            for depth in range(2, longest + 1):
                labels = [display_name(Path(*scan.path.parts[-depth:]).as_posix()) for scan in group]
                if len(set(labels)) == len(labels):
                    break
            for scan, label in zip(group, labels):
                logger.debug("Labelling root %s as %s", scan.argument, label)
                scan.label = label
                if not scan.is_dir:
                    scan.entries[0].relative_path = label

    def scan_root(self, root: PathType) -> RootScan:
        """Scan a single root.

        Args:
            root: A directory or file path.

        Returns:
            The scan result with tree visibility resolved for every entry.

        Raises:
            FileNotFoundError: If the root does not exist.
            OSError: If the root directory cannot be listed.
        """
        path = Path(root).resolve(strict=True)
        label = root_label(path)

        if not path.is_dir():
            size = path.stat().st_size
            scan = RootScan(str(root), path, label, is_dir=False)
            scan.entries.append(Entry(label, EntryKind.FILE, size, path))
            return scan

        scan = RootScan(str(root), path, label, is_dir=True)
        visited: Set[DirectoryIdentity] = set()
        identity = self._identity(path)
        if identity is not None:
            visited.add(identity)

        self._walk_directory(path, "", self._root_rules(path), visited, scan.entries)
        logger.debug("Scanned %s: %d entries", root, len(scan.entries))
        return scan

    def _root_rules(self, root: Path) -> LayeredExclusionRules:
        layers = [RuleLayer(default_ignore_rules())]

        if self.filter_spec.use_ignore_files:
            for ancestor in self._repository_ancestors(root):
                rules = load_directory_rules(ancestor)
                if rules is not None:
                    prefix = root.relative_to(ancestor).as_posix() + "/"
                    layers.append(RuleLayer(rules, prefix=prefix))

        pinned = []
        if self.filter_spec.ignore_rules.has_rules():
            pinned.append(RuleLayer(self.filter_spec.ignore_rules))

        return LayeredExclusionRules(layers, pinned)

    @staticmethod
    def _repository_ancestors(root: Path) -> List[Path]:
        """Ancestors of root whose ignore files apply to it, outermost first.

        Ignore files above the root are only honoured inside a repository: the
        nearest ancestor holding ``.git`` and everything between it and the root.
        """
        if (root / ".git").exists():
            return []
        chain: List[Path] = []
        for ancestor in root.parents:
            chain.append(ancestor)
            if (ancestor / ".git").exists():
                return list(reversed(chain))
        return []

    @staticmethod
    def _identity(path: Path) -> Optional[DirectoryIdentity]:
        try:
            stat_info = path.stat()
        except OSError:
            return None
        return (stat_info.st_dev, stat_info.st_ino)

    def _walk_directory(
        self,
        directory: Path,
        relative_path: str,
        rules: LayeredExclusionRules,
        visited: Set[DirectoryIdentity],
        entries: List[Entry],
    ) -> None:
        """Recursively append the entries below a directory.

        Raises:
            OSError: If the directory itself cannot be listed.
        """
        names = sorted(os.listdir(directory))

        if self.filter_spec.use_ignore_files:
            local_rules = load_directory_rules(directory)
            if local_rules is not None:
                rules = rules.with_layer(RuleLayer(local_rules, anchor=relative_path))

        for name in names:
            child_path = directory / name
            signal_handler.check_interrupted()
            shown = display_name(name)
            child_relative = f"{relative_path}/{shown}" if relative_path else shown

            entry = self._create_entry(child_path, child_relative)
            if entry is None:
                continue

            match_path = child_relative + "/" if entry.is_dir else child_relative
            if rules.exclude(match_path):
                entry.tree_visible = False
                entries.append(entry)
                logger.debug("Ignoring %s", child_relative)
                continue

            if not entry.is_dir:
                entries.append(entry)
                continue

            identity = self._identity(child_path)
            if identity is not None and identity in visited:
                logger.warning("Not following %s: symlink loop detected", child_relative)
                continue

            entries.append(entry)
            if identity is not None:
                visited.add(identity)
            try:
                self._walk_directory(child_path, child_relative, rules, visited, entries)
            except OSError as e:
                logger.warning("Cannot read directory %s: %s", child_relative, e)
                entry.skip_reason = SkipReason.UNREADABLE
            finally:
                # Only ancestors count as loops; the same directory may be reached again elsewhere
                if identity is not None:
                    visited.discard(identity)

    def _create_entry(self, path: Path, relative_path: str) -> Optional[Entry]:
        """Create an entry for a directory child, or None if it should be skipped."""
        try:
            if path.is_symlink():
                if not self.filter_spec.follow_symlinks:
                    logger.debug("Skipping symlink %s", relative_path)
                    return None
                stat_info = path.stat()
            else:
                stat_info = path.lstat()
        except OSError as e:
            logger.warning("Skipping %s: %s", relative_path, e)
            return None

        if path.is_dir():
            return Entry(relative_path, EntryKind.DIRECTORY, 0, path)
        if path.is_file():
            return Entry(relative_path, EntryKind.FILE, stat_info.st_size, path)

        logger.debug("Skipping special file %s", relative_path)
        return None
