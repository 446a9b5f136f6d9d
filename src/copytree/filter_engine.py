"""Content-eligibility classification.

Every tree-visible file is run through an explicit, ordered decision list.
The first rule that returns a verdict decides; a file that passes every rule
is eligible. Visibility is never changed here.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from copytree.binary_detector import SAMPLE_SIZE, is_binary_sample, read_sample
from copytree.entry import Entry, RootScan
from copytree.filter_spec import FilterSpec
from copytree.types import PathType, SkipReason

logger = logging.getLogger(__name__)

# (eligible, reason); None means "no opinion, ask the next rule"
Verdict = Optional[Tuple[bool, Optional[SkipReason]]]


class FilterEngine:
    """Resolves ``content_eligible`` and ``skip_reason`` for entries.

    Rules, in order:

    1. Include allowlist configured and no pattern matches: ineligible, NOT_INCLUDED.
    2. Any exclude pattern matches: ineligible, EXCLUDED. Exclusion therefore wins
       over an include match.
    3. Binary skipping active and the leading bytes look binary: ineligible,
       BINARY. A file whose sample cannot be read is ineligible, UNREADABLE.
    4. Size above a non-zero per-file cap: eligible but capped, OVERSIZED. This is
       an estimate from the size on disk; the content aggregator settles it from the
       redacted text it actually caps.

    Directories and invisible entries are never eligible.

    Attributes:
        filter_spec (FilterSpec): Run configuration.

    Example:
        >>> from pathlib import Path
        >>> from copytree.types import EntryKind
        >>> engine = FilterEngine(FilterSpec(exclude_patterns=["*.md"], skip_binary=False))
        >>> entry = Entry("docs/guide.md", EntryKind.FILE, 10, Path("docs/guide.md"))
        >>> engine.classify(entry)
        (False, <SkipReason.EXCLUDED: 'excluded'>)
        >>> entry.tree_visible
        True
    """

    def __init__(
        self,
        filter_spec: FilterSpec,
        sample_reader: Callable[[PathType, int], bytes] = read_sample,
    ) -> None:
        """Initialize the engine.

        Args:
            filter_spec: Run configuration.
            sample_reader: Primitive returning the leading bytes of a file; used for
                binary detection.
        """
        self.filter_spec = filter_spec
        self._sample_reader = sample_reader
        self._rules: List[Callable[[Entry], Verdict]] = [
            self._check_include,
            self._check_exclude,
            self._check_binary,
            self._check_size,
        ]

    def classify(self, entry: Entry) -> Tuple[bool, Optional[SkipReason]]:
        """Classify one entry and record the result on it.

        Returns:
            The (content_eligible, skip_reason) pair stored on the entry.
        """
        eligible: bool = False
        reason: Optional[SkipReason] = None

        if entry.tree_visible and entry.is_file:
            eligible = True
            for rule in self._rules:
                verdict = rule(entry)
                if verdict is not None:
                    eligible, reason = verdict
                    break
        elif entry.skip_reason is not None:
            # Keep what the walker found, e.g. an unreadable directory
            reason = entry.skip_reason

        entry.content_eligible = eligible
        entry.skip_reason = reason
        return eligible, reason

    def classify_all(self, entries: Iterable[Entry]) -> None:
        for entry in entries:
            self.classify(entry)

    def apply(self, scans: Iterable[RootScan]) -> None:
        """Classify every entry of every scan in place."""
        for scan in scans:
            self.classify_all(scan.entries)
            logger.debug(
                "%s: %d of %d files eligible",
                scan.label,
                len(scan.eligible_files()),
                sum(1 for entry in scan.entries if entry.is_file),
            )

    def _check_include(self, entry: Entry) -> Verdict:
        if not self.filter_spec.is_included(entry.relative_path):
            return False, SkipReason.NOT_INCLUDED
        return None

    def _check_exclude(self, entry: Entry) -> Verdict:
        if self.filter_spec.is_excluded(entry.relative_path):
            return False, SkipReason.EXCLUDED
        return None

    def _check_binary(self, entry: Entry) -> Verdict:
        if not self.filter_spec.skip_binary:
            return None
        try:
            sample = self._sample_reader(entry.path, SAMPLE_SIZE)
        except OSError as e:
            logger.warning("Cannot read %s: %s", entry.relative_path, e)
            return False, SkipReason.UNREADABLE
        if is_binary_sample(sample):
            logger.info("Skipping binary file %s", entry.relative_path)
            return False, SkipReason.BINARY
        return None

    def _check_size(self, entry: Entry) -> Verdict:
        cap = self.filter_spec.max_file_bytes
        if cap and entry.size > cap:
            logger.info("Capping %s (%d bytes) at %d bytes", entry.relative_path, entry.size, cap)
            return True, SkipReason.OVERSIZED
        return None
