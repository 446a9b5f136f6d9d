"""Snapshot of directory trees as a single text document.

This module wires the walker, filter engine, tree renderer and content
aggregator into one run and produces the finished document for delivery.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from copytree.binary_detector import read_sample
from copytree.cli.signal_handler import signal_handler
from copytree.content_aggregator import ContentAggregator, ContentBlock, read_bytes
from copytree.entry import Entry, RootScan
from copytree.fence_strategies import FenceStrategy, create_fence_strategy
from copytree.filter_engine import FilterEngine
from copytree.filter_spec import FilterSpec, RedactionRule
from copytree.output_sinks.base_sink import OutputSink
from copytree.token_counter import TokenCounter
from copytree.tree_renderer import TreeRenderer
from copytree.types import PathType, SkipReason
from copytree.walker import Walker

logger = logging.getLogger(__name__)


@dataclass
class OutputDocument:
    """The finished snapshot of one run.

    Attributes:
        tree_text: Rendered tree of every root, one block per root.
        blocks: Content blocks in canonical order.
        truncated: True if the aggregate cap cut the content short.
        marker: The aggregate truncation marker, or "".
    """

    tree_text: str
    blocks: List[ContentBlock] = field(default_factory=list)
    truncated: bool = False
    marker: str = ""

    def render(self) -> str:
        """Join tree, a blank line and content blocks into the single payload.

        Example:
            >>> OutputDocument("docs/\\n└─ a.txt\\n").render()
            'docs/\\n└─ a.txt\\n\\n'
        """
        return self.tree_text + "\n" + "".join(block.text for block in self.blocks) + self.marker


class CopyTree:
    """One snapshot run over a set of roots.

    The run is built once with ``build()``; its counts describe what that build
    found. Nothing is written anywhere until ``run()`` hands the document to a sink,
    and a fatal error during ``build()`` means nothing is delivered.

    Attributes:
        roots (Tuple[PathType, ...]): Root paths in the order supplied.
        filter_spec (FilterSpec): Visibility and eligibility policy.
        document (Optional[OutputDocument]): Result of the last build, if any.

    Example:
        >>> snapshot = CopyTree(["src"], FilterSpec(max_file_bytes=0))  # doctest: +SKIP
        >>> print(snapshot.build().render())  # doctest: +SKIP
        src/
        └─ main.py
        <BLANKLINE>
        --- main.py ---
        print("hi")
        <BLANKLINE>

    Raises:
        RootNotFoundError: If none of the roots can be read (raised by ``build()``).
        ValueError: If the fence style is unknown.
        TokenizerNotAvailableError: If a tokenizer model is given without tiktoken.
    """

    def __init__(
        self,
        roots: Sequence[PathType],
        filter_spec: Optional[FilterSpec] = None,
        *,
        redaction_rules: Sequence[RedactionRule] = (),
        fence: Union[str, FenceStrategy] = "none",
        annotate: bool = False,
        tokenizer_model: Optional[str] = None,
        reader: Callable[[PathType], bytes] = read_bytes,
        sample_reader: Callable[[PathType, int], bytes] = read_sample,
    ):
        """Configure a run.

        Args:
            roots: Directories or files to snapshot, in output order.
            filter_spec: Filter policy. Defaults to ``FilterSpec()``.
            redaction_rules: Applied in order to every file's text.
            fence: Fence style name ("none", "markdown", "xml") or a strategy instance.
            annotate: Show skip reasons on tree lines.
            tokenizer_model: tiktoken model used for the token count; None disables it.
            reader: Primitive returning the bytes of a file.
            sample_reader: Primitive returning the leading bytes of a file.
        """
        self.roots = tuple(roots)
        self.filter_spec = filter_spec or FilterSpec()
        if isinstance(fence, str):
            fence = create_fence_strategy(fence)

        self._walker = Walker(self.filter_spec)
        self._engine = FilterEngine(self.filter_spec, sample_reader=sample_reader)
        self._renderer = TreeRenderer(annotate=annotate)
        self._aggregator = ContentAggregator(
            fence=fence,
            redaction_rules=redaction_rules,
            max_file_bytes=self.filter_spec.max_file_bytes,
            max_total_bytes=self.filter_spec.max_total_bytes,
            reader=reader,
        )
        self._counter = TokenCounter(model=tokenizer_model)

        self.scans: List[RootScan] = []
        self.document: Optional[OutputDocument] = None
        self._skipped_by_aggregate = 0

    def build(self) -> OutputDocument:
        """Walk, classify, render and aggregate.

        Returns:
            The finished document.

        Raises:
            RootNotFoundError: If no root can be read.
            RunInterruptedError: If SIGINT or SIGPIPE arrives while building.
        """
        self.scans = self._walker.walk(self.roots)
        self._engine.apply(self.scans)

        # Aggregation settles the final skip reasons, so the tree is rendered after it
        result = self._aggregator.aggregate(self.content_files(self.scans))
        tree_text = self._renderer.render_all(self.scans)
        self._skipped_by_aggregate = len(result.skipped_paths)

        self.document = OutputDocument(tree_text, result.blocks, result.truncated, result.marker)
        self._counter.reset_counts()
        self._counter.count(self.document.render())
        logger.info(
            "Built snapshot of %d root(s): %d content block(s)%s",
            len(self.scans),
            len(result.blocks),
            ", truncated" if result.truncated else "",
        )
        return self.document

    def run(self, sink: OutputSink) -> OutputDocument:
        """Build the document and deliver it, all or nothing.

        Raises:
            RootNotFoundError: If no root can be read.
            RunInterruptedError: If SIGINT or SIGPIPE arrived before delivery.
            DeliveryError: If the sink fails.
        """
        document = self.build()
        signal_handler.check_interrupted()
        sink.deliver(document.render())
        return document

    @staticmethod
    def content_files(scans: Sequence[RootScan]) -> List[Tuple[str, Entry]]:
        """Pair each file entry with its header path, in tree order.

        Header paths are relative to their root. With more than one root they are
        prefixed with the root label so blocks from different roots stay apart.
        """
        prefixed = len(scans) > 1
        files: List[Tuple[str, Entry]] = []
        for scan in scans:
            for entry in scan.entries:
                if not entry.is_file:
                    continue
                path = entry.relative_path
                if prefixed and scan.is_dir:
                    path = f"{scan.label}/{path}"
                files.append((path, entry))
        return files

    @property
    def counts(self) -> Dict[str, Optional[int]]:
        """Figures of the last build for the summary report."""
        visible = [entry for scan in self.scans for entry in scan.visible_entries()]
        reasons = Counter(entry.skip_reason for entry in visible if entry.skip_reason is not None)
        blocks = self.document.blocks if self.document is not None else []

        return {
            "roots": len(self.scans),
            "directories": sum(1 for entry in visible if entry.is_dir),
            "files": sum(1 for entry in visible if entry.is_file),
            "included": len(blocks),
            "binary": reasons[SkipReason.BINARY],
            "excluded": reasons[SkipReason.EXCLUDED] + reasons[SkipReason.NOT_INCLUDED],
            "capped": sum(1 for block in blocks if block.truncated),
            "unreadable": reasons[SkipReason.UNREADABLE],
            "omitted": self._skipped_by_aggregate,
            "bytes": len(self.document.render().encode("utf-8")) if self.document is not None else 0,
            "lines": self._counter.total_lines,
            "characters": self._counter.total_characters,
            "tokens": self._counter.total_tokens,
        }
