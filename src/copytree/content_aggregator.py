"""Assembly of file content blocks under per-file and aggregate byte caps.

File contents are processed in a fixed order of steps: read, decode and
normalize line endings, redact, cap, fence. Redaction runs before capping, so
caps count redacted bytes and a pattern that only occurs past the cap is never
matched against the truncated remainder.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from copytree.cli.signal_handler import signal_handler
from copytree.entry import Entry
from copytree.fence_strategies.base_strategy import FenceStrategy
from copytree.fence_strategies.plain_strategy import PlainFenceStrategy
from copytree.filter_spec import RedactionRule
from copytree.types import PathType, SkipReason

logger = logging.getLogger(__name__)

HEADER_TEMPLATE = "--- {path} ---\n"
BLOCK_TERMINATOR = "\n\n"
TRUNCATION_MARKER = "<truncated: {total} bytes total, first {shown} shown>"
UNREADABLE_MARKER = "<unreadable: {error}>"
AGGREGATE_MARKER = "<output truncated: aggregate limit of {limit} bytes reached>\n"


def read_bytes(path: PathType) -> bytes:
    """Read a whole file as bytes.

    The whole file is needed even under a per-file cap: redaction runs first and
    the truncation marker reports the total redacted size.

    Raises:
        OSError: If the file cannot be read.
    """
    return Path(path).read_bytes()


def normalize_newlines(text: str) -> str:
    r"""Convert CRLF and lone CR line endings to LF.

    Example:
        >>> normalize_newlines("a\r\nb\rc\n")
        'a\nb\nc\n'
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def truncate_utf8(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` bytes of UTF-8 without splitting a character.

    Example:
        >>> truncate_utf8("abcdef", 4)
        'abcd'
        >>> truncate_utf8("héllo", 2)
        'h'
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class ContentBlock:
    """One formatted file block.

    Attributes:
        path: Path shown in the block header.
        text: The complete block, header and terminator included.
        truncated: True if the per-file cap cut the content.
        unreadable: True if the file could not be read and a marker stands in.
    """

    path: str
    text: str
    truncated: bool = False
    unreadable: bool = False

    @property
    def size(self) -> int:
        return len(self.text.encode("utf-8"))


@dataclass
class AggregateResult:
    """Outcome of one aggregation run.

    Attributes:
        blocks: Blocks in emission order.
        total_bytes: Combined UTF-8 size of all blocks.
        truncated: True if the aggregate cap stopped processing.
        marker: The aggregate truncation marker, or "" when not truncated.
        skipped_paths: Paths that were not processed because of the aggregate cap.
    """

    blocks: List[ContentBlock] = field(default_factory=list)
    total_bytes: int = 0
    truncated: bool = False
    marker: str = ""
    skipped_paths: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.blocks) + self.marker


class ContentAggregator:
    """Formats and concatenates the content of eligible files.

    The aggregator holds configuration only. Each call to ``aggregate()`` threads
    its own running result through the files, so one instance can serve any
    number of runs.

    Attributes:
        fence (FenceStrategy): Delimiter style around each file's text.
        redaction_rules (Tuple[RedactionRule, ...]): Applied in order to each file.
        max_file_bytes (int): Per-file cap in bytes; 0 disables it.
        max_total_bytes (int): Cap on the combined size of all blocks; 0 disables it.

    Example:
        >>> aggregator = ContentAggregator(max_file_bytes=5)
        >>> print(aggregator.format_block("notes.txt", "hello world").text, end="")
        --- notes.txt ---
        hello
        <truncated: 11 bytes total, first 5 shown>
        <BLANKLINE>
    """

    def __init__(
        self,
        fence: Optional[FenceStrategy] = None,
        redaction_rules: Sequence[RedactionRule] = (),
        max_file_bytes: int = 0,
        max_total_bytes: int = 0,
        reader: Callable[[PathType], bytes] = read_bytes,
    ) -> None:
        """Initialize the aggregator.

        Args:
            fence: Fence strategy. Defaults to no fence.
            redaction_rules: Redaction rules, applied in the order given.
            max_file_bytes: Per-file cap in bytes; 0 disables it.
            max_total_bytes: Aggregate cap in bytes; 0 disables it.
            reader: Primitive returning the raw bytes of a file.

        Raises:
            ValueError: If a cap is negative.
        """
        if max_file_bytes < 0 or max_total_bytes < 0:
            raise ValueError("Byte caps cannot be negative")

        self.fence = fence or PlainFenceStrategy()
        self.redaction_rules = tuple(redaction_rules)
        self.max_file_bytes = max_file_bytes
        self.max_total_bytes = max_total_bytes
        self._reader = reader

    def redact(self, text: str) -> str:
        for rule in self.redaction_rules:
            text = rule.apply(text)
        return text

    def format_block(self, path: str, text: str) -> ContentBlock:
        """Normalize, redact, cap and fence decoded file text into a block.

        Args:
            path: Path shown in the header.
            text: Decoded file text.

        Returns:
            The finished block.
        """
        content = self.redact(normalize_newlines(text))

        marker = ""
        if self.max_file_bytes:
            total = len(content.encode("utf-8"))
            if total > self.max_file_bytes:
                content = truncate_utf8(content, self.max_file_bytes)
                shown = len(content.encode("utf-8"))
                marker = "\n" + TRUNCATION_MARKER.format(total=total, shown=shown)

        body = self.fence.wrap(path, content) + marker
        return ContentBlock(path, HEADER_TEMPLATE.format(path=path) + body + BLOCK_TERMINATOR, truncated=bool(marker))

    def unreadable_block(self, path: str, error: OSError) -> ContentBlock:
        reason = error.strerror or str(error)
        body = UNREADABLE_MARKER.format(error=reason)
        return ContentBlock(path, HEADER_TEMPLATE.format(path=path) + body + BLOCK_TERMINATOR, unreadable=True)

    def build_block(self, path: str, entry: Entry) -> ContentBlock:
        """Read one file and format it, turning a read failure into a marker block."""
        try:
            raw = self._reader(entry.path)
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            return self.unreadable_block(path, e)
        return self.format_block(path, raw.decode("utf-8", errors="replace"))

    def aggregate(self, files: Iterable[Tuple[str, Entry]]) -> AggregateResult:
        """Build the blocks for eligible files, in the order given.

        Entries that are not content-eligible are passed over without a block. Once
        the next block would push the total past the aggregate cap, processing stops
        and a single truncation marker is recorded instead of that block.

        The skip reason of every emitted entry is updated from its block: OVERSIZED
        when the per-file cap cut the redacted text, UNREADABLE when the read failed,
        none otherwise. Size estimates made from the file size are replaced.

        Args:
            files: Pairs of (header path, entry) in canonical order.

        Returns:
            The aggregation result.

        Raises:
            RunInterruptedError: If SIGINT or SIGPIPE arrives between files.
        """
        result = AggregateResult()
        pending = list(files)

        for index, (path, entry) in enumerate(pending):
            if not entry.content_eligible:
                continue

            signal_handler.check_interrupted()
            block = self.build_block(path, entry)
            if self.max_total_bytes and result.total_bytes + block.size > self.max_total_bytes:
                result.truncated = True
                result.marker = AGGREGATE_MARKER.format(limit=self.max_total_bytes)
                result.skipped_paths = [p for p, e in pending[index:] if e.content_eligible]
                logger.warning(
                    "Aggregate limit of %d bytes reached at %s; %d file(s) left out",
                    self.max_total_bytes,
                    path,
                    len(result.skipped_paths),
                )
                break

            result.blocks.append(block)
            entry.skip_reason = self._block_reason(block)
            result.total_bytes += block.size

        return result

    @staticmethod
    def _block_reason(block: ContentBlock) -> Optional[SkipReason]:
        if block.unreadable:
            return SkipReason.UNREADABLE
        if block.truncated:
            return SkipReason.OVERSIZED
        return None
