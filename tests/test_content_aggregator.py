from pathlib import Path
from unittest.mock import Mock

import pytest

from copytree.content_aggregator import (
    AGGREGATE_MARKER,
    ContentAggregator,
    normalize_newlines,
    truncate_utf8,
)
from copytree.entry import Entry
from copytree.exceptions import RunInterruptedError
from copytree.fence_strategies import MarkdownFenceStrategy, XMLFenceStrategy
from copytree.filter_spec import RedactionRule
from copytree.types import EntryKind, SkipReason


def eligible(relative_path, eligible=True):
    entry = Entry(relative_path, EntryKind.FILE, 0, Path("/p") / relative_path)
    entry.content_eligible = eligible
    return entry


def reader_for(contents):
    """A read primitive serving bytes from a {relative path: bytes} mapping."""

    def read(path):
        relative = Path(path).relative_to("/p").as_posix()
        value = contents[relative]
        if isinstance(value, Exception):
            raise value
        return value

    return read


def files(*paths):
    return [(path, eligible(path)) for path in paths]


def test_block_format():
    block = ContentAggregator().format_block("src/main.py", "print('hi')\n")
    assert block.text == "--- src/main.py ---\nprint('hi')\n\n\n"
    assert block.size == len(block.text)
    assert not block.truncated


def test_newlines_are_normalized():
    assert normalize_newlines("a\r\nb\rc") == "a\nb\nc"
    assert ContentAggregator().format_block("a.txt", "x\r\ny").text == "--- a.txt ---\nx\ny\n\n"


def test_per_file_cap_is_exact():
    block = ContentAggregator(max_file_bytes=10).format_block("a.txt", "0123456789abcdef")
    assert block.truncated
    assert block.text == "--- a.txt ---\n0123456789\n<truncated: 16 bytes total, first 10 shown>\n\n"


def test_content_at_cap_is_untouched():
    block = ContentAggregator(max_file_bytes=4).format_block("a.txt", "abcd")
    assert block.text == "--- a.txt ---\nabcd\n\n"


def test_cap_never_splits_characters():
    assert truncate_utf8("aé", 2) == "a"
    block = ContentAggregator(max_file_bytes=2).format_block("a.txt", "aéb")
    assert "<truncated: 4 bytes total, first 1 shown>" in block.text


def test_redaction_in_order_before_cap():
    rules = [RedactionRule.from_pattern("secret", "s3cr3t"), RedactionRule.from_pattern(r"\d", "#")]
    aggregator = ContentAggregator(redaction_rules=rules)
    assert aggregator.redact("my secret is 42") == "my s#cr#t is ##"


def test_redaction_cannot_leak_through_cap():
    # The key straddles the cap: redacting first leaves no partial key behind
    rule = RedactionRule.from_pattern(r"sk-[a-z0-9]+", "[KEY]")
    block = ContentAggregator(redaction_rules=[rule], max_file_bytes=8).format_block("a.env", "k=sk-abcdef123456")
    assert "sk-" not in block.text
    assert "k=[KEY]" in block.text
    assert "<truncated: 7 bytes total" not in block.text


def test_fence_wraps_capped_content():
    block = ContentAggregator(fence=MarkdownFenceStrategy(), max_file_bytes=3).format_block("a.py", "abcdef")
    assert block.text == "--- a.py ---\n```\nabc\n```\n<truncated: 6 bytes total, first 3 shown>\n\n"


def test_xml_fence():
    block = ContentAggregator(fence=XMLFenceStrategy()).format_block("a.txt", "hi")
    assert block.text == '--- a.txt ---\n<file path="a.txt">\nhi\n</file>\n\n'


def test_aggregate_in_order_and_skips_ineligible():
    aggregator = ContentAggregator(reader=reader_for({"a.txt": b"A", "c.txt": b"C"}))
    items = files("a.txt") + [("b.txt", eligible("b.txt", eligible=False))] + files("c.txt")

    result = aggregator.aggregate(items)

    assert [block.path for block in result.blocks] == ["a.txt", "c.txt"]
    assert result.text == "--- a.txt ---\nA\n\n--- c.txt ---\nC\n\n"
    assert result.total_bytes == len(result.text)
    assert not result.truncated


def test_invalid_utf8_is_replaced():
    aggregator = ContentAggregator(reader=reader_for({"a.txt": b"ok \xff end"}))
    (block,) = aggregator.aggregate(files("a.txt")).blocks
    assert "ok \ufffd end" in block.text


def test_unreadable_file_becomes_marker(caplog):
    reader = reader_for({"a.txt": PermissionError(13, "Permission denied"), "b.txt": b"B"})
    result = ContentAggregator(reader=reader).aggregate(files("a.txt", "b.txt"))

    assert result.blocks[0].text == "--- a.txt ---\n<unreadable: Permission denied>\n\n"
    assert result.blocks[0].unreadable
    assert result.blocks[1].text == "--- b.txt ---\nB\n\n"
    assert "Cannot read a.txt" in caplog.text


def test_aggregate_cap_stops_new_blocks(caplog):
    # Each block is "--- x.txt ---\n" (14) + "0123456789" (10) + "\n\n" (2) = 26 bytes
    contents = {name: b"0123456789" for name in ("a.txt", "b.txt", "c.txt")}
    aggregator = ContentAggregator(max_total_bytes=60, reader=reader_for(contents))

    result = aggregator.aggregate(files("a.txt", "b.txt", "c.txt"))

    assert [block.path for block in result.blocks] == ["a.txt", "b.txt"]
    assert result.total_bytes == 52
    assert result.truncated
    assert result.marker == AGGREGATE_MARKER.format(limit=60)
    assert result.text.endswith("<output truncated: aggregate limit of 60 bytes reached>\n")
    assert result.skipped_paths == ["c.txt"]
    assert "Aggregate limit" in caplog.text


def test_aggregate_cap_exactly_reached_is_not_truncated():
    contents = {"a.txt": b"0123456789"}
    result = ContentAggregator(max_total_bytes=26, reader=reader_for(contents)).aggregate(files("a.txt"))
    assert not result.truncated
    assert result.total_bytes == 26


def test_aggregate_stops_reading_after_cap():
    read = Mock(return_value=b"0123456789")
    ContentAggregator(max_total_bytes=30, reader=read).aggregate(files("a.txt", "b.txt", "c.txt"))
    # The second read produces the block that no longer fits; nothing after it is read
    assert read.call_count == 2


@pytest.mark.parametrize("cap", [1, 20, 40, 60, 80, 200])
def test_aggregate_cap_is_monotonic(cap):
    contents = {name: b"x" * 10 for name in ("a.txt", "b.txt", "c.txt", "d.txt")}
    items = files("a.txt", "b.txt", "c.txt", "d.txt")
    smaller = ContentAggregator(max_total_bytes=cap, reader=reader_for(contents)).aggregate(items)
    larger = ContentAggregator(max_total_bytes=cap + 30, reader=reader_for(contents)).aggregate(items)

    smaller_paths = [block.path for block in smaller.blocks]
    larger_paths = [block.path for block in larger.blocks]
    assert len(larger_paths) >= len(smaller_paths)
    assert larger_paths[: len(smaller_paths)] == smaller_paths


def test_aggregator_is_reusable():
    aggregator = ContentAggregator(reader=reader_for({"a.txt": b"A"}))
    first = aggregator.aggregate(files("a.txt"))
    second = aggregator.aggregate(files("a.txt"))
    assert first.text == second.text
    assert len(second.blocks) == 1


def test_negative_caps_rejected():
    with pytest.raises(ValueError):
        ContentAggregator(max_total_bytes=-1)


def test_aggregate_settles_skip_reasons():
    contents = {"big.txt": b"0123456789", "small.txt": b"ab", "gone.txt": PermissionError(13, "Permission denied")}
    items = files("big.txt", "small.txt", "gone.txt")
    # A size estimate made before redaction is overridden by the actual block
    items[1][1].skip_reason = SkipReason.OVERSIZED

    ContentAggregator(max_file_bytes=5, reader=reader_for(contents)).aggregate(items)

    assert [entry.skip_reason for _, entry in items] == [SkipReason.OVERSIZED, None, SkipReason.UNREADABLE]


def test_aggregate_stops_when_interrupted(reset_signal_flags):
    read = Mock(return_value=b"A")
    reset_signal_flags.sigpipe_received.set()

    with pytest.raises(RunInterruptedError):
        ContentAggregator(reader=read).aggregate(files("a.txt"))
    read.assert_not_called()
