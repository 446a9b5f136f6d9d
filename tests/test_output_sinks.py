import os
from unittest.mock import patch

import pyperclip
import pytest

from copytree.exceptions import ConfigurationError, DeliveryError
from copytree.output_sinks import ClipboardSink, FileSink, StdoutSink, resolve_sink


def test_resolve_sink_defaults_to_clipboard():
    assert isinstance(resolve_sink(), ClipboardSink)


def test_resolve_sink_selects_destination(tmp_path):
    assert isinstance(resolve_sink(clipboard=True), ClipboardSink)
    assert isinstance(resolve_sink(stdout=True), StdoutSink)
    sink = resolve_sink(out=tmp_path / "out.txt")
    assert isinstance(sink, FileSink)
    assert sink.path == tmp_path / "out.txt"


@pytest.mark.parametrize(
    "options",
    [
        {"clipboard": True, "stdout": True},
        {"stdout": True, "out": "out.txt"},
        {"clipboard": True, "out": "out.txt"},
    ],
)
def test_resolve_sink_rejects_several_destinations(options):
    with pytest.raises(ConfigurationError, match="Only one output destination"):
        resolve_sink(**options)


def test_clipboard_sink_copies_payload():
    with patch("copytree.output_sinks.clipboard_sink.pyperclip.copy") as copy:
        ClipboardSink().deliver("payload")
    copy.assert_called_once_with("payload")
    assert ClipboardSink().describe() == "Copied to clipboard."


def test_clipboard_failure_is_delivery_error():
    error = pyperclip.PyperclipException("no copy/paste mechanism")
    with patch("copytree.output_sinks.clipboard_sink.pyperclip.copy", side_effect=error):
        with pytest.raises(DeliveryError, match="clipboard: no copy/paste mechanism"):
            ClipboardSink().deliver("payload")


def test_stdout_sink_writes_to_fd(tmp_path):
    target = tmp_path / "captured.txt"
    fd = os.open(target, os.O_WRONLY | os.O_CREAT)
    try:
        StdoutSink(fd).deliver("tree\n\n--- a ---\nä\n\n")
    finally:
        os.close(fd)
    assert target.read_text(encoding="utf-8") == "tree\n\n--- a ---\nä\n\n"
    assert StdoutSink().describe() == ""


def test_stdout_sink_error_is_delivery_error():
    with patch("copytree.output_sinks.stdout_sink.SafeWriter") as writer:
        writer.return_value.__enter__.return_value.write.side_effect = OSError(5, "Input/output error")
        with pytest.raises(DeliveryError, match="stdout"):
            StdoutSink(1).deliver("payload")


def test_stdout_sink_broken_pipe_propagates():
    with patch("copytree.output_sinks.stdout_sink.SafeWriter") as writer:
        writer.return_value.__enter__.return_value.write.side_effect = BrokenPipeError()
        with pytest.raises(BrokenPipeError):
            StdoutSink(1).deliver("payload")


def test_file_sink_creates_file(tmp_path):
    target = tmp_path / "snapshot.txt"
    sink = FileSink(target)
    sink.deliver("content ✓\n")

    assert target.read_text(encoding="utf-8") == "content ✓\n"
    assert sink.describe() == f"Output written to {target}."
    assert os.listdir(tmp_path) == ["snapshot.txt"]


def test_file_sink_overwrites_and_keeps_mode(tmp_path):
    target = tmp_path / "snapshot.txt"
    target.write_text("old content that is longer\n")
    target.chmod(0o640)

    FileSink(target).deliver("new\n")

    assert target.read_text() == "new\n"
    assert target.stat().st_mode & 0o777 == 0o640


def test_file_sink_missing_directory(tmp_path):
    with pytest.raises(DeliveryError, match="Failed to deliver output to"):
        FileSink(tmp_path / "missing" / "out.txt").deliver("x")


def test_file_sink_failure_leaves_target_and_no_temp_file(tmp_path):
    target = tmp_path / "snapshot.txt"
    target.write_text("original\n")

    with patch("copytree.output_sinks.file_sink.os.replace", side_effect=OSError(28, "No space left on device")):
        with pytest.raises(DeliveryError, match="No space left on device"):
            FileSink(target).deliver("new\n")

    assert target.read_text() == "original\n"
    assert os.listdir(tmp_path) == ["snapshot.txt"]
