"""Unit tests for the SafeWriter class in the copytree CLI."""

import errno
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from copytree.cli.safe_writer import SafeWriter


@pytest.fixture
def mock_signals():
    """Replace the signal handler with one that reports no signal."""
    with patch("copytree.cli.safe_writer.signal_handler") as mock:
        mock.interrupted.return_value = False
        yield mock


@pytest.fixture
def output_file(tmp_path):
    return tmp_path / "out.txt"


def test_init_with_fd():
    writer = SafeWriter(3)

    assert writer.file == 3
    assert writer.fd == 3
    assert writer._file_obj is None
    assert not writer._closed


@pytest.mark.parametrize("path", ["/path/to/file.txt", Path("/path/to/file.txt")])
def test_init_with_path(path):
    with patch("pathlib.Path.open") as mock_open_func:
        mock_file = MagicMock()
        mock_file.fileno.return_value = 5
        mock_open_func.return_value = mock_file

        writer = SafeWriter(path)

    mock_open_func.assert_called_once_with("wb")
    assert writer.fd == 5
    assert writer._file_obj is mock_file


def test_init_with_invalid_type():
    with pytest.raises(TypeError, match="Expected int, str, or PathLike"):
        SafeWriter(42.0)


def test_write_encodes_utf8(mock_signals):
    with patch("os.write", return_value=6) as mock_write:
        SafeWriter(3).write("héllo")

    (fd, data), _ = mock_write.call_args
    assert fd == 3
    assert bytes(data) == "héllo".encode("utf-8")


def test_write_retries_partial_writes(mock_signals):
    chunks = []

    def partial_write(fd, data):
        chunks.append(bytes(data[:4]))
        return min(4, len(data))

    with patch("os.write", side_effect=partial_write):
        SafeWriter(3).write("0123456789")

    assert b"".join(chunks) == b"0123456789"
    assert len(chunks) == 3


def test_write_empty_string_does_nothing(mock_signals):
    with patch("os.write") as mock_write:
        SafeWriter(3).write("")
    mock_write.assert_not_called()


def test_write_after_close():
    writer = SafeWriter(3)
    writer.close()

    with pytest.raises(ValueError, match="Cannot write to closed SafeWriter"):
        writer.write("test data")


def test_write_after_signal(mock_signals):
    mock_signals.interrupted.return_value = True

    with patch("os.write") as mock_write:
        with pytest.raises(BrokenPipeError):
            SafeWriter(3).write("test data")
    mock_write.assert_not_called()


def test_write_with_os_error(mock_signals):
    with patch("os.write", side_effect=OSError(errno.EIO, "Input/output error")):
        with pytest.raises(OSError) as excinfo:
            SafeWriter(3).write("test data")

    assert excinfo.value.errno == errno.EIO
    assert not isinstance(excinfo.value, BrokenPipeError)


def test_write_with_epipe(mock_signals):
    with patch("os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        with pytest.raises(BrokenPipeError):
            SafeWriter(3).write("test data")


def test_close_leaves_fd_open():
    writer = SafeWriter(3)
    writer.close()
    writer.close()
    assert writer._closed


def test_close_file_once():
    mock_file = MagicMock()
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    writer.close()
    writer.close()

    mock_file.close.assert_called_once()


def test_close_with_error():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EIO, "I/O error")
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    with pytest.raises(OSError) as excinfo:
        writer.close()
    assert excinfo.value.errno == errno.EIO


def test_close_with_broken_pipe():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EPIPE, "Broken pipe")
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    writer.close()
    assert writer._closed


def test_actual_file_write(output_file, mock_signals):
    with SafeWriter(output_file) as writer:
        writer.write("Hello, 世界! 🌍 Café\n")
        writer.write("second line\n")

    assert output_file.read_text(encoding="utf-8") == "Hello, 世界! 🌍 Café\nsecond line\n"
    assert writer._closed


def test_context_manager_with_exception(output_file):
    with pytest.raises(ValueError):
        with SafeWriter(output_file) as writer:
            raise ValueError("Test exception")
    assert writer._closed


def test_context_manager_close_error_does_not_mask_exception():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EIO, "I/O error")

    with pytest.raises(ValueError):
        with SafeWriter(3) as writer:
            writer._file_obj = mock_file
            raise ValueError("Test exception")
