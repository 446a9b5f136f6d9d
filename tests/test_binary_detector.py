
import pytest

from copytree.binary_detector import SAMPLE_SIZE, is_binary_sample, read_sample


@pytest.mark.parametrize(
    "sample",
    [
        b"",
        b"def main():\n\treturn 0\r\n",
        "héllo wörld ✓\n".encode("utf-8"),
        b"page one\x0cpage two\n",
    ],
)
def test_text_samples(sample):
    assert is_binary_sample(sample) is False


@pytest.mark.parametrize(
    "sample",
    [
        b"\x00",
        b"text with a \x00 null",
        b"\x89PNG\r\n\x1a\n" + b"\x01\x02\x03\x04" * 10,
    ],
)
def test_binary_samples(sample):
    assert is_binary_sample(sample) is True


def test_control_character_threshold():
    # Exactly 1% control characters is still text, anything above is binary
    assert is_binary_sample(b"\x01" + b"a" * 99) is False
    assert is_binary_sample(b"\x01\x02" + b"a" * 98) is True


def test_undecodable_mostly_printable_is_text():
    # Odd length with a stray latin-1 byte: not UTF-8, not UTF-16
    sample = b"caf\xe9 au lait, " * 10 + b"x"
    assert is_binary_sample(sample) is False


def test_read_sample_limits_size(tmp_path):
    path = tmp_path / "big.txt"
    path.write_bytes(b"a" * (SAMPLE_SIZE + 100))
    assert len(read_sample(path)) == SAMPLE_SIZE
    assert read_sample(path, 10) == b"a" * 10


def test_read_sample_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_sample(tmp_path / "missing")
