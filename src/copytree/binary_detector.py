"""Binary content detection from a fixed-size sample of leading bytes."""

from pathlib import Path

from copytree.types import PathType

SAMPLE_SIZE = 8192

# Encodings tried before falling back to a printable-ratio check
TEXT_ENCODINGS = ("utf-8", "utf-16")


def read_sample(file_path: PathType, sample_size: int = SAMPLE_SIZE) -> bytes:
    """Read up to ``sample_size`` leading bytes of a file.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(Path(file_path), "rb") as file:
        return file.read(sample_size)


def is_binary_sample(chunk: bytes) -> bool:
    """Decide whether a sample of leading bytes comes from a binary file.

    The checks run in this order:
    1. An empty sample is text.
    2. Any null byte means binary.
    3. If the sample decodes with a common text encoding, it is binary only when
       more than 1% of its bytes are control characters other than tab, newline,
       carriage return and form feed.
    4. Otherwise it is binary when fewer than 95% of the bytes are printable ASCII
       or common whitespace.

    Args:
        chunk: Leading bytes of a file.

    Returns:
        True if the sample looks binary.

    Example:
        >>> is_binary_sample(b"print('hello')\\n")
        False
        >>> is_binary_sample(b"PK\\x03\\x04\\x00\\x00")
        True
        >>> is_binary_sample(b"")
        False
    """
    if not chunk:
        return False

    if b"\0" in chunk:
        return True

    for encoding in TEXT_ENCODINGS:
        try:
            chunk.decode(encoding)
        except UnicodeDecodeError:
            continue
        control_chars = sum(1 for byte in chunk if byte < 32 and byte not in (9, 10, 12, 13))
        return control_chars / len(chunk) > 0.01

    # A sample cut in the middle of a multi-byte character also ends up here
    printable_chars = sum(1 for byte in chunk if 32 <= byte < 127 or byte in (9, 10, 12, 13) or byte >= 128)
    return printable_chars / len(chunk) < 0.95
