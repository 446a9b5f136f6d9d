"""Safe output writing utilities for the copytree CLI.

This module provides a safe writing interface that handles
signals and interruptions gracefully.
"""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from copytree.cli.signal_handler import signal_handler


class SafeWriter:
    """Signal-aware writer for a file descriptor or a file path.

    Data is encoded as UTF-8 and written with ``os.write`` until every byte is
    out, so large payloads survive partial writes to pipes. A received SIGPIPE or
    SIGINT turns the next write into BrokenPipeError.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.
    """

    def __init__(self, file: Union[int, str, os.PathLike]):
        """Initialize the safe writer.

        Args:
            file: A file descriptor, which is left open on close, or a path, which
                is opened for writing (truncating it) and closed on close.

        Raises:
            TypeError: If file is neither an int nor path-like.
            OSError: If the path cannot be opened.
        """
        self.file = file
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write all of the data.

        Raises:
            BrokenPipeError: If SIGPIPE/SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        view = memoryview(data.encode("utf-8"))
        while view:
            if signal_handler.interrupted():
                raise BrokenPipeError()
            try:
                written = os.write(self.fd, view)
            except OSError as e:
                if e.errno == errno.EPIPE:
                    raise BrokenPipeError()
                raise
            view = view[written:]

    def close(self) -> None:
        """Close the file if this writer opened it.

        The writer is marked closed even when closing fails with a broken pipe.
        """
        if self._closed:
            return

        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Close resources, letting an exception from the with block take priority."""
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
