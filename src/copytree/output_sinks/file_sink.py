import logging
import os
import tempfile
from pathlib import Path

from copytree.cli.safe_writer import SafeWriter
from copytree.exceptions import DeliveryError
from copytree.types import PathType

from .base_sink import OutputSink

logger = logging.getLogger(__name__)


class FileSink(OutputSink):
    """Writes the payload to a file, creating or replacing it.

    The payload goes to a temporary file next to the target, which then replaces
    the target in one step. A failed write leaves an existing target untouched.

    Attributes:
        path (Path): The target file.
    """

    name = "file"

    def __init__(self, path: PathType) -> None:
        self.path = Path(path)

    def deliver(self, payload: str) -> None:
        target = self.path
        try:
            fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        except OSError as e:
            raise DeliveryError(str(target), e.strerror or str(e)) from e

        try:
            os.close(fd)
            # mkstemp creates the file private to the owner
            os.chmod(temp_name, target.stat().st_mode & 0o777 if target.exists() else 0o644)
            with SafeWriter(Path(temp_name)) as writer:
                writer.write(payload)
            os.replace(temp_name, target)
        except OSError as e:
            try:
                os.unlink(temp_name)
            except OSError:
                logger.debug("Could not remove temporary file %s", temp_name)
            if isinstance(e, BrokenPipeError):
                raise
            raise DeliveryError(str(target), e.strerror or str(e)) from e

        logger.debug("Wrote %d characters to %s", len(payload), target)

    def describe(self) -> str:
        return f"Output written to {self.path}."
