import sys
from typing import Optional

from copytree.cli.safe_writer import SafeWriter
from copytree.exceptions import DeliveryError

from .base_sink import OutputSink


class StdoutSink(OutputSink):
    """Writes the payload to standard output through a signal-aware SafeWriter.

    Attributes:
        fd (Optional[int]): File descriptor to write to; standard output's when None.
    """

    name = "stdout"

    def __init__(self, fd: Optional[int] = None) -> None:
        self.fd = fd

    def deliver(self, payload: str) -> None:
        fd = self.fd
        if fd is None:
            sys.stdout.flush()
            fd = sys.stdout.fileno()
        try:
            with SafeWriter(fd) as writer:
                writer.write(payload)
        except BrokenPipeError:
            # The reader went away; the CLI reports it through the signal handler
            raise
        except OSError as e:
            raise DeliveryError(self.name, e.strerror or str(e)) from e

    def describe(self) -> str:
        return ""
