import logging

import pyperclip

from copytree.exceptions import DeliveryError

from .base_sink import OutputSink

logger = logging.getLogger(__name__)


class ClipboardSink(OutputSink):
    """Copies the payload to the system clipboard through pyperclip."""

    name = "clipboard"

    def deliver(self, payload: str) -> None:
        try:
            pyperclip.copy(payload)
        except pyperclip.PyperclipException as e:
            raise DeliveryError(self.name, str(e)) from e
        logger.debug("Copied %d characters to the clipboard", len(payload))

    def describe(self) -> str:
        return "Copied to clipboard."
